"""
Viewport Fit - Camera transform that shows every node of a diagram.

View coordinates relate to model coordinates by

    view = model * scale + translate
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from trellis.core.config import ViewportConfig
from trellis.core.graph_model import Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewportTransform:
    """Uniform scale plus translation from model space to view space."""
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def map_to_view(self, x: float, y: float) -> Tuple[float, float]:
        return x * self.scale + self.translate_x, y * self.scale + self.translate_y

    def map_from_view(self, x: float, y: float) -> Tuple[float, float]:
        return (x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "translate_x": self.translate_x,
            "translate_y": self.translate_y,
        }


def bounding_box(nodes: Iterable[Node]) -> Optional[Tuple[float, float, float, float]]:
    """(left, top, right, bottom) covering every node rectangle, or None without nodes."""
    rects = np.array([node.bounds for node in nodes], dtype=float)
    if rects.size == 0:
        return None
    return (
        float(rects[:, 0].min()),
        float(rects[:, 1].min()),
        float(rects[:, 2].max()),
        float(rects[:, 3].max()),
    )


def compute_fit(
    nodes: Iterable[Node],
    width: float = 1280.0,
    height: float = 800.0,
    fill: float = 0.9,
    max_scale: float = 1.0,
) -> ViewportTransform:
    """
    Fit every node into a ``width`` x ``height`` viewport.

    The bounding box is centered and scaled to occupy at most ``fill`` of
    the viewport, never zooming in beyond ``max_scale`` or 1. With no nodes, a
    single node or a zero-area box the transform keeps scale 1 and centers
    the origin or the box center.
    """
    nodes = list(nodes)
    box = bounding_box(nodes)

    if box is None:
        logger.debug("Fit requested on an empty diagram, centering the origin")
        return ViewportTransform(1.0, width / 2, height / 2)

    left, top, right, bottom = box
    center_x = (left + right) / 2
    center_y = (top + bottom) / 2
    box_width = right - left
    box_height = bottom - top

    if len(nodes) == 1 or box_width <= 0 or box_height <= 0:
        logger.debug("Degenerate bounding box, using neutral scale")
        return ViewportTransform(1.0, width / 2 - center_x, height / 2 - center_y)

    scale = min(fill * width / box_width, fill * height / box_height, max_scale, 1.0)
    return ViewportTransform(
        scale,
        width / 2 - center_x * scale,
        height / 2 - center_y * scale,
    )


def fit_to_config(nodes: Iterable[Node], config: ViewportConfig) -> ViewportTransform:
    """compute_fit with the viewport settings from ``config``."""
    return compute_fit(
        nodes,
        width=config.width,
        height=config.height,
        fill=config.fill,
        max_scale=config.max_scale,
    )
