"""
Centralized Configuration for Trellis.

This module provides the spacing constants, transition timing and viewport
settings used by a diagram session. Configuration objects are passed to the
components that need them; there is no process-wide instance.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from trellis.core.types import ArrayPolicy, Orientation

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Spacing used while synthesizing nodes from a JSON document."""

    # Distance between a node and its children along the depth axis
    horizontal_spacing: float = 400.0

    # Distance between children of one parent along the breadth axis
    child_spacing: float = 200.0

    # Step between successive sibling keys handled by one call
    sibling_spacing: float = 300.0

    # Node size
    node_width: float = 200.0
    node_height: float = 100.0

    orientation: str = Orientation.LEFT_RIGHT.value
    array_policy: str = ArrayPolicy.FLAT.value

    @property
    def orientation_enum(self) -> Orientation:
        return Orientation.from_string(self.orientation)

    @property
    def array_policy_enum(self) -> ArrayPolicy:
        return ArrayPolicy.from_string(self.array_policy)


@dataclass
class ArrangeConfig:
    """Spacing used by the tidy-tree arrangement pass."""

    # Gap between depth levels, added to the widest node of a level
    level_gap: float = 120.0

    # Minimum gap between sibling subtrees
    sibling_gap: float = 40.0

    # Minimum gap between separate trees of a forest
    tree_gap: float = 80.0


@dataclass
class TransitionConfig:
    """Animated transition settings (seconds)."""

    duration: float = 0.5
    frame_interval: float = 1.0 / 60.0
    easing: str = "ease_in_out"


@dataclass
class ViewportConfig:
    """Target viewport for fitting the diagram."""

    width: float = 1280.0
    height: float = 800.0

    # Fraction of the viewport the bounding box may occupy
    fill: float = 0.9

    # Never zoom in beyond this
    max_scale: float = 1.0


def _apply(target: Any, data: dict) -> None:
    known = {f.name for f in fields(target)}
    for key, value in data.items():
        if key in known:
            setattr(target, key, value)
        else:
            logger.debug(f"Ignoring unknown config key: {key}")


@dataclass
class TrellisConfig:
    """Main configuration container for Trellis."""

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    arrange: ArrangeConfig = field(default_factory=ArrangeConfig)
    transition: TransitionConfig = field(default_factory=TransitionConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)

    @staticmethod
    def default_path() -> Path:
        return Path.home() / ".trellis" / "config.json"

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "layout": asdict(self.layout),
            "arrange": asdict(self.arrange),
            "transition": asdict(self.transition),
            "viewport": asdict(self.viewport),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrellisConfig":
        """Create configuration from dictionary. Unknown keys are ignored."""
        config = cls()

        if "layout" in data:
            _apply(config.layout, data["layout"])

        if "arrange" in data:
            _apply(config.arrange, data["arrange"])

        if "transition" in data:
            _apply(config.transition, data["transition"])

        if "viewport" in data:
            _apply(config.viewport, data["viewport"])

        return config

    def save(self, path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = self.default_path()

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "TrellisConfig":
        """Load configuration from file, using defaults if not found."""
        config = cls()

        if path is None:
            path = cls.default_path()

        if path.exists():
            try:
                with open(path) as f:
                    data = json.load(f)
                config = cls.from_dict(data)
                logger.info(f"Configuration loaded from {path}")
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load configuration from {path}: {e}")
                logger.info("Using default configuration")

        return config
