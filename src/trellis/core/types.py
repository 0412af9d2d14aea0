"""
Centralized Type Definitions for Trellis.

This module provides the enums shared by the graph model, the layout
engine and the arrangement pass, replacing stringly-typed options.
"""

from enum import Enum, auto
from typing import Tuple


class PortDirection(Enum):
    """Direction of a node port."""
    INPUT = auto()
    OUTPUT = auto()


class JsonKind(Enum):
    """Tag of a JSON value."""
    OBJECT = auto()
    ARRAY = auto()
    SCALAR = auto()
    NULL = auto()

    @property
    def is_container(self) -> bool:
        """Whether values of this kind hold nested values."""
        return self in (JsonKind.OBJECT, JsonKind.ARRAY)


class Orientation(Enum):
    """
    Direction in which the diagram tree flows.

    Layout code works in (depth, breadth) coordinates: depth grows from a
    parent to its children, breadth spreads siblings apart. The orientation
    maps those onto model-space (x, y).
    """
    LEFT_RIGHT = "left_right"
    TOP_DOWN = "top_down"

    @classmethod
    def from_string(cls, value: str) -> "Orientation":
        """
        Convert a string to an Orientation.

        Accepts the enum values as well as the short forms "lr" and "td".

        Raises:
            ValueError: If the string doesn't match any orientation
        """
        normalized = value.strip().lower().replace("-", "_")
        aliases = {"lr": cls.LEFT_RIGHT, "td": cls.TOP_DOWN, "tb": cls.TOP_DOWN}
        if normalized in aliases:
            return aliases[normalized]
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown orientation: {value}")

    def to_xy(self, depth: float, breadth: float) -> Tuple[float, float]:
        """Map (depth, breadth) coordinates to model-space (x, y)."""
        if self == Orientation.LEFT_RIGHT:
            return depth, breadth
        return breadth, depth

    def from_xy(self, x: float, y: float) -> Tuple[float, float]:
        """Map model-space (x, y) to (depth, breadth) coordinates."""
        if self == Orientation.LEFT_RIGHT:
            return x, y
        return y, x

    def extents(self, width: float, height: float) -> Tuple[float, float]:
        """Split a node size into (depth extent, breadth extent)."""
        return self.from_xy(width, height)


class ArrayPolicy(Enum):
    """
    How the layout engine expands JSON arrays.

    FLAT turns every element into a terminal leaf labelled with the
    element's text. EXPAND keeps scalar elements as leaves but gives each
    structured element an index node whose contents are laid out beneath it.
    """
    FLAT = "flat"
    EXPAND = "expand"

    @classmethod
    def from_string(cls, value: str) -> "ArrayPolicy":
        """
        Convert a string to an ArrayPolicy.

        Raises:
            ValueError: If the string doesn't match any policy
        """
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown array policy: {value}")
