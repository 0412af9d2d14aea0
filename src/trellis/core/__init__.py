"""
Trellis Core - The headless diagram engine.

The core turns JSON documents into laid-out node graphs and computes the
camera transform to show them. It has no GUI dependencies.
"""

from trellis.core.appliers import InstantApplier, TransitionApplier, TransitionHandle
from trellis.core.arrange import TreeArranger
from trellis.core.config import TrellisConfig
from trellis.core.errors import (
    DanglingReference,
    GraphError,
    InvalidEndpoint,
    TrellisError,
    UnsupportedValueError,
)
from trellis.core.graph_model import Connection, GraphModel, Node, Position, Socket
from trellis.core.json_value import JsonValue
from trellis.core.layout_engine import LayoutEngine
from trellis.core.session import DiagramSession
from trellis.core.viewport import ViewportTransform, compute_fit

__all__ = [
    "Connection",
    "DanglingReference",
    "DiagramSession",
    "GraphError",
    "GraphModel",
    "InstantApplier",
    "InvalidEndpoint",
    "JsonValue",
    "LayoutEngine",
    "Node",
    "Position",
    "Socket",
    "TransitionApplier",
    "TransitionHandle",
    "TreeArranger",
    "TrellisConfig",
    "TrellisError",
    "UnsupportedValueError",
    "ViewportTransform",
    "compute_fit",
]
