"""
Diagram Canvas

Read-only drawing of a diagram session built with Qt's Graphics View
Framework.
"""

from trellis.gui.node_graph.graph_view import DiagramView
from trellis.gui.node_graph.node_item import NodeItem
from trellis.gui.node_graph.connection_item import ConnectionItem
from trellis.gui.node_graph.port_item import PortItem

__all__ = [
    "DiagramView",
    "NodeItem",
    "ConnectionItem",
    "PortItem",
]
