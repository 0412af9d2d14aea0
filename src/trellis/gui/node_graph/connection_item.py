"""
Connection Item - Visual representation of connections between nodes.
"""

from typing import TYPE_CHECKING

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QColor, QPainter, QPainterPath, QPen
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsPathItem

from trellis.core.graph_model import Connection
from trellis.core.types import Orientation

if TYPE_CHECKING:
    from trellis.gui.node_graph.node_item import NodeItem


class ConnectionItem(QGraphicsPathItem):
    """
    Visual representation of a connection between node ports.

    Draws a bezier curve from the output port of the source node to the
    input port of the target node, leaving and entering along the depth
    axis of the diagram.
    """

    COLOR = QColor(100, 180, 255)  # Blue
    SELECTED_COLOR = QColor(255, 180, 0)  # Orange

    def __init__(
        self,
        connection: Connection,
        source: "NodeItem",
        target: "NodeItem",
        orientation: Orientation = Orientation.LEFT_RIGHT,
    ):
        super().__init__()

        self._connection = connection
        self._source = source
        self._target = target
        self._orientation = orientation
        self._line_width = 2

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable)
        self.setZValue(-1)  # Draw behind nodes
        self.update_path()

    @property
    def connection_id(self) -> str:
        return self._connection.id

    @property
    def source_id(self) -> str:
        return self._connection.source

    @property
    def target_id(self) -> str:
        return self._connection.target

    def update_path(self) -> None:
        """Update the bezier path based on node positions."""
        start = self._source.get_port_scene_pos(self._connection.source_output, is_output=True)
        end = self._target.get_port_scene_pos(self._connection.target_input, is_output=False)
        self.setPath(self._create_bezier_path(start, end))

    def _create_bezier_path(self, start: QPointF, end: QPointF) -> QPainterPath:
        """Create a bezier curve path between two points."""
        path = QPainterPath()
        path.moveTo(start)

        if self._orientation == Orientation.LEFT_RIGHT:
            offset = max(50, min(abs(end.x() - start.x()) * 0.5, 150))
            ctrl1 = QPointF(start.x() + offset, start.y())
            ctrl2 = QPointF(end.x() - offset, end.y())
        else:
            offset = max(50, min(abs(end.y() - start.y()) * 0.5, 150))
            ctrl1 = QPointF(start.x(), start.y() + offset)
            ctrl2 = QPointF(end.x(), end.y() - offset)

        path.cubicTo(ctrl1, ctrl2, end)
        return path

    def paint(self, painter: QPainter, option, widget=None) -> None:
        """Paint the connection."""
        color = self.SELECTED_COLOR if self.isSelected() else self.COLOR
        pen = QPen(color, self._line_width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(self.path())
