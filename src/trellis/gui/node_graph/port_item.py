"""
Port Item - Visual representation of node input/output ports.
"""

from typing import Optional

from PyQt6.QtCore import QRectF
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen
from PyQt6.QtWidgets import QGraphicsEllipseItem, QGraphicsItem

from trellis.core.graph_model import Port


class PortItem(QGraphicsEllipseItem):
    """
    Visual representation of a node port.

    Colored by socket so incompatible ports are told apart at a glance.
    """

    # Port dimensions
    PORT_RADIUS = 6

    SOCKET_COLORS = {
        "socket": QColor(100, 180, 255),  # Blue
    }
    DEFAULT_COLOR = QColor(200, 200, 200)

    def __init__(self, port: Port, parent: Optional[QGraphicsItem] = None):
        super().__init__(parent)

        self._port = port
        self._color = self.SOCKET_COLORS.get(port.socket.name, self.DEFAULT_COLOR)

        r = self.PORT_RADIUS
        self.setRect(QRectF(-r, -r, r * 2, r * 2))
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable, False)

    @property
    def name(self) -> str:
        return self._port.name

    @property
    def is_output(self) -> bool:
        return self._port.is_output

    def get_scene_center(self):
        """Get the center of the port in scene coordinates."""
        return self.scenePos()

    def paint(self, painter: QPainter, option, widget=None) -> None:
        """Paint the port."""
        painter.setPen(QPen(self._color.darker(150), 1.5))
        painter.setBrush(QBrush(self._color))
        painter.drawEllipse(self.rect())
