"""
Node Item - Visual representation of a diagram node.
"""

from typing import List

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetrics, QLinearGradient, QPainter, QPen
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsRectItem, QStyleOptionGraphicsItem

from trellis.core.graph_model import Node
from trellis.core.types import Orientation
from trellis.gui.node_graph.port_item import PortItem


class NodeItem(QGraphicsRectItem):
    """
    Visual representation of a node.

    Features:
    - Header with the node label (elided to fit)
    - Input port on the leading edge, output port on the trailing edge
    - Leaf nodes drawn with a muted header
    """

    HEADER_COLOR = QColor(45, 74, 90)  # Blue
    LEAF_COLOR = QColor(68, 68, 68)  # Gray
    BODY_COLOR = QColor(50, 50, 50)

    HEADER_HEIGHT = 30
    CORNER_RADIUS = 8

    def __init__(self, node: Node, orientation: Orientation = Orientation.LEFT_RIGHT):
        super().__init__()

        self._node = node
        self._orientation = orientation
        self._is_leaf = False

        self._input_ports: List[PortItem] = [PortItem(p, self) for p in node.inputs]
        self._output_ports: List[PortItem] = [PortItem(p, self) for p in node.outputs]

        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIsSelectable)
        self.setRect(QRectF(0, 0, node.width, node.height))
        self._update_port_positions()
        self.sync_position()

    @property
    def node_id(self) -> str:
        return self._node.id

    @property
    def label(self) -> str:
        return self._node.label

    @property
    def input_ports(self) -> List[PortItem]:
        return self._input_ports

    @property
    def output_ports(self) -> List[PortItem]:
        return self._output_ports

    @property
    def is_leaf(self) -> bool:
        return self._is_leaf

    @is_leaf.setter
    def is_leaf(self, value: bool) -> None:
        if value != self._is_leaf:
            self._is_leaf = value
            self.update()

    def sync_position(self) -> None:
        """Move the item to the model position of its node."""
        position = self._node.position
        self.setPos(position.x, position.y)

    def _update_port_positions(self) -> None:
        rect = self.rect()
        for ports, is_output in ((self._input_ports, False), (self._output_ports, True)):
            for index, port in enumerate(ports):
                fraction = (index + 1) / (len(ports) + 1)
                if self._orientation == Orientation.LEFT_RIGHT:
                    x = rect.width() if is_output else 0.0
                    port.setPos(x, rect.height() * fraction)
                else:
                    y = rect.height() if is_output else 0.0
                    port.setPos(rect.width() * fraction, y)

    def get_port_scene_pos(self, port_name: str, is_output: bool) -> QPointF:
        """Get the scene position of a port."""
        ports = self._output_ports if is_output else self._input_ports
        for port in ports:
            if port.name == port_name:
                return port.get_scene_center()
        return self.scenePos()

    def paint(self, painter: QPainter, option: QStyleOptionGraphicsItem, widget=None) -> None:
        """Paint the node."""
        rect = self.rect()
        header_color = self.LEAF_COLOR if self._is_leaf else self.HEADER_COLOR

        # Body background
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(self.BODY_COLOR))
        painter.drawRoundedRect(rect, self.CORNER_RADIUS, self.CORNER_RADIUS)

        # Header
        header_rect = QRectF(0, 0, rect.width(), self.HEADER_HEIGHT)
        gradient = QLinearGradient(0, 0, 0, self.HEADER_HEIGHT)
        gradient.setColorAt(0, header_color.lighter(120))
        gradient.setColorAt(1, header_color)
        painter.setBrush(QBrush(gradient))
        painter.drawRoundedRect(header_rect, self.CORNER_RADIUS, self.CORNER_RADIUS)
        # Fill bottom corners
        painter.drawRect(QRectF(0, self.HEADER_HEIGHT - self.CORNER_RADIUS,
                                rect.width(), self.CORNER_RADIUS))

        # Border
        if self.isSelected():
            pen = QPen(QColor(255, 180, 0), 3)
        else:
            pen = QPen(header_color.darker(120), 2)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawRoundedRect(rect, self.CORNER_RADIUS, self.CORNER_RADIUS)

        # Label
        font = QFont("Segoe UI", 10, QFont.Weight.Bold)
        painter.setFont(font)
        painter.setPen(QPen(QColor(220, 220, 220)))
        text = QFontMetrics(font).elidedText(
            self._node.label, Qt.TextElideMode.ElideRight, int(rect.width() - 20)
        )
        painter.drawText(
            QRectF(10, 0, rect.width() - 20, self.HEADER_HEIGHT),
            Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft,
            text,
        )
