"""
Diagram View - Read-only canvas for a diagram session.

Uses Qt's QGraphicsView/QGraphicsScene to draw the nodes and connections
of a GraphModel. Items follow the model: they are created and removed from
the graph callbacks and moved by ``sync_positions``.
"""

import logging
from typing import Dict, Optional

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QKeyEvent, QMouseEvent, QPainter, QPen, QTransform, QWheelEvent
from PyQt6.QtWidgets import QGraphicsScene, QGraphicsView, QWidget

from trellis.core.graph_model import Connection, Node
from trellis.core.session import DiagramSession
from trellis.core.viewport import ViewportTransform
from trellis.gui.node_graph.connection_item import ConnectionItem
from trellis.gui.node_graph.node_item import NodeItem

logger = logging.getLogger(__name__)


class DiagramScene(QGraphicsScene):
    """Custom scene for the diagram with grid background."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._grid_size = 20
        self._grid_color = QColor(50, 50, 50)
        self._grid_color_major = QColor(70, 70, 70)
        self._background_color = QColor(30, 30, 30)

        self.setSceneRect(-100000, -100000, 200000, 200000)
        self.setBackgroundBrush(QBrush(self._background_color))

    def drawBackground(self, painter: QPainter, rect: QRectF) -> None:
        """Draw grid background."""
        super().drawBackground(painter, rect)

        for size, pen in (
            (self._grid_size, QPen(self._grid_color, 0.5)),
            (self._grid_size * 5, QPen(self._grid_color_major, 1)),
        ):
            painter.setPen(pen)
            left = int(rect.left()) - (int(rect.left()) % size)
            top = int(rect.top()) - (int(rect.top()) % size)

            x = left
            while x < rect.right():
                painter.drawLine(QPointF(x, rect.top()), QPointF(x, rect.bottom()))
                x += size

            y = top
            while y < rect.bottom():
                painter.drawLine(QPointF(rect.left(), y), QPointF(rect.right(), y))
                y += size


class DiagramView(QGraphicsView):
    """
    View of one diagram session.

    Supports:
    - Incremental drawing while a document is being synthesized
    - Following animated arrangements (call ``sync_positions`` per tick)
    - Fitting the whole diagram (F key) and resetting the view (Home key)
    - Wheel zoom and middle-button panning
    """

    def __init__(self, session: DiagramSession, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._session = session
        self._orientation = session.config.layout.orientation_enum
        self._scene = DiagramScene(self)
        self.setScene(self._scene)

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        self._nodes: Dict[str, NodeItem] = {}
        self._connections: Dict[str, ConnectionItem] = {}

        # Pan and zoom
        self._panning = False
        self._pan_start = QPointF()
        self._zoom = 1.0
        self._zoom_min = 0.05
        self._zoom_max = 3.0

        graph = session.graph
        for node in graph.nodes:
            self._add_node(node)
        for connection in graph.connections:
            self._add_connection(connection)
        graph.on_node_added(self._add_node)
        graph.on_node_removed(self._remove_node)
        graph.on_connection_added(self._add_connection)
        graph.on_connection_removed(self._remove_connection)

    @property
    def session(self) -> DiagramSession:
        return self._session

    @property
    def nodes(self) -> Dict[str, NodeItem]:
        """Get all node items."""
        return self._nodes.copy()

    @property
    def connections(self) -> Dict[str, ConnectionItem]:
        """Get all connection items."""
        return self._connections.copy()

    @property
    def zoom(self) -> float:
        return self._zoom

    def _add_node(self, node: Node) -> None:
        item = NodeItem(node, self._orientation)
        item.is_leaf = True
        self._scene.addItem(item)
        self._nodes[node.id] = item

    def _remove_node(self, node: Node) -> None:
        item = self._nodes.pop(node.id, None)
        if item is not None:
            self._scene.removeItem(item)

    def _add_connection(self, connection: Connection) -> None:
        source = self._nodes.get(connection.source)
        target = self._nodes.get(connection.target)
        if source is None or target is None:
            logger.warning(f"No items for connection {connection.id}")
            return
        source.is_leaf = False
        item = ConnectionItem(connection, source, target, self._orientation)
        self._scene.addItem(item)
        self._connections[connection.id] = item

    def _remove_connection(self, connection: Connection) -> None:
        item = self._connections.pop(connection.id, None)
        if item is not None:
            self._scene.removeItem(item)
        source = self._nodes.get(connection.source)
        if source is not None:
            source.is_leaf = not self._session.graph.outgoing(connection.source)

    def sync_positions(self) -> None:
        """Move every item to its node's model position."""
        for item in self._nodes.values():
            item.sync_position()
        for conn in self._connections.values():
            conn.update_path()

    def apply_transform(self, transform: ViewportTransform) -> None:
        """Show the model region described by a viewport transform."""
        self._zoom = transform.scale
        self.setTransform(QTransform.fromScale(transform.scale, transform.scale))
        viewport = self.viewport().rect()
        center_x, center_y = transform.map_from_view(viewport.width() / 2, viewport.height() / 2)
        self.centerOn(center_x, center_y)

    def fit(self) -> ViewportTransform:
        """Fit the whole diagram into the widget."""
        viewport = self.viewport().rect()
        transform = self._session.fit(viewport.width(), viewport.height())
        self.apply_transform(transform)
        return transform

    def follow(self, progress: float = 1.0) -> None:
        """Tick handler for animated arrangements: move items and re-fit."""
        self.sync_positions()
        self.fit()

    # Event handlers
    def wheelEvent(self, event: QWheelEvent) -> None:
        """Handle zoom with mouse wheel."""
        factor = 1.15 if event.angleDelta().y() > 0 else 1 / 1.15
        new_zoom = self._zoom * factor

        if self._zoom_min <= new_zoom <= self._zoom_max:
            self._zoom = new_zoom
            self.scale(factor, factor)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Handle mouse press for panning."""
        if event.button() == Qt.MouseButton.MiddleButton:
            self._panning = True
            self._pan_start = event.position()
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Handle mouse move for panning."""
        if self._panning:
            delta = event.position() - self._pan_start
            self._pan_start = event.position()
            self.horizontalScrollBar().setValue(
                int(self.horizontalScrollBar().value() - delta.x())
            )
            self.verticalScrollBar().setValue(
                int(self.verticalScrollBar().value() - delta.y())
            )
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Handle mouse release."""
        if event.button() == Qt.MouseButton.MiddleButton:
            self._panning = False
            self.setCursor(Qt.CursorShape.ArrowCursor)
        else:
            super().mouseReleaseEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Handle keyboard shortcuts."""
        if event.key() == Qt.Key.Key_Home:
            self.resetTransform()
            self._zoom = 1.0
            self.centerOn(0, 0)
        elif event.key() == Qt.Key.Key_F:
            self.fit()
        else:
            super().keyPressEvent(event)
