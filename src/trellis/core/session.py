"""
Diagram Session - One diagram and everything that works on it.

A session owns its GraphModel together with the layout engine, the
arrangement pass, the position applier and the viewport settings built
from one TrellisConfig. Sessions share no state, so several diagrams can
coexist in one process.
"""

import logging
from typing import Any, Dict, Optional

from trellis.core.appliers import InstantApplier, PositionApplier, TransitionHandle
from trellis.core.arrange import TreeArranger
from trellis.core.config import TrellisConfig
from trellis.core.errors import DanglingReference, GraphError, InvalidEndpoint
from trellis.core.graph_model import DEFAULT_PORT, GraphModel, Node, Position
from trellis.core.layout_engine import LayoutEngine
from trellis.core.viewport import ViewportTransform, compute_fit

logger = logging.getLogger(__name__)


class DiagramSession:
    """
    Builds, arranges and fits a diagram of a JSON document.

    Typical use:

        session = DiagramSession()
        await session.load_document({"A": ["B", "C"]})
        session.arrange()
        transform = session.fit()
    """

    def __init__(
        self,
        config: Optional[TrellisConfig] = None,
        applier: Optional[PositionApplier] = None,
        yield_control: bool = True,
    ):
        """
        Initialize the session.

        Args:
            config: Layout, arrangement, transition and viewport settings
            applier: Default applier for arrangement (instant when omitted)
            yield_control: Let the engine yield to the event loop between insertions
        """
        self._config = config or TrellisConfig()
        layout = self._config.layout
        self._graph = GraphModel(
            default_width=layout.node_width,
            default_height=layout.node_height,
        )
        self._engine = LayoutEngine(self._graph, layout, yield_control=yield_control)
        self._arranger = TreeArranger(self._config.arrange, layout.orientation_enum)
        self._applier = applier or InstantApplier()
        self._transform: Optional[ViewportTransform] = None

    @property
    def config(self) -> TrellisConfig:
        return self._config

    @property
    def graph(self) -> GraphModel:
        return self._graph

    @property
    def engine(self) -> LayoutEngine:
        return self._engine

    @property
    def arranger(self) -> TreeArranger:
        return self._arranger

    @property
    def applier(self) -> PositionApplier:
        return self._applier

    @applier.setter
    def applier(self, value: PositionApplier) -> None:
        self._applier = value

    @property
    def transform(self) -> Optional[ViewportTransform]:
        """Transform from the most recent fit."""
        return self._transform

    async def load_document(self, document: Any, x: float = 0.0, y: float = 0.0) -> int:
        """
        Synthesize the nodes for ``document`` into this session's graph.

        Returns:
            Number of nodes created
        """
        before = len(self._graph)
        await self._engine.add_nodes_from_json(document, x=x, y=y)
        created = len(self._graph) - before
        logger.info(
            f"Loaded document: {created} nodes, {len(self._graph.connections)} connections"
        )
        return created

    def arrange(self, applier: Optional[PositionApplier] = None) -> Dict[str, Position]:
        """Run the arrangement pass with ``applier`` or the session default."""
        positions = self._arranger.layout(self._graph, applier or self._applier)
        logger.info(f"Arranged {len(positions)} nodes")
        return positions

    @property
    def transition(self) -> Optional[TransitionHandle]:
        """Handle of the most recent arrangement."""
        return self._arranger.last_handle

    def fit(self, width: Optional[float] = None, height: Optional[float] = None) -> ViewportTransform:
        """Fit every node into the viewport (configured size unless given)."""
        viewport = self._config.viewport
        self._transform = compute_fit(
            self._graph.nodes,
            width=viewport.width if width is None else width,
            height=viewport.height if height is None else height,
            fill=viewport.fill,
            max_scale=viewport.max_scale,
        )
        return self._transform

    def insert_node(self, connection_id: str, label: str = "Node") -> Node:
        """
        Insert a new node into an existing connection.

        The connection source -> target is replaced by source -> new node ->
        target, then the arrangement pass runs again. If anything fails the
        graph is left as it was.

        Raises:
            InvalidEndpoint: If the connection does not exist
            DanglingReference: If one of its endpoints no longer exists
        """
        connection = self._graph.get_connection(connection_id)
        if connection is None:
            raise InvalidEndpoint(f"Connection {connection_id} not found")

        source = self._graph.get_node(connection.source)
        if source is None:
            raise DanglingReference(
                f"Node with id {connection.source} not found", node_id=connection.source
            )
        target = self._graph.get_node(connection.target)
        if target is None:
            raise DanglingReference(
                f"Node with id {connection.target} not found", node_id=connection.target
            )

        node = self._graph.add_node(label)
        source_x, source_y = source.center
        target_x, target_y = target.center
        node.translate(
            (source_x + target_x) / 2 - node.width / 2,
            (source_y + target_y) / 2 - node.height / 2,
        )

        try:
            self._graph.add_connection(source, connection.source_output, node, DEFAULT_PORT)
            self._graph.add_connection(node, DEFAULT_PORT, target, connection.target_input)
        except GraphError:
            self._graph.remove_node(node.id)
            raise

        self._graph.remove_connection(connection_id)
        logger.info(f"Inserted {node.id} between {source.id} and {target.id}")

        self.arrange()
        return node

    def clear(self) -> None:
        """Remove every node and connection, cancelling any transition."""
        handle = self._arranger.last_handle
        if handle is not None:
            handle.cancel()
        self._graph.clear()
        self._transform = None
