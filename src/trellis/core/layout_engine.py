"""
Layout Engine - Synthesizes diagram nodes from a JSON document.

Walks a JSON value depth-first and pre-order, creating one node per object
key (and per array element), connecting each to its parent and placing it
as it is created. Children are pre-distributed symmetrically around their
parent's breadth coordinate so a parent sits centered on its children:

    slot_i = anchor - (count - 1) * child_spacing / 2 + i * child_spacing

Successive sibling keys handled by one call advance the anchor by
``sibling_spacing``. Overlaps between neighbouring subtrees are left to the
arrangement pass.
"""

import asyncio
import logging
from typing import Any, List, Optional, Sequence, Tuple

from trellis.core.config import LayoutConfig
from trellis.core.errors import GraphError
from trellis.core.graph_model import DEFAULT_PORT, GraphModel, Node
from trellis.core.json_value import JsonValue
from trellis.core.types import ArrayPolicy, JsonKind

logger = logging.getLogger(__name__)


class LayoutEngine:
    """
    Builds nodes and connections in a GraphModel from JSON documents.

    Every node and connection insertion is awaited before the next one, and
    by default the engine yields to the event loop after each insertion so a
    host renderer can draw the diagram incrementally.
    """

    def __init__(
        self,
        graph: GraphModel,
        config: Optional[LayoutConfig] = None,
        yield_control: bool = True,
    ):
        """
        Initialize the layout engine.

        Args:
            graph: Graph model to populate
            config: Spacing constants, orientation and array policy
            yield_control: Yield to the event loop after each insertion
        """
        self._graph = graph
        self._config = config or LayoutConfig()
        self._orientation = self._config.orientation_enum
        self._array_policy = self._config.array_policy_enum
        self._yield_control = yield_control

    @property
    def graph(self) -> GraphModel:
        return self._graph

    @property
    def config(self) -> LayoutConfig:
        return self._config

    async def add_nodes_from_json(
        self,
        value: Any,
        parent: Optional[Node] = None,
        x: float = 0.0,
        y: float = 0.0,
    ) -> List[Node]:
        """
        Add the nodes for ``value`` to the graph, anchored at (x, y).

        An object produces one node per key, the first at the anchor and
        each following one ``sibling_spacing`` further along the breadth
        axis. Any other value produces a single leaf labelled with its text.
        When ``parent`` is given, every top-level node is connected to it.

        Synthesis is all-or-nothing: if any insertion fails, the nodes and
        connections created by this call are removed before the error
        propagates.

        Returns:
            The nodes created for the top level of ``value``

        Raises:
            DanglingReference: If ``parent`` is not part of the graph
            UnsupportedValueError: If ``value`` is not JSON data
        """
        document = JsonValue.from_python(value)
        depth, breadth = self._orientation.from_xy(x, y)

        # Nodes created by this call, in creation order
        created: List[Node] = []
        try:
            if document.kind == JsonKind.OBJECT:
                nodes = await self._emit_entries(document.entries, parent, depth, breadth, created)
            else:
                logger.debug(f"Non-object root ({document.kind.name}), adding a single leaf")
                nodes = [await self._place(document.text, parent, depth, breadth, created)]
        except GraphError:
            logger.error(f"Synthesis aborted, rolling back {len(created)} nodes")
            self._rollback(created)
            raise

        logger.debug(f"Synthesized {len(created)} nodes from {document.kind.name}")
        return nodes

    def child_slots(self, anchor: float, count: int) -> List[float]:
        """Breadth coordinates of ``count`` children centered on ``anchor``."""
        spacing = self._config.child_spacing
        start = anchor - (count - 1) * spacing / 2
        return [start + i * spacing for i in range(count)]

    async def _emit_entries(
        self,
        entries: Sequence[Tuple[str, JsonValue]],
        parent: Optional[Node],
        depth: float,
        breadth: float,
        created: List[Node],
    ) -> List[Node]:
        nodes = []
        for key, child in entries:
            node = await self._place(key, parent, depth, breadth, created)
            await self._emit_children(node, child, depth, breadth, created)
            nodes.append(node)
            breadth += self._config.sibling_spacing
        return nodes

    async def _emit_children(
        self,
        node: Node,
        value: JsonValue,
        depth: float,
        breadth: float,
        created: List[Node],
    ) -> None:
        child_depth = depth + self._config.horizontal_spacing

        if value.kind == JsonKind.ARRAY:
            slots = self.child_slots(breadth, len(value))
            for index, (item, slot) in enumerate(zip(value.items, slots)):
                if self._array_policy == ArrayPolicy.FLAT or not item.kind.is_container:
                    await self._place(item.text, node, child_depth, slot, created)
                else:
                    index_node = await self._place(f"[{index}]", node, child_depth, slot, created)
                    await self._emit_children(index_node, item, child_depth, slot, created)

        elif value.kind == JsonKind.OBJECT:
            slots = self.child_slots(breadth, len(value))
            for entry, slot in zip(value.entries, slots):
                await self._emit_entries([entry], node, child_depth, slot, created)

        # Scalars and null end the branch

    async def _place(
        self,
        label: str,
        parent: Optional[Node],
        depth: float,
        breadth: float,
        created: List[Node],
    ) -> Node:
        node = self._graph.add_node(
            label,
            width=self._config.node_width,
            height=self._config.node_height,
            position=self._orientation.to_xy(depth, breadth),
        )
        created.append(node)
        await self._pause()

        if parent is not None:
            self._graph.add_connection(parent, DEFAULT_PORT, node, DEFAULT_PORT)
            await self._pause()

        return node

    async def _pause(self) -> None:
        if self._yield_control:
            await asyncio.sleep(0)

    def _rollback(self, nodes: List[Node]) -> None:
        for node in reversed(nodes):
            if node.id in self._graph:
                self._graph.remove_node(node.id)
