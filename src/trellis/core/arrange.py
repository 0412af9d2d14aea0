"""
Tree Arrangement - Tidy re-layout of an already synthesized graph.

Computes deterministic positions from graph topology, node sizes and the
spacing constants only, so running it twice yields the same result:
- each depth level occupies its own band along the depth axis
- sibling subtrees are packed along the breadth axis so that, level by
  level, their contours stay ``sibling_gap`` apart
- each parent is centered on the midpoint of its first and last child
- separate trees of a forest are packed the same way, ``tree_gap`` apart

The computed positions are handed to a PositionApplier, which either writes
them at once or animates towards them.
"""

import logging
from typing import Dict, List, Optional, Tuple

from trellis.core.appliers import InstantApplier, PositionApplier, TransitionHandle
from trellis.core.config import ArrangeConfig
from trellis.core.graph_model import GraphModel, Position
from trellis.core.types import Orientation

logger = logging.getLogger(__name__)

# (min, max) breadth extent of one level of a subtree
Extent = Tuple[float, float]


class _Subtree:
    """Breadth offsets of a laid-out subtree, relative to its root's center."""

    __slots__ = ("offsets", "contour")

    def __init__(self, offsets: Dict[str, float], contour: List[Extent]):
        self.offsets = offsets
        self.contour = contour


class TreeArranger:
    """
    Tidy-tree arrangement pass.

    Graphs that are not trees are arranged as the spanning forest found by
    a depth-first walk from the roots: a node reached twice stays under its
    first parent, and nodes only reachable through a cycle start a tree of
    their own.
    """

    def __init__(
        self,
        config: Optional[ArrangeConfig] = None,
        orientation: Orientation = Orientation.LEFT_RIGHT,
    ):
        self._config = config or ArrangeConfig()
        self._orientation = orientation
        self._last_handle: Optional[TransitionHandle] = None

    @property
    def config(self) -> ArrangeConfig:
        return self._config

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def last_handle(self) -> Optional[TransitionHandle]:
        """Handle returned by the applier of the most recent layout call."""
        return self._last_handle

    def layout(
        self,
        graph: GraphModel,
        applier: Optional[PositionApplier] = None,
    ) -> Dict[str, Position]:
        """
        Arrange every node of ``graph``.

        Args:
            graph: Graph to arrange
            applier: How to realize the positions (instant when omitted)

        Returns:
            Target position for every node id
        """
        positions = self.compute(graph)
        applier = applier or InstantApplier()
        # A new layout supersedes any transition still running
        if self._last_handle is not None and self._last_handle.cancel():
            logger.debug("Cancelled in-flight arrangement")
        self._last_handle = applier.apply(graph, positions)
        logger.debug(f"Arranged {len(positions)} nodes with {type(applier).__name__}")
        return positions

    def compute(self, graph: GraphModel) -> Dict[str, Position]:
        """Compute target positions without touching the graph."""
        if len(graph) == 0:
            return {}

        roots, children = self._spanning_forest(graph)
        sizes = {
            node.id: self._orientation.extents(node.width, node.height)
            for node in graph.nodes
        }

        levels: Dict[str, int] = {}
        for root in roots:
            self._assign_levels(root, 0, children, levels)

        # Band start of each level along the depth axis
        widest: Dict[int, float] = {}
        for node_id, level in levels.items():
            widest[level] = max(widest.get(level, 0.0), sizes[node_id][0])
        band_start = [0.0]
        for level in range(1, max(widest) + 1):
            band_start.append(
                band_start[-1] + widest[level - 1] + self._config.level_gap
            )

        trees = [self._layout_subtree(root, children, sizes) for root in roots]
        forest = self._pack(trees, self._config.tree_gap)

        positions: Dict[str, Position] = {}
        for node in graph.nodes:
            breadth_extent = sizes[node.id][1]
            depth = band_start[levels[node.id]]
            breadth = forest.offsets[node.id] - breadth_extent / 2
            positions[node.id] = Position(*self._orientation.to_xy(depth, breadth))
        return positions

    def _spanning_forest(self, graph: GraphModel) -> Tuple[List[str], Dict[str, List[str]]]:
        adjacency = graph.adjacency()
        children: Dict[str, List[str]] = {node_id: [] for node_id in adjacency}
        visited = set()
        roots: List[str] = []

        def walk(start: str) -> None:
            stack = [start]
            visited.add(start)
            while stack:
                node_id = stack.pop()
                fresh = [c for c in adjacency[node_id] if c not in visited]
                for child in fresh:
                    visited.add(child)
                children[node_id].extend(fresh)
                stack.extend(reversed(fresh))

        for root in graph.roots():
            roots.append(root.id)
            walk(root.id)

        # Whatever is left is only reachable through a cycle
        for node_id in adjacency:
            if node_id not in visited:
                roots.append(node_id)
                walk(node_id)

        return roots, children

    def _assign_levels(
        self,
        root: str,
        level: int,
        children: Dict[str, List[str]],
        levels: Dict[str, int],
    ) -> None:
        stack = [(root, level)]
        while stack:
            node_id, depth = stack.pop()
            levels[node_id] = depth
            stack.extend((child, depth + 1) for child in children[node_id])

    def _layout_subtree(
        self,
        node_id: str,
        children: Dict[str, List[str]],
        sizes: Dict[str, Tuple[float, float]],
    ) -> _Subtree:
        half = sizes[node_id][1] / 2
        kids = [self._layout_subtree(c, children, sizes) for c in children[node_id]]
        if not kids:
            return _Subtree({node_id: 0.0}, [(-half, half)])

        below = self._pack(kids, self._config.sibling_gap)
        below.offsets[node_id] = 0.0
        below.contour.insert(0, (-half, half))
        return below

    def _pack(self, subtrees: List[_Subtree], gap: float) -> _Subtree:
        """
        Place subtrees side by side along the breadth axis.

        Each subtree is shifted just far enough that every level clears the
        merged contour of the ones before it. The result is re-centered on
        the midpoint of the first and last subtree roots.
        """
        shifts = [0.0]
        merged = list(subtrees[0].contour)

        for subtree in subtrees[1:]:
            shift = max(
                merged[k][1] - subtree.contour[k][0] + gap
                for k in range(min(len(merged), len(subtree.contour)))
            )
            shifts.append(shift)
            for k, (lo, hi) in enumerate(subtree.contour):
                if k < len(merged):
                    merged[k] = (min(merged[k][0], lo + shift), max(merged[k][1], hi + shift))
                else:
                    merged.append((lo + shift, hi + shift))

        center = (shifts[0] + shifts[-1]) / 2
        offsets: Dict[str, float] = {}
        for subtree, shift in zip(subtrees, shifts):
            for node_id, offset in subtree.offsets.items():
                offsets[node_id] = offset + shift - center
        contour = [(lo - center, hi - center) for lo, hi in merged]
        return _Subtree(offsets, contour)
