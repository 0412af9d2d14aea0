"""
Tests for trellis.core.arrange module.

Tests the tidy-tree arrangement: overlap removal, centering, level bands,
forests and non-tree graphs.
"""

import asyncio
from itertools import combinations

import pytest

from trellis.core.appliers import InstantApplier, TransitionApplier
from trellis.core.arrange import TreeArranger
from trellis.core.config import ArrangeConfig
from trellis.core.graph_model import DEFAULT_PORT, Position
from trellis.core.types import Orientation


def overlapping_pairs(graph):
    def overlap(a, b):
        return a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]

    return [
        (a.label, b.label)
        for a, b in combinations(graph.nodes, 2)
        if overlap(a.bounds, b.bounds)
    ]


def connect(graph, *pairs):
    for source, target in pairs:
        graph.add_connection(source, DEFAULT_PORT, target, DEFAULT_PORT)


class RecordingApplier(InstantApplier):
    """Instant applier that remembers what it was asked to apply."""

    def __init__(self):
        super().__init__()
        self.applied = None

    def apply(self, graph, positions):
        self.applied = dict(positions)
        return super().apply(graph, positions)


class TestTreeArranger:
    """Tests for TreeArranger on simple trees."""

    def test_empty_graph(self, graph):
        """Test arranging nothing."""
        arranger = TreeArranger()

        assert arranger.layout(graph) == {}
        assert arranger.last_handle.done

    def test_single_node(self, graph):
        """Test a lone node lands at the origin band."""
        node = graph.add_node("A")
        node.translate(500, 500)

        TreeArranger().layout(graph)

        assert node.position == Position(0, -50)

    def test_two_children(self, graph):
        """Test exact positions for a parent with two leaves."""
        a, b, c = (graph.add_node(label) for label in "ABC")
        connect(graph, (a, b), (a, c))

        positions = TreeArranger().layout(graph)

        assert positions[a.id] == Position(0, -50)
        assert positions[b.id] == Position(320, -120)
        assert positions[c.id] == Position(320, 20)
        assert b.position == positions[b.id]

    def test_parent_centered_on_children(self, graph):
        """Test the parent sits at the midpoint of its first and last child."""
        a, b, c, d = (graph.add_node(label) for label in "ABCD")
        connect(graph, (a, b), (a, c), (a, d))

        TreeArranger().layout(graph)

        first, last = b.center[1], d.center[1]
        assert a.center[1] == pytest.approx((first + last) / 2)

    def test_sibling_gap(self, graph):
        """Test adjacent leaves are exactly sibling_gap apart."""
        a, b, c = (graph.add_node(label) for label in "ABC")
        connect(graph, (a, b), (a, c))

        TreeArranger(ArrangeConfig(sibling_gap=10)).layout(graph)

        assert c.bounds[1] - b.bounds[3] == pytest.approx(10)

    def test_level_bands(self, graph):
        """Test each level starts after the widest node of the previous one."""
        a = graph.add_node("A", width=300)
        b = graph.add_node("B")
        c = graph.add_node("C", width=50)
        d = graph.add_node("D")
        connect(graph, (a, b), (b, c), (a, d), (c, graph.add_node("E")))

        TreeArranger(ArrangeConfig(level_gap=100)).layout(graph)

        assert a.position.x == 0
        assert b.position.x == d.position.x == 400
        # Level 1 is 200 wide
        assert c.position.x == 700
        # Level 2 is 50 wide
        assert graph.nodes[-1].position.x == 850

    def test_deterministic(self, graph):
        """Test arranging twice gives the same positions."""
        nodes = [graph.add_node(str(i)) for i in range(6)]
        connect(graph, (nodes[0], nodes[1]), (nodes[0], nodes[2]), (nodes[1], nodes[3]),
                (nodes[1], nodes[4]), (nodes[2], nodes[5]))
        arranger = TreeArranger()

        first = arranger.layout(graph)
        second = arranger.layout(graph)

        assert first == second

    def test_compute_does_not_move_nodes(self, graph):
        """Test compute only returns positions."""
        a, b = graph.add_node("A"), graph.add_node("B")
        connect(graph, (a, b))
        b.translate(7, 7)

        TreeArranger().compute(graph)

        assert b.position == Position(7, 7)

    def test_custom_applier(self, graph):
        """Test the computed positions go through the given applier."""
        a, b = graph.add_node("A"), graph.add_node("B")
        connect(graph, (a, b))
        applier = RecordingApplier()

        positions = TreeArranger().layout(graph, applier)

        assert applier.applied == positions


class TestSupersede:
    """Tests for layouts requested while a transition is running."""

    @pytest.mark.asyncio
    async def test_instant_layout_cancels_transition(self, graph):
        a, b = graph.add_node("A"), graph.add_node("B")
        connect(graph, (a, b))
        b.translate(1000, 1000)
        arranger = TreeArranger()

        arranger.layout(graph, TransitionApplier(duration=10.0, frame_interval=0.01))
        running = arranger.last_handle
        await asyncio.sleep(0.02)
        positions = arranger.layout(graph)
        await running.wait()

        assert running.cancelled
        assert b.position == positions[b.id]

    @pytest.mark.asyncio
    async def test_transition_from_another_applier_cancels(self, graph):
        a, b = graph.add_node("A"), graph.add_node("B")
        connect(graph, (a, b))
        arranger = TreeArranger()

        arranger.layout(graph, TransitionApplier(duration=10.0, frame_interval=0.01))
        first = arranger.last_handle
        arranger.layout(graph, TransitionApplier(duration=0.02, frame_interval=0.01))
        second = arranger.last_handle
        await first.wait()
        await second.wait()

        assert first.cancelled
        assert not second.cancelled
        assert b.position == arranger.compute(graph)[b.id]


class TestOverlapRemoval:
    """Tests that arrangement separates colliding subtrees."""

    @pytest.mark.asyncio
    async def test_synthesized_document(self, engine, graph, wide_document):
        """Test a document with colliding subtrees ends up overlap-free."""
        await engine.add_nodes_from_json(wide_document)
        assert overlapping_pairs(graph)

        TreeArranger().layout(graph)

        assert overlapping_pairs(graph) == []

    @pytest.mark.asyncio
    async def test_connections_unchanged(self, engine, graph, nested_document):
        """Test arrangement only moves nodes."""
        await engine.add_nodes_from_json(nested_document)
        before = graph.connections

        TreeArranger().layout(graph)

        assert graph.connections == before

    @pytest.mark.asyncio
    async def test_children_one_band_deeper(self, engine, graph, wide_document):
        """Test every child sits further along the depth axis than its parent."""
        await engine.add_nodes_from_json(wide_document)

        TreeArranger().layout(graph)

        for conn in graph.connections:
            source = graph.get_node(conn.source)
            target = graph.get_node(conn.target)
            assert target.position.x > source.bounds[2]


class TestForest:
    """Tests for graphs with several roots or cycles."""

    def test_trees_separated_by_tree_gap(self, graph):
        """Test separate trees keep tree_gap between them."""
        a, b = graph.add_node("A"), graph.add_node("B")
        c, d = graph.add_node("C"), graph.add_node("D")
        connect(graph, (a, b), (c, d))

        TreeArranger(ArrangeConfig(tree_gap=80)).layout(graph)

        assert c.bounds[1] - a.bounds[3] == pytest.approx(80)
        assert overlapping_pairs(graph) == []

    def test_shared_child_stays_with_first_parent(self, graph):
        """Test a node with two parents is arranged once."""
        a, b, c, d = (graph.add_node(label) for label in "ABCD")
        connect(graph, (a, b), (a, c), (b, d), (c, d))

        positions = TreeArranger().layout(graph)

        assert set(positions) == {a.id, b.id, c.id, d.id}
        assert d.center[1] == pytest.approx(b.center[1])
        assert overlapping_pairs(graph) == []

    def test_cycle(self, graph):
        """Test a graph without roots is still arranged."""
        a, b = graph.add_node("A"), graph.add_node("B")
        connect(graph, (a, b), (b, a))

        positions = TreeArranger().layout(graph)

        assert positions[a.id].x == 0
        assert positions[b.id].x == 320


class TestTopDown:
    """Tests for top-down arrangement."""

    def test_two_children(self, graph):
        a, b, c = (graph.add_node(label) for label in "ABC")
        connect(graph, (a, b), (a, c))

        TreeArranger(orientation=Orientation.TOP_DOWN).layout(graph)

        assert a.position == Position(-100, 0)
        assert b.position == Position(-220, 220)
        assert c.position == Position(20, 220)
