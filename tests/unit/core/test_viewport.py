"""
Tests for trellis.core.viewport module.

Tests bounding boxes and the fit-to-view transform.
"""

import pytest

from trellis.core.config import ViewportConfig
from trellis.core.viewport import ViewportTransform, bounding_box, compute_fit, fit_to_config


def place(graph, *specs):
    nodes = []
    for x, y, w, h in specs:
        node = graph.add_node("n", width=w, height=h)
        node.translate(x, y)
        nodes.append(node)
    return nodes


class TestViewportTransform:
    """Tests for ViewportTransform."""

    def test_identity(self):
        assert ViewportTransform().map_to_view(3, 4) == (3, 4)

    def test_inverse(self):
        transform = ViewportTransform(0.5, 10, -20)

        x, y = transform.map_to_view(100, 200)
        assert (x, y) == (60, 80)
        assert transform.map_from_view(x, y) == (100, 200)

    def test_to_dict(self):
        assert ViewportTransform(2, 3, 4).to_dict() == {
            "scale": 2,
            "translate_x": 3,
            "translate_y": 4,
        }


class TestBoundingBox:
    """Tests for bounding_box."""

    def test_empty(self):
        assert bounding_box([]) is None

    def test_covers_all_nodes(self, graph):
        nodes = place(graph, (0, 0, 200, 100), (400, -300, 200, 100))

        assert bounding_box(nodes) == (0, -300, 600, 100)


class TestComputeFit:
    """Tests for compute_fit."""

    def test_empty(self):
        """Test an empty diagram centers the origin at neutral scale."""
        assert compute_fit([], 1000, 500) == ViewportTransform(1.0, 500, 250)

    def test_single_node(self, graph):
        """Test a lone node is centered without zooming."""
        nodes = place(graph, (100, 100, 200, 100))

        transform = compute_fit(nodes, 1000, 500)

        assert transform.scale == 1.0
        assert transform.map_to_view(*nodes[0].center) == (500, 250)

    def test_zero_area_box(self, graph):
        """Test degenerate geometry keeps scale 1."""
        nodes = place(graph, (0, 0, 0, 0), (0, 0, 0, 0))

        assert compute_fit(nodes, 800, 600) == ViewportTransform(1.0, 400, 300)

    def test_large_diagram_scaled_down(self, graph):
        """Test the box fills at most 90% of the viewport."""
        nodes = place(graph, (0, 0, 200, 100), (1800, 900, 200, 100))

        transform = compute_fit(nodes, 1000, 500)

        # Box is 2000 x 1000
        assert transform.scale == pytest.approx(0.45)
        left, top = transform.map_to_view(0, 0)
        right, bottom = transform.map_to_view(2000, 1000)
        assert (left + right) / 2 == pytest.approx(500)
        assert (top + bottom) / 2 == pytest.approx(250)
        assert right - left <= 0.9 * 1000 + 1e-9
        assert bottom - top <= 0.9 * 500 + 1e-9

    def test_never_zooms_in(self, graph):
        """Test small diagrams are capped at max_scale."""
        nodes = place(graph, (0, 0, 10, 10), (20, 20, 10, 10))

        transform = compute_fit(nodes, 1000, 500)

        assert transform.scale == 1.0
        assert transform.map_to_view(15, 15) == (500, 250)

    def test_custom_fill(self, graph):
        nodes = place(graph, (0, 0, 100, 100), (900, 900, 100, 100))

        transform = compute_fit(nodes, 1000, 1000, fill=0.5)

        assert transform.scale == pytest.approx(0.5)

    def test_fit_to_config(self, graph):
        nodes = place(graph, (0, 0, 200, 100), (1800, 900, 200, 100))

        transform = fit_to_config(nodes, ViewportConfig(width=1000, height=500))

        assert transform == compute_fit(nodes, 1000, 500)

    def test_max_scale_above_one_is_capped(self, graph):
        """Test a permissive max_scale still never zooms in."""
        nodes = place(graph, (0, 0, 10, 10), (20, 20, 10, 10))

        transform = compute_fit(nodes, 1000, 500, max_scale=4.0)

        assert transform.scale == 1.0
