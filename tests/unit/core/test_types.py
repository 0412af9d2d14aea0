"""
Tests for trellis.core.types module.

Tests the shared enums and the orientation mapping.
"""

import pytest

from trellis.core.types import ArrayPolicy, JsonKind, Orientation, PortDirection


class TestPortDirection:
    """Tests for PortDirection enum."""

    def test_members(self):
        assert {d.name for d in PortDirection} == {"INPUT", "OUTPUT"}


class TestJsonKind:
    """Tests for JsonKind enum."""

    def test_containers(self):
        """Test which kinds hold nested values."""
        assert JsonKind.OBJECT.is_container
        assert JsonKind.ARRAY.is_container
        assert not JsonKind.SCALAR.is_container
        assert not JsonKind.NULL.is_container


class TestOrientation:
    """Tests for Orientation enum."""

    @pytest.mark.parametrize("text,expected", [
        ("left_right", Orientation.LEFT_RIGHT),
        ("lr", Orientation.LEFT_RIGHT),
        ("Left-Right", Orientation.LEFT_RIGHT),
        ("top_down", Orientation.TOP_DOWN),
        ("td", Orientation.TOP_DOWN),
        (" TB ", Orientation.TOP_DOWN),
    ])
    def test_from_string(self, text, expected):
        """Test parsing orientation names and aliases."""
        assert Orientation.from_string(text) == expected

    def test_from_string_invalid(self):
        """Test invalid orientation names raise."""
        with pytest.raises(ValueError, match="Unknown orientation"):
            Orientation.from_string("diagonal")

    def test_left_right_mapping(self):
        """Test depth runs along x for left-to-right trees."""
        assert Orientation.LEFT_RIGHT.to_xy(400, -100) == (400, -100)
        assert Orientation.LEFT_RIGHT.from_xy(400, -100) == (400, -100)

    def test_top_down_mapping(self):
        """Test depth runs along y for top-down trees."""
        assert Orientation.TOP_DOWN.to_xy(400, -100) == (-100, 400)
        assert Orientation.TOP_DOWN.from_xy(-100, 400) == (400, -100)

    def test_extents(self):
        """Test node sizes split into depth and breadth extents."""
        assert Orientation.LEFT_RIGHT.extents(200, 100) == (200, 100)
        assert Orientation.TOP_DOWN.extents(200, 100) == (100, 200)


class TestArrayPolicy:
    """Tests for ArrayPolicy enum."""

    def test_from_string(self):
        assert ArrayPolicy.from_string("flat") == ArrayPolicy.FLAT
        assert ArrayPolicy.from_string("EXPAND") == ArrayPolicy.EXPAND

    def test_from_string_invalid(self):
        with pytest.raises(ValueError, match="Unknown array policy"):
            ArrayPolicy.from_string("deep")
