"""
Tests for trellis.core.json_value module.
"""

import pytest

from trellis.core.errors import UnsupportedValueError
from trellis.core.json_value import JsonValue, count_nodes
from trellis.core.types import JsonKind


class TestJsonValue:
    """Tests for JsonValue conversion."""

    def test_kinds(self):
        """Test each Python type maps to its kind."""
        assert JsonValue.from_python({}).kind == JsonKind.OBJECT
        assert JsonValue.from_python([]).kind == JsonKind.ARRAY
        assert JsonValue.from_python(()).kind == JsonKind.ARRAY
        assert JsonValue.from_python("s").kind == JsonKind.SCALAR
        assert JsonValue.from_python(1.5).kind == JsonKind.SCALAR
        assert JsonValue.from_python(False).kind == JsonKind.SCALAR
        assert JsonValue.from_python(None).kind == JsonKind.NULL

    def test_key_order_preserved(self):
        """Test object entries keep document order."""
        value = JsonValue.from_python({"z": 1, "a": 2, "m": 3})

        assert value.keys() == ["z", "a", "m"]

    def test_passthrough(self):
        """Test converting an existing JsonValue returns it unchanged."""
        value = JsonValue.from_python({"a": 1})

        assert JsonValue.from_python(value) is value

    def test_non_string_key(self):
        """Test non-string keys are rejected."""
        with pytest.raises(UnsupportedValueError):
            JsonValue.from_python({1: "a"})

    def test_unsupported_type(self):
        """Test values JSON cannot represent are rejected."""
        with pytest.raises(UnsupportedValueError):
            JsonValue.from_python({"a": {1, 2}})

    def test_unsupported_is_type_error(self):
        """Test the error is also a TypeError."""
        with pytest.raises(TypeError):
            JsonValue.from_python(object())

    def test_to_python(self):
        """Test conversion back to plain data."""
        data = {"a": [1, {"b": None}], "c": "text"}

        assert JsonValue.from_python(data).to_python() == data

    def test_len_and_iter(self):
        """Test containers report their size; scalars are empty."""
        array = JsonValue.from_python([1, 2, 3])

        assert len(array) == 3
        assert [item.payload for item in array] == [1, 2, 3]
        assert len(JsonValue.from_python("abc")) == 0
        assert list(JsonValue.from_python(None)) == []

    def test_entries_and_items_by_kind(self):
        """Test accessors return empty tuples for the wrong kind."""
        obj = JsonValue.from_python({"a": 1})
        arr = JsonValue.from_python([1])

        assert obj.items == ()
        assert arr.entries == ()
        assert obj.is_object and not obj.is_array

    def test_from_entries(self):
        """Test building an object from pairs."""
        value = JsonValue.from_entries([("k", JsonValue.from_python(1))])

        assert value.to_python() == {"k": 1}


class TestText:
    """Tests for JsonValue.text display strings."""

    @pytest.mark.parametrize("data,expected", [
        ("B", "B"),
        ("", ""),
        (42, "42"),
        (1.5, "1.5"),
        (True, "true"),
        (None, "null"),
        ({}, "{}"),
        ([], "[]"),
        ({"x": 1}, '{"x":1}'),
        ([1, "a"], '[1,"a"]'),
        ("héllo", "héllo"),
    ])
    def test_text(self, data, expected):
        assert JsonValue.from_python(data).text == expected


class TestCountNodes:
    """Tests for count_nodes."""

    def test_empty_object(self):
        assert count_nodes({}) == 0

    def test_non_object_root(self):
        assert count_nodes([1, 2]) == 1
        assert count_nodes("x") == 1

    def test_array_under_key(self):
        assert count_nodes({"A": ["B", "C"]}) == 3

    def test_nested(self):
        assert count_nodes({"A": {"B": {}, "C": []}}) == 3

    def test_mixed(self, nested_document):
        assert count_nodes(nested_document) == 13
