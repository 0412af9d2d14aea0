"""
JSON Value - Tagged representation of an arbitrary JSON document.

The layout engine dispatches on ``JsonValue.kind`` instead of inspecting
Python types at every recursion step. Conversion from plain Python data
(as produced by ``json.load``) happens once, up front.
"""

import json
from dataclasses import dataclass
from typing import Any, Iterator, List, Tuple

from trellis.core.errors import UnsupportedValueError
from trellis.core.types import JsonKind


@dataclass(frozen=True)
class JsonValue:
    """
    One JSON value tagged with its kind.

    Payload by kind:
    - OBJECT: tuple of (key, JsonValue) pairs in document order
    - ARRAY: tuple of JsonValue items
    - SCALAR: the str, int, float or bool value
    - NULL: None
    """
    kind: JsonKind
    payload: Any = None

    @classmethod
    def from_python(cls, value: Any) -> "JsonValue":
        """
        Build a tagged value from plain Python data.

        Dict key order is preserved. Tuples are accepted as arrays.

        Raises:
            UnsupportedValueError: If the data contains something JSON
                cannot represent (sets, arbitrary objects, non-string keys)
        """
        if isinstance(value, JsonValue):
            return value
        if value is None:
            return cls(JsonKind.NULL)
        if isinstance(value, (bool, int, float, str)):
            return cls(JsonKind.SCALAR, value)
        if isinstance(value, dict):
            entries = []
            for key, item in value.items():
                if not isinstance(key, str):
                    raise UnsupportedValueError(
                        f"JSON object keys must be strings, got {type(key).__name__}"
                    )
                entries.append((key, cls.from_python(item)))
            return cls(JsonKind.OBJECT, tuple(entries))
        if isinstance(value, (list, tuple)):
            return cls(JsonKind.ARRAY, tuple(cls.from_python(item) for item in value))
        raise UnsupportedValueError(f"Cannot represent {type(value).__name__} as JSON")

    @classmethod
    def from_entries(cls, entries: List[Tuple[str, "JsonValue"]]) -> "JsonValue":
        """Build an object value from (key, value) pairs."""
        return cls(JsonKind.OBJECT, tuple(entries))

    @property
    def is_object(self) -> bool:
        return self.kind == JsonKind.OBJECT

    @property
    def is_array(self) -> bool:
        return self.kind == JsonKind.ARRAY

    @property
    def entries(self) -> Tuple[Tuple[str, "JsonValue"], ...]:
        """Object entries in document order (empty for other kinds)."""
        return self.payload if self.kind == JsonKind.OBJECT else ()

    @property
    def items(self) -> Tuple["JsonValue", ...]:
        """Array items in order (empty for other kinds)."""
        return self.payload if self.kind == JsonKind.ARRAY else ()

    def keys(self) -> List[str]:
        return [key for key, _ in self.entries]

    def __len__(self) -> int:
        if self.kind.is_container:
            return len(self.payload)
        return 0

    def __iter__(self) -> Iterator[Any]:
        if self.kind.is_container:
            return iter(self.payload)
        return iter(())

    def to_python(self) -> Any:
        """Convert back to plain Python data."""
        if self.kind == JsonKind.OBJECT:
            return {key: value.to_python() for key, value in self.payload}
        if self.kind == JsonKind.ARRAY:
            return [item.to_python() for item in self.payload]
        return self.payload

    @property
    def text(self) -> str:
        """
        Display text for this value when it is drawn as a single node.

        Strings are shown verbatim, everything else as compact JSON.
        """
        if self.kind == JsonKind.SCALAR and isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.to_python(), separators=(",", ":"), ensure_ascii=False)


def count_nodes(value: Any) -> int:
    """
    Count the nodes the flat-array layout produces for a document.

    That is one per object key plus one per array element directly held by a
    key. A non-object root counts as a single leaf.
    """
    value = JsonValue.from_python(value)
    if not value.is_object:
        return 1

    total = 0
    for _, child in value.entries:
        total += 1
        if child.is_array:
            total += len(child)
        elif child.is_object:
            total += count_nodes(child)
    return total
