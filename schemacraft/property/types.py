"""Schema type tags and runtime type matching.

A property's declared type is either a single tag (``"string"``) or a union
of tags (``["null", "string"]``). The two forms match values differently:

- A single type compares against the schema vocabulary, so ``"number"``
  accepts both ints and floats and ``"object"`` accepts any container.
- A union compares the value's runtime tag (``"integer"``, ``"double"``,
  ``"array"``...) for membership. ``["number"]`` therefore never matches
  a numeric value; list ``"integer"`` or ``"double"`` explicitly instead.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class TypeTag(str, Enum):
    """Schema vocabulary for declared property types."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"


class RuntimeTag(str, Enum):
    """Native type names reported for runtime values.

    Mirrors the names a loosely typed host reports (``gettype``-style),
    which is what union types are matched against.
    """

    NULL = "NULL"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DOUBLE = "double"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def runtime_type_tag(value: Any) -> str:
    """Return the runtime type tag of a value.

    Args:
        value: Any Python value.

    Returns:
        One of the RuntimeTag values. Mappings, lists and tuples report
        ``"array"``; anything that is not a primitive reports ``"object"``.

    Example:
        >>> runtime_type_tag(5)
        'integer'
        >>> runtime_type_tag({"a": 1})
        'array'
    """
    # bool before int: bool is an int subclass
    if value is None:
        return RuntimeTag.NULL.value
    if isinstance(value, bool):
        return RuntimeTag.BOOLEAN.value
    if isinstance(value, int):
        return RuntimeTag.INTEGER.value
    if isinstance(value, float):
        return RuntimeTag.DOUBLE.value
    if isinstance(value, str):
        return RuntimeTag.STRING.value
    if isinstance(value, (Mapping, list, tuple)):
        return RuntimeTag.ARRAY.value
    return RuntimeTag.OBJECT.value


def _tag_value(tag: str | TypeTag) -> str:
    if isinstance(tag, TypeTag):
        return tag.value
    if not isinstance(tag, str):
        raise TypeError(f"Type tags must be strings, got {type(tag).__name__}")
    return tag


@dataclass(frozen=True)
class SingleType:
    """A single declared type such as ``"string"``."""

    tag: str

    @property
    def primary(self) -> str:
        return self.tag

    @property
    def members(self) -> tuple[str, ...]:
        return (self.tag,)

    def to_wire(self) -> str:
        return self.tag

    def with_null(self) -> UnionType:
        return UnionType(("null", self.tag))

    def without_null(self) -> SchemaType:
        return self

    def accepts(self, value: Any) -> bool:
        """Check a value against the declared schema type."""
        runtime = runtime_type_tag(value)
        if self.tag == TypeTag.OBJECT.value:
            return runtime in (RuntimeTag.ARRAY.value, RuntimeTag.OBJECT.value)
        if self.tag == TypeTag.NUMBER.value:
            return runtime in (RuntimeTag.INTEGER.value, RuntimeTag.DOUBLE.value)
        return runtime == self.tag


@dataclass(frozen=True)
class UnionType:
    """A union of declared types such as ``["null", "string"]``."""

    tags: tuple[str, ...]

    @property
    def primary(self) -> str:
        """First non-null member, or ``"null"`` for a null-only union."""
        for tag in self.tags:
            if tag != TypeTag.NULL.value:
                return tag
        return TypeTag.NULL.value

    @property
    def members(self) -> tuple[str, ...]:
        return self.tags

    def to_wire(self) -> list[str]:
        return list(self.tags)

    def with_null(self) -> UnionType:
        if TypeTag.NULL.value in self.tags:
            return self
        return UnionType((TypeTag.NULL.value, *self.tags))

    def without_null(self) -> SchemaType:
        remaining = tuple(tag for tag in self.tags if tag != TypeTag.NULL.value)
        if len(remaining) == 1:
            return SingleType(remaining[0])
        return UnionType(remaining)

    def accepts(self, value: Any) -> bool:
        """Check the runtime tag of a value for membership."""
        return runtime_type_tag(value) in self.tags


SchemaType = Union[SingleType, UnionType]


def parse_type(value: str | TypeTag | Sequence[str | TypeTag] | SchemaType) -> SchemaType:
    """Build a SchemaType from its wire form.

    Args:
        value: A tag string, a list of tag strings, or an existing SchemaType.

    Returns:
        SingleType for a string, UnionType for a list.

    Raises:
        TypeError: If the value is neither a string nor a sequence of strings.
        ValueError: If a union is empty.
    """
    if isinstance(value, (SingleType, UnionType)):
        return value
    if isinstance(value, (str, TypeTag)):
        return SingleType(_tag_value(value))
    if isinstance(value, Sequence):
        tags = tuple(_tag_value(tag) for tag in value)
        if not tags:
            raise ValueError("Union types need at least one member")
        return UnionType(tags)
    raise TypeError(f"Unsupported type declaration: {value!r}")
