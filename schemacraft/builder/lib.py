"""PropertyBuilder: an ordered, named collection of properties.

Typed shortcuts create a Property, register it and return it so it can be
refined in place:

Example:
    >>> builder = PropertyBuilder()
    >>> email = builder.string("email").required().rules("email")
    >>> age = builder.integer("age").min(18)
    >>> list(builder.to_array())
    ['email', 'age']
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from schemacraft.core import get_logger
from schemacraft.property import Property

logger = get_logger("schemacraft.builder")


class PropertyBuilder:
    """Insertion-ordered mapping of name to Property.

    Args:
        properties: Optional properties to register up front.
    """

    def __init__(self, properties: Iterable[Property] | None = None) -> None:
        self._properties: dict[str, Property] = {}
        for prop in properties or ():
            self.add(prop)

    @classmethod
    def new(cls) -> PropertyBuilder:
        return cls()

    @classmethod
    def from_array(cls, schema: Mapping[str, Mapping[str, Any]]) -> PropertyBuilder:
        """Rebuild a builder from serialized properties.

        Accepts either a bare name-to-schema mapping (``to_array()`` output)
        or a full object document (``{"type": "object", "properties": ...}``).
        Names in a document's ``required`` list are marked required.

        Raises:
            ValueError: If a property holds a closure rule.
        """
        required: set[str] = set()
        if schema.get("type") == "object" and isinstance(schema.get("properties"), Mapping):
            required = set(schema.get("required") or ())
            schema = schema["properties"]

        builder = cls()
        for name, data in schema.items():
            prop = Property.from_array(name, data)
            if name in required:
                prop.required()
            builder.add(prop)
        return builder

    def __len__(self) -> int:
        return len(self._properties)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __iter__(self) -> Iterator[Property]:
        return iter(self._properties.values())

    def __repr__(self) -> str:
        return f"PropertyBuilder({list(self._properties)!r})"

    # =========================================================================
    # Registration
    # =========================================================================

    def add(self, property: Property) -> Property:
        """Register a property by name; a later property with the same name wins."""
        name = property.get_name()
        if name in self._properties:
            logger.debug(f"Replacing property '{name}'")
        self._properties[name] = property
        return property

    def get(self, name: str) -> Property | None:
        return self._properties.get(name)

    def string(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.string(name, description))

    def number(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.number(name, description))

    def integer(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.integer(name, description))

    def boolean(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.boolean(name, description))

    def object(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.object(name, description))

    def array(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.array(name, description))

    def time_range(
        self, name: str, description: str | None = None, *, format: str = "Y-m-d"
    ) -> Property:
        return self.add(Property.time_range(name, description, format=format))

    def date_range(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.date_range(name, description))

    def time(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.time(name, description))

    def duration(self, name: str, description: str | None = None) -> Property:
        return self.add(Property.duration(name, description))

    def group(
        self,
        name: str,
        callback: Callable[[PropertyBuilder], Any],
        description: str | None = None,
    ) -> Property:
        """Register an object property whose children come from ``callback``."""
        return self.add(Property.object(name, description).with_builder(callback))

    def list(
        self,
        name: str,
        items: Property | Mapping[str, Any] | Callable[[PropertyBuilder], Any],
        description: str | None = None,
    ) -> Property:
        """Register an array property.

        ``items`` is an item schema, or a callback that fills a builder whose
        properties become the fields of an object item.
        """
        prop = Property.array(name, description)
        if callable(items):
            items = Property.object("item").with_builder(items)
        return self.add(prop.items(items))

    # =========================================================================
    # Composition
    # =========================================================================

    def merge(self, other: PropertyBuilder) -> PropertyBuilder:
        """Copy every property of ``other`` into this builder.

        Properties are cloned, so later changes on either side do not leak
        into the other. Names already present are overwritten.
        """
        for name, prop in other.get_properties().items():
            self._properties[name] = prop.clone()
        return self

    def prefix(self, prefix: str) -> PropertyBuilder:
        """Rename every property to ``prefix + name`` and re-key the builder."""
        renamed: dict[str, Property] = {}
        for name, prop in self._properties.items():
            prop.set_name(prefix + name)
            renamed[prefix + name] = prop
        self._properties = renamed
        return self

    def validate(
        self,
        name: str,
        rules: Iterable[str] | str,
        type: str = "string",
    ) -> Property:
        """Build a bare, unregistered Property carrying ``rules``."""
        return Property(name, type).rules(rules)

    # =========================================================================
    # Serialization
    # =========================================================================

    def get_properties(self) -> dict[str, Property]:
        return dict(self._properties)

    def to_array(self) -> dict[str, dict[str, Any]]:
        """Serialize every property keyed by name.

        The ``name`` key is dropped (the map key carries it) and ``default``
        is moved to the end of each entry.
        """
        schema: dict[str, dict[str, Any]] = {}
        for name, prop in self._properties.items():
            data = prop.to_array()
            data.pop("name", None)
            if "default" in data:
                data["default"] = data.pop("default")
            schema[name] = data
        return schema
