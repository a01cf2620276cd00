"""Property: a single named, typed schema node.

A Property is built fluently (every mutator returns ``self``) and serializes
to the JSON-schema-like wire form consumed by renderers and by
``SchemaCompiler``. Object properties nest child properties; array
properties carry a single item schema.

Example:
    >>> age = Property.integer("age").required().min(18).max(120)
    >>> age.validate(30)
    True
    >>> age.to_array()["rules"]
    ['required']
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .formats import compile_pattern, is_email, pattern_matches
from .rules import (
    ArrayFieldEqualityRule,
    ClosureRule,
    ComparisonRule,
    ConditionalRule,
    FieldEqualityRule,
    PatternMatchRule,
    RequiredWithoutRule,
    RequiredWithRule,
    is_blank,
    normalize_rules,
    rule_from_array,
)
from .types import SchemaType, TypeTag, parse_type

if TYPE_CHECKING:
    from schemacraft.builder import PropertyBuilder

DURATION_UNITS = ["seconds", "minutes", "hours", "days", "weeks", "months", "years"]


def humanize(name: str) -> str:
    """Turn a field name into a label: ``"start_time"`` -> ``"Start Time"``."""
    words = name.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def rule_value(value: Any) -> str:
    """Render a value the way rule tokens expect (booleans as 1/0)."""
    if value is True:
        return "1"
    if value is False:
        return "0"
    if value is None:
        return ""
    return str(value)


def _field_value_token(rule: str, field: str, value: Any) -> str:
    rendered = rule_value(value)
    if "," in rendered:
        raise ValueError(f"{rule} value for '{field}' cannot contain a comma: {rendered!r}")
    return f"{rule}:{field},{rendered}"


def _is_object_document(data: Mapping[str, Any]) -> bool:
    declared = data.get("type")
    tags = [declared] if isinstance(declared, str) else declared
    return (
        isinstance(tags, list)
        and TypeTag.OBJECT.value in tags
        and isinstance(data.get("properties"), Mapping)
    )


def _serialize(schema: Property | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(schema, Property):
        return schema.to_array()
    return dict(schema)


class Property:
    """A named schema node with type, constraints and conditional rules.

    Args:
        name: Field name, unique within its parent.
        type: A type tag (``"string"``) or a union list (``["null", "string"]``).
        description: Optional human-readable description.
    """

    def __init__(
        self,
        name: str,
        type: str | Sequence[str] | SchemaType = TypeTag.STRING,
        description: str | None = None,
    ) -> None:
        self._name = name
        self._type: SchemaType = parse_type(type)
        self._description = description
        self._default: Any = None
        self._rules: list[str] = []
        self._is_required = False
        self._attributes: dict[str, Any] = {}
        self._properties: dict[str, Property | dict[str, Any]] = {}
        self._items: Property | dict[str, Any] | None = None
        self._format: str | None = None
        self._minimum: int | float | None = None
        self._maximum: int | float | None = None
        self._pattern: str | None = None
        self._reference: str | None = None
        self._conditional_rules: list[ConditionalRule] = []

    def __repr__(self) -> str:
        return f"Property(name={self._name!r}, type={self._type.to_wire()!r})"

    # =========================================================================
    # Factories
    # =========================================================================

    @classmethod
    def string(cls, name: str, description: str | None = None) -> Property:
        return cls(name, TypeTag.STRING, description)

    @classmethod
    def number(cls, name: str, description: str | None = None) -> Property:
        return cls(name, TypeTag.NUMBER, description)

    @classmethod
    def integer(cls, name: str, description: str | None = None) -> Property:
        return cls(name, TypeTag.INTEGER, description)

    @classmethod
    def boolean(cls, name: str, description: str | None = None) -> Property:
        return cls(name, TypeTag.BOOLEAN, description)

    @classmethod
    def object(cls, name: str, description: str | None = None) -> Property:
        return cls(name, TypeTag.OBJECT, description)

    @classmethod
    def array(cls, name: str, description: str | None = None) -> Property:
        return cls(name, TypeTag.ARRAY, description)

    @classmethod
    def time_range(
        cls,
        name: str,
        description: str | None = None,
        *,
        format: str = "Y-m-d",
    ) -> Property:
        """Nullable object with ``start``/``end`` date-time children.

        Args:
            name: Field name.
            description: Label; derived from the name when omitted.
            format: Display format hint for renderers.
        """
        prop = cls(name, [TypeTag.OBJECT, TypeTag.NULL], description or humanize(name))
        prop.add_attribute("timeRange", True)
        prop.format(format)
        prop.properties(
            {
                "start": cls.string("start").format("date-time"),
                "end": cls.string("end").format("date-time"),
            }
        )
        return prop

    @classmethod
    def date_range(cls, name: str, description: str | None = None) -> Property:
        """Object with ``start``/``end`` dates and picker ``options``."""
        options = cls.object("options").properties(
            {
                "minDate": cls.string("minDate").format("date"),
                "maxDate": cls.string("maxDate").format("date"),
                "disabledDates": cls.array("disabledDates").items(
                    cls.string("date").format("date")
                ),
                "format": cls.string("format").default("YYYY-MM-DD"),
                "shortcuts": cls.boolean("shortcuts").default(True),
                "weekNumbers": cls.boolean("weekNumbers").default(False),
                "monthSelector": cls.boolean("monthSelector").default(True),
                "yearSelector": cls.boolean("yearSelector").default(True),
            }
        )
        return cls.object(name, description or humanize(name)).properties(
            {
                "start": cls.string("start", "Start date").format("date"),
                "end": cls.string("end", "End date").format("date"),
                "options": options,
            }
        )

    @classmethod
    def time(cls, name: str, description: str | None = None) -> Property:
        return cls.string(name, description or humanize(name)).format("time")

    @classmethod
    def duration(cls, name: str, description: str | None = None) -> Property:
        """Object with a numeric ``value`` and an enumerated ``unit``."""
        return cls.object(name, description or humanize(name)).properties(
            {
                "value": cls.number("value"),
                "unit": cls.string("unit").enum(DURATION_UNITS),
            }
        )

    @classmethod
    def from_array(cls, name: str, data: Mapping[str, Any]) -> Property:
        """Rebuild a Property from its serialized form.

        Keys without a dedicated setter are kept as attributes. Nested
        ``properties`` and ``items`` are rebuilt recursively.

        Args:
            name: Field name (the ``name`` key in ``data`` wins if present).
            data: Output of ``to_array()`` or an equivalent hand-written dict.

        Returns:
            A new Property.

        Raises:
            ValueError: If ``data`` holds a closure rule.
        """
        data = dict(data)
        prop = cls(data.pop("name", name), data.pop("type", TypeTag.STRING))
        if (description := data.pop("description", None)) is not None:
            prop.description(description)
        if "default" in data:
            prop.default(data.pop("default"))
        prop.rules(data.pop("rules", None))
        if data.pop("required", False):
            prop.required()
        if (fmt := data.pop("format", None)) is not None:
            prop.format(fmt)
        if (pattern := data.pop("pattern", None)) is not None:
            prop.pattern(pattern)
        if (minimum := data.pop("minimum", None)) is not None:
            prop.minimum(minimum)
        if (maximum := data.pop("maximum", None)) is not None:
            prop.maximum(maximum)
        if (reference := data.pop("$ref", None)) is not None:
            prop.reference(reference)
        if children := data.pop("properties", None):
            prop.properties(
                {key: cls.from_array(key, child) for key, child in children.items()}
            )
        if (items := data.pop("items", None)) is not None:
            prop.items(cls.from_array(items.get("name", "item"), items))
        for rule in data.pop("conditionalRules", None) or []:
            prop._conditional_rules.append(rule_from_array(rule))
        for key, value in data.items():
            prop.add_attribute(key, value)
        return prop

    # =========================================================================
    # Fluent mutators
    # =========================================================================

    def set_name(self, name: str) -> Property:
        self._name = name
        return self

    def description(self, description: str) -> Property:
        self._description = description
        return self

    def default(self, value: Any) -> Property:
        self._default = value
        return self

    def rules(self, rules: str | Iterable[str] | None) -> Property:
        """Append rule tokens from a ``|``-delimited string or a list."""
        for rule in normalize_rules(rules):
            self.add_rule(rule)
        return self

    def add_rule(self, rule: str) -> Property:
        if not isinstance(rule, str):
            raise TypeError(f"Rule tokens must be strings, got {type(rule).__name__}")
        if rule not in self._rules:
            self._rules.append(rule)
        if rule == "required":
            self._is_required = True
        return self

    def add_attribute(self, key: str, value: Any) -> Property:
        self._attributes[key] = value
        return self

    def format(self, format: str) -> Property:
        self._format = format
        return self

    def minimum(self, value: int | float) -> Property:
        self._minimum = value
        return self

    def maximum(self, value: int | float) -> Property:
        self._maximum = value
        return self

    min = minimum
    max = maximum

    def pattern(self, pattern: str) -> Property:
        """Set a regex constraint; delimited forms like ``/^a+$/i`` are accepted.

        Raises:
            ValueError: If the pattern does not compile.
        """
        compile_pattern(pattern)
        self._pattern = pattern
        return self

    def reference(self, reference: str) -> Property:
        self._reference = reference
        return self

    def enum(self, values: Iterable[Any]) -> Property:
        return self.add_attribute("enum", list(values))

    def required(self, required: bool = True) -> Property:
        """Mark required, or strip every ``required*`` token when False."""
        if required:
            return self.add_rule("required")
        self._rules = [rule for rule in self._rules if not rule.startswith("required")]
        self._is_required = False
        return self

    def nullable(self, nullable: bool = True) -> Property:
        """Add ``null`` to the type union and the ``nullable`` token.

        Calling it repeatedly never duplicates either. ``nullable(False)``
        removes both.
        """
        if nullable:
            self._type = self._type.with_null()
            return self.add_rule("nullable")
        self._type = self._type.without_null()
        self._rules = [rule for rule in self._rules if rule != "nullable"]
        return self

    # =========================================================================
    # Nesting
    # =========================================================================

    def _require_primary(self, tag: TypeTag, message: str) -> None:
        if self._type.primary != tag.value:
            raise ValueError(message)

    def add_property(self, property: Property) -> Property:
        self._require_primary(
            TypeTag.OBJECT, "Properties can only be added to object type properties"
        )
        self._properties[property.get_name()] = property
        return self

    def properties(
        self,
        properties: Mapping[str, Property | Mapping[str, Any]] | PropertyBuilder,
    ) -> Property:
        """Replace the child schema.

        Accepts a mapping of name to Property or serialized dict, or a
        PropertyBuilder. An object document (``{"type": "object", "properties":
        {...}}``, as produced by an object's ``to_array()``) is unwrapped
        first, so a child that is itself named ``properties`` is kept.

        Raises:
            ValueError: If this property is not an object.
            TypeError: If a child is neither a Property nor a mapping.
        """
        self._require_primary(
            TypeTag.OBJECT, "Properties can only be set on object type properties"
        )
        if not isinstance(properties, Mapping):
            properties = properties.get_properties()
        elif _is_object_document(properties):
            properties = properties["properties"]

        children: dict[str, Property | dict[str, Any]] = {}
        for key, child in properties.items():
            if isinstance(child, Property):
                children[key] = child
            elif isinstance(child, Mapping):
                children[key] = dict(child)
            else:
                raise TypeError(f"Invalid schema for property '{key}'")
        self._properties = children
        return self

    def items(self, schema: Property | Mapping[str, Any]) -> Property:
        self._require_primary(
            TypeTag.ARRAY, "Items can only be set on array type properties"
        )
        self._items = schema if isinstance(schema, Property) else dict(schema)
        return self

    def with_builder(self, callback: Callable[[PropertyBuilder], Any]) -> Property:
        """Populate children through a callback that receives a fresh builder."""
        from schemacraft.builder import PropertyBuilder

        self._require_primary(
            TypeTag.OBJECT, "Builder can only be used with object type properties"
        )
        builder = PropertyBuilder()
        callback(builder)
        self._properties.update(builder.get_properties())
        return self

    # =========================================================================
    # Conditional rules
    # =========================================================================

    def when(
        self,
        condition: Callable[[Mapping[str, Any]], Any] | Mapping[str, Any] | str,
        value: Any = None,
        rules: str | Iterable[str] | None = None,
    ) -> Property:
        """Apply extra rules when a condition on the record holds.

        The condition is one of:

        - a callable receiving the whole record: ``when(fn, "required")``
        - a mapping of field values that must all match:
          ``when({"status": "active"}, ["required"])``
        - a field name and expected value:
          ``when("status", "active", "required|min:3")``

        Raises:
            TypeError: For any other kind of condition.
        """
        if callable(condition):
            tokens = normalize_rules(rules if rules is not None else value)
            rule: ConditionalRule = ClosureRule(condition, tuple(tokens))
        elif isinstance(condition, Mapping):
            tokens = normalize_rules(rules if rules is not None else value)
            rule = ArrayFieldEqualityRule(dict(condition), tuple(tokens))
        elif isinstance(condition, str):
            rule = FieldEqualityRule(condition, value, tuple(normalize_rules(rules)))
        else:
            raise TypeError(
                "Conditions must be a callable, a mapping of field values or a field name"
            )
        self._conditional_rules.append(rule)
        return self

    def when_matches(
        self, field: str, pattern: str, rules: str | Iterable[str] | None = None
    ) -> Property:
        compile_pattern(pattern)
        self._conditional_rules.append(
            PatternMatchRule(field, pattern, tuple(normalize_rules(rules)))
        )
        return self

    def when_compare(
        self,
        field: str,
        operator: str,
        value: Any,
        rules: str | Iterable[str] | None = None,
    ) -> Property:
        self._conditional_rules.append(
            ComparisonRule(field, operator, value, tuple(normalize_rules(rules)))
        )
        return self

    def required_with(self, fields: str | Sequence[str]) -> Property:
        names = (fields,) if isinstance(fields, str) else tuple(fields)
        self._conditional_rules.append(RequiredWithRule(names))
        return self.add_rule(f"required_with:{','.join(names)}")

    def required_without(self, fields: str | Sequence[str]) -> Property:
        names = (fields,) if isinstance(fields, str) else tuple(fields)
        self._conditional_rules.append(RequiredWithoutRule(names))
        return self.add_rule(f"required_without:{','.join(names)}")

    def required_if(self, field: str, value: Any) -> Property:
        """Require this field when ``field`` equals ``value``.

        Raises:
            ValueError: If the rendered value contains a comma, which the
                ``required_if`` token would read as several candidates.
        """
        token = _field_value_token("required_if", field, value)
        self._conditional_rules.append(FieldEqualityRule(field, value, ("required",)))
        return self.add_rule(token)

    def prohibited_if(self, field: str, value: Any) -> Property:
        token = _field_value_token("prohibited_if", field, value)
        self._conditional_rules.append(FieldEqualityRule(field, value, ("prohibited",)))
        return self.add_rule(token)

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_name(self) -> str:
        return self._name

    def get_type(self) -> str | list[str]:
        """Wire form of the type: a tag string or a list for unions."""
        return self._type.to_wire()

    def get_schema_type(self) -> SchemaType:
        return self._type

    def get_description(self) -> str | None:
        return self._description

    def get_default(self) -> Any:
        return self._default

    def get_rules(self) -> list[str]:
        return list(self._rules)

    def get_attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    def get_properties(self) -> dict[str, dict[str, Any]]:
        """Serialized children keyed by name."""
        return {key: _serialize(child) for key, child in self._properties.items()}

    def get_items(self) -> dict[str, Any] | None:
        return None if self._items is None else _serialize(self._items)

    def get_format(self) -> str | None:
        return self._format

    def get_minimum(self) -> int | float | None:
        return self._minimum

    def get_maximum(self) -> int | float | None:
        return self._maximum

    def get_pattern(self) -> str | None:
        return self._pattern

    def get_reference(self) -> str | None:
        return self._reference

    def get_conditional_rules(self) -> list[ConditionalRule]:
        return list(self._conditional_rules)

    def is_required(self) -> bool:
        return self._is_required

    def is_nullable(self) -> bool:
        return "nullable" in self._rules

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self, value: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Check a single value against this property.

        Only ``required_with``/``required_without`` conditions are evaluated
        here, against ``context``. Every other conditional rule is applied by
        the schema compiler at the record level.

        Args:
            value: The value to check.
            context: Sibling field values, keyed by name.

        Returns:
            True if the value is acceptable.
        """
        context = context or {}
        for rule in self._conditional_rules:
            if isinstance(rule, (RequiredWithRule, RequiredWithoutRule)):
                if rule.requires_value(context) and is_blank(value):
                    return False

        if value is None:
            return True if self.is_nullable() else not self._is_required

        # Blank strings are exempt for every declared type
        if isinstance(value, str) and value == "":
            return not self._is_required

        if not self._type.accepts(value):
            return False

        if self._pattern is not None and isinstance(value, str):
            if not pattern_matches(self._pattern, value):
                return False

        if self._type.primary in (TypeTag.NUMBER.value, TypeTag.INTEGER.value):
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                if self._minimum is not None and value < self._minimum:
                    return False
                if self._maximum is not None and value > self._maximum:
                    return False

        if "email" in self._rules and isinstance(value, str) and not is_email(value):
            return False

        return True

    def get_validation_message(self) -> str:
        if self._is_required:
            return f"The {self._name} field is required."
        return f"Invalid value for {self._name}"

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_array(self) -> dict[str, Any]:
        """Serialize to the wire form.

        Optional keys are only emitted when set. Attributes are merged last
        and win over built-in keys of the same name.
        """
        data: dict[str, Any] = {"name": self._name, "type": self._type.to_wire()}
        if self._description is not None:
            data["description"] = self._description
        if self._default is not None:
            data["default"] = self._default
        data["rules"] = list(self._rules)
        data["required"] = self._is_required
        if self._format is not None:
            data["format"] = self._format
        if self._pattern is not None:
            data["pattern"] = self._pattern
        if self._minimum is not None:
            data["minimum"] = self._minimum
        if self._maximum is not None:
            data["maximum"] = self._maximum
        if self._reference is not None:
            data["$ref"] = self._reference
        if self._properties:
            data["properties"] = self.get_properties()
        if self._items is not None:
            data["items"] = self.get_items()
        if self._conditional_rules:
            data["conditionalRules"] = [rule.to_array() for rule in self._conditional_rules]
        data.update(self._attributes)
        return data

    def clone(self) -> Property:
        """Deep copy; callables in closure rules are shared, not copied."""
        return copy.deepcopy(self)
