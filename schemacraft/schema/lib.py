"""Schema compiler: turns properties into a rule table and a schema document.

``SchemaCompiler.add_property`` reads each property's serialized form. The
static ``rules`` list becomes the field's base rule set, and every entry of
``conditionalRules`` is compiled into a ConditionalRuleSet that only adds
its tokens when its condition holds for the record being validated.

Conditional entries are matched by shape, first match wins:
    1. a callable ``closure``          -> closure predicate
    2. a mapping ``field`` selector    -> every listed field equals its value
    3. ``value`` holding ``pattern``   -> record field matches the pattern
    4. ``value`` holding ``operator``  -> ``compare(record[field], op, operand)``
    5. a plain ``field``               -> record field strictly equals ``value``

Entries without a ``field`` (``requiredWith``/``requiredWithout``) never fire
here; their ``required_with``/``required_without`` tokens carry them.

Example:
    >>> email = Property.string("email").required().rules("email")
    >>> schema = SchemaCompiler().add_property(email)
    >>> schema.validate({"email": "a@b.com"}).valid
    True
"""

from __future__ import annotations

import json
import operator
from collections.abc import Callable, Mapping
from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field

from schemacraft.builder import PropertyBuilder
from schemacraft.core import get_logger
from schemacraft.property import normalize_rules, pattern_matches, rule_value
from schemacraft.validation import (
    ConditionalRuleSet,
    RuleEngine,
    RuleTable,
    ValidationEngine,
    ValidationResult,
)

logger = get_logger("schemacraft.schema")

COMPARATORS: dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


class SchemaDocument(BaseModel):
    """Shape of a serialized schema document, as produced by ``to_array()``."""

    type: Literal["object"] = "object"
    properties: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Serialized properties keyed by name"
    )
    required: list[str] = Field(default_factory=list, description="Required field names")


class SchemaProperty(Protocol):
    """What the compiler needs from a property."""

    def get_name(self) -> str: ...

    def get_rules(self) -> list[str]: ...

    def to_array(self) -> dict[str, Any]: ...


# =============================================================================
# Predicates
# =============================================================================


def compare(left: Any, operator: str, right: Any) -> bool:
    """Compare two values with one of ``=, !=, >, >=, <, <=``.

    Unsupported operators and incomparable operands return False.

    Example:
        >>> compare(15, ">", 10)
        True
        >>> compare(10, "bogus", 10)
        False
    """
    comparator = COMPARATORS.get(operator)
    if comparator is None:
        return False
    try:
        return bool(comparator(left, right))
    except TypeError:
        return False


def strictly_equal(left: Any, right: Any) -> bool:
    """Equality that also requires the same type (``1 != True != 1.0``)."""
    return type(left) is type(right) and left == right


def _has(record: Mapping[str, Any], field: str) -> bool:
    return record.get(field) is not None


def _closure_condition(closure: Callable[[Mapping[str, Any]], Any]):
    def condition(record: Mapping[str, Any]) -> bool:
        return bool(closure(record))

    return condition


def _fields_condition(expected: Mapping[str, Any]):
    expected = dict(expected)

    def condition(record: Mapping[str, Any]) -> bool:
        for name, value in expected.items():
            if value is None:
                if record.get(name) is not None:
                    return False
            elif not (_has(record, name) and strictly_equal(record[name], value)):
                return False
        return True

    return condition


def _pattern_condition(field: str, pattern: str):
    def condition(record: Mapping[str, Any]) -> bool:
        if not _has(record, field):
            return False
        value = record[field]
        if not isinstance(value, (str, int, float)):
            return False
        return pattern_matches(pattern, rule_value(value))

    return condition


def _comparison_condition(field: str, operator: str, operand: Any):
    def condition(record: Mapping[str, Any]) -> bool:
        return _has(record, field) and compare(record[field], operator, operand)

    return condition


def _equality_condition(field: str, expected: Any):
    def condition(record: Mapping[str, Any]) -> bool:
        return _has(record, field) and strictly_equal(record[field], expected)

    return condition


def compile_conditional_rule(rule: Mapping[str, Any]) -> ConditionalRuleSet | None:
    """Compile one serialized conditional rule.

    Args:
        rule: An entry of a property's ``conditionalRules`` list.

    Returns:
        The compiled rule set, or None for entries without a field selector.
    """
    rules = tuple(normalize_rules(rule.get("rules")))
    selector = rule.get("field")
    value = rule.get("value")

    if callable(rule.get("closure")):
        return ConditionalRuleSet(_closure_condition(rule["closure"]), rules, "closure")
    if isinstance(selector, Mapping):
        return ConditionalRuleSet(_fields_condition(selector), rules, "array")
    if selector is None:
        return None
    if isinstance(value, Mapping) and "pattern" in value:
        return ConditionalRuleSet(
            _pattern_condition(selector, value["pattern"]), rules, "pattern"
        )
    if isinstance(value, Mapping) and "operator" in value:
        return ConditionalRuleSet(
            _comparison_condition(selector, value["operator"], value.get("value")),
            rules,
            "comparison",
        )
    return ConditionalRuleSet(_equality_condition(selector, value), rules, "field")


def _json_default(value: Any) -> Any:
    # Callables have no JSON form
    if callable(value):
        return {}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# =============================================================================
# Compiler
# =============================================================================


class SchemaCompiler:
    """Aggregates properties into a validation rule table and a schema document.

    Args:
        engine: Executes the rule table. Defaults to RuleEngine.
    """

    def __init__(self, engine: ValidationEngine | None = None) -> None:
        self._engine: ValidationEngine = engine if engine is not None else RuleEngine()
        self._properties: dict[str, dict[str, Any]] = {}
        self._rules: RuleTable = {}
        self._messages: dict[str, str] = {}
        self._attributes: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._properties)

    @classmethod
    def from_array(
        cls, document: Mapping[str, Any], engine: ValidationEngine | None = None
    ) -> SchemaCompiler:
        """Build a compiler from a serialized schema document.

        Args:
            document: ``{"type": "object", "properties": {...}, "required": [...]}``.
            engine: Optional validation engine.

        Raises:
            pydantic.ValidationError: If the document has the wrong shape.
            ValueError: If a property holds a closure rule.
        """
        parsed = SchemaDocument.model_validate(document)
        builder = PropertyBuilder.from_array(parsed.model_dump())
        return cls(engine).add_properties(builder)

    # =========================================================================
    # Properties and rules
    # =========================================================================

    def add_property(self, property: SchemaProperty) -> SchemaCompiler:
        """Register a property and compile its conditional rules.

        A property registered under an existing name replaces it.
        """
        name = property.get_name()
        data = property.to_array()
        self._properties[name] = data
        self._rules[name] = normalize_rules(property.get_rules())

        for raw in data.get("conditionalRules") or []:
            compiled = compile_conditional_rule(raw)
            if compiled is None:
                logger.debug(f"'{name}': {raw.get('type')} rule is enforced by its token")
                continue
            logger.debug(f"'{name}': compiled {compiled.kind} rule {list(compiled.rules)}")
            self._rules[name].append(compiled)
        return self

    def add_properties(self, properties: Mapping[str, SchemaProperty] | Any) -> SchemaCompiler:
        """Register several properties from a mapping, builder or iterable."""
        if isinstance(properties, Mapping):
            properties = properties.values()
        elif hasattr(properties, "get_properties"):
            properties = properties.get_properties().values()
        for prop in properties:
            self.add_property(prop)
        return self

    def add_rule(self, field: str, rules: str | list[str]) -> SchemaCompiler:
        """Append static rule tokens to a field, creating it if needed."""
        entries = self._rules.setdefault(field, [])
        for token in normalize_rules(rules):
            if token not in entries:
                entries.append(token)
        return self

    def add_rules(self, rules: Mapping[str, str | list[str]]) -> SchemaCompiler:
        for field, tokens in rules.items():
            self.add_rule(field, tokens)
        return self

    def get_rules(self) -> RuleTable:
        """Rule table: static tokens followed by compiled conditional sets."""
        return {field: list(entries) for field, entries in self._rules.items()}

    def get_properties(self) -> dict[str, dict[str, Any]]:
        return dict(self._properties)

    def get_required(self) -> list[str]:
        return [name for name, data in self._properties.items() if data.get("required") is True]

    # =========================================================================
    # Messages and attribute labels
    # =========================================================================

    def with_messages(self, messages: Mapping[str, str]) -> SchemaCompiler:
        """Merge custom messages keyed by ``"field.rule"`` or ``"rule"``."""
        self._messages.update(messages)
        return self

    def set_messages(self, messages: Mapping[str, str]) -> SchemaCompiler:
        self._messages = dict(messages)
        return self

    def add_message(self, field: str, rule: str, message: str) -> SchemaCompiler:
        self._messages[f"{field}.{rule}"] = message
        return self

    def get_messages(self) -> dict[str, str]:
        return dict(self._messages)

    def with_attributes(self, attributes: Mapping[str, str]) -> SchemaCompiler:
        """Merge display labels keyed by field name."""
        self._attributes.update(attributes)
        return self

    def set_attributes(self, attributes: Mapping[str, str]) -> SchemaCompiler:
        self._attributes = dict(attributes)
        return self

    def get_attributes(self) -> dict[str, str]:
        return dict(self._attributes)

    # =========================================================================
    # Validation and output
    # =========================================================================

    def validate(self, record: Mapping[str, Any]) -> ValidationResult:
        """Validate a record with the configured engine.

        Returns:
            ValidationResult with ``valid``, ``errors`` and ``data``.
        """
        return self._engine.evaluate(
            self._rules, record, dict(self._messages), dict(self._attributes)
        )

    def to_array(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": self.get_properties(),
            "required": self.get_required(),
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_array(), indent=indent, default=_json_default)

    def describe_rules(self) -> dict[str, list[Any]]:
        """JSON-friendly view of the rule table."""
        described: dict[str, list[Any]] = {}
        for field, entries in self._rules.items():
            described[field] = [
                {"when": entry.kind, "rules": list(entry.rules)}
                if isinstance(entry, ConditionalRuleSet)
                else entry
                for entry in entries
            ]
        return described


Schema = SchemaCompiler
