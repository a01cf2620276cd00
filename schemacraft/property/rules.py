"""Conditional validation rules attached to a Property.

Each kind is its own frozen dataclass, built at the point a ``when*`` or
``required*`` method is called. ``to_array()`` produces the wire shape that
the schema compiler reads back when building its rule table.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union

__all__ = [
    "RuleKind",
    "ClosureRule",
    "ArrayFieldEqualityRule",
    "FieldEqualityRule",
    "PatternMatchRule",
    "ComparisonRule",
    "RequiredWithRule",
    "RequiredWithoutRule",
    "ConditionalRule",
    "normalize_rules",
    "rule_from_array",
    "is_blank",
    "is_empty",
]


class RuleKind(str, Enum):
    """Wire discriminator stored under the ``type`` key."""

    CLOSURE = "closure"
    ARRAY = "array"
    FIELD = "field"
    PATTERN = "pattern"
    COMPARISON = "comparison"
    REQUIRED_WITH = "requiredWith"
    REQUIRED_WITHOUT = "requiredWithout"


def normalize_rules(rules: str | Iterable[str] | None) -> list[str]:
    """Normalize rule input to a list of tokens.

    Args:
        rules: A ``|``-delimited string, an iterable of tokens, or None.

    Returns:
        List of rule tokens (empty for None).

    Raises:
        TypeError: If a token is not a string.

    Example:
        >>> normalize_rules("required|min:3")
        ['required', 'min:3']
    """
    if rules is None:
        return []
    if isinstance(rules, str):
        return [token for token in rules.split("|") if token]
    tokens = []
    for token in rules:
        if not isinstance(token, str):
            raise TypeError(f"Rule tokens must be strings, got {type(token).__name__}")
        tokens.append(token)
    return tokens


def is_blank(value: Any) -> bool:
    """Return True for None and the empty string."""
    return value is None or (isinstance(value, str) and value == "")


def is_empty(value: Any) -> bool:
    """Loose emptiness used for sibling fields.

    None, False, zero, ``""``, ``"0"`` and empty collections are empty.
    """
    if value is None or isinstance(value, (bool, int, float)):
        return not value
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class ClosureRule:
    """Apply ``rules`` when ``closure(record)`` is truthy."""

    closure: Callable[[Mapping[str, Any]], Any]
    rules: tuple[str, ...] = ()
    kind: ClassVar[RuleKind] = RuleKind.CLOSURE

    def to_array(self) -> dict[str, Any]:
        return {"type": self.kind.value, "closure": self.closure, "rules": list(self.rules)}


@dataclass(frozen=True)
class ArrayFieldEqualityRule:
    """Apply ``rules`` when every listed field equals its expected value."""

    fields: Mapping[str, Any] = field(default_factory=dict)
    rules: tuple[str, ...] = ()
    kind: ClassVar[RuleKind] = RuleKind.ARRAY

    def to_array(self) -> dict[str, Any]:
        return {"type": self.kind.value, "field": dict(self.fields), "rules": list(self.rules)}


@dataclass(frozen=True)
class FieldEqualityRule:
    """Apply ``rules`` when ``record[field]`` strictly equals ``value``."""

    field: str
    value: Any
    rules: tuple[str, ...] = ()
    kind: ClassVar[RuleKind] = RuleKind.FIELD

    def to_array(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "field": self.field,
            "value": self.value,
            "rules": list(self.rules),
        }


@dataclass(frozen=True)
class PatternMatchRule:
    """Apply ``rules`` when ``record[field]`` matches ``pattern``."""

    field: str
    pattern: str
    rules: tuple[str, ...] = ()
    kind: ClassVar[RuleKind] = RuleKind.PATTERN

    def to_array(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "field": self.field,
            "value": {"pattern": self.pattern},
            "rules": list(self.rules),
        }


@dataclass(frozen=True)
class ComparisonRule:
    """Apply ``rules`` when ``compare(record[field], operator, value)`` holds."""

    field: str
    operator: str
    value: Any
    rules: tuple[str, ...] = ()
    kind: ClassVar[RuleKind] = RuleKind.COMPARISON

    def to_array(self) -> dict[str, Any]:
        return {
            "type": self.kind.value,
            "field": self.field,
            "value": {"operator": self.operator, "value": self.value},
            "rules": list(self.rules),
        }


@dataclass(frozen=True)
class RequiredWithRule:
    """The owning property is required when any of ``fields`` has a value."""

    fields: tuple[str, ...]
    rules: tuple[str, ...] = ("required",)
    kind: ClassVar[RuleKind] = RuleKind.REQUIRED_WITH

    def requires_value(self, context: Mapping[str, Any]) -> bool:
        return any(not is_empty(context.get(name)) for name in self.fields)

    def to_array(self) -> dict[str, Any]:
        return {"type": self.kind.value, "fields": list(self.fields), "rules": list(self.rules)}


@dataclass(frozen=True)
class RequiredWithoutRule:
    """The owning property is required when none of ``fields`` has a value."""

    fields: tuple[str, ...]
    rules: tuple[str, ...] = ("required",)
    kind: ClassVar[RuleKind] = RuleKind.REQUIRED_WITHOUT

    def requires_value(self, context: Mapping[str, Any]) -> bool:
        return all(is_empty(context.get(name)) for name in self.fields)

    def to_array(self) -> dict[str, Any]:
        return {"type": self.kind.value, "fields": list(self.fields), "rules": list(self.rules)}


ConditionalRule = Union[
    ClosureRule,
    ArrayFieldEqualityRule,
    FieldEqualityRule,
    PatternMatchRule,
    ComparisonRule,
    RequiredWithRule,
    RequiredWithoutRule,
]


def rule_from_array(data: Mapping[str, Any]) -> ConditionalRule:
    """Rebuild a conditional rule from its wire shape.

    Args:
        data: A mapping produced by one of the ``to_array()`` methods.

    Returns:
        The matching rule variant.

    Raises:
        ValueError: For closure rules (callables do not survive
            serialization) and unknown ``type`` values.
    """
    kind = data.get("type")
    rules = tuple(normalize_rules(data.get("rules")))
    value = data.get("value")

    if kind == RuleKind.CLOSURE.value:
        raise ValueError("Closure rules cannot be restored from serialized data")
    if kind == RuleKind.ARRAY.value:
        return ArrayFieldEqualityRule(fields=dict(data.get("field") or {}), rules=rules)
    if kind == RuleKind.FIELD.value:
        return FieldEqualityRule(field=data["field"], value=value, rules=rules)
    if kind == RuleKind.PATTERN.value:
        return PatternMatchRule(field=data["field"], pattern=value["pattern"], rules=rules)
    if kind == RuleKind.COMPARISON.value:
        return ComparisonRule(
            field=data["field"],
            operator=value["operator"],
            value=value.get("value"),
            rules=rules,
        )
    if kind == RuleKind.REQUIRED_WITH.value:
        return RequiredWithRule(fields=tuple(data.get("fields") or ()))
    if kind == RuleKind.REQUIRED_WITHOUT.value:
        return RequiredWithoutRule(fields=tuple(data.get("fields") or ()))
    raise ValueError(f"Unknown conditional rule type: {kind!r}")
