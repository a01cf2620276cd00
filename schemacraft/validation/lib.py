"""Default rule engine.

RuleEngine executes the rule tables produced by ``SchemaCompiler`` using
Laravel-style rule tokens (``"required"``, ``"min:3"``, ``"in:a,b"``) and
English default messages. Any other engine can be injected into the
compiler as long as it satisfies the ``ValidationEngine`` protocol.

Rule evaluation per field:
    - Conditional rule sets are resolved against the record and their
      tokens appended after the static ones, without duplicates.
    - Implicit rules (``required*``, ``prohibited*``) always run.
    - Other rules are skipped when the field is missing, holds a blank
      string, or holds None while marked ``nullable``.
    - Every failing rule contributes one message, unless the field has a
      ``bail`` token or the engine stops on the first failure.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from schemacraft.config import EnvVar, get_environment
from schemacraft.core import get_logger
from schemacraft.property import (
    is_email,
    is_url,
    is_uuid,
    parse_date,
    pattern_matches,
    rule_value,
)

from .messages import DEFAULT_MESSAGES, FALLBACK_MESSAGE, SIZE_MESSAGES, format_message
from .protocol import RuleTable, resolve_rules
from .result import ValidationResult

logger = get_logger("schemacraft.validation")

IMPLICIT_RULES = frozenset(
    {
        "required",
        "required_with",
        "required_without",
        "required_if",
        "prohibited",
        "prohibited_if",
    }
)

# Tokens that change how other rules run but never fail on their own
MARKER_RULES = frozenset({"nullable", "bail", "sometimes"})

NUMERIC_RULES = frozenset({"numeric", "integer"})

_NUMERIC = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")


class UnknownRuleError(ValueError):
    """Raised when a rule table names a rule the engine does not know."""


@dataclass(frozen=True)
class RuleCall:
    """A single rule invocation against one field.

    Attributes:
        field: Field name.
        value: Field value (None when missing).
        parameters: Rule parameters, e.g. ``("3",)`` for ``min:3``.
        record: The whole input record.
        rule_names: Every rule name applied to the field.
    """

    field: str
    value: Any
    parameters: tuple[str, ...]
    record: Mapping[str, Any]
    rule_names: frozenset[str]


RuleCheck = Callable[[RuleCall], bool]


def parse_rule(token: str) -> tuple[str, tuple[str, ...]]:
    """Split ``"name:a,b"`` into its name and parameters.

    ``regex`` keeps its parameter whole since patterns may contain commas.

    Example:
        >>> parse_rule("between:1,10")
        ('between', ('1', '10'))
    """
    name, _, raw = token.partition(":")
    name = name.strip()
    if not raw:
        return name, ()
    if name == "regex":
        return name, (raw,)
    return name, tuple(raw.split(","))


# =============================================================================
# Value helpers
# =============================================================================


def has_value(value: Any) -> bool:
    """True unless the value is None, a blank string or an empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) > 0
    return True


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and _NUMERIC.match(value) is not None


def _is_collection(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple, set))


def _size_kind(call: RuleCall) -> str:
    if call.rule_names & NUMERIC_RULES and is_numeric(call.value):
        return "numeric"
    if isinstance(call.value, (int, float)) and not isinstance(call.value, bool):
        return "numeric"
    if _is_collection(call.value):
        return "array"
    return "string"


def _size(call: RuleCall) -> float:
    """Numbers by value, collections by count, everything else by length."""
    kind = _size_kind(call)
    if kind == "numeric":
        return float(call.value)
    if kind == "array":
        return len(call.value)
    return len(str(call.value))


def _require_parameters(call: RuleCall, count: int, rule: str) -> None:
    if len(call.parameters) < count:
        raise ValueError(f"Validation rule {rule} requires at least {count} parameters.")


def _dependent_matches(other: Any, candidates: tuple[str, ...]) -> bool:
    """Check another field's value against rule parameters.

    Booleans match ``true``/``1`` and ``false``/``0``; None matches
    ``null`` or an empty parameter; everything else compares as text.
    """
    for candidate in candidates:
        lowered = candidate.strip().lower()
        if isinstance(other, bool):
            if other and lowered in ("true", "1"):
                return True
            if not other and lowered in ("false", "0"):
                return True
        elif other is None:
            if lowered in ("null", ""):
                return True
        elif rule_value(other) == candidate:
            return True
    return False


# =============================================================================
# Rule checks
# =============================================================================


def _validate_required(call: RuleCall) -> bool:
    return has_value(call.value)


def _validate_required_with(call: RuleCall) -> bool:
    if any(has_value(call.record.get(name)) for name in call.parameters):
        return has_value(call.value)
    return True


def _validate_required_without(call: RuleCall) -> bool:
    if any(not has_value(call.record.get(name)) for name in call.parameters):
        return has_value(call.value)
    return True


def _validate_required_if(call: RuleCall) -> bool:
    _require_parameters(call, 2, "required_if")
    other, *values = call.parameters
    if _dependent_matches(call.record.get(other), tuple(values)):
        return has_value(call.value)
    return True


def _validate_prohibited(call: RuleCall) -> bool:
    return not has_value(call.value)


def _validate_prohibited_if(call: RuleCall) -> bool:
    _require_parameters(call, 2, "prohibited_if")
    other, *values = call.parameters
    if _dependent_matches(call.record.get(other), tuple(values)):
        return not has_value(call.value)
    return True


def _validate_string(call: RuleCall) -> bool:
    return isinstance(call.value, str)


def _validate_numeric(call: RuleCall) -> bool:
    return is_numeric(call.value)


def _validate_integer(call: RuleCall) -> bool:
    value = call.value
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and _INTEGER.match(value) is not None


def _validate_boolean(call: RuleCall) -> bool:
    value = call.value
    if isinstance(value, bool):
        return True
    if isinstance(value, int):
        return value in (0, 1)
    return isinstance(value, str) and value in ("0", "1")


def _validate_array(call: RuleCall) -> bool:
    return isinstance(call.value, (Mapping, list, tuple))


def _validate_email(call: RuleCall) -> bool:
    return isinstance(call.value, str) and is_email(call.value)


def _validate_min(call: RuleCall) -> bool:
    _require_parameters(call, 1, "min")
    return _size(call) >= float(call.parameters[0])


def _validate_max(call: RuleCall) -> bool:
    _require_parameters(call, 1, "max")
    return _size(call) <= float(call.parameters[0])


def _validate_between(call: RuleCall) -> bool:
    _require_parameters(call, 2, "between")
    size = _size(call)
    return float(call.parameters[0]) <= size <= float(call.parameters[1])


def _validate_digits(call: RuleCall) -> bool:
    _require_parameters(call, 1, "digits")
    value = call.value
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return False
    text = str(value)
    return text.isascii() and text.isdigit() and len(text) == int(call.parameters[0])


def _validate_date(call: RuleCall) -> bool:
    if isinstance(call.value, date):
        return True
    return isinstance(call.value, str) and parse_date(call.value) is not None


def _validate_alpha(call: RuleCall) -> bool:
    return isinstance(call.value, str) and call.value.isalpha()


def _validate_alpha_num(call: RuleCall) -> bool:
    value = call.value
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        value = str(value)
    return isinstance(value, str) and value.isalnum()


def _validate_in(call: RuleCall) -> bool:
    if isinstance(call.value, (list, tuple)):
        return all(rule_value(item) in call.parameters for item in call.value)
    if _is_collection(call.value):
        return False
    return rule_value(call.value) in call.parameters


def _validate_not_in(call: RuleCall) -> bool:
    if isinstance(call.value, (list, tuple)):
        return not any(rule_value(item) in call.parameters for item in call.value)
    return rule_value(call.value) not in call.parameters


def _validate_regex(call: RuleCall) -> bool:
    _require_parameters(call, 1, "regex")
    value = call.value
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return False
    return pattern_matches(call.parameters[0], str(value))


def _validate_url(call: RuleCall) -> bool:
    return isinstance(call.value, str) and is_url(call.value)


def _validate_uuid(call: RuleCall) -> bool:
    return isinstance(call.value, str) and is_uuid(call.value)


BUILTIN_RULES: dict[str, RuleCheck] = {
    "required": _validate_required,
    "required_with": _validate_required_with,
    "required_without": _validate_required_without,
    "required_if": _validate_required_if,
    "prohibited": _validate_prohibited,
    "prohibited_if": _validate_prohibited_if,
    "string": _validate_string,
    "numeric": _validate_numeric,
    "integer": _validate_integer,
    "boolean": _validate_boolean,
    "array": _validate_array,
    "email": _validate_email,
    "min": _validate_min,
    "max": _validate_max,
    "between": _validate_between,
    "digits": _validate_digits,
    "date": _validate_date,
    "alpha": _validate_alpha,
    "alpha_num": _validate_alpha_num,
    "in": _validate_in,
    "not_in": _validate_not_in,
    "regex": _validate_regex,
    "url": _validate_url,
    "uuid": _validate_uuid,
}


# =============================================================================
# Engine
# =============================================================================


class RuleEngine:
    """Default ValidationEngine implementation.

    Args:
        strict: Raise UnknownRuleError for unknown tokens. When False they
            are logged and skipped. Defaults to SCHEMACRAFT_STRICT_RULES.
        stop_on_first_failure: Report at most one message per field.
            Defaults to SCHEMACRAFT_STOP_ON_FIRST_FAILURE.

    Example:
        >>> engine = RuleEngine()
        >>> result = engine.evaluate({"age": ["required", "integer"]}, {"age": "x"})
        >>> result.errors["age"]
        ['The age field must be an integer.']
    """

    def __init__(
        self,
        strict: bool | None = None,
        stop_on_first_failure: bool | None = None,
    ) -> None:
        self.strict = get_environment(EnvVar.SCHEMACRAFT_STRICT_RULES, override=strict)
        self.stop_on_first_failure = get_environment(
            EnvVar.SCHEMACRAFT_STOP_ON_FIRST_FAILURE, override=stop_on_first_failure
        )
        self.rule_validators: dict[str, RuleCheck] = dict(BUILTIN_RULES)
        self.rule_messages: dict[str, str] = dict(DEFAULT_MESSAGES)
        self.implicit_rules: set[str] = set(IMPLICIT_RULES)

    def register_rule(
        self,
        name: str,
        check: RuleCheck,
        message: str | None = None,
        implicit: bool = False,
    ) -> None:
        """Add or replace a rule.

        Args:
            name: Token name, e.g. ``"uppercase"``.
            check: Callable receiving a RuleCall and returning True on success.
            message: Default message template (``:attribute`` is available).
            implicit: Run the rule even when the value is missing or blank.
        """
        self.rule_validators[name] = check
        if message is not None:
            self.rule_messages[name] = message
        if implicit:
            self.implicit_rules.add(name)
        else:
            self.implicit_rules.discard(name)

    def has_rule(self, name: str) -> bool:
        return name in self.rule_validators or name in MARKER_RULES

    def evaluate(
        self,
        rules: RuleTable,
        record: Mapping[str, Any],
        messages: Mapping[str, str] | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> ValidationResult:
        """Validate a record against a rule table.

        Raises:
            UnknownRuleError: In strict mode, for a rule with no registered check.
        """
        messages = messages or {}
        attributes = attributes or {}
        result = ValidationResult()

        for field, entries in rules.items():
            tokens = resolve_rules(entries, record)
            self._validate_field(field, tokens, record, messages, attributes, result)

        if result.valid:
            result.data = {field: record[field] for field in rules if field in record}
        else:
            result.data = dict(record)
        return result

    def _validate_field(
        self,
        field: str,
        tokens: list[str],
        record: Mapping[str, Any],
        messages: Mapping[str, str],
        attributes: Mapping[str, str],
        result: ValidationResult,
    ) -> None:
        parsed = [parse_rule(token) for token in tokens]
        names = frozenset(name for name, _ in parsed)
        value = record.get(field)
        runs = self._should_run(field, value, record, names)

        for name, parameters in parsed:
            if name in MARKER_RULES:
                continue
            check = self.rule_validators.get(name)
            if check is None:
                if self.strict:
                    raise UnknownRuleError(
                        f"Unknown validation rule '{name}' on field '{field}'"
                    )
                logger.warning(f"Skipping unknown validation rule '{name}' on '{field}'")
                continue
            if not runs and name not in self.implicit_rules:
                continue

            call = RuleCall(field, value, parameters, record, names)
            if check(call):
                continue

            result.add_error(field, self._message(call, name, messages, attributes))
            if self.stop_on_first_failure or "bail" in names:
                break

    @staticmethod
    def _should_run(
        field: str, value: Any, record: Mapping[str, Any], names: frozenset[str]
    ) -> bool:
        if field not in record:
            return False
        if isinstance(value, str) and value.strip() == "":
            return False
        if value is None and "nullable" in names:
            return False
        return True

    # =========================================================================
    # Messages
    # =========================================================================

    @staticmethod
    def _label(field: str, attributes: Mapping[str, str]) -> str:
        return attributes.get(field) or field.replace("_", " ")

    def _message(
        self,
        call: RuleCall,
        name: str,
        messages: Mapping[str, str],
        attributes: Mapping[str, str],
    ) -> str:
        template = messages.get(f"{call.field}.{name}") or messages.get(name)
        if template is None:
            if name in SIZE_MESSAGES:
                template = SIZE_MESSAGES[name][_size_kind(call)]
            else:
                template = self.rule_messages.get(name, FALLBACK_MESSAGE)

        replacements = {"attribute": self._label(call.field, attributes)}
        params = call.parameters
        if name in ("min", "max", "digits") and params:
            replacements[name] = params[0]
        elif name == "between" and len(params) >= 2:
            replacements.update(min=params[0], max=params[1])
        elif name in ("required_with", "required_without"):
            replacements["values"] = " / ".join(
                self._label(other, attributes) for other in params
            )
        elif name in ("required_if", "prohibited_if") and len(params) >= 2:
            replacements["other"] = self._label(params[0], attributes)
            replacements["value"] = ", ".join(params[1:])
        return format_message(template, replacements)
