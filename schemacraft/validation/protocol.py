"""Validation engine protocol and deferred conditional rule sets.

The schema compiler produces a rule table mapping each field to an ordered
list whose entries are either plain rule tokens (``"required"``,
``"min:3"``) or ConditionalRuleSet instances that contribute extra tokens
only when their condition holds for the record being validated.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable

from .result import ValidationResult


@dataclass(frozen=True)
class ConditionalRuleSet:
    """Rule tokens that apply only when ``condition(record)`` is true.

    Attributes:
        condition: Predicate over the whole input record.
        rules: Tokens to apply when the predicate holds.
        kind: Name of the conditional rule kind it was compiled from.
    """

    condition: Callable[[Mapping[str, Any]], bool]
    rules: tuple[str, ...]
    kind: str = "field"

    def applies_to(self, record: Mapping[str, Any]) -> bool:
        return bool(self.condition(record))

    def resolve(self, record: Mapping[str, Any]) -> list[str]:
        return list(self.rules) if self.applies_to(record) else []


RuleEntry = Union[str, ConditionalRuleSet]
RuleTable = dict[str, list[RuleEntry]]


def resolve_rules(entries: Sequence[RuleEntry], record: Mapping[str, Any]) -> list[str]:
    """Flatten a field's rule entries against a record.

    Static tokens come first in their declared order, followed by the
    tokens of every conditional set that applies. Duplicates are dropped,
    keeping the first occurrence.

    Args:
        entries: Static tokens and conditional rule sets for one field.
        record: The input record.

    Returns:
        Ordered, de-duplicated rule tokens.
    """
    tokens: list[str] = []
    for entry in entries:
        if isinstance(entry, ConditionalRuleSet):
            tokens.extend(entry.resolve(record))
        else:
            tokens.append(entry)
    return list(dict.fromkeys(tokens))


@runtime_checkable
class ValidationEngine(Protocol):
    """Executes a rule table against a record.

    Implementations must never raise for ordinary invalid input; failures
    are reported through the returned ValidationResult.
    """

    def evaluate(
        self,
        rules: RuleTable,
        record: Mapping[str, Any],
        messages: Mapping[str, str] | None = None,
        attributes: Mapping[str, str] | None = None,
    ) -> ValidationResult:
        """Validate ``record`` against ``rules``.

        Args:
            rules: Rule entries keyed by field name.
            record: The input record.
            messages: Custom messages keyed by ``"field.rule"`` or ``"rule"``.
            attributes: Display labels keyed by field name.

        Returns:
            The validation outcome.
        """
        ...
