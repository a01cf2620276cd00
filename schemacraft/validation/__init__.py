"""Validation engine protocol, default rule engine and results."""

from .lib import (
    BUILTIN_RULES,
    IMPLICIT_RULES,
    RuleCall,
    RuleCheck,
    RuleEngine,
    UnknownRuleError,
    has_value,
    is_numeric,
    parse_rule,
)
from .messages import DEFAULT_MESSAGES, format_message
from .protocol import (
    ConditionalRuleSet,
    RuleEntry,
    RuleTable,
    ValidationEngine,
    resolve_rules,
)
from .result import ValidationResult

__all__ = [
    # Protocol
    "ValidationEngine",
    "ConditionalRuleSet",
    "RuleEntry",
    "RuleTable",
    "resolve_rules",
    # Results
    "ValidationResult",
    # Default engine
    "RuleEngine",
    "RuleCall",
    "RuleCheck",
    "UnknownRuleError",
    "BUILTIN_RULES",
    "IMPLICIT_RULES",
    "parse_rule",
    "has_value",
    "is_numeric",
    # Messages
    "DEFAULT_MESSAGES",
    "format_message",
]
