"""Property schema nodes, type tags and conditional rules."""

from .formats import compile_pattern, is_email, is_url, is_uuid, parse_date, pattern_matches
from .lib import DURATION_UNITS, Property, humanize, rule_value
from .rules import (
    ArrayFieldEqualityRule,
    ClosureRule,
    ComparisonRule,
    ConditionalRule,
    FieldEqualityRule,
    PatternMatchRule,
    RequiredWithoutRule,
    RequiredWithRule,
    RuleKind,
    is_blank,
    is_empty,
    normalize_rules,
    rule_from_array,
)
from .types import (
    RuntimeTag,
    SchemaType,
    SingleType,
    TypeTag,
    UnionType,
    parse_type,
    runtime_type_tag,
)

__all__ = [
    # Property
    "Property",
    "DURATION_UNITS",
    "humanize",
    "rule_value",
    # Types
    "TypeTag",
    "RuntimeTag",
    "SchemaType",
    "SingleType",
    "UnionType",
    "parse_type",
    "runtime_type_tag",
    # Conditional rules
    "RuleKind",
    "ConditionalRule",
    "ClosureRule",
    "ArrayFieldEqualityRule",
    "FieldEqualityRule",
    "PatternMatchRule",
    "ComparisonRule",
    "RequiredWithRule",
    "RequiredWithoutRule",
    "normalize_rules",
    "rule_from_array",
    "is_blank",
    "is_empty",
    # Formats
    "compile_pattern",
    "pattern_matches",
    "is_email",
    "is_url",
    "is_uuid",
    "parse_date",
]
