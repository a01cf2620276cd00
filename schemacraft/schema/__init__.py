"""Schema compilation and record validation."""

from .lib import (
    COMPARATORS,
    Schema,
    SchemaCompiler,
    SchemaDocument,
    SchemaProperty,
    compare,
    compile_conditional_rule,
    strictly_equal,
)

__all__ = [
    "Schema",
    "SchemaCompiler",
    "SchemaDocument",
    "SchemaProperty",
    "COMPARATORS",
    "compare",
    "compile_conditional_rule",
    "strictly_equal",
]
