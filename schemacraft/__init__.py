"""schemacraft: property schemas, conditional rules and record validation.

Example:
    >>> from schemacraft import Property, SchemaCompiler
    >>>
    >>> email = Property.string("email").required().rules("email")
    >>> tax_id = Property.string("tax_id").when("is_business", True, "required|digits:9")
    >>> schema = SchemaCompiler().add_property(email).add_property(tax_id)
    >>> schema.validate({"email": "a@b.com", "is_business": True}).valid
    False
"""

from .builder import PropertyBuilder
from .property import ConditionalRule, Property, SchemaType, SingleType, TypeTag, UnionType
from .schema import Schema, SchemaCompiler, compare
from .validation import (
    ConditionalRuleSet,
    RuleEngine,
    UnknownRuleError,
    ValidationEngine,
    ValidationResult,
)

__version__ = "0.1.0"

__all__ = [
    "Property",
    "PropertyBuilder",
    "Schema",
    "SchemaCompiler",
    "compare",
    "ConditionalRule",
    "ConditionalRuleSet",
    "SchemaType",
    "SingleType",
    "UnionType",
    "TypeTag",
    "ValidationEngine",
    "ValidationResult",
    "RuleEngine",
    "UnknownRuleError",
]
