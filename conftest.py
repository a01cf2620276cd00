"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation from SCHEMACRAFT_* variables set in the developer's shell
- Common schema fixtures
"""

from __future__ import annotations

import pytest
from dotenv import load_dotenv

from schemacraft.config import EnvVar

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against the documented defaults."""
    for var in EnvVar:
        monkeypatch.delenv(var.value.name, raising=False)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def signup_schema():
    """A small signup form with static and conditional rules.

    Returns:
        SchemaCompiler with name, email, age, is_business and tax_id.
    """
    from schemacraft import Property, SchemaCompiler

    schema = SchemaCompiler()
    schema.add_property(Property.string("name").required())
    schema.add_property(Property.string("email").required().rules("email"))
    schema.add_property(Property.integer("age").rules("integer|min:18"))
    schema.add_property(Property.boolean("is_business"))
    schema.add_property(
        Property.string("tax_id").when("is_business", True, ["required", "digits:9"])
    )
    return schema
