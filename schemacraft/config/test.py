"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    _parse_bool,
    get_environment,
    get_environment_info,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("SCHEMACRAFT_LOG_LEVEL", raising=False)
        assert get_environment(EnvVar.SCHEMACRAFT_LOG_LEVEL) == "WARNING"

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("SCHEMACRAFT_STRICT_RULES", "true")
        assert get_environment(EnvVar.SCHEMACRAFT_STRICT_RULES, override=False) is False

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("SCHEMACRAFT_LOG_LEVEL", "DEBUG")
        assert get_environment(EnvVar.SCHEMACRAFT_LOG_LEVEL) == "DEBUG"

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean type conversion for recognized spellings."""
        for value in ("true", "1", "yes", "ON"):
            monkeypatch.setenv("SCHEMACRAFT_STOP_ON_FIRST_FAILURE", value)
            assert get_environment(EnvVar.SCHEMACRAFT_STOP_ON_FIRST_FAILURE) is True
        for value in ("false", "0", "no", "Off"):
            monkeypatch.setenv("SCHEMACRAFT_STOP_ON_FIRST_FAILURE", value)
            assert get_environment(EnvVar.SCHEMACRAFT_STOP_ON_FIRST_FAILURE) is False

    @pytest.mark.unit
    def test_invalid_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean falls back to the default."""
        monkeypatch.setenv("SCHEMACRAFT_STRICT_RULES", "maybe")
        assert get_environment(EnvVar.SCHEMACRAFT_STRICT_RULES) is True


# =============================================================================
# Tests for conversion helpers
# =============================================================================


class TestConversion:
    """Tests for string-to-type conversion."""

    @pytest.mark.unit
    def test_parse_bool_unknown(self):
        assert _parse_bool("sometimes") is None

    @pytest.mark.unit
    def test_int_conversion(self):
        assert _convert_value("42", int, 0) == 42
        assert _convert_value("forty-two", int, 7) == 7

    @pytest.mark.unit
    def test_none_returns_default(self):
        assert _convert_value(None, str, "fallback") == "fallback"


# =============================================================================
# Tests for metadata and introspection
# =============================================================================


class TestIntrospection:
    """Tests for variable metadata."""

    @pytest.mark.unit
    def test_info_returns_config(self):
        info = get_environment_info(EnvVar.SCHEMACRAFT_LOG_LEVEL)
        assert isinstance(info, EnvConfig)
        assert info.name == "SCHEMACRAFT_LOG_LEVEL"
        assert info.var_type is str

    @pytest.mark.unit
    def test_names_match_members(self):
        """Every member's config name matches the member name."""
        for var in EnvVar:
            assert var.value.name == var.name

    @pytest.mark.unit
    def test_filter_by_category(self):
        validation = list_environment_variables("validation")
        assert EnvVar.SCHEMACRAFT_STRICT_RULES in validation
        assert EnvVar.SCHEMACRAFT_LOG_LEVEL not in validation
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_unknown_category_is_empty(self):
        assert list_environment_variables("nope") == []
