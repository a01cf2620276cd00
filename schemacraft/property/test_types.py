"""Tests for type tags, runtime type matching and format helpers."""

from datetime import date

import pytest

from .formats import compile_pattern, is_email, is_url, is_uuid, parse_date, pattern_matches
from .types import SingleType, TypeTag, UnionType, parse_type, runtime_type_tag


class TestRuntimeTypeTag:
    """Tests for runtime_type_tag()."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,tag",
        [
            (None, "NULL"),
            (True, "boolean"),
            (0, "integer"),
            (1.5, "double"),
            ("x", "string"),
            ([], "array"),
            ((1,), "array"),
            ({"a": 1}, "array"),
            (object(), "object"),
            (date(2024, 1, 1), "object"),
        ],
    )
    def test_tags(self, value, tag):
        """Values report their loosely typed name."""
        assert runtime_type_tag(value) == tag


class TestSchemaTypes:
    """Tests for SingleType, UnionType and parse_type()."""

    @pytest.mark.unit
    def test_parse_single(self):
        """Strings and tags parse to SingleType."""
        assert parse_type("string") == SingleType("string")
        assert parse_type(TypeTag.ARRAY) == SingleType("array")

    @pytest.mark.unit
    def test_parse_union(self):
        """Sequences parse to UnionType."""
        assert parse_type(["null", TypeTag.STRING]) == UnionType(("null", "string"))

    @pytest.mark.unit
    def test_parse_existing(self):
        """Parsed types pass through unchanged."""
        union = UnionType(("string",))
        assert parse_type(union) is union

    @pytest.mark.unit
    def test_parse_errors(self):
        """Bad declarations are rejected."""
        with pytest.raises(ValueError):
            parse_type([])
        with pytest.raises(TypeError):
            parse_type(5)
        with pytest.raises(TypeError):
            parse_type(["string", 5])

    @pytest.mark.unit
    def test_primary(self):
        """The primary tag is the first non-null member."""
        assert SingleType("object").primary == "object"
        assert UnionType(("null", "object", "array")).primary == "object"
        assert UnionType(("null",)).primary == "null"

    @pytest.mark.unit
    def test_null_round_trip(self):
        """with_null and without_null are inverses."""
        nullable = SingleType("string").with_null()
        assert nullable.to_wire() == ["null", "string"]
        assert nullable.with_null() is nullable
        assert nullable.without_null() == SingleType("string")
        assert UnionType(("null", "a", "b")).without_null() == UnionType(("a", "b"))


class TestFormats:
    """Tests for pattern and format helpers."""

    @pytest.mark.unit
    def test_bare_pattern(self):
        """Bare patterns compile as-is and match anywhere."""
        assert pattern_matches("[0-9]", "abc1") is True
        assert pattern_matches("^[0-9]+$", "abc1") is False

    @pytest.mark.unit
    def test_delimited_pattern(self):
        """Delimiters are stripped and modifiers become flags."""
        assert compile_pattern("/^abc$/i").pattern == "^abc$"
        assert pattern_matches("#^a.b$#s", "a\nb") is True
        assert pattern_matches("~^ABC$~", "abc") is False

    @pytest.mark.unit
    def test_invalid_pattern(self):
        """Invalid patterns raise ValueError."""
        with pytest.raises(ValueError, match="Invalid pattern"):
            compile_pattern("/[a-/")

    @pytest.mark.unit
    @pytest.mark.parametrize("pattern", [".+.", ".*.", "-x-", "|a|"])
    def test_punctuation_bounded_bare_pattern(self, pattern):
        """Only PHP delimiters are stripped; other bare patterns stay intact."""
        assert compile_pattern(pattern).pattern == pattern

    @pytest.mark.unit
    def test_bare_pattern_keeps_outer_characters(self):
        """A bare pattern bounded by dots still needs both characters."""
        assert pattern_matches(".+.", "ab") is True
        assert pattern_matches(".+.", "a") is False
        assert pattern_matches("|a|", "b") is True

    @pytest.mark.unit
    def test_email(self):
        """Addresses need a local part, a domain and a TLD."""
        assert is_email("ada@example.com") is True
        assert is_email("ada@example") is False
        assert is_email("ada example.com") is False
        assert is_email("ada@example.com\n") is False

    @pytest.mark.unit
    def test_url(self):
        """URLs need an http(s) scheme."""
        assert is_url("http://example.com") is True
        assert is_url("ftp://example.com") is False
        assert is_url("http://example.com\n") is False

    @pytest.mark.unit
    def test_uuid(self):
        """UUIDs parse in canonical form."""
        assert is_uuid("123e4567-e89b-12d3-a456-426614174000") is True
        assert is_uuid("123") is False

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2024-02-29", date(2024, 2, 29)),
            ("2024-02-29T10:00:00Z", date(2024, 2, 29)),
            ("2024/02/29", date(2024, 2, 29)),
            ("29-02-2024", date(2024, 2, 29)),
            ("02/29/2024", date(2024, 2, 29)),
            ("2023-02-29", None),
            ("tomorrow", None),
        ],
    )
    def test_parse_date(self, value, expected):
        """Common layouts parse; impossible dates do not."""
        assert parse_date(value) == expected
