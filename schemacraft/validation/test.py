"""Tests for the rule engine, rule sets and validation results."""

import logging

import pytest

from .lib import RuleEngine, UnknownRuleError, has_value, is_numeric, parse_rule
from .messages import format_message
from .protocol import ConditionalRuleSet, ValidationEngine, resolve_rules
from .result import ValidationResult


def _passes(rules, value):
    return RuleEngine().evaluate({"field": rules}, {"field": value}).valid


# =============================================================================
# Parsing and helpers
# =============================================================================


class TestHelpers:
    """Tests for token parsing and value helpers."""

    @pytest.mark.unit
    def test_parse_rule(self):
        """Tokens split into a name and comma-separated parameters."""
        assert parse_rule("required") == ("required", ())
        assert parse_rule("between:1,10") == ("between", ("1", "10"))
        assert parse_rule("in:a,b,c") == ("in", ("a", "b", "c"))

    @pytest.mark.unit
    def test_parse_regex_keeps_commas(self):
        """regex parameters are never split."""
        assert parse_rule("regex:/^a{1,3}$/") == ("regex", ("/^a{1,3}$/",))

    @pytest.mark.unit
    def test_has_value(self):
        """Blank strings and empty collections count as missing."""
        assert has_value("x") is True
        assert has_value(0) is True
        assert has_value(False) is True
        assert has_value(None) is False
        assert has_value("   ") is False
        assert has_value([]) is False

    @pytest.mark.unit
    def test_is_numeric(self):
        """Numbers and numeric strings are numeric; booleans are not."""
        assert is_numeric(5) is True
        assert is_numeric("-3.5e2") is True
        assert is_numeric(" 42 ") is True
        assert is_numeric(True) is False
        assert is_numeric("abc") is False

    @pytest.mark.unit
    def test_format_message(self):
        """Longer placeholders are replaced before shorter ones."""
        replacements = {"value": "X", "values": "a / b", "attribute": "phone"}
        assert format_message(":attribute needs :values", replacements) == "phone needs a / b"


class TestResolveRules:
    """Tests for flattening static tokens and conditional sets."""

    @pytest.mark.unit
    def test_static_then_conditional(self):
        """Conditional tokens follow static ones without duplicates."""
        always = ConditionalRuleSet(lambda record: True, ("required", "min:3"))
        assert resolve_rules(["required", always], {}) == ["required", "min:3"]

    @pytest.mark.unit
    def test_inactive_set_contributes_nothing(self):
        """Sets whose condition fails add no tokens."""
        never = ConditionalRuleSet(lambda record: False, ("required",))
        assert resolve_rules(["string", never], {}) == ["string"]
        assert never.resolve({}) == []


# =============================================================================
# Built-in rules
# =============================================================================


class TestBuiltinRules:
    """Tests for individual rule checks."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "rules,value,valid",
        [
            (["string"], "abc", True),
            (["string"], 5, False),
            (["numeric"], "12.5", True),
            (["numeric"], "12a", False),
            (["integer"], "42", True),
            (["integer"], 4.2, False),
            (["boolean"], True, True),
            (["boolean"], 1, True),
            (["boolean"], "0", True),
            (["boolean"], "yes", False),
            (["array"], [1], True),
            (["array"], "a", False),
            (["email"], "ada@example.com", True),
            (["email"], "ada@", False),
            (["email"], "ada@example.com\n", False),
            (["digits:9"], "123456789", True),
            (["digits:9"], 123456789, True),
            (["digits:9"], "12345678a", False),
            (["digits:9"], "1234", False),
            (["date"], "2024-01-31", True),
            (["date"], "2024-13-01", False),
            (["alpha"], "abc", True),
            (["alpha"], "abc1", False),
            (["alpha_num"], "abc123", True),
            (["alpha_num"], "abc-1", False),
            (["in:draft,live"], "draft", True),
            (["in:draft,live"], "archived", False),
            (["in:draft,live"], ["draft", "live"], True),
            (["not_in:admin,root"], "ada", True),
            (["not_in:admin,root"], "root", False),
            (["regex:/^[A-Z]{2,3}$/"], "AB", True),
            (["regex:/^[A-Z]{2,3}$/"], "ABCD", False),
            (["url"], "https://example.com/path", True),
            (["url"], "example", False),
            (["url"], "https://example.com\n", False),
            (["uuid"], "123e4567-e89b-12d3-a456-426614174000", True),
            (["uuid"], "not-a-uuid", False),
        ],
    )
    def test_rule(self, rules, value, valid):
        """Each rule accepts and rejects the expected values."""
        assert _passes(rules, value) is valid

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "rules,value,valid",
        [
            (["min:3"], "abc", True),
            (["min:3"], "ab", False),
            (["max:2"], [1, 2], True),
            (["max:2"], [1, 2, 3], False),
            (["min:18"], 18, True),
            (["min:18"], 17.5, False),
            (["numeric", "between:10,20"], "15", True),
            (["numeric", "between:10,20"], "5", False),
            (["between:10,20"], "5", False),
        ],
    )
    def test_size_rules(self, rules, value, valid):
        """Size is a number, a length or an item count."""
        assert _passes(rules, value) is valid

    @pytest.mark.unit
    def test_missing_parameters(self):
        """Rules that need parameters reject tokens without them."""
        with pytest.raises(ValueError, match="required_if"):
            RuleEngine().evaluate({"x": ["required_if:a"]}, {})


class TestImplicitRules:
    """Tests for rules that run on missing or empty values."""

    @pytest.mark.unit
    def test_optional_rules_skip_missing_and_blank(self):
        """Non-implicit rules ignore missing and blank values."""
        engine = RuleEngine()
        rules = {"nick": ["min:3"]}
        assert engine.evaluate(rules, {}).valid is True
        assert engine.evaluate(rules, {"nick": ""}).valid is True
        assert engine.evaluate(rules, {"nick": "   "}).valid is True
        assert engine.evaluate(rules, {"nick": "ab"}).valid is False

    @pytest.mark.unit
    def test_nullable(self):
        """None passes only when the field is nullable."""
        engine = RuleEngine()
        assert engine.evaluate({"x": ["nullable", "integer"]}, {"x": None}).valid is True
        assert engine.evaluate({"x": ["integer"]}, {"x": None}).valid is False

    @pytest.mark.unit
    def test_required(self):
        """A missing required field reports the required message."""
        result = RuleEngine().evaluate({"name": ["required", "min:3"]}, {})
        assert result.errors == {"name": ["The name field is required."]}

    @pytest.mark.unit
    def test_required_with(self):
        """required_with triggers when a listed field has a value."""
        engine = RuleEngine()
        rules = {"phone": ["required_with:email"]}
        result = engine.evaluate(rules, {"email": "a@b.com"})
        assert result.errors["phone"] == ["The phone field is required when email is present."]
        assert engine.evaluate(rules, {}).valid is True

    @pytest.mark.unit
    def test_required_without_any_missing(self):
        """required_without triggers when any listed field is missing."""
        engine = RuleEngine()
        rules = {"phone": ["required_without:email,fax"]}
        result = engine.evaluate(rules, {"email": "a@b.com"})
        assert result.errors["phone"] == [
            "The phone field is required when email / fax is not present."
        ]
        assert engine.evaluate(rules, {"email": "a@b.com", "fax": "1"}).valid is True

    @pytest.mark.unit
    def test_required_if_boolean(self):
        """required_if matches booleans against 1/0."""
        engine = RuleEngine()
        rules = {"tax_id": ["required_if:is_business,1"]}
        result = engine.evaluate(rules, {"is_business": True})
        assert result.errors["tax_id"] == [
            "The tax id field is required when is business is 1."
        ]
        assert engine.evaluate(rules, {"is_business": False}).valid is True

    @pytest.mark.unit
    def test_prohibited_if(self):
        """prohibited_if rejects a value when the other field matches."""
        engine = RuleEngine()
        rules = {"discount": ["prohibited_if:plan,free"]}
        result = engine.evaluate(rules, {"plan": "free", "discount": 5})
        assert result.errors["discount"] == [
            "The discount field is prohibited when plan is free."
        ]
        assert engine.evaluate(rules, {"plan": "pro", "discount": 5}).valid is True
        assert engine.evaluate(rules, {"plan": "free"}).valid is True

    @pytest.mark.unit
    def test_prohibited(self):
        """prohibited passes only for missing values."""
        engine = RuleEngine()
        assert engine.evaluate({"x": ["prohibited"]}, {}).valid is True
        assert engine.evaluate({"x": ["prohibited"]}, {"x": "set"}).valid is False


# =============================================================================
# Messages
# =============================================================================


class TestMessages:
    """Tests for default, custom and labelled messages."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "rules,value,message",
        [
            (["integer", "min:18"], 16, "The age field must be at least 18."),
            (["min:3"], "ab", "The age field must be at least 3 characters."),
            (["max:2"], [1, 2, 3], "The age field must not have more than 2 items."),
            (
                ["numeric", "between:10,20"],
                "5",
                "The age field must be between 10 and 20.",
            ),
            (["digits:2"], "123", "The age field must be 2 digits."),
            (["email"], "nope", "The age field must be a valid email address."),
        ],
    )
    def test_default_messages(self, rules, value, message):
        """Default messages fill rule parameters."""
        result = RuleEngine().evaluate({"age": rules}, {"age": value})
        assert result.errors["age"] == [message]

    @pytest.mark.unit
    def test_field_message_beats_rule_message(self):
        """A field.rule message takes priority over a rule message."""
        result = RuleEngine().evaluate(
            {"age": ["min:18"], "score": ["min:18"]},
            {"age": 10, "score": 10},
            messages={"age.min": "Too young", "min": ":attribute is below :min"},
        )
        assert result.errors["age"] == ["Too young"]
        assert result.errors["score"] == ["score is below 18"]

    @pytest.mark.unit
    def test_custom_attribute(self):
        """Attribute labels replace the field name in messages."""
        result = RuleEngine().evaluate(
            {"dob": ["required"]}, {}, attributes={"dob": "date of birth"}
        )
        assert result.first_error("dob") == "The date of birth field is required."

    @pytest.mark.unit
    def test_every_failure_reported(self):
        """Each failing rule adds its own message."""
        result = RuleEngine().evaluate({"code": ["integer", "min:5"]}, {"code": "ab"})
        assert len(result.errors["code"]) == 2


# =============================================================================
# Engine behaviour
# =============================================================================


class TestRuleEngine:
    """Tests for strictness, bailing, custom rules and result data."""

    @pytest.mark.unit
    def test_satisfies_protocol(self):
        """RuleEngine is a ValidationEngine."""
        assert isinstance(RuleEngine(), ValidationEngine)

    @pytest.mark.unit
    def test_unknown_rule_strict(self):
        """Strict engines raise for unknown rules."""
        with pytest.raises(UnknownRuleError, match="bogus"):
            RuleEngine(strict=True).evaluate({"x": ["bogus"]}, {"x": 1})

    @pytest.mark.unit
    def test_unknown_rule_lenient(self, caplog):
        """Lenient engines log and skip unknown rules."""
        with caplog.at_level(logging.WARNING, logger="schemacraft.validation"):
            result = RuleEngine(strict=False).evaluate({"x": ["bogus"]}, {"x": 1})
        assert result.valid is True
        assert "bogus" in caplog.text

    @pytest.mark.unit
    def test_strictness_from_environment(self, monkeypatch):
        """Defaults come from the environment."""
        monkeypatch.setenv("SCHEMACRAFT_STRICT_RULES", "false")
        monkeypatch.setenv("SCHEMACRAFT_STOP_ON_FIRST_FAILURE", "true")
        engine = RuleEngine()
        assert engine.strict is False
        assert engine.stop_on_first_failure is True

    @pytest.mark.unit
    def test_bail(self):
        """bail stops a field at its first failure."""
        result = RuleEngine().evaluate({"code": ["bail", "integer", "min:5"]}, {"code": "ab"})
        assert result.errors["code"] == ["The code field must be an integer."]

    @pytest.mark.unit
    def test_stop_on_first_failure(self):
        """The engine option applies bail to every field."""
        engine = RuleEngine(stop_on_first_failure=True)
        result = engine.evaluate({"code": ["integer", "min:5"]}, {"code": "ab"})
        assert len(result.errors["code"]) == 1

    @pytest.mark.unit
    def test_register_rule(self):
        """Custom rules run like built-ins."""
        engine = RuleEngine()
        engine.register_rule(
            "uppercase", lambda call: call.value.isupper(), ":attribute must be uppercase."
        )
        assert engine.has_rule("uppercase") is True
        result = engine.evaluate({"code": ["uppercase"]}, {"code": "abc"})
        assert result.errors["code"] == ["code must be uppercase."]
        assert engine.evaluate({"code": ["uppercase"]}, {}).valid is True

    @pytest.mark.unit
    def test_register_implicit_rule(self):
        """Implicit custom rules run for missing fields."""
        engine = RuleEngine()
        engine.register_rule("present", lambda call: call.field in call.record, implicit=True)
        result = engine.evaluate({"token": ["present"]}, {})
        assert result.errors["token"] == ["The token field is invalid."]

    @pytest.mark.unit
    def test_marker_rules_known(self):
        """Marker tokens are known but never fail."""
        engine = RuleEngine()
        assert engine.has_rule("nullable") is True
        assert engine.has_rule("bogus") is False
        assert engine.evaluate({"x": ["sometimes", "bail"]}, {}).valid is True

    @pytest.mark.unit
    def test_conditional_set(self):
        """Conditional sets add their tokens only when they apply."""
        rules = {
            "tax_id": [
                "string",
                ConditionalRuleSet(lambda r: r.get("is_business") is True, ("required",)),
            ]
        }
        engine = RuleEngine()
        assert engine.evaluate(rules, {"is_business": True}).valid is False
        assert engine.evaluate(rules, {"is_business": False}).valid is True

    @pytest.mark.unit
    def test_result_data(self):
        """Valid results keep ruled fields; invalid ones echo the input."""
        engine = RuleEngine()
        rules = {"name": ["required"]}
        assert engine.evaluate(rules, {"name": "Ada", "extra": 1}).data == {"name": "Ada"}
        assert engine.evaluate(rules, {"extra": 1}).data == {"extra": 1}


# =============================================================================
# Results
# =============================================================================


class TestValidationResult:
    """Tests for the ValidationResult model."""

    @pytest.mark.unit
    def test_defaults(self):
        """A new result is valid and empty."""
        result = ValidationResult()
        assert result.valid is True
        assert result.has_errors() is False
        assert result.first_error("x") is None

    @pytest.mark.unit
    def test_add_error(self):
        """Adding an error invalidates the result."""
        result = ValidationResult().add_error("x", "bad").add_error("x", "worse")
        assert result.valid is False
        assert result.errors == {"x": ["bad", "worse"]}
        assert result.first_error("x") == "bad"

    @pytest.mark.unit
    def test_merge(self):
        """Merging combines errors and data."""
        left = ValidationResult(data={"a": 1}).add_error("x", "bad")
        right = ValidationResult(data={"a": 2, "b": 3}).add_error("x", "worse")
        merged = left.merge(right)
        assert merged.errors == {"x": ["bad", "worse"]}
        assert merged.data == {"a": 2, "b": 3}
        assert merged.valid is False

    @pytest.mark.unit
    def test_to_array(self):
        """to_array returns plain data."""
        assert ValidationResult().to_array() == {"valid": True, "errors": {}, "data": {}}
