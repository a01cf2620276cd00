"""Tests for the schema compiler."""

import json

import pytest
from pydantic import ValidationError

from schemacraft.builder import PropertyBuilder
from schemacraft.property import Property
from schemacraft.validation import ConditionalRuleSet, ValidationEngine, ValidationResult

from .lib import Schema, SchemaCompiler, compare, compile_conditional_rule, strictly_equal


class StubProperty:
    """Minimal object satisfying the SchemaProperty protocol."""

    def __init__(self, name, rules, data=None):
        self.name = name
        self.rules = rules
        self.data = data if data is not None else {"type": "string"}

    def get_name(self):
        return self.name

    def get_rules(self):
        return self.rules

    def to_array(self):
        return self.data


class RecordingEngine:
    """ValidationEngine that records its calls and accepts everything."""

    def __init__(self):
        self.calls = []

    def evaluate(self, rules, record, messages=None, attributes=None):
        self.calls.append(
            {"rules": rules, "record": record, "messages": messages, "attributes": attributes}
        )
        return ValidationResult(data=dict(record))


# =============================================================================
# compare()
# =============================================================================


class TestCompare:
    """Tests for the comparison helper."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "left,operator,right,expected",
        [
            (10, "=", 10, True),
            (10, "=", 11, False),
            (10, "!=", 10, False),
            (10, "!=", 11, True),
            (15, ">", 10, True),
            (10, ">", 10, False),
            (10, ">=", 10, True),
            (9, ">=", 10, False),
            (5, "<", 10, True),
            (10, "<", 10, False),
            (10, "<=", 10, True),
            (11, "<=", 10, False),
        ],
    )
    def test_operators(self, left, operator, right, expected):
        """Every supported operator compares as expected."""
        assert compare(left, operator, right) is expected

    @pytest.mark.unit
    def test_unsupported_operator(self):
        """Unknown operators are never satisfied."""
        assert compare(10, "bogus", 10) is False
        assert compare("a", "==", "a") is False

    @pytest.mark.unit
    def test_incomparable_operands(self):
        """Operands that cannot be ordered compare False."""
        assert compare("a", ">", 1) is False
        assert compare(None, "<", 5) is False

    @pytest.mark.unit
    def test_strictly_equal(self):
        """Strict equality also compares types."""
        assert strictly_equal(True, True) is True
        assert strictly_equal(1, True) is False
        assert strictly_equal(1, 1.0) is False
        assert strictly_equal("1", "1") is True


# =============================================================================
# Conditional rule compilation
# =============================================================================


class TestCompileConditionalRule:
    """Tests for compile_conditional_rule()."""

    @pytest.mark.unit
    def test_closure_beats_field_map(self):
        """A callable closure wins over a field map."""
        compiled = compile_conditional_rule(
            {"closure": lambda record: True, "field": {"a": 1}, "rules": ["required"]}
        )
        assert compiled.kind == "closure"
        assert compiled.applies_to({}) is True

    @pytest.mark.unit
    def test_pattern_beats_operator(self):
        """A pattern payload wins over an operator payload."""
        compiled = compile_conditional_rule(
            {
                "field": "code",
                "value": {"pattern": "^A", "operator": "=", "value": "B"},
                "rules": ["required"],
            }
        )
        assert compiled.kind == "pattern"
        assert compiled.applies_to({"code": "ABC"}) is True
        assert compiled.applies_to({"code": "B"}) is False

    @pytest.mark.unit
    def test_operator_payload(self):
        """An operator payload compiles to a comparison."""
        compiled = compile_conditional_rule(
            {"field": "age", "value": {"operator": "<", "value": 18}, "rules": "required"}
        )
        assert compiled.kind == "comparison"
        assert compiled.rules == ("required",)
        assert compiled.applies_to({"age": 12}) is True
        assert compiled.applies_to({}) is False

    @pytest.mark.unit
    def test_plain_field(self):
        """Anything else is strict field equality."""
        compiled = compile_conditional_rule({"field": "flag", "value": True, "rules": []})
        assert isinstance(compiled, ConditionalRuleSet)
        assert compiled.kind == "field"
        assert compiled.applies_to({"flag": True}) is True
        assert compiled.applies_to({"flag": 1}) is False

    @pytest.mark.unit
    def test_without_field(self):
        """Rules without a selector are not compiled."""
        assert compile_conditional_rule({"type": "requiredWith", "fields": ["a"]}) is None


# =============================================================================
# End-to-end validation
# =============================================================================


class TestValidate:
    """Tests for SchemaCompiler.validate()."""

    @pytest.mark.unit
    def test_email_scenario(self):
        """An invalid email fails and a valid one passes."""
        email = Property.string("email").rules(["required", "email"])
        schema = SchemaCompiler().add_property(email)
        result = schema.validate({"email": "not-an-email"})
        assert result.valid is False
        assert result.errors == {"email": ["The email field must be a valid email address."]}
        result = schema.validate({"email": "a@b.com"})
        assert result.valid is True
        assert result.errors == {}

    @pytest.mark.unit
    def test_email_with_trailing_newline(self):
        """A newline after the address is not a valid email."""
        email = Property.string("email").required().rules("email")
        result = SchemaCompiler().add_property(email).validate({"email": "a@b.com\n"})
        assert result.valid is False
        assert result.errors == {"email": ["The email field must be a valid email address."]}

    @pytest.mark.unit
    def test_required_without_fires_when_any_field_missing(self):
        """The compiled token needs every listed field, unlike Property.validate."""
        fax = Property.string("fax").required_without(["phone", "email"])
        assert fax.validate(None, {"phone": "1"}) is True
        schema = SchemaCompiler().add_property(fax)
        assert schema.validate({"phone": "1"}).valid is False
        assert schema.validate({"phone": "1", "email": "a@b.com"}).valid is True

    @pytest.mark.unit
    def test_empty_schema(self):
        """A schema without properties accepts any record."""
        result = SchemaCompiler().validate({"anything": 1})
        assert result.valid is True
        assert result.errors == {}

    @pytest.mark.unit
    def test_signup_valid(self, signup_schema):
        """A complete record passes and keeps only known fields."""
        record = {"name": "Ada", "email": "ada@example.com", "age": 30, "is_business": False}
        result = signup_schema.validate({**record, "x": 1})
        assert result.valid is True
        assert result.data == record

    @pytest.mark.unit
    def test_field_condition_applies(self, signup_schema):
        """tax_id becomes required for businesses."""
        record = {"name": "Ada", "email": "ada@example.com", "is_business": True}
        result = signup_schema.validate(record)
        assert result.errors == {"tax_id": ["The tax id field is required."]}

        record["tax_id"] = "12345"
        result = signup_schema.validate(record)
        assert result.errors == {"tax_id": ["The tax id field must be 9 digits."]}

        record["tax_id"] = "123456789"
        assert signup_schema.validate(record).valid is True

    @pytest.mark.unit
    def test_field_condition_is_strict(self, signup_schema):
        """A truthy non-boolean does not satisfy an equality on True."""
        record = {"name": "Ada", "email": "ada@example.com", "is_business": 1}
        assert signup_schema.validate(record).valid is True

    @pytest.mark.unit
    def test_custom_message(self, signup_schema):
        """field.rule messages override the default."""
        signup_schema.with_messages({"age.min": "You must be an adult."})
        result = signup_schema.validate({"name": "Ada", "email": "ada@example.com", "age": 16})
        assert result.errors == {"age": ["You must be an adult."]}

    @pytest.mark.unit
    def test_custom_attribute(self):
        """Attribute labels appear in default messages."""
        schema = SchemaCompiler().add_property(Property.string("dob").required())
        schema.with_attributes({"dob": "date of birth"})
        assert schema.validate({}).errors == {"dob": ["The date of birth field is required."]}

    @pytest.mark.unit
    def test_when_matches(self):
        """Pattern conditions test the other field's value."""
        schema = SchemaCompiler().add_property(
            Property.string("state").when_matches("country", "/^(us|ca)$/i", "required")
        )
        assert schema.validate({"country": "US"}).valid is False
        assert schema.validate({"country": "FR"}).valid is True
        assert schema.validate({}).valid is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "operator,age,fires",
        [
            ("=", 18, True),
            ("=", 19, False),
            ("!=", 19, True),
            ("!=", 18, False),
            (">", 19, True),
            (">", 18, False),
            (">=", 18, True),
            (">=", 17, False),
            ("<", 17, True),
            ("<", 18, False),
            ("<=", 18, True),
            ("<=", 19, False),
        ],
    )
    def test_when_compare(self, operator, age, fires):
        """Comparison conditions apply their rules when they hold."""
        schema = SchemaCompiler().add_property(
            Property.string("guardian").when_compare("age", operator, 18, "required")
        )
        assert schema.validate({"age": age}).valid is not fires

    @pytest.mark.unit
    def test_when_compare_invalid_operator(self):
        """An unsupported operator never fires."""
        schema = SchemaCompiler().add_property(
            Property.string("guardian").when_compare("age", "bogus", 18, "required")
        )
        assert schema.validate({"age": 18}).valid is True

    @pytest.mark.unit
    def test_array_condition_with_none(self):
        """A None expectation matches a missing field."""
        schema = SchemaCompiler().add_property(
            Property.string("reason").when({"status": "rejected", "note": None}, "required")
        )
        assert schema.validate({"status": "rejected"}).valid is False
        assert schema.validate({"status": "rejected", "note": "late"}).valid is True
        assert schema.validate({"status": "approved"}).valid is True

    @pytest.mark.unit
    def test_empty_array_condition_always_applies(self):
        """An empty field map always holds."""
        schema = SchemaCompiler().add_property(Property.string("reason").when({}, "required"))
        assert schema.validate({}).valid is False

    @pytest.mark.unit
    def test_missing_field_never_matches(self):
        """Field conditions on a missing field do not fire."""
        schema = SchemaCompiler().add_property(
            Property.string("tax_id").when("is_business", True, "required")
        )
        assert schema.validate({}).valid is True

    @pytest.mark.unit
    def test_closure_condition(self):
        """Closure conditions receive the whole record."""
        schema = SchemaCompiler().add_property(
            Property.string("vat").when(lambda record: record.get("type") == "company", "required")
        )
        assert schema.validate({"type": "company"}).valid is False
        assert schema.validate({"type": "person"}).valid is True

    @pytest.mark.unit
    def test_required_with(self):
        """required_with is enforced through its rule token."""
        schema = SchemaCompiler().add_property(Property.string("phone").required_with("email"))
        assert schema.validate({"email": "a@b.com"}).valid is False
        assert schema.validate({}).valid is True

    @pytest.mark.unit
    def test_required_if(self):
        """required_if applies for the matching value only."""
        schema = SchemaCompiler().add_property(
            Property.string("tax_id").required_if("is_business", True)
        )
        assert schema.validate({"is_business": True}).valid is False
        assert schema.validate({"is_business": False}).valid is True

    @pytest.mark.unit
    def test_prohibited_if(self):
        """prohibited_if rejects a value for the matching value."""
        schema = SchemaCompiler().add_property(
            Property.string("discount").prohibited_if("plan", "free")
        )
        assert schema.validate({"plan": "free", "discount": "10"}).valid is False
        assert schema.validate({"plan": "pro", "discount": "10"}).valid is True


# =============================================================================
# Registration
# =============================================================================


class TestRegistration:
    """Tests for properties, rules, messages and attributes."""

    @pytest.mark.unit
    def test_stub_property(self):
        """Any object with the protocol methods can be added."""
        schema = SchemaCompiler().add_property(StubProperty("title", ["required"]))
        assert schema.get_rules() == {"title": ["required"]}
        assert schema.get_properties() == {"title": {"type": "string"}}
        assert schema.validate({}).errors == {"title": ["The title field is required."]}

    @pytest.mark.unit
    def test_stub_property_with_pipe_rules(self):
        """Pipe-delimited rule strings are split."""
        schema = SchemaCompiler().add_property(StubProperty("title", "required|min:3"))
        assert schema.get_rules() == {"title": ["required", "min:3"]}
        assert schema.validate({"title": "ab"}).valid is False

    @pytest.mark.unit
    def test_conditional_rules_appended(self, signup_schema):
        """Compiled sets follow the static rules."""
        entries = signup_schema.get_rules()["tax_id"]
        assert len(entries) == 1
        assert isinstance(entries[0], ConditionalRuleSet)
        assert entries[0].rules == ("required", "digits:9")

    @pytest.mark.unit
    def test_replace_property(self):
        """A property added twice replaces its rules."""
        schema = SchemaCompiler()
        schema.add_property(Property.string("code").rules("required"))
        schema.add_property(Property.string("code").rules("min:3"))
        assert len(schema) == 1
        assert schema.get_rules() == {"code": ["min:3"]}

    @pytest.mark.unit
    def test_add_properties(self):
        """Properties can come from a builder, a mapping or a list."""
        builder = PropertyBuilder()
        builder.string("a")
        schema = SchemaCompiler().add_properties(builder)
        schema.add_properties({"b": Property.string("b")})
        schema.add_properties([Property.string("c")])
        assert list(schema.get_properties()) == ["a", "b", "c"]

    @pytest.mark.unit
    def test_add_rule(self):
        """Extra rules can be attached to any field."""
        schema = SchemaCompiler().add_rules({"nickname": "min:3", "code": ["required"]})
        schema.add_rule("nickname", "max:10|min:3")
        assert schema.get_rules() == {"nickname": ["min:3", "max:10"], "code": ["required"]}

    @pytest.mark.unit
    def test_messages(self):
        """Messages merge, replace and accept per-field entries."""
        schema = SchemaCompiler().with_messages({"required": "A"}).with_messages({"min": "B"})
        schema.add_message("age", "min", "C")
        assert schema.get_messages() == {"required": "A", "min": "B", "age.min": "C"}
        schema.set_messages({"max": "D"})
        assert schema.get_messages() == {"max": "D"}

    @pytest.mark.unit
    def test_attributes(self):
        """Attributes merge and can be replaced."""
        schema = SchemaCompiler().with_attributes({"dob": "date of birth"})
        schema.with_attributes({"dob": "birthday", "ssn": "SSN"})
        assert schema.get_attributes() == {"dob": "birthday", "ssn": "SSN"}
        schema.set_attributes({})
        assert schema.get_attributes() == {}

    @pytest.mark.unit
    def test_custom_engine(self):
        """validate() delegates to the injected engine."""
        engine = RecordingEngine()
        assert isinstance(engine, ValidationEngine)
        schema = SchemaCompiler(engine).add_property(Property.string("name").required())
        schema.with_messages({"required": "!"}).with_attributes({"name": "Name"})
        result = schema.validate({"name": ""})
        assert result.valid is True
        call = engine.calls[0]
        assert call["rules"] == {"name": ["required"]}
        assert call["messages"] == {"required": "!"}
        assert call["attributes"] == {"name": "Name"}

    @pytest.mark.unit
    def test_schema_alias(self):
        """Schema is the compiler."""
        assert Schema is SchemaCompiler


# =============================================================================
# Serialization
# =============================================================================


class TestSerialization:
    """Tests for to_array(), to_json(), from_array() and describe_rules()."""

    @pytest.mark.unit
    def test_to_array(self, signup_schema):
        """The document lists properties and required names."""
        document = signup_schema.to_array()
        assert document["type"] == "object"
        assert list(document["properties"]) == ["name", "email", "age", "is_business", "tax_id"]
        assert document["required"] == ["name", "email"]

    @pytest.mark.unit
    def test_empty_to_array(self):
        """An empty schema still lists required."""
        assert SchemaCompiler().to_array() == {"type": "object", "properties": {}, "required": []}

    @pytest.mark.unit
    def test_to_json_with_closure(self):
        """Closures serialize as empty objects."""
        schema = SchemaCompiler().add_property(
            Property.string("vat").when(lambda record: True, "required")
        )
        document = json.loads(schema.to_json(indent=2))
        assert document["properties"]["vat"]["conditionalRules"][0]["closure"] == {}

    @pytest.mark.unit
    def test_from_array_round_trip(self, signup_schema):
        """A serialized document rebuilds an equivalent compiler."""
        document = signup_schema.to_array()
        rebuilt = SchemaCompiler.from_array(document)
        assert rebuilt.to_array() == document
        record = {"name": "Ada", "email": "ada@example.com", "is_business": True}
        assert rebuilt.validate(record).errors == signup_schema.validate(record).errors

    @pytest.mark.unit
    def test_from_array_required_list(self):
        """Names in the required list are marked required."""
        schema = SchemaCompiler.from_array(
            {"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]}
        )
        assert schema.get_required() == ["name"]
        assert schema.validate({}).valid is False

    @pytest.mark.unit
    def test_from_array_invalid_document(self):
        """Documents of the wrong shape are rejected."""
        with pytest.raises(ValidationError):
            SchemaCompiler.from_array({"type": "array", "properties": {}})

    @pytest.mark.unit
    def test_from_array_custom_engine(self):
        """from_array accepts an engine."""
        engine = RecordingEngine()
        SchemaCompiler.from_array({"properties": {"a": {"type": "string"}}}, engine).validate({})
        assert len(engine.calls) == 1

    @pytest.mark.unit
    def test_describe_rules(self, signup_schema):
        """Conditional sets are described by kind and tokens."""
        described = signup_schema.describe_rules()
        assert described["email"] == ["required", "email"]
        assert described["tax_id"] == [{"when": "field", "rules": ["required", "digits:9"]}]
        json.dumps(described)
