"""Tests for the Property model."""

import pytest

from schemacraft.builder import PropertyBuilder

from .lib import DURATION_UNITS, Property, humanize, rule_value
from .rules import (
    ClosureRule,
    FieldEqualityRule,
    RequiredWithRule,
    RequiredWithoutRule,
    is_empty,
    normalize_rules,
    rule_from_array,
)

# =============================================================================
# Factories
# =============================================================================


class TestFactories:
    """Tests for the typed factory classmethods."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "factory,expected",
        [
            (Property.string, "string"),
            (Property.number, "number"),
            (Property.integer, "integer"),
            (Property.boolean, "boolean"),
            (Property.object, "object"),
            (Property.array, "array"),
        ],
    )
    def test_primitive_types(self, factory, expected):
        """Each factory sets the matching type tag."""
        prop = factory("field", "A field")
        assert prop.get_type() == expected
        assert prop.get_description() == "A field"

    @pytest.mark.unit
    def test_defaults_to_string(self):
        """A bare Property is a string."""
        assert Property("name").get_type() == "string"

    @pytest.mark.unit
    def test_union_type(self):
        """A list declares a union type."""
        prop = Property("value", ["string", "integer"])
        assert prop.get_type() == ["string", "integer"]

    @pytest.mark.unit
    def test_empty_union_rejected(self):
        """An empty union cannot be declared."""
        with pytest.raises(ValueError):
            Property("value", [])

    @pytest.mark.unit
    def test_time_range(self):
        """time_range is a nullable object with date-time bounds."""
        data = Property.time_range("meeting_time").to_array()
        assert data["type"] == ["object", "null"]
        assert data["description"] == "Meeting Time"
        assert data["format"] == "Y-m-d"
        assert data["timeRange"] is True
        assert data["properties"]["start"]["format"] == "date-time"
        assert data["properties"]["end"]["format"] == "date-time"

    @pytest.mark.unit
    def test_time_range_custom_format(self):
        """time_range accepts a description and a display format."""
        data = Property.time_range("slot", "Booking slot", format="d/m/Y").to_array()
        assert data["description"] == "Booking slot"
        assert data["format"] == "d/m/Y"

    @pytest.mark.unit
    def test_date_range(self):
        """date_range carries start, end and picker options."""
        data = Property.date_range("stay").to_array()
        assert data["type"] == "object"
        assert data["description"] == "Stay"
        assert set(data["properties"]) == {"start", "end", "options"}
        options = data["properties"]["options"]["properties"]
        assert options["format"]["default"] == "YYYY-MM-DD"
        assert options["shortcuts"]["default"] is True
        assert options["weekNumbers"]["default"] is False
        assert options["disabledDates"]["items"]["format"] == "date"

    @pytest.mark.unit
    def test_time(self):
        """time is a string with the time format."""
        data = Property.time("end_time").to_array()
        assert data["type"] == "string"
        assert data["format"] == "time"
        assert data["description"] == "End Time"

    @pytest.mark.unit
    def test_duration(self):
        """duration pairs a number with an enumerated unit."""
        data = Property.duration("timeout", "Request timeout").to_array()
        assert data["description"] == "Request timeout"
        assert data["properties"]["value"]["type"] == "number"
        assert data["properties"]["unit"]["enum"] == DURATION_UNITS


# =============================================================================
# Rules and required
# =============================================================================


class TestRules:
    """Tests for static rule tokens."""

    @pytest.mark.unit
    def test_pipe_string_and_list_are_equivalent(self):
        """Rules can be given as a pipe-delimited string or a list."""
        a = Property.string("name").rules("required|min:3|max:50")
        b = Property.string("name").rules(["required", "min:3", "max:50"])
        assert a.get_rules() == b.get_rules() == ["required", "min:3", "max:50"]

    @pytest.mark.unit
    def test_duplicates_ignored(self):
        """Adding the same token twice keeps one copy."""
        prop = Property.string("name").rules("min:3").add_rule("min:3")
        assert prop.get_rules() == ["min:3"]

    @pytest.mark.unit
    def test_required_token_marks_required(self):
        """A literal required token sets the required flag."""
        prop = Property.string("name").rules("required")
        assert prop.is_required() is True
        assert prop.to_array()["required"] is True

    @pytest.mark.unit
    def test_required_round_trip(self):
        """required(False) strips every required* token."""
        prop = (
            Property.string("name")
            .required()
            .add_rule("required_if:other,value")
            .required_with("field1")
            .rules("min:3")
        )
        prop.required(False)
        assert prop.is_required() is False
        assert prop.get_rules() == ["min:3"]

    @pytest.mark.unit
    def test_non_string_token_rejected(self):
        """Rule tokens must be strings."""
        with pytest.raises(TypeError):
            Property.string("name").rules(["required", 3])
        with pytest.raises(TypeError):
            Property.string("name").add_rule(None)

    @pytest.mark.unit
    def test_normalize_rules(self):
        """normalize_rules splits strings and drops empty tokens."""
        assert normalize_rules(None) == []
        assert normalize_rules("required||email") == ["required", "email"]
        assert normalize_rules(("a", "b")) == ["a", "b"]


class TestNullable:
    """Tests for nullable()."""

    @pytest.mark.unit
    def test_idempotent(self):
        """Calling nullable twice adds null and the token once."""
        prop = Property.string("nickname").nullable().nullable()
        assert prop.get_type() == ["null", "string"]
        assert prop.get_rules().count("nullable") == 1
        assert prop.is_nullable() is True

    @pytest.mark.unit
    def test_union_gets_null_prepended(self):
        """An existing union gains a leading null member."""
        prop = Property("value", ["string", "integer"]).nullable()
        assert prop.get_type() == ["null", "string", "integer"]

    @pytest.mark.unit
    def test_nullable_false_reverts(self):
        """nullable(False) removes the null member and the token."""
        prop = Property.string("nickname").nullable().nullable(False)
        assert prop.get_type() == "string"
        assert "nullable" not in prop.get_rules()


# =============================================================================
# Nesting
# =============================================================================


class TestNesting:
    """Tests for child properties and item schemas."""

    @pytest.mark.unit
    def test_properties_on_non_object_rejected(self):
        """Only objects accept child properties."""
        with pytest.raises(ValueError, match="object type"):
            Property.string("name").properties({"a": Property.string("a")})

    @pytest.mark.unit
    def test_items_on_non_array_rejected(self):
        """Only arrays accept an item schema."""
        with pytest.raises(ValueError, match="array type"):
            Property.object("tags").items(Property.string("tag"))

    @pytest.mark.unit
    def test_with_builder_on_non_object_rejected(self):
        """Only objects can be populated through a builder."""
        with pytest.raises(ValueError, match="Builder"):
            Property.array("tags").with_builder(lambda b: b.string("x"))

    @pytest.mark.unit
    def test_add_property_on_non_object_rejected(self):
        """add_property needs an object parent."""
        with pytest.raises(ValueError):
            Property.integer("age").add_property(Property.string("x"))

    @pytest.mark.unit
    def test_properties_from_mapping(self):
        """Children may be Property objects or serialized dicts."""
        prop = Property.object("address").properties(
            {"street": Property.string("street"), "zip": {"type": "string"}}
        )
        children = prop.get_properties()
        assert children["street"]["type"] == "string"
        assert children["zip"] == {"type": "string"}

    @pytest.mark.unit
    def test_properties_unwraps_object_schema(self):
        """A mapping holding its own properties key is unwrapped."""
        nested = Property.object("inner").properties({"a": Property.string("a")}).to_array()
        prop = Property.object("outer").properties(nested)
        assert list(prop.get_properties()) == ["a"]

    @pytest.mark.unit
    def test_child_named_properties_kept(self):
        """A child called properties is not mistaken for an object document."""
        prop = Property.object("meta").properties(
            {"properties": {"type": "string"}, "title": {"type": "string"}}
        )
        assert prop.get_properties() == {
            "properties": {"type": "string"},
            "title": {"type": "string"},
        }

    @pytest.mark.unit
    def test_properties_unwraps_nullable_object_schema(self):
        """Nullable object documents are unwrapped too."""
        nested = Property.object("inner").nullable().properties({"a": Property.string("a")})
        prop = Property.object("outer").properties(nested.to_array())
        assert list(prop.get_properties()) == ["a"]

    @pytest.mark.unit
    def test_properties_from_builder(self):
        """A PropertyBuilder can supply the children."""
        builder = PropertyBuilder()
        builder.string("street")
        builder.string("city")
        prop = Property.object("address").properties(builder)
        assert list(prop.get_properties()) == ["street", "city"]

    @pytest.mark.unit
    def test_invalid_child_rejected(self):
        """Children must be properties or mappings."""
        with pytest.raises(TypeError, match="street"):
            Property.object("address").properties({"street": "string"})

    @pytest.mark.unit
    def test_with_builder(self):
        """with_builder adds the properties built in the callback."""
        prop = Property.object("contact").with_builder(
            lambda b: (b.string("email").required(), b.string("phone"))
        )
        children = prop.get_properties()
        assert list(children) == ["email", "phone"]
        assert children["email"]["required"] is True

    @pytest.mark.unit
    def test_items(self):
        """items serializes the item schema."""
        prop = Property.array("tags").items(Property.string("tag").rules("max:20"))
        assert prop.get_items()["type"] == "string"
        assert prop.to_array()["items"]["rules"] == ["max:20"]

    @pytest.mark.unit
    def test_nullable_object_accepts_children(self):
        """A nullable object still counts as an object for nesting."""
        prop = Property.object("meta").nullable().add_property(Property.string("a"))
        assert "a" in prop.get_properties()


# =============================================================================
# Conditional rules
# =============================================================================


class TestConditionalRules:
    """Tests for the serialized shape of each conditional rule."""

    @pytest.mark.unit
    def test_closure(self):
        """A callable condition becomes a closure rule."""

        def check(record):
            return record.get("type") == "business"

        prop = Property.string("vat").when(check, "required|min:5")
        rule = prop.to_array()["conditionalRules"][0]
        assert rule == {"type": "closure", "closure": check, "rules": ["required", "min:5"]}

    @pytest.mark.unit
    def test_array_field_equality(self):
        """A mapping condition lists every expected field value."""
        prop = Property.string("reason").when({"status": "rejected", "final": True}, ["required"])
        rule = prop.to_array()["conditionalRules"][0]
        assert rule == {
            "type": "array",
            "field": {"status": "rejected", "final": True},
            "rules": ["required"],
        }

    @pytest.mark.unit
    def test_field_equality(self):
        """A field name and value make a field rule."""
        prop = Property.string("tax_id").when("is_business", True, ["required", "digits:9"])
        rule = prop.to_array()["conditionalRules"][0]
        assert rule == {
            "type": "field",
            "field": "is_business",
            "value": True,
            "rules": ["required", "digits:9"],
        }

    @pytest.mark.unit
    def test_when_without_rules(self):
        """Omitted rules serialize as an empty list."""
        prop = Property.string("note").when("status", "draft")
        assert prop.to_array()["conditionalRules"][0]["rules"] == []

    @pytest.mark.unit
    def test_pattern(self):
        """when_matches stores the pattern under value."""
        prop = Property.string("state").when_matches("country", "/^US$/", "required")
        rule = prop.to_array()["conditionalRules"][0]
        assert rule == {
            "type": "pattern",
            "field": "country",
            "value": {"pattern": "/^US$/"},
            "rules": ["required"],
        }

    @pytest.mark.unit
    def test_pattern_must_compile(self):
        """An invalid pattern is rejected at declaration time."""
        with pytest.raises(ValueError):
            Property.string("state").when_matches("country", "([a-z", "required")

    @pytest.mark.unit
    def test_comparison(self):
        """when_compare stores operator and operand under value."""
        prop = Property.string("guardian").when_compare("age", "<", 18, "required")
        rule = prop.to_array()["conditionalRules"][0]
        assert rule == {
            "type": "comparison",
            "field": "age",
            "value": {"operator": "<", "value": 18},
            "rules": ["required"],
        }

    @pytest.mark.unit
    def test_required_with(self):
        """required_with records the fields and adds the token."""
        prop = Property.string("phone").required_with(["email", "name"])
        data = prop.to_array()
        assert data["conditionalRules"][0] == {
            "type": "requiredWith",
            "fields": ["email", "name"],
            "rules": ["required"],
        }
        assert data["rules"][0] == "required_with:email,name"

    @pytest.mark.unit
    def test_required_without(self):
        """required_without accepts a single field name."""
        prop = Property.string("phone").required_without("email")
        data = prop.to_array()
        assert data["conditionalRules"][0]["type"] == "requiredWithout"
        assert data["conditionalRules"][0]["fields"] == ["email"]
        assert data["rules"] == ["required_without:email"]

    @pytest.mark.unit
    def test_required_if(self):
        """required_if renders booleans as 1/0 in its token."""
        prop = Property.string("phone").required_if("has_phone", True)
        data = prop.to_array()
        assert "required_if:has_phone,1" in data["rules"]
        assert data["conditionalRules"][0]["rules"] == ["required"]

    @pytest.mark.unit
    def test_prohibited_if(self):
        """prohibited_if attaches the prohibited rule."""
        prop = Property.string("discount").prohibited_if("plan", "free")
        data = prop.to_array()
        assert data["conditionalRules"][0]["rules"] == ["prohibited"]
        assert "prohibited_if:plan,free" in data["rules"]

    @pytest.mark.unit
    @pytest.mark.parametrize("method", ["required_if", "prohibited_if"])
    def test_comma_in_value_rejected(self, method):
        """Values that would split into several token candidates are refused."""
        prop = Property.string("note")
        with pytest.raises(ValueError, match="comma"):
            getattr(prop, method)("tags", "a,b")
        assert prop.get_rules() == []
        assert prop.get_conditional_rules() == []

    @pytest.mark.unit
    def test_invalid_condition(self):
        """Conditions other than callable, mapping or name are rejected."""
        with pytest.raises(TypeError):
            Property.string("x").when(42, True, "required")

    @pytest.mark.unit
    def test_rule_from_array(self):
        """Serialized rules are rebuilt as their variant."""
        rule = rule_from_array({"type": "field", "field": "a", "value": 1, "rules": "required"})
        assert rule == FieldEqualityRule("a", 1, ("required",))
        assert isinstance(
            rule_from_array({"type": "requiredWith", "fields": ["a"]}), RequiredWithRule
        )

    @pytest.mark.unit
    def test_rule_from_array_rejects_closures_and_unknown(self):
        """Closures and unknown kinds cannot be rebuilt."""
        with pytest.raises(ValueError):
            rule_from_array({"type": "closure", "closure": {}, "rules": []})
        with pytest.raises(ValueError):
            rule_from_array({"type": "bogus"})


# =============================================================================
# validate()
# =============================================================================


class TestValidateTypes:
    """Tests for the type check inside validate()."""

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [1, 0, "true"])
    def test_boolean_is_strict(self, value):
        """Booleans reject ints and strings."""
        assert Property.boolean("flag").validate(value) is False

    @pytest.mark.unit
    def test_boolean_accepts_bools(self):
        """Both boolean values pass."""
        assert Property.boolean("flag").validate(True) is True
        assert Property.boolean("flag").validate(False) is True

    @pytest.mark.unit
    def test_number(self):
        """number accepts ints and floats but not bools or numeric strings."""
        prop = Property.number("price")
        assert prop.validate(5) is True
        assert prop.validate(5.5) is True
        assert prop.validate(True) is False
        assert prop.validate("5") is False

    @pytest.mark.unit
    def test_integer(self):
        """integer rejects floats."""
        prop = Property.integer("count")
        assert prop.validate(3) is True
        assert prop.validate(3.0) is False

    @pytest.mark.unit
    def test_object_accepts_any_container(self):
        """object accepts dicts, lists and arbitrary objects."""
        prop = Property.object("meta")
        assert prop.validate({"a": 1}) is True
        assert prop.validate([1, 2]) is True
        assert prop.validate(object()) is True
        assert prop.validate("x") is False

    @pytest.mark.unit
    def test_array(self):
        """array accepts lists and mappings but not plain objects."""
        prop = Property.array("tags")
        assert prop.validate(["a"]) is True
        assert prop.validate({"a": 1}) is True
        assert prop.validate(object()) is False

    @pytest.mark.unit
    def test_mixed_union(self):
        """A union checks the runtime tag for membership."""
        prop = Property("value", ["string", "integer", "boolean"])
        assert prop.validate("test") is True
        assert prop.validate(123) is True
        assert prop.validate(True) is True
        assert prop.validate([]) is False
        assert prop.validate(object()) is False

    @pytest.mark.unit
    def test_number_union_does_not_match_numbers(self):
        """A union of "number" alone matches no runtime value."""
        prop = Property("amount", ["number"])
        assert prop.validate(5) is False
        assert prop.validate(5.0) is False
        assert Property("amount", ["integer", "double"]).validate(5.0) is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "factory",
        [
            Property.string,
            Property.number,
            Property.integer,
            Property.boolean,
            Property.object,
            Property.array,
        ],
    )
    def test_empty_values_exempt(self, factory):
        """None and empty strings pass every optional type."""
        prop = factory("field")
        assert prop.validate(None) is True
        assert prop.validate("") is True


class TestValidateConstraints:
    """Tests for required, pattern, bounds and email checks."""

    @pytest.mark.unit
    def test_required(self):
        """Required properties reject empty values."""
        prop = Property.string("name").required()
        assert prop.validate(None) is False
        assert prop.validate("") is False
        assert prop.validate("Ada") is True

    @pytest.mark.unit
    def test_nullable_required_accepts_none(self):
        """nullable wins over required for None."""
        assert Property.string("name").required().nullable().validate(None) is True

    @pytest.mark.unit
    def test_bounds(self):
        """minimum and maximum are inclusive."""
        prop = Property.number("score").min(0).max(100)
        assert prop.validate(0) is True
        assert prop.validate(100) is True
        assert prop.validate(50.5) is True
        assert prop.validate(-1) is False
        assert prop.validate(100.5) is False
        assert prop.validate("50") is False

    @pytest.mark.unit
    def test_bounds_ignored_for_strings(self):
        """Numeric bounds do not apply to string properties."""
        assert Property.string("code").min(5).validate("ab") is True

    @pytest.mark.unit
    def test_pattern(self):
        """Strings must match the pattern."""
        prop = Property.string("code").pattern("^[0-9]+$")
        assert prop.validate("123") is True
        assert prop.validate("abc") is False

    @pytest.mark.unit
    def test_delimited_pattern_flags(self):
        """Delimited patterns honour their modifiers."""
        prop = Property.string("code").pattern("/^[a-z]+$/i")
        assert prop.validate("ABC") is True
        assert prop.get_pattern() == "/^[a-z]+$/i"

    @pytest.mark.unit
    def test_pattern_skipped_for_non_strings(self):
        """The pattern only applies to string values."""
        prop = Property("code", ["string", "integer"]).pattern("^[a-z]+$")
        assert prop.validate(123) is True
        assert prop.validate("123") is False

    @pytest.mark.unit
    def test_invalid_pattern(self):
        """Patterns are compiled when set."""
        with pytest.raises(ValueError):
            Property.string("code").pattern("([0-9")

    @pytest.mark.unit
    def test_email(self):
        """The email token enables the address check."""
        prop = Property.string("email").rules("email")
        assert prop.validate("ada@example.com") is True
        assert prop.validate("not-an-email") is False
        assert prop.validate("ada@example.com\n") is False

    @pytest.mark.unit
    def test_dot_bounded_pattern(self):
        """A bare pattern bounded by dots is used as written."""
        prop = Property.string("code").pattern(".+.")
        assert prop.get_pattern() == ".+."
        assert prop.validate("ab") is True
        assert prop.validate("a") is False


class TestValidateContext:
    """Tests for required_with / required_without against a context."""

    @pytest.mark.unit
    def test_required_with(self):
        """The value is needed once a listed sibling has a value."""
        prop = Property.string("tax_id").required_with(["is_business"])
        assert prop.validate(None, {"is_business": True}) is False
        assert prop.validate(None, {"is_business": False}) is True
        assert prop.validate("123", {"is_business": True}) is True
        assert prop.validate(None) is True

    @pytest.mark.unit
    def test_required_without(self):
        """The value is needed when every listed sibling is empty."""
        prop = Property.string("phone").required_without(["email", "fax"])
        assert prop.validate(None, {}) is False
        assert prop.validate("", {"email": ""}) is False
        assert prop.validate(None, {"email": "a@b.com"}) is True
        assert prop.validate("555", {}) is True

    @pytest.mark.unit
    def test_other_conditions_ignored(self):
        """Field, pattern and comparison rules are not checked locally."""
        prop = Property.string("tax_id").when("is_business", True, "required")
        assert prop.validate(None, {"is_business": True}) is True

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,empty",
        [
            (None, True),
            (False, True),
            (0, True),
            ("", True),
            ("0", True),
            ([], True),
            ({}, True),
            (True, False),
            (1, False),
            ("no", False),
            ([0], False),
        ],
    )
    def test_is_empty(self, value, empty):
        """Sibling emptiness follows loose truthiness."""
        assert is_empty(value) is empty


class TestValidationMessage:
    """Tests for get_validation_message()."""

    @pytest.mark.unit
    def test_required_message(self):
        """Required properties report the required message."""
        assert (
            Property.string("email").required().get_validation_message()
            == "The email field is required."
        )

    @pytest.mark.unit
    def test_generic_message(self):
        """Optional properties report a generic message."""
        assert Property.string("email").get_validation_message() == "Invalid value for email"


# =============================================================================
# Serialization
# =============================================================================


class TestSerialization:
    """Tests for to_array(), from_array() and clone()."""

    @pytest.mark.unit
    def test_minimal_keys(self):
        """Unset optional keys are omitted."""
        assert Property.string("name").to_array() == {
            "name": "name",
            "type": "string",
            "rules": [],
            "required": False,
        }

    @pytest.mark.unit
    def test_full_keys(self):
        """Every set field is emitted."""
        data = (
            Property.integer("age", "Age in years")
            .default(30)
            .required()
            .format("int32")
            .min(0)
            .max(150)
            .reference("#/defs/age")
            .to_array()
        )
        assert data == {
            "name": "age",
            "type": "integer",
            "description": "Age in years",
            "default": 30,
            "rules": ["required"],
            "required": True,
            "format": "int32",
            "minimum": 0,
            "maximum": 150,
            "$ref": "#/defs/age",
        }

    @pytest.mark.unit
    def test_attributes_merged(self):
        """Attributes land at the top level and can override keys."""
        data = (
            Property.string("status")
            .enum(["draft", "live"])
            .add_attribute("widget", "select")
            .add_attribute("format", "slug")
            .format("ignored")
            .to_array()
        )
        assert data["enum"] == ["draft", "live"]
        assert data["widget"] == "select"
        assert data["format"] == "slug"

    @pytest.mark.unit
    def test_round_trip(self):
        """from_array(to_array()) reproduces the property."""
        prop = (
            Property.string("phone", "Phone number")
            .nullable()
            .pattern("^[0-9 ]+$")
            .required_with(["email"])
            .when("country", "US", "min:10")
            .when_compare("age", ">=", 18, "required")
            .enum(["a", "b"])
        )
        data = prop.to_array()
        assert Property.from_array("phone", data).to_array() == data

    @pytest.mark.unit
    def test_round_trip_nested(self):
        """Nested properties and items survive a round trip."""
        prop = Property.object("order").properties(
            {
                "lines": Property.array("lines").items(Property.integer("qty").min(1)),
                "note": Property.string("note"),
            }
        )
        data = prop.to_array()
        assert Property.from_array("order", data).to_array() == data

    @pytest.mark.unit
    def test_from_array_rejects_closures(self):
        """Closure rules cannot be rebuilt from data."""
        data = Property.string("x").when(lambda r: True, "required").to_array()
        with pytest.raises(ValueError, match="Closure"):
            Property.from_array("x", data)

    @pytest.mark.unit
    def test_clone_is_independent(self):
        """Changes to a clone do not leak back."""
        original = Property.object("meta").properties({"a": Property.string("a")})
        copy = original.clone().rules("required")
        copy.add_property(Property.string("b"))
        assert original.get_rules() == []
        assert list(original.get_properties()) == ["a"]

    @pytest.mark.unit
    def test_conditional_rule_objects(self):
        """get_conditional_rules returns the typed variants."""
        prop = Property.string("x").when(lambda r: True).required_without("y")
        kinds = [type(rule) for rule in prop.get_conditional_rules()]
        assert kinds == [ClosureRule, RequiredWithoutRule]


class TestHelpers:
    """Tests for module helpers."""

    @pytest.mark.unit
    def test_humanize(self):
        """Underscored names become title-cased labels."""
        assert humanize("start_time") == "Start Time"
        assert humanize("name") == "Name"

    @pytest.mark.unit
    def test_rule_value(self):
        """Booleans render as 1/0 and None as empty."""
        assert rule_value(True) == "1"
        assert rule_value(False) == "0"
        assert rule_value(None) == ""
        assert rule_value(7) == "7"
