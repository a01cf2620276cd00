"""Tests for PropertyBuilder."""

import pytest

from schemacraft.property import Property

from .lib import PropertyBuilder


class TestRegistration:
    """Tests for adding and retrieving properties."""

    @pytest.mark.unit
    def test_add_returns_same_instance(self):
        """add() hands back the registered property for chaining."""
        builder = PropertyBuilder()
        prop = Property.string("name")
        assert builder.add(prop) is prop
        assert builder.get("name") is prop

    @pytest.mark.unit
    def test_typed_shortcuts(self):
        """Shortcuts register properties of the matching type."""
        builder = PropertyBuilder.new()
        builder.string("name").required()
        builder.integer("age").min(18)
        builder.boolean("active")
        builder.time("starts_at")
        builder.duration("timeout")
        schema = builder.to_array()
        assert list(schema) == ["name", "age", "active", "starts_at", "timeout"]
        assert schema["name"]["required"] is True
        assert schema["age"]["minimum"] == 18
        assert schema["starts_at"]["format"] == "time"

    @pytest.mark.unit
    def test_later_property_wins(self):
        """Registering a name twice replaces the first property."""
        builder = PropertyBuilder()
        builder.string("code")
        builder.integer("code")
        assert len(builder) == 1
        assert builder.to_array()["code"]["type"] == "integer"

    @pytest.mark.unit
    def test_container_protocol(self):
        """len, in and iteration reflect the registered properties."""
        builder = PropertyBuilder([Property.string("a"), Property.string("b")])
        assert len(builder) == 2
        assert "a" in builder
        assert "c" not in builder
        assert [prop.get_name() for prop in builder] == ["a", "b"]
        assert repr(builder) == "PropertyBuilder(['a', 'b'])"

    @pytest.mark.unit
    def test_get_missing(self):
        """get() returns None for unknown names."""
        assert PropertyBuilder().get("missing") is None


class TestComposition:
    """Tests for group, list, merge, prefix and validate."""

    @pytest.mark.unit
    def test_group(self):
        """group() builds an object from a callback."""
        builder = PropertyBuilder()
        builder.group("address", lambda b: (b.string("street"), b.string("city")), "Address")
        data = builder.to_array()["address"]
        assert data["type"] == "object"
        assert data["description"] == "Address"
        assert list(data["properties"]) == ["street", "city"]

    @pytest.mark.unit
    def test_list_with_item_schema(self):
        """list() with a property sets it as the item schema."""
        builder = PropertyBuilder()
        builder.list("tags", Property.string("tag"))
        data = builder.to_array()["tags"]
        assert data["type"] == "array"
        assert data["items"]["type"] == "string"

    @pytest.mark.unit
    def test_list_with_callback(self):
        """list() with a callback builds an object item."""
        builder = PropertyBuilder()
        builder.list("lines", lambda b: (b.string("sku").required(), b.integer("qty")))
        items = builder.to_array()["lines"]["items"]
        assert items["type"] == "object"
        assert list(items["properties"]) == ["sku", "qty"]

    @pytest.mark.unit
    def test_merge_clones(self):
        """Merged properties are independent copies."""
        source = PropertyBuilder()
        source.string("email")
        target = PropertyBuilder().merge(source)
        target.get("email").required()
        assert source.get("email").is_required() is False
        assert target.get("email").is_required() is True

    @pytest.mark.unit
    def test_prefix(self):
        """prefix() renames and re-keys every property."""
        builder = PropertyBuilder()
        builder.string("street")
        builder.string("city")
        builder.prefix("billing_")
        assert list(builder.get_properties()) == ["billing_street", "billing_city"]
        assert builder.get("billing_city").get_name() == "billing_city"

    @pytest.mark.unit
    def test_validate_helper(self):
        """validate() returns an unregistered property carrying rules."""
        builder = PropertyBuilder()
        prop = builder.validate("code", "required|size:4", "integer")
        assert prop.get_type() == "integer"
        assert prop.get_rules() == ["required", "size:4"]
        assert "code" not in builder


class TestSerialization:
    """Tests for to_array() and from_array()."""

    @pytest.mark.unit
    def test_to_array_strips_name_and_moves_default(self):
        """Entries drop name and end with default."""
        builder = PropertyBuilder()
        builder.string("status").default("draft").format("slug")
        data = builder.to_array()["status"]
        assert "name" not in data
        assert list(data)[-1] == "default"
        assert data["default"] == "draft"

    @pytest.mark.unit
    def test_from_bare_mapping(self):
        """A name-to-schema mapping is rebuilt."""
        original = PropertyBuilder()
        original.string("name").required()
        original.integer("age").min(18)
        rebuilt = PropertyBuilder.from_array(original.to_array())
        assert rebuilt.to_array() == original.to_array()

    @pytest.mark.unit
    def test_from_document(self):
        """A full document applies its required list."""
        document = {
            "type": "object",
            "properties": {"email": {"type": "string", "rules": ["email"]}},
            "required": ["email"],
        }
        builder = PropertyBuilder.from_array(document)
        email = builder.get("email")
        assert email.is_required() is True
        assert email.get_rules() == ["email", "required"]
