#
# Recordify - Schema Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import copy

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from recordify.record import Record
from recordify.schema import AttributeDef, Schema


# Tests ----------------------------------------------------------------------------------------------------------------

class TestAttributeDef:

    @pytest.mark.parametrize("value, expected", [
        pytest.param("string", AttributeDef(type="string"), id="type-name"),
        pytest.param({"model": "Profile"}, AttributeDef(model="Profile"), id="model"),
        pytest.param({"collection": "Post", "via": "author"}, AttributeDef(collection="Post", via="author"),
                     id="collection"),
        pytest.param(AttributeDef(type="integer"), AttributeDef(type="integer"), id="descriptor"),
    ])
    def test_from_any(self, value, expected):
        """Create descriptors from supported inputs."""
        assert AttributeDef.from_any(value) == expected

    def test_from_any_unknown_keys(self):
        """Reject unknown descriptor keys."""
        with pytest.raises(ValueError, match=r"Unknown attribute descriptor keys"):
            AttributeDef.from_any({"model": "Profile", "through": "x"})

    @pytest.mark.parametrize("value", [
        pytest.param(1, id="int"),
        pytest.param(None, id="none"),
        pytest.param(["model"], id="list"),
    ])
    def test_from_any_invalid_type(self, value):
        """Reject unsupported descriptor inputs."""
        with pytest.raises(TypeError, match=r"Attribute descriptor"):
            AttributeDef.from_any(value)

    @pytest.mark.parametrize("kwargs, exc", [
        pytest.param(dict(model=1), TypeError, id="model-int"),
        pytest.param(dict(collection=["Post"]), TypeError, id="collection-list"),
        pytest.param(dict(model=""), ValueError, id="model-empty"),
        pytest.param(dict(type=""), ValueError, id="type-empty"),
    ])
    def test_validation(self, kwargs, exc):
        """Validate descriptor field types and values."""
        with pytest.raises(exc, match=r"AttributeDef\."):
            AttributeDef(**kwargs)

    @pytest.mark.parametrize("attr, is_association, is_collection, target", [
        pytest.param(AttributeDef(type="string"), False, False, None, id="plain"),
        pytest.param(AttributeDef(model="Profile"), True, False, "Profile", id="model"),
        pytest.param(AttributeDef(collection="Post"), True, True, "Post", id="collection"),
        pytest.param(AttributeDef(model="User", collection="Post"), True, True, "Post", id="both"),
    ])
    def test_properties(self, attr, is_association, is_collection, target):
        """Classify descriptors and resolve targets."""
        assert attr.is_association is is_association
        assert attr.is_collection is is_collection
        assert attr.target == target

    @pytest.mark.parametrize("attr, expected", [
        pytest.param(AttributeDef(model="UserProfile"), "userprofile", id="model-lower"),
        pytest.param(AttributeDef(collection="Post"), "post", id="collection-lower"),
        pytest.param(AttributeDef(model="User", collection="Post"), "post", id="collection-wins"),
        pytest.param(AttributeDef(type="string"), "owner", id="fallback-name"),
    ])
    def test_join_name(self, attr, expected):
        """Build join names from targets with attribute name fallback."""
        assert attr.join_name("owner") == expected


class TestSchema:

    def test_registry(self, user_schema):
        """Keep descriptors in declaration order."""
        assert list(user_schema.attributes) == ["id", "name", "profile", "address", "posts"]
        assert user_schema._attributes["posts"] == AttributeDef(collection="Post", via="author")
        assert user_schema.identity == "user"

    def test_registry_read_only(self, user_schema):
        """Reject registry mutation."""
        with pytest.raises(TypeError):
            user_schema._attributes["extra"] = AttributeDef(type="string")

    def test_association_names(self, user_schema):
        """List relation attribute names by kind."""
        assert user_schema.associations == ("profile", "address", "posts")
        assert user_schema.collections == ("posts",)
        assert user_schema.models == ("profile", "address")

    @pytest.mark.parametrize("name, expected", [
        pytest.param("profile", True, id="model"),
        pytest.param("posts", True, id="collection"),
        pytest.param("name", False, id="plain"),
        pytest.param("unknown", False, id="unknown"),
    ])
    def test_is_association(self, user_schema, name, expected):
        """Report relation attributes, plain and unknown names are not."""
        assert user_schema.is_association(name) is expected

    def test_join_name(self, user_schema):
        """Resolve join names by attribute name."""
        assert user_schema.join_name("profile") == "profile"
        assert user_schema.join_name("posts") == "post"
        with pytest.raises(KeyError):
            user_schema.join_name("unknown")

    def test_identity_lowercased(self):
        """Store the type name in lower case."""
        assert Schema(identity="User").identity == "user"
        assert Schema(identity="").identity is None

    def test_repr(self, user_schema):
        """Show identity and attribute names."""
        assert repr(user_schema) == "Schema(identity='user', attributes=['id', 'name', 'profile', 'address', 'posts'])"
        assert repr(Schema()) == "Schema(identity=None, attributes=[])"

    def test_contains(self, user_schema):
        assert "posts" in user_schema
        assert "unknown" not in user_schema

    def test_empty(self):
        """Create an empty registry by default."""
        schema = Schema()
        assert dict(schema.attributes) == {}
        assert schema.identity is None

    @pytest.mark.parametrize("kwargs, match", [
        pytest.param(dict(attributes=["id"]), r"attributes must be a Mapping", id="attributes"),
        pytest.param(dict(attributes={1: "integer"}), r"Attribute name must be a str", id="name"),
        pytest.param(dict(identity=1), r"identity must be a str", id="identity"),
    ])
    def test_invalid(self, kwargs, match):
        """Reject invalid registry input."""
        with pytest.raises(TypeError, match=match):
            Schema(**kwargs)

    def test_copy_returns_self(self, user_schema):
        """Share the read-only schema on copy."""
        assert copy.copy(user_schema) is user_schema
        assert copy.deepcopy(user_schema) is user_schema

    def test_new(self, user_schema):
        """Create records bound to the schema."""

        class User(Record):
            pass

        record = user_schema.new({"id": 1}, associations={"posts": []}, properties={"showJoins": True},
                                 record_class=User)
        assert isinstance(record, User)
        assert record._context is user_schema
        assert record.associations["posts"].value == []
        assert record._properties.show_joins is True

    def test_new_invalid_class(self, user_schema):
        """Reject record classes which are not Record subclasses."""
        with pytest.raises(TypeError, match=r"record_class"):
            user_schema.new({"id": 1}, record_class=dict)
