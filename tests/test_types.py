"""Tests for type definitions, type references and the type registry."""

import pytest

from typed_schema.errors import DuplicateTypeName, UnknownType, UnresolvedPolymorphicType
from typed_schema.jazz import build_schema, models
from typed_schema.types import (
    GLOBAL_ID_CAPABILITY,
    InterfaceTypeDefinition,
    ListTypeDefinition,
    NonNullTypeDefinition,
    ObjectTypeDefinition,
    ScalarTypeDefinition,
    TypeKind,
    TypeRef,
    TypeRegistry,
    UnionTypeDefinition,
    runtime_type_name,
)


@pytest.fixture
def registry():
    """Registry with a small interface hierarchy."""
    reg = TypeRegistry()
    reg.register(InterfaceTypeDefinition(name="NamedEntity"))
    reg.register(ObjectTypeDefinition(name="Musician", interfaces=["NamedEntity"]))
    reg.register(ObjectTypeDefinition(name="Ensemble", interfaces=["NamedEntity"]))
    reg.register(ObjectTypeDefinition(name="Venue"))
    reg.register(UnionTypeDefinition(name="Performer", possible_types=["Musician", "Ensemble"]))
    return reg


class TestTypeRef:
    """Tests for parsing type reference strings."""

    def test_named(self):
        ref = TypeRef.parse("Musician")
        assert ref.name == "Musician"
        assert not ref.non_null
        assert not ref.is_list

    def test_non_null_list_of_non_null(self):
        ref = TypeRef.parse("[Musician!]!")
        assert ref.non_null
        assert ref.is_list
        assert ref.of_type.non_null
        assert ref.named == "Musician"
        assert str(ref) == "[Musician!]!"

    def test_qualified_names_keep_last_segment(self):
        assert TypeRef.parse("Jazz::Musician").name == "Musician"
        assert TypeRef.parse("jazz.models.Musician").name == "Musician"

    def test_invalid_reference(self):
        with pytest.raises(ValueError):
            TypeRef.parse("[Musician")

    def test_with_non_null(self):
        ref = TypeRef(name="Int").with_non_null()
        assert ref.non_null
        assert str(ref.with_non_null(False)) == "Int"


class TestTypeRegistry:
    """Tests for registration and lookup."""

    def test_builtin_scalars(self):
        reg = TypeRegistry()
        for name in ("String", "Int", "Float", "Boolean", "ID"):
            assert isinstance(reg.get(name), ScalarTypeDefinition)

    def test_duplicate_name(self, registry):
        with pytest.raises(DuplicateTypeName) as excinfo:
            registry.register(ObjectTypeDefinition(name="Musician"))
        assert excinfo.value.name == "Musician"

    def test_duplicate_name_is_value_error(self, registry):
        with pytest.raises(ValueError):
            registry.register(ObjectTypeDefinition(name="Venue"))

    def test_lookup_unknown(self, registry):
        assert registry.get("Nope") is None
        with pytest.raises(UnknownType):
            registry.lookup("Nope")

    def test_stub_is_populated_in_place(self):
        reg = TypeRegistry()
        stub = reg.register_stub("Node", ObjectTypeDefinition)
        stub.interfaces = ["X"]
        assert reg.lookup("Node") is stub
        assert reg.lookup("Node").interfaces == ["X"]

    def test_wrappers_are_cached_and_not_listed(self, registry):
        musician = registry.lookup("Musician")
        assert registry.list_of(musician) is registry.list_of(musician)
        assert registry.non_null(musician) is registry.non_null(musician)
        assert "[Musician]" not in registry.list_types()
        assert "Musician!" not in registry

    def test_non_null_is_idempotent(self, registry):
        wrapped = registry.non_null(registry.lookup("Venue"))
        assert registry.non_null(wrapped) is wrapped

    def test_resolve_ref(self, registry):
        resolved = registry.resolve_ref(TypeRef.parse("[Musician!]!"))
        assert isinstance(resolved, NonNullTypeDefinition)
        assert isinstance(resolved.of_type, ListTypeDefinition)
        assert resolved.named_type is registry.lookup("Musician")
        assert resolved.kind is TypeKind.NON_NULL

    def test_find_implementing_types(self, registry):
        names = [t.name for t in registry.find_implementing_types("NamedEntity")]
        assert names == ["Musician", "Ensemble"]

    def test_possible_types(self, registry):
        union = registry.lookup("Performer")
        assert [t.name for t in registry.possible_types(union)] == ["Musician", "Ensemble"]
        venue = registry.lookup("Venue")
        assert registry.possible_types(venue) == [venue]

    def test_abstract_kinds(self, registry):
        assert registry.lookup("NamedEntity").is_abstract
        assert registry.lookup("Performer").is_abstract
        assert not registry.lookup("Venue").is_abstract


class TestPolymorphicDispatch:
    """Tests for mapping runtime objects to concrete object types."""

    def test_runtime_type_name_strips_qualifiers(self):
        assert runtime_type_name(models.Musician("Victor")) == "Musician"

    def test_interface_dispatch(self, registry):
        concrete = registry.resolve_concrete_type(
            registry.lookup("NamedEntity"), models.Musician("Victor Wooten")
        )
        assert concrete is registry.lookup("Musician")

    def test_union_dispatch(self, registry):
        concrete = registry.resolve_concrete_type(
            registry.lookup("Performer"), models.Ensemble("Flecktones")
        )
        assert concrete.name == "Ensemble"

    def test_unregistered_runtime_type(self, registry):
        with pytest.raises(UnresolvedPolymorphicType) as excinfo:
            registry.resolve_concrete_type(registry.lookup("NamedEntity"), object())
        assert excinfo.value.abstract_name == "NamedEntity"
        assert excinfo.value.runtime_name == "object"

    def test_registered_but_not_implementing(self, registry):
        class Venue:
            pass

        with pytest.raises(UnresolvedPolymorphicType):
            registry.resolve_concrete_type(registry.lookup("NamedEntity"), Venue())

    def test_capability_propagates_to_implementers(self):
        schema = build_schema()
        identifiable = schema.registry.types_with_capability(GLOBAL_ID_CAPABILITY)
        names = {t.name for t in identifiable}
        assert {"GloballyIdentifiable", "Instrument", "Ensemble", "Musician"} <= names
        assert not schema.get_type("Query").supports_global_id
