"""Tests for enum value equality, encoding and decoding."""

import enum

import pytest

from typed_schema.enums import Symbol, canonical_value, values_equal
from typed_schema.errors import FieldError, UnknownEnumLabel
from typed_schema.jazz import build_schema
from typed_schema.types import EnumTypeDefinition, EnumValueDefinition


class Color(enum.Enum):
    RED = 1
    GREEN = 2


@pytest.fixture
def family():
    """The Family enum from the demo schema."""
    return build_schema().get_type("Family")


class TestSymbol:
    """Tests for Symbol tokens."""

    def test_equal_to_plain_string(self):
        assert Symbol("str") == "str"
        assert "str" == Symbol("str")
        assert hash(Symbol("str")) == hash("str")

    def test_repr(self):
        assert repr(Symbol("WOODWIND")) == ":WOODWIND"

    def test_str_is_plain_text(self):
        assert str(Symbol("BRASS")) == "BRASS"


class TestValuesEqual:
    """Tests for the canonical comparison of internal values."""

    def test_symbol_and_string(self):
        assert values_equal(Symbol("KEYS"), "KEYS")

    def test_stdlib_enum_member_compares_by_name(self):
        assert values_equal(Color.RED, "RED")
        assert values_equal(Color.RED, Symbol("RED"))
        assert not values_equal(Color.RED, 1)

    def test_other_values(self):
        assert values_equal(3, 3)
        assert not values_equal(3, "3")

    def test_canonical_value_returns_plain_str(self):
        assert type(canonical_value(Symbol("x"))) is str


class TestEnumTypeDefinition:
    """Tests for label/value mapping."""

    def test_decode(self, family):
        assert family.decode("STRING") == "str"
        assert isinstance(family.decode("STRING"), Symbol)
        assert family.decode("KEYS") == "KEYS"

    def test_decode_unknown_label(self, family):
        with pytest.raises(UnknownEnumLabel) as excinfo:
            family.decode("KAZOO")
        assert excinfo.value.enum_name == "Family"
        assert isinstance(excinfo.value, FieldError)

    def test_encode_either_spelling(self, family):
        assert family.encode(Symbol("str")) == "STRING"
        assert family.encode("str") == "STRING"
        assert family.encode(Symbol("WOODWIND")) == family.encode("WOODWIND") == "WOODWIND"

    def test_encode_unknown_value(self, family):
        with pytest.raises(UnknownEnumLabel):
            family.encode("TUBA")

    def test_encode_decode(self, family):
        for value in family.values:
            assert family.encode(family.decode(value.name)) == value.name

    def test_deprecation(self, family):
        deprecated = family.deprecated_values()
        assert [v.name for v in deprecated] == ["DIDGERIDOO"]
        assert deprecated[0].deprecation_reason == "Merged into BRASS"
        assert not family.get_value("BRASS").is_deprecated

    def test_descriptions(self, family):
        assert family.description == "Groups of musical instruments"
        assert family.get_value("KEYS").description == "Neither here nor there, really"

    def test_first_equal_value_wins(self):
        enum_def = EnumTypeDefinition(
            name="Size",
            values=[
                EnumValueDefinition(name="SMALL", value="s"),
                EnumValueDefinition(name="TINY", value=Symbol("s")),
            ],
        )
        assert enum_def.encode("s") == "SMALL"

    def test_stdlib_enum_internal_values(self):
        enum_def = EnumTypeDefinition(
            name="Color",
            values=[EnumValueDefinition(name=m.name, value=m) for m in Color],
        )
        assert enum_def.decode("GREEN") is Color.GREEN
        assert enum_def.encode(Color.GREEN) == "GREEN"
        assert enum_def.encode("RED") == "RED"
