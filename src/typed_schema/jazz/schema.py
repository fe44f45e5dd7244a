"""Jazz demo schema.

SDL-declared and class-declared types live side by side and reference each
other: ``Instrument`` is declared in SDL but implements the class-declared
``GloballyIdentifiable``, and class-declared ``Musician`` returns an
``Instrument``.
"""

from __future__ import annotations

from typing import Any

from typed_schema.config import SchemaSettings
from typed_schema.declarative import EnumType, Interface, ObjectType, argument, field, value
from typed_schema.enums import Symbol, values_equal
from typed_schema.identity import to_global_id
from typed_schema.inputs import InputObject
from typed_schema.jazz import models
from typed_schema.schema import Schema
from typed_schema.types import GLOBAL_ID_CAPABILITY

SDL = '''
"Something with a name"
interface NamedEntity {
  name: String!
}

"A musical instrument"
type Instrument implements NamedEntity & GloballyIdentifiable {
  "A unique identifier for this object"
  id: ID!
  upcasedId: ID!
  family: Family!
}

input LegacyInput {
  intValue: Int!
}
'''


class GloballyIdentifiable(Interface):
    """A fetchable object in the system"""

    class Meta:
        capabilities = (GLOBAL_ID_CAPABILITY,)

    @field("ID", null=False)
    def id(self):
        """A unique identifier for this object"""
        return to_global_id(self.object, self.context.schema.settings.id_separator)

    upcased_id = field("ID", null=False, upcase=True, method="id")


class Family(EnumType):
    """Groups of musical instruments"""

    STRING = value("Makes a sound by vibrating strings", value=Symbol("str"))
    WOODWIND = value("Makes a sound by vibrating air in a pipe", value=Symbol("WOODWIND"))
    BRASS = value("Makes a sound by amplifying the sound of buzzing lips", value=Symbol("BRASS"))
    PERCUSSION = value("Makes a sound by hitting something that vibrates")
    KEYS = value("Neither here nor there, really")
    DIDGERIDOO = value(
        "Makes a sound by amplifying the sound of buzzing lips",
        deprecation_reason="Merged into BRASS",
    )


class Ensemble(ObjectType):
    """A group of musicians playing together"""

    class Meta:
        interfaces = (GloballyIdentifiable, "NamedEntity")
        config = {"config": "configged"}

    name = field(str, null=False)
    musicians = field("[Jazz::Musician!]", null=False)

    @field(str, null=False, upcase=True)
    def upcase_name(self):
        # upcased by the field decorator
        return self.object.name


class Musician(ObjectType):
    """Someone who plays an instrument"""

    class Meta:
        interfaces = (GloballyIdentifiable, "NamedEntity")

    instrument = field("Instrument", null=False)


class InspectableInput(InputObject):
    string_value = argument(str, null=False)
    nested_input = argument("InspectableInput")
    legacy_input = argument("LegacyInput")

    def helper(self) -> str:
        message = self.context.get("message") if self.context is not None else None
        legacy = self.legacy_input
        nested = self.nested_input
        return ", ".join(
            [
                self.arguments["stringValue"],
                "" if message is None else str(message),
                str(legacy.int_value) if legacy is not None else "-",
                f"({nested.helper() if nested is not None else '-'})",
            ]
        )


class EnsembleInput(InputObject):
    name = argument(str, null=False)


class Query(ObjectType):
    @field([Ensemble], null=False)
    def ensembles(self):
        return self.context.store.select("Ensemble")

    @field(GloballyIdentifiable, args={"id": argument("ID", null=False)})
    def find(self, id):
        return self.context.global_identity.find(id)

    @field(["Instrument"], null=False, args={"family": argument(Family)})
    def instruments(self, family=None):
        instruments = self.context.store.select("Instrument")
        if family is not None:
            instruments = [i for i in instruments if values_equal(i.family, family)]
        return instruments

    @field([str], null=False, args={"input": argument(InspectableInput, null=False)})
    def inspect_input(self, input):
        return [
            type(input).__name__,
            input.helper(),
            input.string_value,
            input["stringValue"],
            input[Symbol("stringValue")],
        ]


class Mutation(ObjectType):
    @field(Ensemble, null=False, args={"input": argument(EnsembleInput, null=False)})
    def add_ensemble(self, input):
        return self.context.store.push("Ensemble", models.Ensemble(input.name))


def _instrument_id(obj: Any, args: dict[str, Any], ctx: Any) -> str:
    return to_global_id(obj, ctx.schema.settings.id_separator)


RESOLVERS = {
    "Instrument": {
        "id": _instrument_id,
        "upcasedId": lambda obj, args, ctx: _instrument_id(obj, args, ctx).upper(),
    },
}


def build_schema(settings: SchemaSettings | None = None) -> Schema:
    """Build the demo schema."""
    return Schema.build(
        SDL,
        types=[Musician],
        resolvers=RESOLVERS,
        query=Query,
        mutation=Mutation,
        settings=settings,
    )
