"""End-to-end tests against the jazz demo schema."""

import logging

import pytest

from typed_schema.config import SchemaSettings
from typed_schema.errors import SchemaError, UnresolvedPolymorphicType
from typed_schema.execution import ResolutionContext, Selection, select
from typed_schema.jazz import build_schema, models, new_store
from typed_schema.schema import Schema


@pytest.fixture
def schema():
    return build_schema()


@pytest.fixture
def store():
    return new_store()


@pytest.fixture
def run(schema, store):
    """Execute a query against the demo schema and a shared store."""

    def _run(*selections, **kwargs):
        kwargs.setdefault("store", store)
        return schema.execute(list(selections), **kwargs)

    return _run


class TestSchemaShape:
    """Tests for the assembled demo schema."""

    def test_sdl_and_class_types_registered(self, schema):
        for name in (
            "NamedEntity", "Instrument", "LegacyInput", "GloballyIdentifiable",
            "Family", "Ensemble", "Musician", "InspectableInput", "EnsembleInput",
            "Query", "Mutation",
        ):
            assert name in schema.registry

    def test_config_metadata(self, schema):
        assert schema.get_type("Ensemble").metadata == {"config": "configged"}

    def test_sdl_type_implements_class_interface(self, schema):
        instrument = schema.get_type("Instrument")
        assert instrument.interfaces == ["NamedEntity", "GloballyIdentifiable"]
        assert instrument.supports_global_id
        assert [f.name for f in instrument.fields] == ["id", "upcasedId", "family", "name"]

    def test_musician_fields_from_interfaces(self, schema):
        names = [f.name for f in schema.get_type("Musician").fields]
        assert names == ["instrument", "id", "upcasedId", "name"]


class TestQueries:
    """Tests for query execution."""

    def test_enum_filter(self, run):
        result = run(select("instruments", select("name"), family="WOODWIND"))
        assert result.errors == []
        assert result.data == {"instruments": [{"name": "Flute"}]}

    def test_symbol_valued_enum_filter(self, run):
        result = run(select("instruments", select("name"), select("family"), family="STRING"))
        assert result.data == {"instruments": [{"name": "Banjo", "family": "STRING"}]}

    def test_deprecated_value_still_accepted(self, run):
        result = run(select("instruments", select("name"), family="DIDGERIDOO"))
        assert result.data == {"instruments": []}

    def test_all_instruments(self, run):
        result = run(select("instruments", select("name"), select("family")))
        families = {i["name"]: i["family"] for i in result.data["instruments"]}
        assert families == {
            "Banjo": "STRING",
            "Flute": "WOODWIND",
            "Trumpet": "BRASS",
            "Piano": "KEYS",
            "Organ": "KEYS",
            "Drum Kit": "PERCUSSION",
        }

    def test_global_ids(self, run):
        result = run(select("instruments", select("id"), select("upcasedId"), family="STRING"))
        assert result.data == {
            "instruments": [{"id": "Instrument/Banjo", "upcasedId": "INSTRUMENT/BANJO"}]
        }

    def test_upcase_decorators(self, run):
        result = run(select("ensembles", select("name"), select("upcaseName"), select("upcasedId")))
        assert result.data == {
            "ensembles": [
                {
                    "name": "Bela Fleck and the Flecktones",
                    "upcaseName": "BELA FLECK AND THE FLECKTONES",
                    "upcasedId": "ENSEMBLE/BELA FLECK AND THE FLECKTONES",
                }
            ]
        }

    def test_find_dispatches_to_concrete_type(self, run):
        result = run(select("find", select("__typename"), select("name"), id="Instrument/Flute"))
        assert result.data == {"find": {"__typename": "Instrument", "name": "Flute"}}

    def test_find_musician(self, run, store):
        store.push("Musician", models.Musician("Victor Wooten"))
        result = run(select("find", select("__typename"), select("id"), id="Musician/Victor Wooten"))
        assert result.data == {
            "find": {"__typename": "Musician", "id": "Musician/Victor Wooten"}
        }

    def test_aliases(self, run):
        result = run(
            select("flute: find", select("name"), id="Instrument/Flute"),
            select("banjo: find", select("name"), id="Instrument/Banjo"),
        )
        assert result.data == {"flute": {"name": "Flute"}, "banjo": {"name": "Banjo"}}

    def test_inspect_input(self, run):
        result = run(
            select(
                "inspectInput",
                input={
                    "stringValue": "ABC",
                    "legacyInput": {"intValue": 4},
                    "nestedInput": {"stringValue": "xyz"},
                },
            ),
            context={"message": "hi"},
        )
        assert result.errors == []
        assert result.data == {
            "inspectInput": [
                "InspectableInput",
                "ABC, hi, 4, (xyz, hi, -, (-))",
                "ABC",
                "ABC",
                "ABC",
            ]
        }

    def test_selection_from_data(self, run):
        selection = Selection.from_data(
            {"name": "instruments", "arguments": {"family": "BRASS"}, "selections": ["name"]}
        )
        assert run(selection).data == {"instruments": [{"name": "Trumpet"}]}

    def test_explicit_context(self, schema, store):
        context = ResolutionContext(schema, store=store, values={"message": "ctx"})
        result = schema.execute(
            select("inspectInput", input={"stringValue": "A"}), context=context
        )
        assert result.data["inspectInput"][1] == "A, ctx, -, (-)"

    def test_id_separator_setting(self, store):
        schema = build_schema(SchemaSettings(id_separator=":"))
        result = schema.execute(
            select("find", select("id"), id="Instrument:Piano"), store=store
        )
        assert result.data == {"find": {"id": "Instrument:Piano"}}


class TestMutations:
    """Tests for mutation execution."""

    def test_add_ensemble(self, schema, run, store):
        before = store.count("Ensemble")
        result = schema.mutate(
            select("addEnsemble", select("id"), select("name"), input={"name": "Spyro Gyra"}),
            store=store,
        )
        assert result.errors == []
        assert store.count("Ensemble") == before + 1

        new_id = result.data["addEnsemble"]["id"]
        assert new_id == "Ensemble/Spyro Gyra"
        found = run(select("find", select("name"), id=new_id))
        assert found.data == {"find": {"name": "Spyro Gyra"}}

    def test_mutation_without_mutation_type(self):
        schema = Schema.build("type Query { a: String }")
        with pytest.raises(SchemaError):
            schema.mutate(select("a"))

    def test_unknown_operation(self, schema):
        with pytest.raises(ValueError):
            schema.execute(select("ensembles"), operation="subscription")


class TestErrors:
    """Tests for error collection and propagation."""

    def test_sibling_fields_still_resolve(self, run):
        result = run(
            select("bad: find", select("name"), id="Nope/1"),
            select("ensembles", select("name")),
        )
        assert result.data == {
            "bad": None,
            "ensembles": [{"name": "Bela Fleck and the Flecktones"}],
        }
        assert len(result.errors) == 1
        assert result.errors[0].path == ["bad"]
        assert result.errors[0].kind == "NotFoundError"

    def test_missing_required_argument(self, run):
        result = run(select("find", select("name")))
        assert result.data == {"find": None}
        assert result.errors[0].kind == "MissingRequiredArgument"

    def test_unknown_enum_label(self, run):
        result = run(select("instruments", select("name"), family="KAZOO"))
        assert result.data == {"instruments": None}
        assert result.errors[0].kind == "UnknownEnumLabel"

    def test_non_null_violation_is_reported_at_the_field(self, run, store):
        ensemble = store.select("Ensemble")[0]
        ensemble.musicians.append(models.Musician("Victor Wooten"))
        result = run(
            select("ensembles", select("musicians", select("name"), select("instrument", select("name"))))
        )
        assert result.data == {
            "ensembles": [{"musicians": [{"name": "Victor Wooten", "instrument": None}]}]
        }
        assert result.errors[0].path == ["ensembles", 0, "musicians", 0, "instrument"]

    def test_unknown_field(self, run):
        result = run(select("nope"))
        assert result.data == {"nope": None}
        assert "nope" in result.errors[0].message

    def test_object_needs_sub_selection(self, run):
        result = run(select("ensembles"))
        assert result.data == {"ensembles": None}
        assert result.errors[0].kind == "FieldError"

    def test_unresolvable_runtime_type_aborts(self, run, store):
        class Kazoo:
            name = "Kazoo"

        store.push("Instrument", Kazoo())
        with pytest.raises(UnresolvedPolymorphicType):
            run(select("find", select("name"), id="Instrument/Kazoo"))

    def test_resolver_exception_is_logged_and_reported(self, caplog):
        def boom(obj, args, ctx):
            raise RuntimeError("kaboom")

        schema = Schema.build("type Query { a: String b: String }", resolvers={"Query": {"a": boom}})
        with caplog.at_level(logging.WARNING, logger="typed_schema.execution"):
            result = schema.execute([select("a"), select("b")], root_value={"b": "ok"})
        assert result.data == {"a": None, "b": "ok"}
        assert result.errors[0].kind == "RuntimeError"
        assert "Query.a" in caplog.text

    def test_resolver_logging_can_be_disabled(self, caplog):
        def boom(obj, args, ctx):
            raise RuntimeError("kaboom")

        schema = Schema.build(
            "type Query { a: String }",
            resolvers={"Query": {"a": boom}},
            settings=SchemaSettings(log_resolver_errors=False),
        )
        with caplog.at_level(logging.WARNING, logger="typed_schema.execution"):
            result = schema.execute(select("a"))
        assert result.errors[0].message == "kaboom"
        assert caplog.text == ""

    def test_result_to_dict(self, run):
        ok = run(select("instruments", select("name"), family="WOODWIND"))
        assert ok.to_dict() == {"data": {"instruments": [{"name": "Flute"}]}}
        bad = run(select("nope"))
        assert bad.to_dict()["errors"] == [
            {"message": "Cannot query field 'nope' on type 'Query'", "path": ["nope"], "kind": "FieldError"}
        ]
