"""Tests for the command line entry point."""

import json

import pytest

from typed_schema.cli import load_factory, main, parse_context
from typed_schema.jazz import build_schema


def _write(tmp_path, data):
    path = tmp_path / "selection.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestHelpers:
    """Tests for argument helpers."""

    def test_load_factory(self):
        assert load_factory("typed_schema.jazz:build_schema") is build_schema

    def test_load_factory_needs_attribute(self):
        with pytest.raises(ValueError):
            load_factory("typed_schema.jazz")

    def test_parse_context(self):
        assert parse_context(["message=hi", "empty="]) == {"message": "hi", "empty": ""}
        with pytest.raises(ValueError):
            parse_context(["novalue"])


class TestTypesCommand:
    """Tests for `typed-schema types`."""

    def test_lists_types(self, capsys):
        assert main(["types"]) == 0
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert "object     Instrument" in lines
        assert "enum       Family" in lines
        assert "scalar     String" in lines

    def test_bad_schema_factory(self, capsys):
        assert main(["types", "--schema", "typed_schema.jazz:nope"]) == 1
        assert "cannot load schema" in capsys.readouterr().err


class TestExecuteCommand:
    """Tests for `typed-schema execute`."""

    def test_query(self, tmp_path, capsys):
        path = _write(
            tmp_path,
            {"name": "instruments", "arguments": {"family": "WOODWIND"}, "selections": ["name"]},
        )
        assert main(["execute", path]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "data": {"instruments": [{"name": "Flute"}]}
        }

    def test_context_values(self, tmp_path, capsys):
        path = _write(
            tmp_path,
            [{"name": "inspectInput", "arguments": {"input": {"stringValue": "A"}}}],
        )
        assert main(["execute", path, "-c", "message=hello"]) == 0
        data = json.loads(capsys.readouterr().out)["data"]
        assert data["inspectInput"][1] == "A, hello, -, (-)"

    def test_mutation(self, tmp_path, capsys):
        path = _write(
            tmp_path,
            {"name": "addEnsemble", "arguments": {"input": {"name": "Spyro Gyra"}}, "selections": ["id"]},
        )
        assert main(["execute", "--mutation", path]) == 0
        assert json.loads(capsys.readouterr().out) == {
            "data": {"addEnsemble": {"id": "Ensemble/Spyro Gyra"}}
        }

    def test_field_errors_exit_nonzero(self, tmp_path, capsys):
        path = _write(tmp_path, {"name": "find", "arguments": {"id": "Nope/1"}, "selections": ["name"]})
        assert main(["execute", path]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["data"] == {"find": None}
        assert output["errors"][0]["kind"] == "NotFoundError"

    def test_missing_file(self, tmp_path, capsys):
        assert main(["execute", str(tmp_path / "missing.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_invalid_selection(self, tmp_path, capsys):
        path = _write(tmp_path, [{"arguments": {}}])
        assert main(["execute", path]) == 1
