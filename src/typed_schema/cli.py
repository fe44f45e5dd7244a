"""Command line entry point: list a schema's types or execute a selection."""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

from typed_schema.errors import SchemaError
from typed_schema.execution import Selection

DEFAULT_SCHEMA = "typed_schema.jazz:build_schema"
DEFAULT_STORE = "typed_schema.jazz:new_store"


def load_factory(target: str) -> Callable[[], Any]:
    """Resolve ``"package.module:attribute"`` to the attribute."""
    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got '{target}'")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def parse_context(pairs: list[str]) -> dict[str, str]:
    """``["message=hi"]`` -> ``{"message": "hi"}``."""
    values = {}
    for pair in pairs:
        key, sep, val = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
        values[key] = val
    return values


def read_selections(source: str) -> list[Selection]:
    """Read selections from a JSON file (``-`` for stdin)."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        data = json.loads(Path(source).read_text())
    if isinstance(data, (str, dict)):
        data = [data]
    return [Selection.from_data(item) for item in data]


def run_types(schema: Any) -> int:
    for name in schema.list_types():
        type_def = schema.get_type(name)
        print(f"{type_def.kind.value:<10} {name}")
    return 0


def run_execute(schema: Any, args: argparse.Namespace) -> int:
    try:
        selections = read_selections(args.selection)
        values = parse_context(args.context)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    store = load_factory(args.store)()
    operation = "mutation" if args.mutation else "query"
    try:
        result = schema.execute(selections, context=values, store=store, operation=operation)
    except SchemaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict(), indent=2, default=str))
    return 1 if result.errors else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        prog="typed-schema",
        description="Inspect typed schemas and resolve field selections against them",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = arg_parser.add_subparsers(dest="command", required=True)

    types_parser = subparsers.add_parser("types", help="List registered types")
    types_parser.add_argument(
        "--schema",
        default=DEFAULT_SCHEMA,
        help="Schema factory as module:attribute (default: %(default)s)",
    )

    execute_parser = subparsers.add_parser("execute", help="Execute a JSON selection")
    execute_parser.add_argument(
        "selection",
        help="Path to a JSON selection file, or '-' for stdin",
    )
    execute_parser.add_argument(
        "--schema",
        default=DEFAULT_SCHEMA,
        help="Schema factory as module:attribute (default: %(default)s)",
    )
    execute_parser.add_argument(
        "--store",
        default=DEFAULT_STORE,
        help="Store factory as module:attribute (default: %(default)s)",
    )
    execute_parser.add_argument(
        "--mutation",
        action="store_true",
        help="Resolve against the mutation root type",
    )
    execute_parser.add_argument(
        "-c", "--context",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Context value available to resolvers (repeatable)",
    )

    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        schema = load_factory(args.schema)()
    except (ImportError, AttributeError, ValueError, SchemaError, SyntaxError) as exc:
        print(f"Error: cannot load schema: {exc}", file=sys.stderr)
        return 1

    if args.command == "types":
        return run_types(schema)
    return run_execute(schema, args)


if __name__ == "__main__":
    sys.exit(main())
