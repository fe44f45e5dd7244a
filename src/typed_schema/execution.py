"""Field resolution over a selection tree."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from typed_schema.enums import canonical_value
from typed_schema.errors import FieldError, SchemaError
from typed_schema.fields import apply_decorators, resolve_base
from typed_schema.identity import GlobalIdentity
from typed_schema.inputs import coerce_arguments
from typed_schema.types import (
    CompositeTypeDefinition,
    EnumTypeDefinition,
    FieldDefinition,
    ListTypeDefinition,
    NonNullTypeDefinition,
    ObjectTypeDefinition,
    ScalarTypeDefinition,
    TypeDefinition,
)

if TYPE_CHECKING:
    from typed_schema.schema import Schema
    from typed_schema.store import DomainStore

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    """One selected field, with its arguments and sub-selections."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    selections: list[Selection] = field(default_factory=list)
    alias: str | None = None

    @property
    def response_key(self) -> str:
        return self.alias or self.name

    @classmethod
    def from_data(cls, data: str | Mapping[str, Any]) -> Selection:
        """Build from a field name or a ``{"name", "alias", "arguments",
        "selections"}`` mapping (the JSON form used by the CLI)."""
        if isinstance(data, str):
            return cls(name=data)
        if not isinstance(data, Mapping) or "name" not in data:
            raise ValueError(f"Invalid selection: {data!r}")
        return cls(
            name=data["name"],
            arguments=dict(data.get("arguments") or {}),
            selections=[cls.from_data(s) for s in data.get("selections") or ()],
            alias=data.get("alias"),
        )


def select(name: str, /, *selections: Selection, **arguments: Any) -> Selection:
    """Shorthand: ``select("instruments", select("name"), family="KEYS")``.

    An alias is written before the field name, ``select("flute: find", id=...)``,
    so every keyword is free to be a field argument.
    """
    alias, _, field_name = name.rpartition(":")
    return Selection(
        name=field_name.strip(),
        arguments=arguments,
        selections=list(selections),
        alias=alias.strip() or None,
    )


@dataclass
class ResolutionError:
    """A field-level error with the response path where it occurred."""

    message: str
    path: list[str | int]
    kind: str = "FieldError"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "path": list(self.path), "kind": self.kind}


@dataclass
class ExecutionResult:
    """Resolved data plus the errors collected along the way."""

    data: dict[str, Any] | None
    errors: list[ResolutionError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"data": self.data}
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        return result


class ResolutionContext(Mapping):
    """Caller-scoped data available to every resolver and input object.

    Behaves as a read-only mapping of the caller's values (``ctx["message"]``;
    ``Symbol`` keys work too) and carries the schema and domain store.
    """

    def __init__(
        self,
        schema: Schema,
        store: DomainStore | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> None:
        self.schema = schema
        self.store = store
        self._values = {canonical_value(k): v for k, v in (values or {}).items()}
        self._identity: GlobalIdentity | None = None

    @property
    def global_identity(self) -> GlobalIdentity:
        if self.store is None:
            raise SchemaError("Global ids need a domain store in the context")
        if self._identity is None:
            self._identity = self.schema.global_identity(self.store)
        return self._identity

    def __getitem__(self, key: Any) -> Any:
        return self._values[canonical_value(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ResolutionContext({self._values!r})"


class Executor:
    """Resolves selections against object types, collecting field errors.

    Schema errors propagate and abort the execution. Field errors, and any
    other exception raised by a resolver, are recorded with their path and
    the field resolves to ``None``.
    """

    def __init__(self, schema: Schema, context: ResolutionContext) -> None:
        self.schema = schema
        self.registry = schema.registry
        self.context = context
        self.errors: list[ResolutionError] = []

    def execute(
        self, root_type: ObjectTypeDefinition, root_value: Any, selections: list[Selection]
    ) -> ExecutionResult:
        data = self.resolve_selections(root_type, root_value, selections, [])
        return ExecutionResult(data=data, errors=list(self.errors))

    def resolve_selections(
        self,
        object_type: CompositeTypeDefinition,
        obj: Any,
        selections: list[Selection],
        path: list[str | int],
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for selection in selections:
            key = selection.response_key
            field_path = path + [key]
            if selection.name == "__typename":
                result[key] = object_type.name
                continue
            field_def = object_type.get_field(selection.name)
            if field_def is None:
                self._report(
                    FieldError(f"Cannot query field '{selection.name}' on type '{object_type.name}'"),
                    field_path,
                )
                result[key] = None
                continue
            result[key] = self.resolve_field(obj, object_type, field_def, selection, field_path)
        return result

    def resolve_field(
        self,
        obj: Any,
        parent_type: CompositeTypeDefinition,
        field_def: FieldDefinition,
        selection: Selection,
        path: list[str | int],
    ) -> Any:
        """Base resolver, then completion, then decorators."""
        owner = f"{parent_type.name}.{field_def.name}"
        try:
            args = coerce_arguments(field_def.arguments, selection.arguments, owner, self.context)
            value = resolve_base(obj, parent_type, field_def, args, self.context, self.registry)
            completed = self.complete_value(field_def.type_def, value, selection, path)
            return apply_decorators(completed, field_def)
        except SchemaError:
            raise
        except FieldError as exc:
            self._report(exc, path)
        except Exception as exc:
            if self.schema.settings.log_resolver_errors:
                logger.warning("Resolver for %s failed: %s", owner, exc, exc_info=True)
            self._report(exc, path)
        return None

    def complete_value(
        self, type_def: TypeDefinition, value: Any, selection: Selection, path: list[str | int]
    ) -> Any:
        """Shape a resolved value according to its declared type."""
        if isinstance(type_def, NonNullTypeDefinition):
            completed = self.complete_value(type_def.of_type, value, selection, path)  # type: ignore[arg-type]
            if completed is None:
                raise FieldError(
                    f"Cannot return null for non-nullable field at {'.'.join(map(str, path))}"
                )
            return completed

        if value is None:
            return None

        if isinstance(type_def, ListTypeDefinition):
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
                raise FieldError(f"Expected a list for '{type_def.name}', got {type(value).__name__}")
            return [
                self.complete_value(type_def.of_type, item, selection, path + [index])  # type: ignore[arg-type]
                for index, item in enumerate(value)
            ]

        if isinstance(type_def, ScalarTypeDefinition):
            return type_def.serialize(value)

        if isinstance(type_def, EnumTypeDefinition):
            return type_def.encode(value)

        if type_def.is_abstract:
            type_def = self.registry.resolve_concrete_type(type_def, value)

        if isinstance(type_def, ObjectTypeDefinition):
            if not selection.selections:
                raise FieldError(
                    f"Field '{selection.name}' of type '{type_def.name}' must have a selection of subfields"
                )
            return self.resolve_selections(type_def, value, selection.selections, path)

        raise SchemaError(f"Cannot complete a value of type '{type_def.name}'")

    def _report(self, exc: Exception, path: list[str | int]) -> None:
        error = ResolutionError(message=str(exc), path=list(path), kind=type(exc).__name__)
        logger.debug("Field error at %s: %s", path, error.message)
        self.errors.append(error)
