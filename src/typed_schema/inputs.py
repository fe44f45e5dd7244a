"""Input coercion: raw keyed data -> validated, immutable input objects."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterator

from typed_schema.enums import canonical_value
from typed_schema.errors import InvalidArgumentType, MissingRequiredArgument, SchemaError
from typed_schema.types import (
    ArgumentDefinition,
    EnumTypeDefinition,
    InputTypeDefinition,
    ListTypeDefinition,
    NonNullTypeDefinition,
    ScalarTypeDefinition,
    TypeDefinition,
)


class InputObject:
    """A coerced input value.

    Every argument is reachable three ways, all yielding the same value:
    ``obj.string_value``, ``obj["stringValue"]`` and
    ``obj[Symbol("stringValue")]``. Arguments that were not supplied and have
    no default read as ``None``. Instances are immutable.

    Subclass it to declare an input type with classes and to add helper
    methods; ``self.context`` gives access to caller-scoped data.
    """

    def __init__(
        self,
        arguments: Mapping[str, Any],
        definition: InputTypeDefinition,
        context: Any = None,
    ) -> None:
        object.__setattr__(self, "_arguments", MappingProxyType(dict(arguments)))
        object.__setattr__(self, "_definition", definition)
        object.__setattr__(self, "_accessors", definition.accessor_names())
        object.__setattr__(self, "_context", context)

    @property
    def arguments(self) -> Mapping[str, Any]:
        """Read-only mapping of exposed argument name -> value."""
        return self._arguments

    @property
    def context(self) -> Any:
        return self._context

    @property
    def definition(self) -> InputTypeDefinition:
        return self._definition

    def value_for_accessor(self, accessor: str) -> Any:
        """Value of the argument whose snake_case accessor is ``accessor``."""
        try:
            return self._arguments[self._accessors[accessor]]
        except KeyError:
            raise AttributeError(
                f"'{self._definition.name}' has no argument accessor '{accessor}'"
            ) from None

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        return self.value_for_accessor(name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"'{type(self).__name__}' is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"'{type(self).__name__}' is immutable")

    def __getitem__(self, key: Any) -> Any:
        return self._arguments[canonical_value(key)]

    def __contains__(self, key: object) -> bool:
        return canonical_value(key) in self._arguments

    def __iter__(self) -> Iterator[str]:
        return iter(self._arguments)

    def __len__(self) -> int:
        return len(self._arguments)

    def keys(self):
        return self._arguments.keys()

    def items(self):
        return self._arguments.items()

    def get(self, key: Any, default: Any = None) -> Any:
        return self._arguments.get(canonical_value(key), default)

    def to_dict(self) -> dict[str, Any]:
        """Plain nested dict of the argument values."""
        return {k: _plain(v) for k, v in self._arguments.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InputObject):
            return NotImplemented
        return self._definition is other._definition and self._arguments == other._arguments

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self._arguments.items())
        return f"{type(self).__name__}({args})"


_METHOD_TYPES = (property, staticmethod, classmethod)


def shadowed_accessors(definition: InputTypeDefinition) -> list[str]:
    """Accessor names of ``definition`` that attribute access cannot reach.

    Methods and properties of the input class win over ``__getattr__``, and
    names starting with an underscore are never looked up as arguments.
    """
    input_class = definition.input_class or InputObject
    shadowed = []
    for accessor in definition.accessor_names():
        member = inspect.getattr_static(input_class, accessor, None)
        is_method = inspect.isfunction(member) or isinstance(member, _METHOD_TYPES)
        if accessor.startswith("_") or is_method:
            shadowed.append(accessor)
    return shadowed


def _plain(value: Any) -> Any:
    if isinstance(value, InputObject):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def coerce_value(value: Any, type_def: TypeDefinition, context: Any = None) -> Any:
    """Coerce one raw value against an input type."""
    if isinstance(type_def, NonNullTypeDefinition):
        if value is None:
            raise InvalidArgumentType(f"Expected non-null value of type '{type_def.name}'")
        return coerce_value(value, type_def.of_type, context)  # type: ignore[arg-type]

    if value is None:
        return None

    if isinstance(type_def, ListTypeDefinition):
        # A single value is accepted where a list is expected
        items = value if isinstance(value, (list, tuple)) else [value]
        return [coerce_value(item, type_def.of_type, context) for item in items]  # type: ignore[arg-type]

    if isinstance(type_def, ScalarTypeDefinition):
        return type_def.parse(value)

    if isinstance(type_def, EnumTypeDefinition):
        if not isinstance(value, str):
            raise InvalidArgumentType(
                f"Enum '{type_def.name}' expects a label string, got {value!r}"
            )
        return type_def.decode(value)

    if isinstance(type_def, InputTypeDefinition):
        return coerce_input(value, type_def, context)

    raise SchemaError(f"'{type_def.name}' is not an input type")


def coerce_input(
    raw: Any, definition: InputTypeDefinition, context: Any = None
) -> InputObject:
    """Validate ``raw`` against ``definition`` and build its input object.

    Nested input arguments, including ones typed as ``definition`` itself, are
    coerced recursively; recursion ends where the data supplies null.
    """
    if isinstance(raw, InputObject) and raw.definition is definition:
        return raw
    if not isinstance(raw, Mapping):
        raise InvalidArgumentType(
            f"Input '{definition.name}' expects a mapping, got {type(raw).__name__}"
        )
    values = _coerce_mapping(raw, definition.arguments, definition.name, context)
    for arg in definition.arguments:
        values.setdefault(arg.name, None)
    input_class = definition.input_class or InputObject
    return input_class(values, definition, context)


def coerce_arguments(
    arguments: list[ArgumentDefinition],
    raw: Mapping[str, Any] | None,
    owner: str,
    context: Any = None,
) -> dict[str, Any]:
    """Coerce field arguments; only supplied or defaulted arguments appear."""
    return _coerce_mapping(raw or {}, arguments, owner, context)


def _coerce_mapping(
    raw: Mapping[str, Any],
    arguments: list[ArgumentDefinition],
    owner: str,
    context: Any,
) -> dict[str, Any]:
    supplied = {canonical_value(k): v for k, v in raw.items()}
    known = {arg.name for arg in arguments}
    unknown = [k for k in supplied if k not in known]
    if unknown:
        raise InvalidArgumentType(f"Unknown argument(s) {unknown} for '{owner}'")

    values: dict[str, Any] = {}
    for arg in arguments:
        if arg.name in supplied:
            values[arg.name] = coerce_value(supplied[arg.name], arg.type_def, context)
        elif arg.has_default:
            values[arg.name] = coerce_value(arg.default_value, arg.type_def, context)
        elif arg.is_required:
            raise MissingRequiredArgument(owner, arg.name)
    return values
