"""Base field resolvers and field decorators."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Callable, Iterator

from graphene.utils.str_converters import to_snake_case

from typed_schema.errors import DecoratorTypeMismatch, FieldError, SchemaError
from typed_schema.types import (
    CompositeTypeDefinition,
    DecoratorSpec,
    FieldDefinition,
    ObjectTypeDefinition,
    TypeRegistry,
)

DecoratorFunc = Callable[[Any, DecoratorSpec], Any]

_DECORATORS: dict[str, DecoratorFunc] = {}


def register_decorator(name: str, func: DecoratorFunc | None = None) -> Any:
    """Register a field decorator, directly or as a function decorator.

    A decorator receives the value produced so far and its ``DecoratorSpec``
    and returns the new value. It is never called with ``None``; list values
    are decorated element by element.
    """

    def _register(f: DecoratorFunc) -> DecoratorFunc:
        _DECORATORS[name] = f
        return f

    if func is not None:
        return _register(func)
    return _register


def get_decorator(name: str) -> DecoratorFunc | None:
    return _DECORATORS.get(name)


def registered_decorators() -> list[str]:
    return sorted(_DECORATORS)


@register_decorator("upcase")
def upcase(value: Any, spec: DecoratorSpec) -> str:
    if not isinstance(value, str):
        raise DecoratorTypeMismatch(f"upcase expects a string, got {type(value).__name__}")
    return value.upper()


@register_decorator("downcase")
def downcase(value: Any, spec: DecoratorSpec) -> str:
    if not isinstance(value, str):
        raise DecoratorTypeMismatch(f"downcase expects a string, got {type(value).__name__}")
    return value.lower()


def apply_decorators(value: Any, field_def: FieldDefinition) -> Any:
    """Run the field's decorators in declaration order."""
    for spec in field_def.decorators:
        func = _DECORATORS.get(spec.name)
        if func is None:
            raise SchemaError(f"Unknown field decorator '{spec.name}' on field '{field_def.name}'")
        value = _apply(func, value, spec)
    return value


def _apply(func: DecoratorFunc, value: Any, spec: DecoratorSpec) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [_apply(func, item, spec) for item in value]
    return func(value, spec)


def _implementations(
    parent_type: CompositeTypeDefinition, registry: TypeRegistry
) -> Iterator[type]:
    """Declarative classes consulted for base resolvers, own type first."""
    if parent_type.implementation is not None:
        yield parent_type.implementation
    if isinstance(parent_type, ObjectTypeDefinition):
        for name in parent_type.interfaces:
            interface = registry.get(name)
            if isinstance(interface, CompositeTypeDefinition) and interface.implementation:
                yield interface.implementation


def _declares_resolver(implementation: type, method_name: str) -> bool:
    attr = inspect.getattr_static(implementation, method_name, None)
    if attr is None:
        return False
    # Field objects used as method decorators keep the wrapped function
    return inspect.isfunction(attr) or getattr(attr, "func", None) is not None


def read_attribute(obj: Any, names: tuple[str, ...], kwargs: dict[str, Any]) -> Any:
    """Default accessor: read the first matching attribute or mapping key."""
    for name in names:
        if isinstance(obj, Mapping):
            if name not in obj:
                continue
            value = obj[name]
        else:
            try:
                value = getattr(obj, name)
            except AttributeError:
                continue
        if callable(value) and not isinstance(value, type):
            return value(**kwargs)
        return value
    raise FieldError(f"'{type(obj).__name__}' has no attribute '{names[0]}'")


def resolve_base(
    obj: Any,
    parent_type: CompositeTypeDefinition,
    field_def: FieldDefinition,
    args: dict[str, Any],
    context: Any,
    registry: TypeRegistry,
) -> Any:
    """Run the base resolver of a field.

    First match wins: an inline ``resolver(obj, args, context)``, then a
    method on the declarative class of the parent type or of one of its
    interfaces, then an attribute of ``obj``. Methods and callable attributes
    receive the arguments as snake_case keywords.
    """
    if field_def.resolver is not None:
        return field_def.resolver(obj, args, context)

    method_name = field_def.method_name
    kwargs = {to_snake_case(k): v for k, v in args.items()}
    for implementation in _implementations(parent_type, registry):
        if _declares_resolver(implementation, method_name):
            wrapper = implementation(obj, context)
            return getattr(wrapper, method_name)(**kwargs)

    names = (method_name,) if field_def.method else (method_name, field_def.name)
    return read_attribute(obj, names, kwargs)
