"""Class-based type declarations.

Types are declared as subclasses of ``ObjectType``, ``Interface``,
``EnumType`` and ``InputObject``; ``spec_from_class`` translates them into
the same ``TypeSpec`` shape the SDL parser produces.

    class Ensemble(ObjectType):
        class Meta:
            interfaces = (GloballyIdentifiable, "NamedEntity")

        name = field(str, null=False)

        @field(str, null=False, upcase=True)
        def upcase_name(self):
            return self.object.name
"""

from __future__ import annotations

import inspect
from collections import deque
from typing import Any, Callable, Iterable, Iterator, Mapping

from graphene.utils.str_converters import to_camel_case

from typed_schema.errors import SchemaError
from typed_schema.inputs import InputObject
from typed_schema.specs import ArgumentSpec, EnumValueSpec, FieldSpec, TypeSpec
from typed_schema.types import UNSET, DecoratorSpec, TypeKind, TypeRef

_PYTHON_SCALARS: dict[type, str] = {
    str: "String",
    int: "Int",
    float: "Float",
    bool: "Boolean",
}


class _Resolvable:
    """Runtime wrapper: declared methods see the domain object and context."""

    def __init__(self, obj: Any, context: Any = None) -> None:
        self.object = obj
        self.context = context


class ObjectType(_Resolvable):
    """Base class for class-declared object types."""


class Interface(_Resolvable):
    """Base class for class-declared interfaces.

    Methods declared here resolve fields of every implementing object type
    that does not provide its own.
    """


class EnumType:
    """Base class for class-declared enums; values are ``value()`` attributes."""


_BASES = (ObjectType, Interface, EnumType, InputObject)


def _decorator_spec(decorator: str | DecoratorSpec | tuple[str, Mapping[str, Any]]) -> DecoratorSpec:
    if isinstance(decorator, DecoratorSpec):
        return decorator
    if isinstance(decorator, str):
        return DecoratorSpec(name=decorator)
    name, params = decorator
    return DecoratorSpec(name=name, params=dict(params))


class Argument:
    """Declared argument of a field or of an ``InputObject`` subclass.

    On an ``InputObject`` subclass the attribute reads the coerced value.
    """

    def __init__(
        self,
        type_: Any,
        name: str | None = None,
        *,
        null: bool = True,
        description: str | None = None,
        default: Any = UNSET,
    ) -> None:
        self.type_ = type_
        self.name = name
        self.null = null
        self.description = description
        self.default = default
        self.attr_name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.attr_name = name

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        if self.name is not None:
            return instance[self.name]
        return instance.value_for_accessor(self.attr_name)

    def to_spec(self, key: str, auto_camelcase: bool = True) -> ArgumentSpec:
        name = self.name or (to_camel_case(key) if auto_camelcase else key)
        return ArgumentSpec(
            name=name,
            type_ref=type_ref_for(self.type_).with_non_null(not self.null),
            description=self.description,
            default_value=self.default,
        )


class Field:
    """Declared field; also usable as a decorator on its resolver method."""

    def __init__(
        self,
        type_: Any,
        name: str | None = None,
        *,
        null: bool = True,
        description: str | None = None,
        method: str | None = None,
        resolver: Callable[..., Any] | None = None,
        args: Mapping[str, Argument] | None = None,
        decorators: Iterable[Any] = (),
        upcase: bool = False,
        deprecation_reason: str | None = None,
    ) -> None:
        self.type_ = type_
        self.name = name
        self.null = null
        self.description = description
        self.method = method
        self.resolver = resolver
        self.args = dict(args or {})
        self.decorators = [_decorator_spec(d) for d in decorators]
        if upcase:
            self.decorators.append(DecoratorSpec(name="upcase"))
        self.deprecation_reason = deprecation_reason
        self.func: Callable[..., Any] | None = None
        self.attr_name: str | None = None

    def __call__(self, func: Callable[..., Any]) -> Field:
        if self.func is not None:
            raise TypeError(f"Field '{self.attr_name or self.name}' already wraps a method")
        self.func = func
        if self.description is None and func.__doc__:
            self.description = inspect.cleandoc(func.__doc__)
        return self

    def __set_name__(self, owner: type, name: str) -> None:
        self.attr_name = name

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None or self.func is None:
            return self
        return self.func.__get__(instance, owner)

    def to_spec(self, key: str, auto_camelcase: bool = True) -> FieldSpec:
        name = self.name or (to_camel_case(key) if auto_camelcase else key)
        return FieldSpec(
            name=name,
            type_ref=type_ref_for(self.type_).with_non_null(not self.null),
            description=self.description,
            arguments=[arg.to_spec(k, auto_camelcase) for k, arg in self.args.items()],
            resolver=self.resolver,
            # A wrapped method is looked up by its attribute name
            method=self.method or (key if self.func is not None else None),
            decorators=list(self.decorators),
            deprecation_reason=self.deprecation_reason,
        )


class EnumValue:
    """Declared enum value; the label defaults to the attribute name."""

    def __init__(
        self,
        description: str | None = None,
        *,
        value: Any = UNSET,
        name: str | None = None,
        deprecation_reason: str | None = None,
    ) -> None:
        self.description = description
        self.value = value
        self.name = name
        self.deprecation_reason = deprecation_reason

    def to_spec(self, key: str) -> EnumValueSpec:
        return EnumValueSpec(
            name=self.name or key,
            value=self.value,
            description=self.description,
            deprecation_reason=self.deprecation_reason,
        )


def field(type_: Any = None, name: str | None = None, **kwargs: Any) -> Field:
    """Declare a field (``name = field(str)``) or wrap a resolver method."""
    return Field(type_, name, **kwargs)


def argument(type_: Any, name: str | None = None, **kwargs: Any) -> Argument:
    """Declare an argument."""
    return Argument(type_, name, **kwargs)


def value(description: str | None = None, **kwargs: Any) -> EnumValue:
    """Declare an enum value."""
    return EnumValue(description, **kwargs)


def is_declared_class(obj: Any) -> bool:
    return isinstance(obj, type) and issubclass(obj, _BASES) and obj not in _BASES


def _meta(cls: type, key: str, default: Any = None) -> Any:
    meta = cls.__dict__.get("Meta")
    return getattr(meta, key, default) if meta is not None else default


def declared_type_name(cls: type) -> str:
    return _meta(cls, "name") or cls.__name__


def type_ref_for(type_: Any) -> TypeRef:
    """Turn a declared field/argument type into a ``TypeRef``.

    Accepts declared classes, type strings, ``str``/``int``/``float``/``bool``
    and one-element lists (list of non-null items).
    """
    if isinstance(type_, TypeRef):
        return type_
    if isinstance(type_, str):
        return TypeRef.parse(type_)
    if isinstance(type_, list):
        if len(type_) != 1:
            raise SchemaError(f"List type must have exactly one item type, got {type_!r}")
        return TypeRef.list_of(type_ref_for(type_[0]).with_non_null())
    if isinstance(type_, type):
        if type_ in _PYTHON_SCALARS:
            return TypeRef(name=_PYTHON_SCALARS[type_])
        if is_declared_class(type_):
            return TypeRef(name=declared_type_name(type_))
    raise SchemaError(f"Cannot use {type_!r} as a type")


def _members(cls: type, kind: type) -> Iterator[tuple[str, Any]]:
    """Declared members of ``kind`` in definition order, base classes first."""
    members: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        for key, attr in vars(klass).items():
            if isinstance(attr, kind):
                members[key] = attr
            elif key in members:
                del members[key]
    return iter(members.items())


def _interface_names(cls: type) -> list[str]:
    return [type_ref_for(iface).named for iface in _meta(cls, "interfaces", ())]


def spec_from_class(cls: type, auto_camelcase: bool = True) -> TypeSpec:
    """Translate a declared class into a ``TypeSpec``."""
    if not is_declared_class(cls):
        raise SchemaError(f"{cls!r} is not a declared type class")

    doc = cls.__dict__.get("__doc__")
    spec = TypeSpec(
        kind=TypeKind.OBJECT,
        name=declared_type_name(cls),
        description=_meta(cls, "description") or (inspect.cleandoc(doc) if doc else None),
    )

    if issubclass(cls, EnumType):
        spec.kind = TypeKind.ENUM
        spec.values = [v.to_spec(key) for key, v in _members(cls, EnumValue)]
    elif issubclass(cls, InputObject):
        spec.kind = TypeKind.INPUT
        spec.arguments = [a.to_spec(key, auto_camelcase) for key, a in _members(cls, Argument)]
        spec.implementation = cls
    else:
        if issubclass(cls, Interface):
            spec.kind = TypeKind.INTERFACE
        else:
            spec.interfaces = _interface_names(cls)
            spec.metadata = dict(_meta(cls, "config", {}))
        spec.fields = [f.to_spec(key, auto_camelcase) for key, f in _members(cls, Field)]
        spec.capabilities = set(_meta(cls, "capabilities", ()))
        spec.implementation = cls
    return spec


def _referenced(type_: Any) -> Iterator[type]:
    if isinstance(type_, list):
        for item in type_:
            yield from _referenced(item)
    elif is_declared_class(type_):
        yield type_


def collect_classes(roots: Iterable[type]) -> list[type]:
    """Declared classes reachable from ``roots`` through class references.

    Types referenced by string are not followed.
    """
    seen: list[type] = []
    queue = deque(roots)
    while queue:
        cls = queue.popleft()
        if cls in seen:
            continue
        seen.append(cls)
        for iface in _meta(cls, "interfaces", ()):
            queue.extend(_referenced(iface))
        for _, f in _members(cls, Field):
            queue.extend(_referenced(f.type_))
            for arg in f.args.values():
                queue.extend(_referenced(arg.type_))
        for _, arg in _members(cls, Argument):
            queue.extend(_referenced(arg.type_))
    return seen
