"""Type definitions and the type registry."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, ClassVar

from graphene.utils.str_converters import to_snake_case

from typed_schema.enums import canonical_value, values_equal
from typed_schema.errors import (
    DuplicateTypeName,
    FieldError,
    InvalidArgumentType,
    UnknownEnumLabel,
    UnknownType,
    UnresolvedPolymorphicType,
)

logger = logging.getLogger(__name__)

# Capability tag carried by types whose objects can be fetched by global id
GLOBAL_ID_CAPABILITY = "global_id"

_NAME = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")


class TypeKind(Enum):
    """Kinds of named types."""

    SCALAR = "scalar"
    OBJECT = "object"
    INTERFACE = "interface"
    UNION = "union"
    ENUM = "enum"
    INPUT = "input"
    LIST = "list"
    NON_NULL = "non_null"


class _Unset:
    """Marker for "no default value" (``None`` is a valid default)."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class TypeRef:
    """Unresolved reference to a type, possibly wrapped as list and/or non-null.

    Named references keep only the last segment of a qualified name, so
    ``Jazz::Musician`` and ``jazz.models.Musician`` both refer to ``Musician``.
    """

    name: str | None = None
    of_type: TypeRef | None = None  # set for list references
    non_null: bool = False

    @classmethod
    def parse(cls, text: str) -> TypeRef:
        """Parse ``"[Musician!]!"``-style type strings."""
        text = text.strip()
        non_null = text.endswith("!")
        if non_null:
            text = text[:-1].rstrip()
        if text.startswith("[") and text.endswith("]"):
            return cls(of_type=cls.parse(text[1:-1]), non_null=non_null)
        name = re.split(r"::|\.", text)[-1]
        if not _NAME.fullmatch(name):
            raise ValueError(f"Invalid type reference {text!r}")
        return cls(name=name, non_null=non_null)

    @classmethod
    def list_of(cls, item: TypeRef, non_null: bool = False) -> TypeRef:
        return cls(of_type=item, non_null=non_null)

    def with_non_null(self, non_null: bool = True) -> TypeRef:
        return replace(self, non_null=non_null)

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def named(self) -> str:
        """Name of the innermost named type."""
        return self.of_type.named if self.of_type is not None else self.name  # type: ignore[return-value]

    def __str__(self) -> str:
        inner = f"[{self.of_type}]" if self.of_type is not None else str(self.name)
        return f"{inner}!" if self.non_null else inner


@dataclass(eq=False, repr=False)
class TypeDefinition:
    """Base class for all type definitions."""

    kind: ClassVar[TypeKind]

    name: str
    description: str | None = None

    @property
    def named_type(self) -> TypeDefinition:
        """The definition with list/non-null wrappers removed."""
        return self

    @property
    def is_abstract(self) -> bool:
        return self.kind in (TypeKind.INTERFACE, TypeKind.UNION)

    @property
    def is_input_type(self) -> bool:
        return self.named_type.kind in (TypeKind.SCALAR, TypeKind.ENUM, TypeKind.INPUT)

    @property
    def is_output_type(self) -> bool:
        return self.named_type.kind is not TypeKind.INPUT

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


@dataclass(eq=False, repr=False)
class ListTypeDefinition(TypeDefinition):
    """``[of_type]``"""

    kind: ClassVar[TypeKind] = TypeKind.LIST

    of_type: TypeDefinition | None = None

    @property
    def named_type(self) -> TypeDefinition:
        return self.of_type.named_type  # type: ignore[union-attr]


@dataclass(eq=False, repr=False)
class NonNullTypeDefinition(TypeDefinition):
    """``of_type!``"""

    kind: ClassVar[TypeKind] = TypeKind.NON_NULL

    of_type: TypeDefinition | None = None

    @property
    def named_type(self) -> TypeDefinition:
        return self.of_type.named_type  # type: ignore[union-attr]


def _identity(value: Any) -> Any:
    return value


@dataclass(eq=False, repr=False)
class ScalarTypeDefinition(TypeDefinition):
    """Leaf type with serialize (output) and parse (input) functions.

    Both functions raise ``FieldError`` (or a subclass) for values they
    cannot represent.
    """

    kind: ClassVar[TypeKind] = TypeKind.SCALAR

    serialize: Callable[[Any], Any] = _identity
    parse: Callable[[Any], Any] = _identity


def _serialize_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise FieldError(f"String cannot represent value {value!r}")


def _parse_string(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentType(f"String cannot represent a non string value: {value!r}")
    return str(value)


def _serialize_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise FieldError(f"Int cannot represent value {value!r}")


def _parse_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentType(f"Int cannot represent non-integer value: {value!r}")
    return value


def _serialize_float(value: Any) -> float:
    if isinstance(value, (int, float)):
        return float(value)
    raise FieldError(f"Float cannot represent value {value!r}")


def _parse_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentType(f"Float cannot represent non numeric value: {value!r}")
    return float(value)


def _serialize_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise FieldError(f"Boolean cannot represent value {value!r}")


def _parse_boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidArgumentType(f"Boolean cannot represent a non boolean value: {value!r}")
    return value


def _serialize_id(value: Any) -> str:
    if isinstance(value, str) or (isinstance(value, int) and not isinstance(value, bool)):
        return str(value)
    raise FieldError(f"ID cannot represent value {value!r}")


def _parse_id(value: Any) -> str:
    if isinstance(value, str) or (isinstance(value, int) and not isinstance(value, bool)):
        return str(value)
    raise InvalidArgumentType(f"ID cannot represent value: {value!r}")


BUILTIN_SCALARS: dict[str, tuple[Callable[[Any], Any], Callable[[Any], Any]]] = {
    "String": (_serialize_string, _parse_string),
    "Int": (_serialize_int, _parse_int),
    "Float": (_serialize_float, _parse_float),
    "Boolean": (_serialize_boolean, _parse_boolean),
    "ID": (_serialize_id, _parse_id),
}


@dataclass
class DecoratorSpec:
    """A named post-processing transform attached to a field."""

    name: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class ArgumentDefinition:
    """An argument of a field, or a field of an input type."""

    name: str
    type_def: TypeDefinition
    description: str | None = None
    default_value: Any = UNSET

    @property
    def has_default(self) -> bool:
        return self.default_value is not UNSET

    @property
    def nullable(self) -> bool:
        return self.type_def.kind is not TypeKind.NON_NULL

    @property
    def is_required(self) -> bool:
        return not self.nullable and not self.has_default


@dataclass
class FieldDefinition:
    """A named, typed, resolvable member of an object or interface type."""

    name: str
    type_def: TypeDefinition
    description: str | None = None
    arguments: list[ArgumentDefinition] = field(default_factory=list)
    resolver: Callable[..., Any] | None = None
    method: str | None = None
    decorators: list[DecoratorSpec] = field(default_factory=list)
    deprecation_reason: str | None = None

    @property
    def method_name(self) -> str:
        """Python-side name used to look up the base resolver."""
        return self.method or to_snake_case(self.name)

    def get_argument(self, name: str) -> ArgumentDefinition | None:
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None


@dataclass(eq=False, repr=False)
class CompositeTypeDefinition(TypeDefinition):
    """Shared shape of object and interface types."""

    fields: list[FieldDefinition] = field(default_factory=list)
    capabilities: frozenset[str] = frozenset()
    # Declarative class whose methods act as base resolvers
    implementation: type | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def get_field(self, name: str) -> FieldDefinition | None:
        """Get a field by exposed name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def supports_global_id(self) -> bool:
        return GLOBAL_ID_CAPABILITY in self.capabilities


@dataclass(eq=False, repr=False)
class ObjectTypeDefinition(CompositeTypeDefinition):
    """Concrete object type."""

    kind: ClassVar[TypeKind] = TypeKind.OBJECT

    interfaces: list[str] = field(default_factory=list)


@dataclass(eq=False, repr=False)
class InterfaceTypeDefinition(CompositeTypeDefinition):
    """Abstract type implemented by object types."""

    kind: ClassVar[TypeKind] = TypeKind.INTERFACE


@dataclass(eq=False, repr=False)
class UnionTypeDefinition(TypeDefinition):
    """Abstract type listing its member object types."""

    kind: ClassVar[TypeKind] = TypeKind.UNION

    possible_types: list[str] = field(default_factory=list)


@dataclass
class EnumValueDefinition:
    """One value of an enum: exposed label plus internal value."""

    name: str
    value: Any = None
    description: str | None = None
    deprecation_reason: str | None = None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None


@dataclass(eq=False, repr=False)
class EnumTypeDefinition(TypeDefinition):
    """Enum type: bidirectional mapping between labels and internal values."""

    kind: ClassVar[TypeKind] = TypeKind.ENUM

    values: list[EnumValueDefinition] = field(default_factory=list)

    def get_value(self, label: str) -> EnumValueDefinition | None:
        key = canonical_value(label)
        for v in self.values:
            if v.name == key:
                return v
        return None

    def decode(self, label: Any) -> Any:
        """Exposed label -> internal value."""
        value = self.get_value(label) if isinstance(label, str) else None
        if value is None:
            raise UnknownEnumLabel(self.name, label)
        return value.value

    def encode(self, internal: Any) -> str:
        """Internal value -> exposed label; the first equal value wins."""
        for v in self.values:
            if values_equal(v.value, internal):
                return v.name
        raise UnknownEnumLabel(self.name, internal)

    def deprecated_values(self) -> list[EnumValueDefinition]:
        return [v for v in self.values if v.is_deprecated]


@dataclass(eq=False, repr=False)
class InputTypeDefinition(TypeDefinition):
    """Structured argument type; may reference itself."""

    kind: ClassVar[TypeKind] = TypeKind.INPUT

    arguments: list[ArgumentDefinition] = field(default_factory=list)
    # Class instantiated by coercion (``InputObject`` when None)
    input_class: type | None = None

    def get_argument(self, name: str) -> ArgumentDefinition | None:
        for arg in self.arguments:
            if arg.name == name:
                return arg
        return None

    def accessor_names(self) -> dict[str, str]:
        """Map snake_case accessor names to exposed argument names."""
        return {to_snake_case(arg.name): arg.name for arg in self.arguments}


def runtime_type_name(instance: Any) -> str:
    """Concrete kind name of a runtime object, without module/class qualifiers."""
    return type(instance).__qualname__.rsplit(".", 1)[-1]


class TypeRegistry:
    """Registry of all defined types."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDefinition] = {}
        self._wrapped: dict[str, TypeDefinition] = {}
        self._register_scalars()

    def _register_scalars(self) -> None:
        """Register the built-in scalar types."""
        for name, (serialize, parse) in BUILTIN_SCALARS.items():
            self._types[name] = ScalarTypeDefinition(
                name=name, serialize=serialize, parse=parse
            )

    def register(self, type_def: TypeDefinition) -> TypeDefinition:
        """Register a type definition."""
        if type_def.name in self._types:
            raise DuplicateTypeName(type_def.name)
        self._types[type_def.name] = type_def
        logger.debug("Registered %s type %s", type_def.kind.value, type_def.name)
        return type_def

    def register_stub(self, name: str, definition_cls: type[TypeDefinition]) -> TypeDefinition:
        """Pre-register an empty definition for forward/self-references.

        The stub is populated in place once every name is known.
        """
        return self.register(definition_cls(name=name))

    def get(self, name: str) -> TypeDefinition | None:
        """Get a type by name."""
        return self._types.get(name)

    def lookup(self, name: str) -> TypeDefinition:
        """Get a type by name, raising if not found."""
        type_def = self._types.get(name)
        if type_def is None:
            raise UnknownType(name)
        return type_def

    def list_of(self, of_type: TypeDefinition) -> ListTypeDefinition:
        """Get or create the list wrapper for a type."""
        name = f"[{of_type.name}]"
        existing = self._wrapped.get(name)
        if existing is None:
            existing = self._wrapped[name] = ListTypeDefinition(name=name, of_type=of_type)
        return existing  # type: ignore[return-value]

    def non_null(self, of_type: TypeDefinition) -> NonNullTypeDefinition:
        """Get or create the non-null wrapper for a type."""
        if isinstance(of_type, NonNullTypeDefinition):
            return of_type
        name = f"{of_type.name}!"
        existing = self._wrapped.get(name)
        if existing is None:
            existing = self._wrapped[name] = NonNullTypeDefinition(name=name, of_type=of_type)
        return existing  # type: ignore[return-value]

    def resolve_ref(self, ref: TypeRef) -> TypeDefinition:
        """Resolve a type reference to a (possibly wrapped) definition."""
        if ref.of_type is not None:
            resolved: TypeDefinition = self.list_of(self.resolve_ref(ref.of_type))
        else:
            resolved = self.lookup(ref.name)  # type: ignore[arg-type]
        return self.non_null(resolved) if ref.non_null else resolved

    def find_implementing_types(self, interface_name: str) -> list[ObjectTypeDefinition]:
        """Find all object types that implement the given interface."""
        return [
            td
            for td in self._types.values()
            if isinstance(td, ObjectTypeDefinition) and interface_name in td.interfaces
        ]

    def possible_types(self, abstract_type: TypeDefinition) -> list[ObjectTypeDefinition]:
        """Object types a value of ``abstract_type`` may be rendered as."""
        if isinstance(abstract_type, InterfaceTypeDefinition):
            return self.find_implementing_types(abstract_type.name)
        if isinstance(abstract_type, UnionTypeDefinition):
            return [self.lookup(name) for name in abstract_type.possible_types]  # type: ignore[misc]
        if isinstance(abstract_type, ObjectTypeDefinition):
            return [abstract_type]
        return []

    def is_possible_type(
        self, abstract_type: TypeDefinition, concrete: ObjectTypeDefinition
    ) -> bool:
        if isinstance(abstract_type, InterfaceTypeDefinition):
            return abstract_type.name in concrete.interfaces
        if isinstance(abstract_type, UnionTypeDefinition):
            return concrete.name in abstract_type.possible_types
        return abstract_type is concrete

    def resolve_concrete_type(
        self, abstract_type: TypeDefinition, instance: Any
    ) -> ObjectTypeDefinition:
        """Pick the object type a runtime instance is rendered as.

        The instance's own class name is looked up in the registry; this holds
        the same for types declared in SDL and with classes.
        """
        runtime_name = runtime_type_name(instance)
        concrete = self._types.get(runtime_name)
        if not isinstance(concrete, ObjectTypeDefinition) or not self.is_possible_type(
            abstract_type, concrete
        ):
            raise UnresolvedPolymorphicType(abstract_type.name, runtime_name)
        return concrete

    def types_with_capability(self, capability: str) -> list[CompositeTypeDefinition]:
        return [
            td
            for td in self._types.values()
            if isinstance(td, CompositeTypeDefinition) and capability in td.capabilities
        ]

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._types

    def __iter__(self):
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
