"""Normalized type specs and their resolution into a ``TypeRegistry``.

SDL documents and declarative classes are both translated into ``TypeSpec``
objects whose type references are still unresolved ``TypeRef``s. The specs
are then registered together in one pass, so either style can reference
types declared in the other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from typed_schema.errors import SchemaError, UnknownType
from typed_schema.fields import get_decorator
from typed_schema.inputs import shadowed_accessors
from typed_schema.types import (
    UNSET,
    ArgumentDefinition,
    CompositeTypeDefinition,
    DecoratorSpec,
    EnumTypeDefinition,
    EnumValueDefinition,
    FieldDefinition,
    InputTypeDefinition,
    InterfaceTypeDefinition,
    ObjectTypeDefinition,
    ScalarTypeDefinition,
    TypeDefinition,
    TypeKind,
    TypeRef,
    TypeRegistry,
    UnionTypeDefinition,
)

logger = logging.getLogger(__name__)


@dataclass
class ArgumentSpec:
    """Argument (or input field) before type resolution."""

    name: str
    type_ref: TypeRef
    description: str | None = None
    default_value: Any = UNSET


@dataclass
class FieldSpec:
    """Field before type resolution."""

    name: str
    type_ref: TypeRef
    description: str | None = None
    arguments: list[ArgumentSpec] = field(default_factory=list)
    resolver: Callable[..., Any] | None = None
    method: str | None = None
    decorators: list[DecoratorSpec] = field(default_factory=list)
    deprecation_reason: str | None = None


@dataclass
class EnumValueSpec:
    """Enum value; the internal value defaults to the label."""

    name: str
    value: Any = UNSET
    description: str | None = None
    deprecation_reason: str | None = None


@dataclass
class TypeSpec:
    """A named type from either declaration style."""

    kind: TypeKind
    name: str
    description: str | None = None
    fields: list[FieldSpec] = field(default_factory=list)
    arguments: list[ArgumentSpec] = field(default_factory=list)
    values: list[EnumValueSpec] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    possible_types: list[str] = field(default_factory=list)
    capabilities: set[str] = field(default_factory=set)
    metadata: dict[str, Any] = field(default_factory=dict)
    # Declarative class (object/interface resolvers, or the input class)
    implementation: type | None = None
    serialize: Callable[[Any], Any] | None = None
    parse: Callable[[Any], Any] | None = None

    def get_field(self, name: str) -> FieldSpec | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_value(self, name: str) -> EnumValueSpec | None:
        for v in self.values:
            if v.name == name:
                return v
        return None


_STUB_CLASSES: dict[TypeKind, type[TypeDefinition]] = {
    TypeKind.SCALAR: ScalarTypeDefinition,
    TypeKind.OBJECT: ObjectTypeDefinition,
    TypeKind.INTERFACE: InterfaceTypeDefinition,
    TypeKind.UNION: UnionTypeDefinition,
    TypeKind.ENUM: EnumTypeDefinition,
    TypeKind.INPUT: InputTypeDefinition,
}


def apply_resolver_map(
    specs: list[TypeSpec], resolvers: Mapping[str, Mapping[str, Any]]
) -> None:
    """Attach a resolver map to specs (usually the ones parsed from SDL).

    ``{"Type": {"field": fn}}`` sets inline resolvers on object and interface
    fields, ``{"Enum": {"LABEL": value}}`` sets internal enum values and
    ``{"Scalar": {"serialize": f, "parse": g}}`` customizes scalars.
    """
    by_name = {spec.name: spec for spec in specs}
    for type_name, entries in resolvers.items():
        spec = by_name.get(type_name)
        if spec is None:
            raise UnknownType(type_name)
        if spec.kind in (TypeKind.OBJECT, TypeKind.INTERFACE):
            for field_name, resolver in entries.items():
                field_spec = spec.get_field(field_name)
                if field_spec is None:
                    raise SchemaError(f"Type '{type_name}' has no field '{field_name}'")
                field_spec.resolver = resolver
        elif spec.kind is TypeKind.ENUM:
            for label, internal in entries.items():
                value_spec = spec.get_value(label)
                if value_spec is None:
                    raise SchemaError(f"Enum '{type_name}' has no value '{label}'")
                value_spec.value = internal
        elif spec.kind is TypeKind.SCALAR:
            spec.serialize = entries.get("serialize", spec.serialize)
            spec.parse = entries.get("parse", spec.parse)
        else:
            raise SchemaError(
                f"Resolvers cannot be attached to {spec.kind.value} type '{type_name}'"
            )


def build_registry(specs: list[TypeSpec], registry: TypeRegistry | None = None) -> TypeRegistry:
    """Resolve specs into definitions.

    Phase 1 registers an empty stub per spec so that self-referential and
    mutually referential types resolve. Phase 2 populates the stubs in place.
    Phase 3 copies interface fields and capabilities onto implementers and
    validates the result.
    """
    if registry is None:
        registry = TypeRegistry()

    # Phase 1: stubs
    for spec in specs:
        registry.register_stub(spec.name, _STUB_CLASSES[spec.kind])

    # Phase 2: populate
    for spec in specs:
        _populate(registry, spec, registry.lookup(spec.name))

    # Phase 3: inherit from interfaces, then validate
    for spec in specs:
        if spec.kind is TypeKind.OBJECT:
            _merge_interfaces(registry, registry.lookup(spec.name))  # type: ignore[arg-type]
    for spec in specs:
        _validate(registry, registry.lookup(spec.name))

    return registry


def _resolve_argument(registry: TypeRegistry, spec: ArgumentSpec) -> ArgumentDefinition:
    return ArgumentDefinition(
        name=spec.name,
        type_def=registry.resolve_ref(spec.type_ref),
        description=spec.description,
        default_value=spec.default_value,
    )


def _resolve_field(registry: TypeRegistry, spec: FieldSpec) -> FieldDefinition:
    return FieldDefinition(
        name=spec.name,
        type_def=registry.resolve_ref(spec.type_ref),
        description=spec.description,
        arguments=[_resolve_argument(registry, a) for a in spec.arguments],
        resolver=spec.resolver,
        method=spec.method,
        decorators=list(spec.decorators),
        deprecation_reason=spec.deprecation_reason,
    )


def _populate(registry: TypeRegistry, spec: TypeSpec, stub: TypeDefinition) -> None:
    stub.description = spec.description

    if isinstance(stub, CompositeTypeDefinition):
        names = [f.name for f in spec.fields]
        if len(names) != len(set(names)):
            raise SchemaError(f"Type '{spec.name}' declares a field twice")
        stub.fields = [_resolve_field(registry, f) for f in spec.fields]
        stub.capabilities = frozenset(spec.capabilities)
        stub.implementation = spec.implementation
        stub.metadata = dict(spec.metadata)
        if isinstance(stub, ObjectTypeDefinition):
            stub.interfaces = list(spec.interfaces)
    elif isinstance(stub, EnumTypeDefinition):
        labels = [v.name for v in spec.values]
        if len(labels) != len(set(labels)):
            raise SchemaError(f"Enum '{spec.name}' declares a label twice")
        stub.values = [
            EnumValueDefinition(
                name=v.name,
                value=v.name if v.value is UNSET else v.value,
                description=v.description,
                deprecation_reason=v.deprecation_reason,
            )
            for v in spec.values
        ]
    elif isinstance(stub, InputTypeDefinition):
        stub.arguments = [_resolve_argument(registry, a) for a in spec.arguments]
        stub.input_class = spec.implementation
    elif isinstance(stub, UnionTypeDefinition):
        stub.possible_types = list(spec.possible_types)
    elif isinstance(stub, ScalarTypeDefinition):
        if spec.serialize is not None:
            stub.serialize = spec.serialize
        if spec.parse is not None:
            stub.parse = spec.parse


def _merge_interfaces(registry: TypeRegistry, object_type: ObjectTypeDefinition) -> None:
    capabilities = set(object_type.capabilities)
    for name in object_type.interfaces:
        interface = registry.lookup(name)
        if not isinstance(interface, InterfaceTypeDefinition):
            raise SchemaError(f"'{object_type.name}' implements '{name}', which is not an interface")
        for f in interface.fields:
            if object_type.get_field(f.name) is None:
                object_type.fields.append(f)
        capabilities |= interface.capabilities
    object_type.capabilities = frozenset(capabilities)


def _validate(registry: TypeRegistry, type_def: TypeDefinition) -> None:
    if isinstance(type_def, CompositeTypeDefinition):
        for f in type_def.fields:
            if not f.type_def.is_output_type:
                raise SchemaError(f"Field '{type_def.name}.{f.name}' cannot return an input type")
            for spec in f.decorators:
                if get_decorator(spec.name) is None:
                    raise SchemaError(
                        f"Unknown field decorator '{spec.name}' on '{type_def.name}.{f.name}'"
                    )
            for arg in f.arguments:
                if not arg.type_def.is_input_type:
                    raise SchemaError(
                        f"Argument '{arg.name}' of '{type_def.name}.{f.name}' is not an input type"
                    )
    elif isinstance(type_def, InputTypeDefinition):
        for arg in type_def.arguments:
            if not arg.type_def.is_input_type:
                raise SchemaError(f"'{type_def.name}.{arg.name}' is not an input type")
        shadowed = shadowed_accessors(type_def)
        if shadowed:
            arg_name = type_def.accessor_names()[shadowed[0]]
            raise SchemaError(
                f"Input '{type_def.name}' argument '{arg_name}' is hidden "
                f"by the input object attribute '{shadowed[0]}'"
            )
    elif isinstance(type_def, UnionTypeDefinition):
        for name in type_def.possible_types:
            if not isinstance(registry.lookup(name), ObjectTypeDefinition):
                raise SchemaError(f"Union '{type_def.name}' member '{name}' is not an object type")
    logger.debug("Resolved %s type %s", type_def.kind.value, type_def.name)
