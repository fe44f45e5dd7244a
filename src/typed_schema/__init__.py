"""Typed Schema - typed object schemas with polymorphic field resolution."""

from typed_schema.config import SchemaSettings
from typed_schema.declarative import (
    EnumType,
    Interface,
    ObjectType,
    argument,
    field,
    value,
)
from typed_schema.enums import Symbol, values_equal
from typed_schema.errors import (
    DecoratorTypeMismatch,
    DuplicateTypeName,
    FieldError,
    InvalidArgumentType,
    MissingRequiredArgument,
    NotFoundError,
    SchemaError,
    UnknownEnumLabel,
    UnknownType,
    UnresolvedPolymorphicType,
)
from typed_schema.execution import ExecutionResult, ResolutionContext, ResolutionError, Selection, select
from typed_schema.fields import register_decorator
from typed_schema.identity import GlobalIdentity, to_global_id
from typed_schema.inputs import InputObject, coerce_input
from typed_schema.parsing import SDLParser
from typed_schema.schema import Schema
from typed_schema.store import DomainStore
from typed_schema.types import (
    GLOBAL_ID_CAPABILITY,
    DecoratorSpec,
    EnumTypeDefinition,
    FieldDefinition,
    InputTypeDefinition,
    InterfaceTypeDefinition,
    ObjectTypeDefinition,
    TypeDefinition,
    TypeKind,
    TypeRegistry,
)

__all__ = [
    # Main API
    "Schema",
    "SchemaSettings",
    "SDLParser",
    "Selection",
    "select",
    "ExecutionResult",
    "ResolutionContext",
    "ResolutionError",
    "DomainStore",
    # Declarative style
    "ObjectType",
    "Interface",
    "EnumType",
    "InputObject",
    "field",
    "argument",
    "value",
    # Building blocks
    "Symbol",
    "values_equal",
    "GlobalIdentity",
    "GLOBAL_ID_CAPABILITY",
    "to_global_id",
    "coerce_input",
    "register_decorator",
    # Type definitions
    "TypeKind",
    "TypeDefinition",
    "ObjectTypeDefinition",
    "InterfaceTypeDefinition",
    "EnumTypeDefinition",
    "InputTypeDefinition",
    "FieldDefinition",
    "DecoratorSpec",
    "TypeRegistry",
    # Errors
    "SchemaError",
    "FieldError",
    "DuplicateTypeName",
    "UnknownType",
    "UnresolvedPolymorphicType",
    "UnknownEnumLabel",
    "MissingRequiredArgument",
    "InvalidArgumentType",
    "DecoratorTypeMismatch",
    "NotFoundError",
]

__version__ = "0.1.0"
