"""Exception taxonomy for schema building and field resolution.

Two families:

* ``SchemaError`` subclasses mean the schema itself is broken. They are never
  recovered and abort a whole execution.
* ``FieldError`` subclasses mean a single field or argument could not be
  resolved. The executor catches them at the nearest field and reports them
  next to the sibling fields that did resolve.
"""

from __future__ import annotations


class SchemaError(Exception):
    """Structural problem with the schema (unrecoverable)."""


class DuplicateTypeName(SchemaError, ValueError):
    """A type name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Type '{name}' is already defined")
        self.name = name


class UnknownType(SchemaError, LookupError):
    """A type name is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Type '{name}' not found")
        self.name = name


class UnresolvedPolymorphicType(SchemaError, TypeError):
    """A runtime object cannot be mapped to a concrete object type."""

    def __init__(self, abstract_name: str, runtime_name: str) -> None:
        super().__init__(
            f"Could not resolve '{runtime_name}' to a concrete type of '{abstract_name}'"
        )
        self.abstract_name = abstract_name
        self.runtime_name = runtime_name


class FieldError(Exception):
    """Error scoped to a single field or argument (recoverable)."""


class UnknownEnumLabel(FieldError, ValueError):
    """An enum label (or internal value) is not registered on the enum."""

    def __init__(self, enum_name: str, label: object) -> None:
        super().__init__(f"Enum '{enum_name}' has no value {label!r}")
        self.enum_name = enum_name
        self.label = label


class MissingRequiredArgument(FieldError, ValueError):
    """A non-null argument was not supplied."""

    def __init__(self, owner: str, argument: str) -> None:
        super().__init__(f"Argument '{argument}' of '{owner}' is required")
        self.owner = owner
        self.argument = argument


class InvalidArgumentType(FieldError, TypeError):
    """An argument value does not match its declared type."""


class DecoratorTypeMismatch(FieldError, TypeError):
    """A field decorator received a value of the wrong type."""


class NotFoundError(FieldError, LookupError):
    """A global id did not resolve to a stored object."""

    def __init__(self, global_id: object) -> None:
        super().__init__(f"No object found for id {global_id!r}")
        self.global_id = global_id
