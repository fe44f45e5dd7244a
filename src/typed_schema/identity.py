"""Global identifiers: ``"<TypeName>/<NaturalKey>"``.

The natural key is the object's ``name``. Keys must not contain the separator;
this is not checked.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from typed_schema.errors import NotFoundError
from typed_schema.types import CompositeTypeDefinition, TypeRegistry, runtime_type_name

if TYPE_CHECKING:
    from typed_schema.store import DomainStore

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "/"


def natural_key(obj: Any) -> Any:
    """The ``name`` of a record (attribute or mapping key)."""
    if isinstance(obj, Mapping):
        return obj.get("name")
    return getattr(obj, "name", None)


def to_global_id(obj: Any, separator: str = DEFAULT_SEPARATOR) -> str:
    """Build the global id of ``obj`` from its class name and natural key."""
    return f"{runtime_type_name(obj)}{separator}{natural_key(obj)}"


class GlobalIdentity:
    """Encodes objects to global ids and finds them again in a store.

    With a registry attached, only types carrying the ``global_id``
    capability can be found.
    """

    def __init__(
        self,
        store: DomainStore,
        registry: TypeRegistry | None = None,
        separator: str = DEFAULT_SEPARATOR,
    ) -> None:
        self.store = store
        self.registry = registry
        self.separator = separator

    def to_id(self, obj: Any) -> str:
        return to_global_id(obj, self.separator)

    def decode(self, global_id: Any) -> tuple[str, str]:
        """Split an id into (type name, natural key)."""
        if not isinstance(global_id, str) or self.separator not in global_id:
            raise NotFoundError(global_id)
        type_name, _, key = global_id.partition(self.separator)
        if not type_name:
            raise NotFoundError(global_id)
        return type_name, key

    def find(self, global_id: Any) -> Any:
        """Return the stored object ``global_id`` refers to.

        Malformed ids, unknown partitions and missing keys all raise
        ``NotFoundError``.
        """
        type_name, key = self.decode(global_id)
        if self.registry is not None:
            type_def = self.registry.get(type_name)
            if not isinstance(type_def, CompositeTypeDefinition) or not type_def.supports_global_id:
                logger.debug("Type %s is not globally identifiable", type_name)
                raise NotFoundError(global_id)
        if not self.store.has_partition(type_name):
            logger.debug("No store partition for %s", type_name)
            raise NotFoundError(global_id)
        for record in self.store.select(type_name):
            if natural_key(record) == key:
                return record
        raise NotFoundError(global_id)
