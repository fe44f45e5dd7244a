"""Schema class tying the registry to query and mutation entry points."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from typed_schema.config import SchemaSettings
from typed_schema.declarative import collect_classes, declared_type_name, is_declared_class, spec_from_class
from typed_schema.errors import SchemaError
from typed_schema.execution import ExecutionResult, Executor, ResolutionContext, Selection
from typed_schema.identity import GlobalIdentity
from typed_schema.parsing import SDLParser
from typed_schema.specs import TypeSpec, apply_resolver_map, build_registry
from typed_schema.store import DomainStore
from typed_schema.types import ObjectTypeDefinition, TypeDefinition, TypeRegistry

logger = logging.getLogger(__name__)


def _root_name(root: str | type | None) -> str | None:
    if root is None or isinstance(root, str):
        return root
    return declared_type_name(root)


class Schema:
    """Registered types plus their root operation types."""

    def __init__(
        self,
        registry: TypeRegistry,
        query: str = "Query",
        mutation: str | None = None,
        settings: SchemaSettings | None = None,
    ) -> None:
        """Initialize a schema.

        Args:
            registry: Type registry with all type definitions.
            query: Name of the query root type.
            mutation: Name of the mutation root type, if any.
            settings: Engine settings (defaults when omitted).
        """
        self.registry = registry
        self.settings = settings or SchemaSettings()
        self.query_type = self._root_type(query)
        self.mutation_type = self._root_type(mutation) if mutation else None

    def _root_type(self, name: str) -> ObjectTypeDefinition:
        root = self.registry.lookup(name)
        if not isinstance(root, ObjectTypeDefinition):
            raise SchemaError(f"Root type '{name}' must be an object type")
        return root

    @classmethod
    def build(
        cls,
        sdl: str | None = None,
        *,
        types: Iterable[type] = (),
        resolvers: Mapping[str, Mapping[str, Any]] | None = None,
        query: str | type = "Query",
        mutation: str | type | None = None,
        settings: SchemaSettings | None = None,
    ) -> Schema:
        """Build a schema from SDL and/or declared classes.

        Args:
            sdl: Schema definition document.
            types: Declared classes not reachable from the root types.
            resolvers: Resolver map applied to the collected types.
            query: Query root type (name or declared class).
            mutation: Mutation root type (name or declared class).
            settings: Engine settings.

        Returns:
            A new Schema instance.
        """
        settings = settings or SchemaSettings()
        specs: list[TypeSpec] = []
        if sdl:
            specs.extend(SDLParser().parse(sdl))

        roots = [root for root in (query, mutation) if is_declared_class(root)]
        for declared in collect_classes([*roots, *types]):
            specs.append(spec_from_class(declared, settings.auto_camelcase))

        if resolvers:
            apply_resolver_map(specs, resolvers)

        registry = build_registry(specs)
        logger.debug("Built schema with %d types", len(specs))
        return cls(
            registry,
            query=_root_name(query),  # type: ignore[arg-type]
            mutation=_root_name(mutation),
            settings=settings,
        )

    def get_type(self, name: str) -> TypeDefinition:
        """Get a type definition by name.

        Raises:
            UnknownType: If the type is not found.
        """
        return self.registry.lookup(name)

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return self.registry.list_types()

    def global_identity(self, store: DomainStore) -> GlobalIdentity:
        """Global id encoder/finder over ``store`` for this schema's types."""
        return GlobalIdentity(store, self.registry, self.settings.id_separator)

    def execute(
        self,
        selections: Selection | Iterable[Selection],
        *,
        root_value: Any = None,
        context: ResolutionContext | Mapping[str, Any] | None = None,
        store: DomainStore | None = None,
        operation: str = "query",
    ) -> ExecutionResult:
        """Resolve ``selections`` against the query or mutation root type.

        Field errors are collected in the result; schema errors raise.
        """
        if operation == "query":
            root_type = self.query_type
        elif operation == "mutation":
            if self.mutation_type is None:
                raise SchemaError("Schema has no mutation type")
            root_type = self.mutation_type
        else:
            raise ValueError(f"Unknown operation '{operation}'")

        if isinstance(selections, Selection):
            selections = [selections]
        if not isinstance(context, ResolutionContext):
            context = ResolutionContext(self, store=store, values=context)

        logger.debug("Executing %s on %s", operation, root_type.name)
        return Executor(self, context).execute(root_type, root_value, list(selections))

    def mutate(self, selections: Selection | Iterable[Selection], **kwargs: Any) -> ExecutionResult:
        """``execute`` against the mutation root type."""
        return self.execute(selections, operation="mutation", **kwargs)
