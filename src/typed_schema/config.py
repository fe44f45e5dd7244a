"""Engine settings."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class SchemaSettings:
    """Settings controlling schema building and execution."""

    # Derive exposed camelCase names from snake_case Python attribute names
    auto_camelcase: bool = True
    # Separator between type name and natural key in global ids
    id_separator: str = "/"
    # Log exceptions raised by resolvers before reporting them as field errors
    log_resolver_errors: bool = True

    @classmethod
    def from_mapping(cls, *mappings: Mapping[str, Any] | None) -> SchemaSettings:
        """Merge mappings left to right into a settings object.

        Later mappings override earlier ones; keys that are not settings are
        ignored.
        """
        valid = {f.name for f in fields(cls)}
        merged: dict[str, Any] = {}
        for mapping in mappings:
            if not mapping:
                continue
            merged.update({k: v for k, v in mapping.items() if k in valid})
        settings = cls(**merged)
        if not settings.id_separator:
            raise ValueError("id_separator must be a non-empty string")
        return settings
