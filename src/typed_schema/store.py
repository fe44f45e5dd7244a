"""In-memory domain store: partition name -> ordered records."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

logger = logging.getLogger(__name__)

SeedFactory = Callable[[], Mapping[str, Iterable[Any]]]


class DomainStore:
    """Keyed table of record lists.

    The engine only reads (``select``) and appends (``push``). Seeding and
    resets belong to whoever constructs the store. Not thread-safe; callers
    serialize access.
    """

    def __init__(self, seed: SeedFactory | None = None) -> None:
        self._seed = seed
        self._partitions: dict[str, list[Any]] = {}
        self.reset()

    def reset(self) -> None:
        """Drop all records and reload the seed data."""
        self._partitions = {}
        if self._seed is not None:
            for name, records in self._seed().items():
                self._partitions[name] = list(records)
        logger.debug("Store reset with partitions %s", list(self._partitions))

    def has_partition(self, name: str) -> bool:
        return name in self._partitions

    def select(self, name: str) -> list[Any]:
        """Records of a partition in insertion order (empty if unknown)."""
        return list(self._partitions.get(name, ()))

    def push(self, name: str, record: Any) -> Any:
        """Append a record, creating the partition if needed."""
        self._partitions.setdefault(name, []).append(record)
        logger.debug("Appended record to %s (now %d)", name, len(self._partitions[name]))
        return record

    def count(self, name: str) -> int:
        return len(self._partitions.get(name, ()))

    @property
    def partitions(self) -> list[str]:
        return list(self._partitions)

    def __contains__(self, name: object) -> bool:
        return name in self._partitions
