"""Sample domain records for the jazz demo schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from typed_schema.enums import Symbol
from typed_schema.store import DomainStore


@dataclass
class Instrument:
    name: str
    family: Any


@dataclass
class Ensemble:
    name: str
    musicians: list[Musician] = field(default_factory=list)


@dataclass
class Musician:
    name: str
    instrument: Instrument | None = None


def seed_data() -> dict[str, list[Any]]:
    """Fresh seed records. Families mix symbol and string spellings."""
    return {
        "Instrument": [
            Instrument("Banjo", Symbol("str")),
            Instrument("Flute", "WOODWIND"),
            Instrument("Trumpet", "BRASS"),
            Instrument("Piano", "KEYS"),
            Instrument("Organ", "KEYS"),
            Instrument("Drum Kit", "PERCUSSION"),
        ],
        "Ensemble": [
            Ensemble("Bela Fleck and the Flecktones"),
        ],
    }


def new_store() -> DomainStore:
    """A store seeded with the demo records."""
    return DomainStore(seed_data)
