"""Jazz demo application: sample records plus a schema over them."""

from typed_schema.jazz.models import new_store, seed_data
from typed_schema.jazz.schema import build_schema

__all__ = [
    "build_schema",
    "new_store",
    "seed_data",
]
