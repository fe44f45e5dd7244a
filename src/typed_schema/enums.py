"""Enum value equality.

Internal enum values come in several spellings: plain strings, ``Symbol``
tokens and stdlib ``enum.Enum`` members. They are compared through one
canonical form:

* ``Symbol`` is a ``str`` subclass, so ``Symbol("str") == "str"``.
* ``enum.Enum`` members compare by member name.
* Anything else compares with ``==``.
"""

from __future__ import annotations

import enum
from typing import Any


class Symbol(str):
    """A symbol-like token; equal to the string with the same text."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f":{str.__str__(self)}"


def canonical_value(value: Any) -> Any:
    """Return the form used to compare internal enum values."""
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, str):
        return str.__str__(value)
    return value


def values_equal(left: Any, right: Any) -> bool:
    """Check whether two internal enum values are the same value."""
    return canonical_value(left) == canonical_value(right)
