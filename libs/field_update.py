"""
Tri-state optional update.

A partial update needs to tell apart "leave the field alone", "clear the
field" and "write this value". ``None`` alone cannot carry all three.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class Unset:
    """Leave the stored value untouched."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"


class SetToNull:
    """Clear the stored value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SET_TO_NULL"


@dataclass(frozen=True)
class SetTo(Generic[T]):
    """Write ``value``."""

    value: T


UNSET = Unset()
SET_TO_NULL = SetToNull()

FieldUpdate = Union[Unset, SetToNull, SetTo[T]]


def apply_update(current: Any, update: "FieldUpdate") -> Any:
    """Return the value a column holds after ``update`` is applied."""
    if isinstance(update, Unset):
        return current
    if isinstance(update, SetToNull):
        return None
    if isinstance(update, SetTo):
        return update.value
    raise TypeError(f"Not a field update: {update!r}")


def is_set(update: "FieldUpdate") -> bool:
    return not isinstance(update, Unset)
