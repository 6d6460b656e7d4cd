"""Read values from domain objects and recognize collections."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel


def read_attribute(obj: Any, name: str) -> Any:
    """Read `name` from obj: mapping key for mappings, attribute otherwise."""
    if isinstance(obj, Mapping):
        return obj[name]
    return getattr(obj, name)


def is_collection(value: Any) -> bool:
    """True if value is a finite sequence of objects to serialize one by one.

    Strings, bytes, mappings and pydantic models are iterable but count as
    single objects.
    """
    if isinstance(value, (str, bytes, bytearray, Mapping, BaseModel)):
        return False
    return isinstance(value, Iterable)
