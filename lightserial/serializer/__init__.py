"""Serializer base class and its metaclass."""

from .base import Serializer, ROOT_KEY, META_KEY, SKIP_ROOT_OPTION
from .meta import SerializerMeta

__all__ = [
    "Serializer",
    "SerializerMeta",
    "ROOT_KEY",
    "META_KEY",
    "SKIP_ROOT_OPTION",
]
