"""Resolve serializer forward references (class names) to Serializer classes."""

import logging
from functools import cache

from ..errors import ConfigurationError
from .find_subclass import find_subclass
from .is_serializer import is_serializer

logger = logging.getLogger("lightserial")


def resolve_serializer(reference) -> type:
    """Return the Serializer class for a class or a class name."""
    if not isinstance(reference, str):
        return reference
    return _resolve_name(reference)


@cache
def _resolve_name(name: str) -> type:
    """Look a serializer up by name once; later same-named classes do not change the result."""
    from ..serializer import Serializer
    try:
        cls = find_subclass(Serializer, name)
    except ValueError as error:
        raise ConfigurationError(f"Ambiguous serializer reference `{name}`: {error}") from error
    if cls is None or not is_serializer(cls):
        raise ConfigurationError(f"Could not resolve serializer `{name}`")
    logger.debug("Resolved serializer reference %s to %s", name, cls.__qualname__)
    return cls
