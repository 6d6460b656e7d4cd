"""Discover subclasses by name, used to resolve forward references to serializers."""

from typing import Iterable

from .inflection import qualified_name


def _get_subclasses(base: type) -> Iterable[type]:
    """Recursively yield all subclasses of base in depth-first order."""
    for subclass in base.__subclasses__()[::-1]:
        yield from _get_subclasses(subclass)
        yield subclass


def find_subclass(base: type, name: str) -> type | None:
    """Return the unique subclass of base named `name`, or None.

    `name` is compared with both `__name__` and the qualified name, so nested
    classes can be referenced as `Outer.Inner` or `Outer::Inner`.
    Raises if multiple subclasses match.
    """
    dotted = name.replace("::", ".")
    subclasses = []
    for subclass in _get_subclasses(base):
        if dotted in (subclass.__name__, qualified_name(subclass)) and subclass not in subclasses:
            subclasses.append(subclass)
    if len(subclasses) > 1:
        raise ValueError(f"More than one subclass of `{base.__name__}` found with name `{name}`")
    if len(subclasses) == 0:
        return None
    return subclasses[0]
