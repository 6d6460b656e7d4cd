"""Check whether a value can be used as a nested serializer target."""

import inspect


def is_serializer(t) -> bool:
    """Return True if t is a Serializer class (has a declaration registry)."""
    return (
        inspect.isclass(t)
        and getattr(t, "_attributes", None) is not None
        and getattr(t, "_nested_resources", None) is not None
    )


def is_polymorphic_target(t) -> bool:
    """Return True if t maps model classes to serializers."""
    return isinstance(t, dict)
