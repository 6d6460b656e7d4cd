"""Exceptions raised while declaring or using serializers."""


class ConfigurationError(ValueError):
    """A serializer declaration is invalid (raised at declaration time)."""


class CyclicReferenceError(ConfigurationError):
    """Serializers reference each other in a cycle (A nests B nests A)."""


class UnsupportedTypeError(LookupError):
    """A polymorphic nested value has no serializer registered for its type."""

    def __init__(self, field: str, value_type: type):
        self.field = field
        self.value_type = value_type
        super().__init__(
            f"No serializer registered in `{field}` for type `{value_type.__qualname__}`"
        )


__all__ = ["ConfigurationError", "CyclicReferenceError", "UnsupportedTypeError"]
