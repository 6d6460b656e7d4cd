"""Metaclass for Serializer: merges the registries of its bases and collects class-body declarations."""

from copy import deepcopy

from ..declarations import Declaration
from ..errors import ConfigurationError


class SerializerMeta(type):
    """Metaclass for Serializer: gives each subclass its own declaration registry.

    The registries of all Serializer bases are deep-copied and merged in base
    order, so declarations made on a subclass never leak into its parents
    (and the reverse).
    """

    def __new__(mcs, name, bases, namespace,
                serializes_type=None,
                serializes_model=None,
                no_root: bool = False,
                no_type_field: bool = False,
                allow_options: tuple[str] = (),
                **kwargs):
        declarations = {
            key: value for key, value in namespace.items()
            if isinstance(value, Declaration)
        }
        namespace = {
            key: value for key, value in namespace.items()
            if key not in declarations
        }
        result = super().__new__(mcs, name, bases, namespace, **kwargs)

        parents = [base for base in bases if isinstance(base, SerializerMeta)]
        result._attributes = mcs._merge(parents, "_attributes")
        result._nested_resources = mcs._merge(parents, "_nested_resources")
        result._groups = mcs._merge(parents, "_groups")
        result._allowed_options = set().union(
            *(deepcopy(parent._allowed_options) for parent in parents)
        )
        for field_name in result._attributes:
            if field_name in result._nested_resources:
                raise ConfigurationError(
                    f"{name}.{field_name} is inherited both as an attribute and as a nested resource"
                )
        result._skip_root_node = any(parent._skip_root_node for parent in parents)
        result._skip_type_field = any(parent._skip_type_field for parent in parents)
        result._type_declaration = next(
            (parent._type_declaration for parent in parents
             if parent._type_declaration is not None),
            None,
        )

        if serializes_type is not None or serializes_model is not None:
            result.serializes(type=serializes_type, model=serializes_model)
        if no_root:
            result.no_root()
        if no_type_field:
            result.no_automatic_type_field()
        if allow_options:
            result.allow_options(*allow_options)
        for key, declaration in declarations.items():
            declaration.declare(result, key)
        return result

    @staticmethod
    def _merge(parents: list[type], registry: str) -> dict:
        """Deep copy of the parents' registries; the first parent declaring a name wins."""
        merged = {}
        for parent in parents:
            for key, value in getattr(parent, registry).items():
                if key not in merged:
                    merged[key] = deepcopy(value)
        return merged
