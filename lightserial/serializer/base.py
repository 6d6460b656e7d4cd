"""Serializer base: declaration classmethods and the serialization walk."""

import json
import logging
from functools import cache
from typing import Any, ClassVar, Optional

from ..declarations import Attribute, NestedResource, TypeDeclaration
from ..errors import ConfigurationError, CyclicReferenceError, UnsupportedTypeError
from ..utils.accessors import is_collection
from ..utils.schema import serialize
from .meta import SerializerMeta

logger = logging.getLogger("lightserial")

ROOT_KEY = "data"
META_KEY = "meta"
SKIP_ROOT_OPTION = "skip_root"


def _cycle_message(path: tuple[type]) -> str:
    return "Cyclic serializer reference: " + " -> ".join(c.__name__ for c in path)


class Serializer(metaclass=SerializerMeta):
    """Base class for serializers; subclasses declare fields, instances render objects.

    >>> UserSerializer(user, with_email=True).as_json()
    {'data': {'name': 'Ada', 'email': 'ada@example.com'}}
    """

    _attributes: ClassVar[dict[str, Attribute]]
    _nested_resources: ClassVar[dict[str, NestedResource]]
    _groups: ClassVar[dict[str, dict]]
    _allowed_options: ClassVar[set[str]]
    _skip_root_node: ClassVar[bool]
    _skip_type_field: ClassVar[bool]
    _type_declaration: ClassVar[Optional[TypeDeclaration]]

    def __init__(self, object_or_collection: Any, **options):
        self.object_or_collection = object_or_collection
        self.options = options

    # declaration

    @classmethod
    def serializes(cls, type: Any = None, model: Any = None) -> None:
        """Record what this serializer renders (used by the documented `type` field)."""
        if (type is None) == (model is None):
            raise ConfigurationError(
                f"{cls.__name__}.serializes() takes exactly one of `type` or `model`"
            )
        cls._type_declaration = TypeDeclaration(literal=type, model=model)

    @classmethod
    def add_attribute(cls, name: str, condition: str = None, group: str = None,
                      extractor=None, **documentation) -> None:
        """Declare (or redeclare) a scalar field."""
        name = str(name)
        if name in cls._nested_resources:
            raise ConfigurationError(
                f"{cls.__name__}.{name} is already declared as a nested resource"
            )
        cls._check_group_names(name, group)
        cls._attributes[name] = Attribute(
            name=name,
            group=group,
            condition=condition,
            extractor=extractor,
            documentation=documentation,
        )
        if condition:
            cls._allowed_options.add(condition)
        cls._declarations_changed()
        logger.debug("Declared attribute %s.%s", cls.__name__, name)

    @classmethod
    def add_nested(cls, name: str, serializer: Any = None, condition: str = None,
                   group: str = None, extractor=None, is_collection: bool = False,
                   **documentation) -> None:
        """Declare (or redeclare) a field rendered by another serializer.

        Cycles through serializer classes are rejected here. Targets given as
        class names are resolved (and checked for cycles) the first time this
        serializer renders an object or a schema.
        """
        name = str(name)
        if name in cls._attributes:
            raise ConfigurationError(
                f"{cls.__name__}.{name} is already declared as an attribute"
            )
        cls._check_group_names(name, group)
        NestedResource.check_target(cls, name, serializer)
        previous = cls._nested_resources.get(name)
        cls._nested_resources[name] = NestedResource(
            name=name,
            group=group,
            condition=condition,
            extractor=extractor,
            documentation=documentation,
            is_collection=is_collection,
            serializer=serializer,
        )
        try:
            cls._check_cycles()
        except CyclicReferenceError:
            if previous is None:
                del cls._nested_resources[name]
            else:
                cls._nested_resources[name] = previous
            raise
        if condition:
            cls._allowed_options.add(condition)
        cls._declarations_changed()
        logger.debug("Declared %s %s.%s", "collection" if is_collection else "nested",
                     cls.__name__, name)

    @classmethod
    def add_collection(cls, name: str, serializer: Any = None, **params) -> None:
        """Declare a list field whose items are rendered by another serializer."""
        cls.add_nested(name, serializer=serializer, is_collection=True, **params)

    @classmethod
    def add_group(cls, name: str, **documentation) -> None:
        """Document a group; members join it through their `group` parameter."""
        name = str(name)
        if name in cls._attributes or name in cls._nested_resources:
            raise ConfigurationError(f"{cls.__name__}.{name} is already declared as a field")
        cls._groups[name] = documentation

    @classmethod
    def remove_attribute(cls, name: str) -> None:
        """Forget an (inherited) attribute; no error if it is not declared."""
        cls._attributes.pop(str(name), None)
        cls._declarations_changed()

    @classmethod
    def remove_nested(cls, name: str) -> None:
        """Forget an (inherited) nested resource or collection."""
        cls._nested_resources.pop(str(name), None)
        cls._declarations_changed()

    @classmethod
    def no_root(cls) -> None:
        """Render bare values instead of wrapping them in `{"data": ...}`."""
        cls._skip_root_node = True

    @classmethod
    def no_automatic_type_field(cls) -> None:
        """Do not document a `type` property for this serializer."""
        cls._skip_type_field = True

    @classmethod
    def allow_options(cls, *option_names: str) -> None:
        """Let these options through to this serializer when it is nested."""
        cls._allowed_options.update(option_names)
        cls._declarations_changed()

    @classmethod
    def _check_group_names(cls, name: str, group: Optional[str]) -> None:
        """Reject a field named like a group, or a group named like a field."""
        group_names = set(cls._groups) | {
            field.group
            for field in (*cls._attributes.values(), *cls._nested_resources.values())
            if field.group
        }
        if name in group_names or name == group:
            raise ConfigurationError(f"{cls.__name__}.{name} is already declared as a group")
        if group in cls._attributes or group in cls._nested_resources:
            raise ConfigurationError(
                f"{cls.__name__}.{name}: group `{group}` is already declared as a field"
            )

    @classmethod
    def _check_cycles(cls, _path: tuple[type] = ()) -> None:
        """Raise CyclicReferenceError if cls reaches itself through serializer classes."""
        if cls in _path:
            raise CyclicReferenceError(_cycle_message(_path + (cls,)))
        for resource in cls._nested_resources.values():
            for target in resource.declared_targets():
                if not isinstance(target, str):
                    target._check_cycles(_path + (cls,))

    @staticmethod
    def _declarations_changed() -> None:
        Serializer.get_allowed_options.cache_clear()

    # introspection

    @classmethod
    def get_attributes(cls) -> dict[str, Attribute]:
        return cls._attributes

    @classmethod
    def get_nested_resources(cls) -> dict[str, NestedResource]:
        return cls._nested_resources

    @classmethod
    @cache
    def get_allowed_options(cls) -> frozenset[str]:
        """Options this serializer and every serializer it nests may read.

        Resolves forward references on the way, so unknown names and cycles
        raise ConfigurationError / CyclicReferenceError here.
        """
        return cls._collect_allowed_options()

    @classmethod
    def _collect_allowed_options(cls, _path: tuple[type] = ()) -> frozenset[str]:
        if cls in _path:
            raise CyclicReferenceError(_cycle_message(_path + (cls,)))
        path = _path + (cls,)
        allowed_options = set(cls._allowed_options)
        for resource in cls._nested_resources.values():
            for target in resource.targets():
                allowed_options |= target._collect_allowed_options(path)
        return frozenset(allowed_options)

    @classmethod
    def openapi_schema(cls) -> dict:
        """Shortcut for Documentation(cls).openapi_schema()."""
        from ..documentation import Documentation
        return Documentation(cls).openapi_schema()

    # serialization

    def as_json(self) -> Any:
        """Render the object (or each object of the collection), with the root node if enabled."""
        # resolves forward references and rejects cycles on first use
        type(self).get_allowed_options()
        if is_collection(self.object_or_collection):
            result = [self.serialize_object(o) for o in self.object_or_collection]
        else:
            result = self.serialize_object(self.object_or_collection)

        if self._skip_root_node or self.options.get(SKIP_ROOT_OPTION):
            return result
        final = {ROOT_KEY: result}
        if self.options.get(META_KEY):
            final[META_KEY] = self.options[META_KEY]
        return final

    def to_json(self, **kwargs) -> str:
        """Render as a JSON string; kwargs are passed to json.dumps."""
        return json.dumps(serialize(self.as_json()), **kwargs)

    def serialize_object(self, obj: Any) -> Optional[dict]:
        """Render a single object; None stays None."""
        if obj is None:
            return None

        result = {}
        for name, attribute in self._attributes.items():
            if not attribute.is_included(self.options):
                continue
            self._write(result, attribute, attribute.extract(self, obj))

        for name, resource in self._nested_resources.items():
            if not resource.is_included(self.options):
                continue
            value = resource.extract(self, obj)
            self._write(result, resource, self._serialize_nested(resource, value))

        return result

    def _serialize_nested(self, resource: NestedResource, value: Any) -> Any:
        """Render the value of a nested resource or collection."""
        if value is None:
            return None
        if not resource.is_collection:
            return self._serialize_nested_item(resource, value)
        if not is_collection(value):
            raise TypeError(
                f"{type(self).__name__}.{resource.name} is a collection, "
                f"got `{type(value).__name__}`"
            )
        return [self._serialize_nested_item(resource, item) for item in value]

    def _serialize_nested_item(self, resource: NestedResource, value: Any) -> Any:
        if value is None:
            return None
        try:
            serializer = resource.resolve(value)
        except UnsupportedTypeError:
            logger.warning("No serializer for %s in %s.%s",
                           type(value).__name__, type(self).__name__, resource.name)
            raise
        return serializer(value, **self._options_for_nested(serializer)).as_json()

    def _options_for_nested(self, serializer: type["Serializer"]) -> dict:
        """Options restricted to what serializer allows, with the root node skipped."""
        allowed_options = serializer.get_allowed_options()
        options = {
            key: value for key, value in self.options.items()
            if key in allowed_options
        }
        options[SKIP_ROOT_OPTION] = True
        return options

    @staticmethod
    def _write(result: dict, field: Attribute | NestedResource, value: Any) -> None:
        """Store value under the field name, inside its group if it has one."""
        if field.group:
            result.setdefault(field.group, {})[field.name] = value
        else:
            result[field.name] = value


__all__ = ["Serializer", "ROOT_KEY", "META_KEY", "SKIP_ROOT_OPTION"]
