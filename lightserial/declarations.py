"""Field declarations for Serializer classes.

After a Serializer subclass is created, each declared output field is
represented by an Attribute or a NestedResource stored in
SerializerSubClass._attributes / SerializerSubClass._nested_resources.
Both serialization (Serializer.as_json) and documentation
(Documentation.openapi_schema) read these same objects.

In a class body, fields are declared with the `attribute`, `nested`,
`collection` and `group` markers defined at the bottom of this module.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError, UnsupportedTypeError
from .utils.accessors import read_attribute
from .utils.inflection import qualified_name, underscore
from .utils.is_serializer import is_serializer, is_polymorphic_target
from .utils.resolve_serializer import resolve_serializer


# Signature of custom extractors: (serializer instance, object) -> value
Extractor = Callable[[Any, Any], Any]

REF_OVERRIDE_KEYS = ("ref_override", "refOverride")


class _Field(BaseModel):
    """Attributes shared by every declared output field."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    group: Optional[str] = None
    condition: Optional[str] = None
    extractor: Optional[Extractor] = None
    documentation: dict[str, Any] = {}

    def is_included(self, options: dict) -> bool:
        """False when the field is conditional and its option is falsy or missing."""
        return self.condition is None or bool(options.get(self.condition))

    def extract(self, serializer, obj: Any) -> Any:
        """Read the field value from obj, through the custom extractor if any."""
        if self.extractor is not None:
            return self.extractor(serializer, obj)
        return read_attribute(obj, self.name)


class Attribute(_Field):
    """A scalar output field. Stored in MySerializer._attributes["name"]."""


class NestedResource(_Field):
    """An output field rendered by another serializer, singly or as a collection.

    `serializer` is a Serializer class, a Serializer class name (resolved on
    first use), or a mapping of model classes to serializers (polymorphic).
    """

    is_collection: bool = False
    serializer: Any

    @property
    def is_polymorphic(self) -> bool:
        return is_polymorphic_target(self.serializer)

    @property
    def ref_override(self) -> Optional[str]:
        """Schema identifier replacing the computed one (`ref_override` or `refOverride`)."""
        for key in REF_OVERRIDE_KEYS:
            if self.documentation.get(key):
                return self.documentation[key]
        return None

    def declared_targets(self) -> list:
        """Targets as declared: Serializer classes or, for forward references, class names."""
        if self.is_polymorphic:
            return list(self.serializer.values())
        return [self.serializer]

    def targets(self) -> list[type]:
        """Every serializer this field may resolve to, in declared order."""
        return [resolve_serializer(target) for target in self.declared_targets()]

    def resolve(self, value: Any) -> type:
        """Return the serializer to use for one (non-null) nested value."""
        if not self.is_polymorphic:
            return resolve_serializer(self.serializer)
        value_type = type(value)
        if value_type in self.serializer:
            return resolve_serializer(self.serializer[value_type])
        for model, target in self.serializer.items():
            if isinstance(value, model):
                return resolve_serializer(target)
        raise UnsupportedTypeError(self.name, value_type)

    @classmethod
    def check_target(cls, owner: type, name: str, serializer: Any) -> None:
        """Raise ConfigurationError unless serializer is a usable target."""
        where = f"{owner.__name__}.{name}"
        if serializer is None:
            raise ConfigurationError(f"{where}: a serializer is required")
        if isinstance(serializer, str):
            return
        if is_polymorphic_target(serializer):
            if not serializer:
                raise ConfigurationError(f"{where}: polymorphic serializer mapping is empty")
            for model, target in serializer.items():
                if not inspect.isclass(model):
                    raise ConfigurationError(f"{where}: `{model!r}` is not a class")
                cls.check_target(owner, name, target)
            return
        if not is_serializer(serializer):
            raise ConfigurationError(f"{where}: `{serializer!r}` is not a serializer")


class TypeDeclaration(BaseModel):
    """What a serializer serializes: a literal type name or a model (class or class name)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    literal: Any = None
    model: Any = None

    @property
    def type_name(self) -> Any:
        """Value of the documented `type` field."""
        if self.literal is not None:
            return self.literal
        return underscore(qualified_name(self.model))


class Declaration:
    """Class-body marker, turned into registry entries by SerializerMeta.

    Calling a declaration with a function uses that function as extractor,
    so `attribute(...)` also works as a method decorator.
    """

    def __init__(self, kind: str, **params):
        self.kind = kind
        self.params = params

    def __call__(self, extractor: Extractor) -> Declaration:
        if self.kind == "group":
            raise ConfigurationError("A group cannot be used as a decorator")
        return Declaration(self.kind, **self.params, extractor=extractor)

    def declare(self, serializer: type, name: str, group: Optional[str] = None) -> None:
        """Register this declaration on serializer under name."""
        if self.kind == "group":
            members = {k: v for k, v in self.params.items() if isinstance(v, Declaration)}
            documentation = {k: v for k, v in self.params.items() if k not in members}
            serializer.add_group(name, **documentation)
            for member_name, member in members.items():
                member.declare(serializer, member_name, group=name)
            return
        params = dict(self.params)
        if group is not None:
            params.setdefault("group", group)
        if self.kind == "attribute":
            serializer.add_attribute(name, **params)
        elif self.kind == "nested":
            serializer.add_nested(name, **params)
        elif self.kind == "collection":
            serializer.add_collection(name, **params)
        else:
            raise ConfigurationError(f"Unknown declaration kind `{self.kind}`")


def attribute(**params) -> Declaration:
    """Declare a scalar field (condition=, group=, extractor=, documentation params)."""
    return Declaration("attribute", **params)


def nested(**params) -> Declaration:
    """Declare a field rendered by another serializer (serializer= required)."""
    return Declaration("nested", **params)


def collection(**params) -> Declaration:
    """Declare a list field whose items are rendered by another serializer."""
    return Declaration("collection", **params)


def group(**params) -> Declaration:
    """Declare a group: Declaration values are members, other params document the group."""
    return Declaration("group", **params)


__all__ = [
    "Attribute",
    "NestedResource",
    "TypeDeclaration",
    "Declaration",
    "attribute",
    "nested",
    "collection",
    "group",
]
