"""OpenAPI schema generation from Serializer declarations.

The same Attribute / NestedResource objects that drive serialization are read
here to describe the rendered shape. Nested serializers are never embedded:
they are referenced as `#/components/schemas/<identifier>`, and
`build_components` collects every referenced schema under its identifier.
"""

import logging
from copy import deepcopy
from typing import Any

from .declarations import Attribute, NestedResource, REF_OVERRIDE_KEYS
from .errors import ConfigurationError
from .utils.inflection import identifier_for, qualified_name

logger = logging.getLogger("lightserial")

TYPE_FIELD_DESCRIPTION = "Type of the object, to distinguish it from other kinds of objects"
SCHEMA_REF_PREFIX = "#/components/schemas/"

# Schema keywords kept from documentation params; anything else is dropped.
DOCUMENTATION_KEYS = frozenset({
    "title",
    "description",
    "type",
    "format",
    "enum",
    "nullable",
    "default",
    "example",
    "examples",
    "deprecated",
    "readOnly",
    "writeOnly",
    "minimum",
    "maximum",
    "exclusiveMinimum",
    "exclusiveMaximum",
    "multipleOf",
    "minLength",
    "maxLength",
    "pattern",
    "minItems",
    "maxItems",
    "uniqueItems",
    "items",
    "properties",
    "additionalProperties",
})


def _camelize(key: str) -> str:
    head, *tail = str(key).split("_")
    return head + "".join(part.capitalize() for part in tail)


def filter_documentation(documentation: dict[str, Any]) -> dict[str, Any]:
    """Keep recognized schema keywords (snake_case accepted), as independent copies."""
    result = {}
    for key, value in documentation.items():
        keyword = _camelize(key)
        if keyword in DOCUMENTATION_KEYS:
            result[keyword] = deepcopy(value)
        elif key not in REF_OVERRIDE_KEYS:
            logger.debug("Dropping unknown documentation key %s", key)
    return result


class Documentation:
    """Builds the OpenAPI schema of one serializer class."""

    TYPE_FIELD_DESCRIPTION = TYPE_FIELD_DESCRIPTION

    def __init__(self, serializer: type):
        self.serializer = serializer

    @staticmethod
    def identifier_for(serializer: type | str) -> str:
        """Schema identifier of a serializer class (or qualified class name)."""
        return identifier_for(serializer)

    @property
    def identifier(self) -> str:
        return identifier_for(self.serializer)

    @property
    def title(self) -> str:
        return qualified_name(self.serializer).replace("Serializer", "")

    def openapi_schema(self) -> dict:
        """Return `{"title", "type": "object", "properties"}` for the serializer."""
        # resolves forward references and rejects cycles on first use
        self.serializer.get_allowed_options()
        properties = {}
        if not self.serializer._skip_type_field:
            properties["type"] = self._type_field_schema()

        fields = [
            *((a, self._attribute_schema(a)) for a in self.serializer._attributes.values()),
            *((n, self._nested_schema(n)) for n in self.serializer._nested_resources.values()),
        ]
        for field, schema in fields:
            if field.group:
                if field.group not in properties:
                    properties[field.group] = self._group_schema(field.group)
                properties[field.group]["properties"][field.name] = schema
            else:
                properties[field.name] = schema

        return {
            "title": self.title,
            "type": "object",
            "properties": properties,
        }

    def _type_field_schema(self) -> dict:
        schema = {"type": "string", "description": TYPE_FIELD_DESCRIPTION}
        declaration = self.serializer._type_declaration
        if declaration is not None:
            schema["enum"] = [declaration.type_name]
            schema["example"] = declaration.type_name
        return schema

    def _group_schema(self, name: str) -> dict:
        documentation = filter_documentation(self.serializer._groups.get(name, {}))
        documentation.pop("type", None)
        documentation.pop("properties", None)
        return {"type": "object", **documentation, "properties": {}}

    @staticmethod
    def _attribute_schema(attribute: Attribute) -> dict:
        schema = filter_documentation(attribute.documentation)
        if not schema.get("nullable"):
            return schema
        if "enum" in schema:
            schema["enum"] = [*schema["enum"], None]
        if "type" in schema:
            if isinstance(schema["type"], list):
                if "null" not in schema["type"]:
                    schema["type"] = [*schema["type"], "null"]
            else:
                schema["type"] = [schema["type"], "null"]
            del schema["nullable"]
        return schema

    def _nested_schema(self, resource: NestedResource) -> dict:
        schema = filter_documentation(resource.documentation)
        schema.pop("type", None)
        nullable = bool(schema.get("nullable"))
        refs = [{"$ref": self._ref(resource, target)} for target in resource.targets()]

        if resource.is_collection:
            schema.pop("nullable", None)
            schema["type"] = "array"
            schema["items"] = {"oneOf": refs} if resource.is_polymorphic else refs[0]
        elif resource.is_polymorphic:
            if nullable:
                del schema["nullable"]
                refs.append({"type": "null"})
            schema["oneOf"] = refs
        elif nullable:
            del schema["nullable"]
            schema["oneOf"] = [refs[0], {"type": "null"}]
        else:
            schema["$ref"] = refs[0]["$ref"]
        return schema

    @staticmethod
    def _ref(resource: NestedResource, target: type) -> str:
        return SCHEMA_REF_PREFIX + (resource.ref_override or identifier_for(target))


def build_components(*serializers: type) -> dict[str, dict]:
    """Schemas of serializers and of every serializer they reference, by identifier.

    The result is suitable as the OpenAPI `components.schemas` mapping.
    """
    components = {}
    owners = {}
    pending = list(serializers)
    for serializer in serializers:
        serializer.get_allowed_options()
    while pending:
        serializer = pending.pop(0)
        documentation = Documentation(serializer)
        identifier = documentation.identifier
        if identifier in owners:
            if owners[identifier] is not serializer:
                raise ConfigurationError(
                    f"`{owners[identifier].__qualname__}` and `{serializer.__qualname__}` "
                    f"share the schema identifier `{identifier}`"
                )
            continue
        owners[identifier] = serializer
        components[identifier] = documentation.openapi_schema()
        for resource in serializer._nested_resources.values():
            pending.extend(resource.targets())
    return components


__all__ = [
    "Documentation",
    "build_components",
    "filter_documentation",
    "TYPE_FIELD_DESCRIPTION",
    "SCHEMA_REF_PREFIX",
    "DOCUMENTATION_KEYS",
]
