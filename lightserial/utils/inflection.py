"""Name inflection: underscoring class names and deriving schema identifiers."""

import re

NAMESPACE_SEPARATOR = re.compile(r"::|\.")
IDENTIFIER_SEPARATOR = "--"
SERIALIZER_TOKEN = "Serializer"


def qualified_name(thing: type | str) -> str:
    """Return the dotted qualified name of a class, without any `<locals>` prefix."""
    if isinstance(thing, str):
        return thing
    name = thing.__qualname__
    if "<locals>." in name:
        name = name.rsplit("<locals>.", 1)[1]
    return name


def underscore(name: str) -> str:
    """Convert `CamelCase::Name` (or `CamelCase.Name`) to `camel_case/name`."""
    word = NAMESPACE_SEPARATOR.sub("/", name)
    word = re.sub(r"([A-Z\d]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def identifier_for(thing: type | str) -> str:
    """Return the schema identifier of a serializer class or qualified name.

    Each namespace segment loses one `Serializer` token and is underscored;
    segments are joined with `--`:

    >>> identifier_for("Outer::SerializerForUser")
    'outer--for_user'
    >>> identifier_for("WidgetSerializerWithType")
    'widget_with_type'
    """
    segments = []
    for segment in NAMESPACE_SEPARATOR.split(qualified_name(thing)):
        segment = segment.replace(SERIALIZER_TOKEN, "", 1)
        if segment:
            segments.append(underscore(segment))
    return IDENTIFIER_SEPARATOR.join(segments)
