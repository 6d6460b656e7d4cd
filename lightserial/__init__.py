"""lightserial: declarative object-to-JSON serializers with OpenAPI schema generation."""

from .serializer import Serializer
from .declarations import attribute, nested, collection, group
from .documentation import Documentation, build_components
from .errors import ConfigurationError, CyclicReferenceError, UnsupportedTypeError
