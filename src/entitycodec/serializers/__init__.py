"""entitycodec serializers — canonical JSON codec and serializer lookup."""

from entitycodec.serializers.base import EntityTextSerializer
from entitycodec.serializers.json_serializer import (
    DEFAULT_JSON_FORMAT,
    JsonEntitySerializer,
    JsonFormat,
)
from entitycodec.serializers.registry import (
    SerializerRegistry,
    default_registry,
    get_default_json_serializer,
)

__all__ = [
    "DEFAULT_JSON_FORMAT",
    "EntityTextSerializer",
    "JsonEntitySerializer",
    "JsonFormat",
    "SerializerRegistry",
    "default_registry",
    "get_default_json_serializer",
]
