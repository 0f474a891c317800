"""Serializer lookup by name and by file extension.

Usage:
    registry = default_registry()
    serializer = registry.for_path(Path("model/domain/Person.json"))
    if serializer is not None:
        entity = serializer.deserialize_from_bytes(data)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from entitycodec.serializers.base import EntityTextSerializer
from entitycodec.serializers.json_serializer import (
    DEFAULT_JSON_FORMAT,
    JsonEntitySerializer,
    JsonFormat,
)

_DEFAULT_JSON_SERIALIZER = JsonEntitySerializer(DEFAULT_JSON_FORMAT)


def get_default_json_serializer() -> JsonEntitySerializer:
    """Return the process-wide JSON serializer built from the default format."""
    return _DEFAULT_JSON_SERIALIZER


def _normalize_extension(extension: str) -> str:
    return extension.lstrip(".").lower()


class SerializerRegistry:
    """Ordered set of serializers with unique names.

    Extension lookup returns the first registered serializer whose
    ``default_file_extension`` matches.
    """

    def __init__(self, serializers: Iterable[EntityTextSerializer] = ()) -> None:
        self._by_name: dict[str, EntityTextSerializer] = {}
        for serializer in serializers:
            self.register(serializer)

    def register(self, serializer: EntityTextSerializer) -> None:
        if serializer.name in self._by_name:
            raise ValueError(f"A serializer named '{serializer.name}' is already registered")
        self._by_name[serializer.name] = serializer

    def get(self, name: str) -> EntityTextSerializer | None:
        return self._by_name.get(name)

    def for_extension(self, extension: str) -> EntityTextSerializer | None:
        wanted = _normalize_extension(extension)
        for serializer in self._by_name.values():
            if _normalize_extension(serializer.default_file_extension) == wanted:
                return serializer
        return None

    def for_path(self, path: str | Path) -> EntityTextSerializer | None:
        suffix = Path(path).suffix
        if not suffix:
            return None
        return self.for_extension(suffix)

    @property
    def extensions(self) -> set[str]:
        return {_normalize_extension(s.default_file_extension) for s in self._by_name.values()}

    def __iter__(self) -> Iterator[EntityTextSerializer]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


def default_registry(fmt: JsonFormat | None = None) -> SerializerRegistry:
    """Registry holding a JSON serializer for *fmt* (the shared one by default)."""
    if fmt is None or fmt == DEFAULT_JSON_FORMAT:
        return SerializerRegistry([_DEFAULT_JSON_SERIALIZER])
    return SerializerRegistry([JsonEntitySerializer(fmt)])
