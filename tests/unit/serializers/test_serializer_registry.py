"""Tests for serializer lookup."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from entitycodec.errors import EncodingError
from entitycodec.model import Entity
from entitycodec.paths import entity_path_from_content
from entitycodec.serializers import (
    EntityTextSerializer,
    JsonEntitySerializer,
    JsonFormat,
    SerializerRegistry,
    default_registry,
    get_default_json_serializer,
)


class _GrammarSerializer(EntityTextSerializer):
    """Minimal non-JSON sibling: one ``name = value`` line per content key."""

    @property
    def name(self) -> str:
        return "grammar"

    @property
    def default_file_extension(self) -> str:
        return "pure"

    def serialize_to_string(self, entity: Entity) -> str:
        lines = [f"# {entity.classifier_path}"]
        lines += [f"{k} = {v}" for k, v in sorted(entity.content.items())]
        return "\n".join(lines) + "\n"

    def deserialize_from_string(self, text: str) -> Entity:
        header, *rows = text.splitlines()
        content = dict(row.split(" = ", 1) for row in rows)
        return Entity(entity_path_from_content(content), header[2:], content)


# ---------------------------------------------------------------------------
# Default serializer
# ---------------------------------------------------------------------------


def test_default_json_serializer_is_shared() -> None:
    assert get_default_json_serializer() is get_default_json_serializer()
    assert isinstance(get_default_json_serializer(), JsonEntitySerializer)


def test_default_registry_uses_shared_instance() -> None:
    assert default_registry().get("json") is get_default_json_serializer()


def test_default_registry_custom_format() -> None:
    serializer = default_registry(JsonFormat(indent=4)).get("json")
    assert isinstance(serializer, JsonEntitySerializer)
    assert serializer.format.indent == 4
    assert serializer is not get_default_json_serializer()


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("ext", ["json", ".json", "JSON", ".Json"])
def test_for_extension_normalizes(ext: str) -> None:
    assert default_registry().for_extension(ext) is get_default_json_serializer()


def test_for_extension_unknown() -> None:
    assert default_registry().for_extension("yaml") is None


@pytest.mark.parametrize("path", ["model/Person.json", Path("a/b/C.JSON")])
def test_for_path(path) -> None:
    assert default_registry().for_path(path) is get_default_json_serializer()


@pytest.mark.parametrize("path", ["README", "notes.txt", "model/"])
def test_for_path_no_match(path: str) -> None:
    assert default_registry().for_path(path) is None


def test_get_unknown_name() -> None:
    assert default_registry().get("xml") is None


def test_routes_between_siblings() -> None:
    grammar = _GrammarSerializer()
    registry = SerializerRegistry([get_default_json_serializer(), grammar])

    assert registry.for_path("model/Person.pure") is grammar
    assert registry.for_path("model/Person.json") is get_default_json_serializer()
    assert registry.extensions == {"json", "pure"}
    assert [s.name for s in registry] == ["json", "grammar"]
    assert len(registry) == 2


def test_register_duplicate_name_rejected() -> None:
    registry = default_registry()
    with pytest.raises(ValueError, match="already registered"):
        registry.register(JsonEntitySerializer(JsonFormat(indent=4)))


def test_first_registered_wins_for_extension() -> None:
    class _OtherJson(_GrammarSerializer):
        @property
        def name(self) -> str:
            return "other-json"

        @property
        def default_file_extension(self) -> str:
            return "json"

    registry = SerializerRegistry([get_default_json_serializer(), _OtherJson()])
    assert registry.for_extension("json") is get_default_json_serializer()


# ---------------------------------------------------------------------------
# Base class behaviour through a sibling serializer
# ---------------------------------------------------------------------------


def test_base_derives_bytes_and_streams() -> None:
    grammar = _GrammarSerializer()
    entity = Entity("Foo", "c", {"name": "Foo"})

    data = grammar.serialize_to_bytes(entity)
    assert data == b"# c\nname = Foo\n"
    assert grammar.deserialize_from_bytes(data) == entity
    assert grammar.deserialize(io.BytesIO(data)) == entity
    assert grammar.can_serialize(entity)


def test_base_bytes_rejects_unencodable_text() -> None:
    grammar = _GrammarSerializer()
    with pytest.raises(EncodingError, match="utf-8"):
        grammar.serialize_to_bytes(Entity("Foo", "c", {"name": "Foo", "x": "\ud800"}))
