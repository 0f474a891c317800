"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from entitycodec.model import Entity
from entitycodec.serializers.json_serializer import JsonEntitySerializer

CLASS_CLASSIFIER = "meta::pure::metamodel::type::Class"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's global config and ENTITYCODEC_* env vars out of tests."""
    missing = tmp_path_factory.mktemp("global") / "config.yaml"
    monkeypatch.setattr("entitycodec.config._GLOBAL_CONFIG_PATH", missing)
    monkeypatch.delenv("ENTITYCODEC_JSON_INDENT", raising=False)
    monkeypatch.delenv("ENTITYCODEC_JSON_ENSURE_ASCII", raising=False)


@pytest.fixture
def serializer() -> JsonEntitySerializer:
    return JsonEntitySerializer()


@pytest.fixture
def person() -> Entity:
    return Entity(
        path="model::domain::Person",
        classifier_path=CLASS_CLASSIFIER,
        content={
            "_type": "class",
            "package": "model::domain",
            "name": "Person",
            "properties": [
                {"name": "firstName", "type": "String", "multiplicity": {"lowerBound": 1, "upperBound": 1}},
                {"name": "age", "type": "Integer", "multiplicity": {"lowerBound": 0, "upperBound": 1}},
            ],
            "stereotypes": [],
            "taggedValues": [],
        },
    )


@pytest.fixture
def write_entity_file(serializer):
    """Write *entity* canonically to *path* and return the path."""

    def _write(path: Path, entity: Entity) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(serializer.serialize_to_bytes(entity))
        return path

    return _write
