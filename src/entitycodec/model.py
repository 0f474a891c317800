"""Domain models for entity serialization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from entitycodec.errors import PathDerivationError
from entitycodec.paths import entity_path_from_content


@dataclass(frozen=True, eq=True)
class Entity:
    """Immutable entity record.

    Fields cannot be reassigned, but ``content`` is the caller's dict and is
    not copied. Entities compare by value and are not hashable (the content
    dict is not).
    """

    path: str
    classifier_path: str
    content: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_content(cls, classifier_path: str, content: dict[str, Any]) -> Entity:
        """Build an entity whose path is derived from *content*.

        Raises:
            PathDerivationError: if *content* has no string ``name`` or a
                non-string ``package``.
        """
        return cls(
            path=entity_path_from_content(content),
            classifier_path=classifier_path,
            content=content,
        )


@dataclass(frozen=True)
class EntityFile:
    """On-disk shape of an entity: the path is implied by ``content``."""

    classifier_path: str
    content: dict[str, Any] | None

    @classmethod
    def from_entity(cls, entity: Entity) -> EntityFile:
        return cls(classifier_path=entity.classifier_path, content=entity.content)

    def to_entity(self) -> Entity:
        if self.content is None:
            raise PathDerivationError("Could not compute entity path: entity content is missing")
        path = entity_path_from_content(self.content)
        return Entity(path=path, classifier_path=self.classifier_path, content=self.content)
