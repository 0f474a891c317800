"""Entity path helpers.

An entity path is a sequence of segments joined by ``::``, e.g.
``model::domain::Person``. Serialized documents never store the path; it is
rebuilt from the top-level ``package`` and ``name`` keys of the content:

    {"name": "Person"}                             -> Person
    {"name": "Person", "package": "model::domain"} -> model::domain::Person

Usage:
    result = derive_entity_path(content)
    if isinstance(result, DerivedPath):
        print(result.path)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

from entitycodec.errors import PathDerivationError

PACKAGE_SEPARATOR = "::"

_NAME_KEY = "name"
_PACKAGE_KEY = "package"

# Letters, digits, _ and $ per segment; no empty segments.
_ENTITY_PATH_RE = re.compile(r"[\w$]+(?:::[\w$]+)*")


@dataclass(frozen=True)
class DerivedPath:
    path: str


@dataclass(frozen=True)
class PathFailure:
    reason: str


PathResult = Union[DerivedPath, PathFailure]


def derive_entity_path(content: Mapping[str, Any] | None) -> PathResult:
    """Compute the entity path from the top level of *content*.

    Only ``name`` and ``package`` are looked at; nested structures are never
    searched. A ``package`` of ``None`` counts as absent.
    """
    if content is None:
        return PathFailure("entity content is missing")

    name = content.get(_NAME_KEY)
    if name is None:
        return PathFailure("entity content has no 'name'")
    if not isinstance(name, str):
        return PathFailure(f"'name' must be a string, got {type(name).__name__}")

    package = content.get(_PACKAGE_KEY)
    if package is None:
        return DerivedPath(name)
    if not isinstance(package, str):
        return PathFailure(f"'package' must be a string, got {type(package).__name__}")

    return DerivedPath(package + PACKAGE_SEPARATOR + name)


def entity_path_from_content(content: Mapping[str, Any] | None) -> str:
    """Like ``derive_entity_path`` but raises on failure.

    Raises:
        PathDerivationError: if the path cannot be computed.
    """
    result = derive_entity_path(content)
    if isinstance(result, PathFailure):
        raise PathDerivationError(f"Could not compute entity path: {result.reason}")
    return result.path


def split_entity_path(path: str) -> tuple[str | None, str]:
    """Split *path* into ``(package, name)``; package is None for a bare name."""
    package, sep, name = path.rpartition(PACKAGE_SEPARATOR)
    if not sep:
        return None, path
    return package, name


def is_valid_entity_path(path: str) -> bool:
    return _ENTITY_PATH_RE.fullmatch(path) is not None
