"""Canonical JSON entity serializer.

Document layout:

    {
      "classifierPath": "meta::pure::metamodel::type::Class",
      "content": {
        "name": "Person",
        "package": "model::domain"
      }
    }

Canonical form:
  - keys sorted at every depth (top level: classifierPath, content)
  - fixed indent (2 spaces by default, 4 allowed), ", " / ": " separators
  - LF newlines, exactly one trailing newline, UTF-8
  - non-finite numbers rejected in both directions

The entity path is not written; it is rebuilt from content.package and
content.name on read.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Mapping, NoReturn

from entitycodec.errors import DecodingError, EncodingError
from entitycodec.model import Entity, EntityFile
from entitycodec.serializers.base import EntityTextSerializer

ALLOWED_INDENTS: tuple[int, ...] = (2, 4)

_CLASSIFIER_PATH = "classifierPath"
_CONTENT = "content"
_DOCUMENT_FIELDS = frozenset([_CLASSIFIER_PATH, _CONTENT])
_BOM = "\ufeff"


@dataclass(frozen=True)
class JsonFormat:
    """Layout options for canonical JSON output.

    Key sorting is not an option: it is always on.

    Attributes:
        indent: Spaces per nesting level, 2 or 4.
        ensure_ascii: Escape non-ASCII characters as ``\\uXXXX``.
    """

    indent: int = 2
    ensure_ascii: bool = False

    def __post_init__(self) -> None:
        if self.indent not in ALLOWED_INDENTS:
            raise ValueError(f"indent must be one of {ALLOWED_INDENTS}, got {self.indent!r}")


DEFAULT_JSON_FORMAT = JsonFormat()


class JsonEntitySerializer(EntityTextSerializer):
    """Stateless; one instance may be shared across threads."""

    def __init__(self, fmt: JsonFormat = DEFAULT_JSON_FORMAT) -> None:
        self._format = fmt

    @property
    def format(self) -> JsonFormat:
        return self._format

    @property
    def name(self) -> str:
        return "json"

    @property
    def default_file_extension(self) -> str:
        return "json"

    # -- Serialization ------------------------------------------------------

    def serialize_to_string(self, entity: Entity) -> str:
        try:
            document = _to_document(EntityFile.from_entity(entity))
            text = json.dumps(
                document,
                sort_keys=True,
                indent=self._format.indent,
                separators=(",", ": "),
                ensure_ascii=self._format.ensure_ascii,
                allow_nan=False,
            )
        except RecursionError as exc:
            raise EncodingError("content is nested too deeply to encode") from exc
        return text + "\n"

    # -- Deserialization ----------------------------------------------------

    def deserialize_from_string(self, text: str) -> Entity:
        return _parse_entity_file(text).to_entity()


# ---------------------------------------------------------------------------
# Encoding helpers
# ---------------------------------------------------------------------------


def _to_document(entity_file: EntityFile) -> dict[str, Any]:
    if not isinstance(entity_file.classifier_path, str):
        raise EncodingError(
            f"classifierPath must be a string, got {type(entity_file.classifier_path).__name__}"
        )
    _check_encodable(entity_file.classifier_path, _CLASSIFIER_PATH)
    if not isinstance(entity_file.content, Mapping):
        raise EncodingError(
            f"content must be a mapping, got {type(entity_file.content).__name__}"
        )
    return {
        _CLASSIFIER_PATH: entity_file.classifier_path,
        _CONTENT: _to_json_value(entity_file.content, _CONTENT, set()),
    }


def _to_json_value(value: Any, location: str, active: set[int]) -> Any:
    """Return a plain dict/list copy of *value*, rejecting anything JSON cannot hold.

    *active* holds the ids of the containers on the current descent path.
    """
    if isinstance(value, str):
        _check_encodable(value, location)
        return value

    if value is None or isinstance(value, (bool, int)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"{location}: non-finite number {value!r} is not allowed")
        return value

    if isinstance(value, Mapping):
        _enter(value, location, active)
        try:
            result: dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise EncodingError(
                        f"{location}: key {key!r} is a {type(key).__name__}, keys must be strings"
                    )
                _check_encodable(key, f"{location} key {key!r}")
                result[key] = _to_json_value(item, f"{location}.{key}", active)
        finally:
            active.discard(id(value))
        return result

    if isinstance(value, (list, tuple)):
        _enter(value, location, active)
        try:
            items = [
                _to_json_value(item, f"{location}[{i}]", active) for i, item in enumerate(value)
            ]
        finally:
            active.discard(id(value))
        return items

    raise EncodingError(f"{location}: unsupported value of type {type(value).__name__}")


def _check_encodable(text: str, location: str) -> None:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise EncodingError(f"{location}: string is not valid Unicode ({exc.reason})") from exc


def _enter(container: Any, location: str, active: set[int]) -> None:
    marker = id(container)
    if marker in active:
        raise EncodingError(f"{location}: circular reference")
    active.add(marker)


# ---------------------------------------------------------------------------
# Decoding helpers
# ---------------------------------------------------------------------------


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"non-standard JSON constant {name!r}")


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _find_unencodable(data: Any) -> str | None:
    """Location of the first key or string that UTF-8 cannot encode, if any.

    Iterative: the parser has already bounded the nesting depth.
    """
    stack: list[tuple[Any, str]] = [(data, "$")]
    while stack:
        value, location = stack.pop()
        if isinstance(value, str):
            try:
                value.encode("utf-8")
            except UnicodeEncodeError:
                return location
        elif isinstance(value, dict):
            for key, item in value.items():
                stack.append((key, f"{location} key {key!r}"))
                stack.append((item, f"{location}.{key}"))
        elif isinstance(value, list):
            stack.extend((item, f"{location}[{i}]") for i, item in enumerate(value))
    return None


def _parse_entity_file(text: str) -> EntityFile:
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DecodingError(f"Entity document is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise DecodingError("Entity document is nested too deeply") from exc

    bad_string = _find_unencodable(data)
    if bad_string is not None:
        raise DecodingError(
            f"Entity document holds a string that is not valid Unicode at {bad_string}"
        )

    if not isinstance(data, dict):
        raise DecodingError(f"Entity document must be a JSON object, got {_json_type(data)}")

    unknown = sorted(set(data) - _DOCUMENT_FIELDS)
    if unknown:
        raise DecodingError(f"Unexpected field(s) in entity document: {', '.join(unknown)}")

    if _CLASSIFIER_PATH not in data:
        raise DecodingError(f"Entity document has no '{_CLASSIFIER_PATH}'")
    classifier_path = data[_CLASSIFIER_PATH]
    if not isinstance(classifier_path, str):
        raise DecodingError(
            f"'{_CLASSIFIER_PATH}' must be a string, got {_json_type(classifier_path)}"
        )

    # A null or missing content is left for path derivation to reject.
    content = data.get(_CONTENT)
    if content is not None and not isinstance(content, dict):
        raise DecodingError(f"'{_CONTENT}' must be an object, got {_json_type(content)}")

    return EntityFile(classifier_path=classifier_path, content=content)
