"""Shared helpers for entitycodec commands: config, file discovery, re-encoding."""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from entitycodec.cli.errors import err_config, err_decode_failed, err_path_derivation
from entitycodec.config import ConfigError, load_config
from entitycodec.errors import EntitySerializationError, PathDerivationError
from entitycodec.serializers.base import EntityTextSerializer
from entitycodec.serializers.registry import SerializerRegistry, default_registry

logger = logging.getLogger(__name__)

_MAX_DEPTH = 10


def load_registry(console: Console) -> SerializerRegistry:
    """Build the serializer registry from config; exit 1 on a bad config."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1) from exc
    logger.debug("JSON format: indent=%d ensure_ascii=%s", cfg.json.indent, cfg.json.ensure_ascii)
    return default_registry(cfg.json)


# ------------------------------------------------------------------
# File discovery
# ------------------------------------------------------------------


def expand_paths(
    paths: list[Path],
    extensions: set[str],
    recursive: bool,
    exclude: list[str],
) -> list[Path]:
    """Expand directories to entity files; explicit files are kept as-is."""
    result: list[Path] = []
    for p in paths:
        if p.is_dir():
            files = _scan_dir(p, extensions, recursive=recursive, exclude=exclude, depth=0)
            logger.debug("%s: %d entity file(s)", p, len(files))
            result.extend(files)
        else:
            result.append(p)
    return result


def _scan_dir(
    directory: Path,
    extensions: set[str],
    recursive: bool,
    exclude: list[str],
    depth: int,
) -> list[Path]:
    """Return entity files in *directory* (optionally recursive)."""
    files: list[Path] = []
    try:
        entries = sorted(directory.iterdir())
    except PermissionError:
        logger.debug("Permission denied: %s", directory)
        return []
    for entry in entries:
        if any(fnmatch.fnmatch(entry.name, pat) for pat in exclude):
            continue
        if entry.is_file() and entry.suffix.lstrip(".").lower() in extensions:
            files.append(entry)
        elif entry.is_dir() and recursive and depth < _MAX_DEPTH:
            files.extend(
                _scan_dir(entry, extensions, recursive=recursive, exclude=exclude, depth=depth + 1)
            )
    return files


# ------------------------------------------------------------------
# Re-encoding
# ------------------------------------------------------------------


@dataclass
class RecodeResult:
    path: Path
    original: bytes
    canonical: bytes | None = None
    error: EntitySerializationError | None = None

    @property
    def is_canonical(self) -> bool:
        return self.error is None and self.original == self.canonical


def recode_file(path: Path, serializer: EntityTextSerializer) -> RecodeResult:
    """Decode *path* and encode it again; decode/encode failures are captured."""
    data = path.read_bytes()
    try:
        entity = serializer.deserialize_from_bytes(data)
        canonical = serializer.serialize_to_bytes(entity)
    except EntitySerializationError as exc:
        logger.debug("%s: %s", path, exc)
        return RecodeResult(path=path, original=data, error=exc)
    logger.debug("%s: entity %s", path, entity.path)
    return RecodeResult(path=path, original=data, canonical=canonical)


def describe_error(path: Path, error: EntitySerializationError) -> str:
    if isinstance(error, PathDerivationError):
        return err_path_derivation(str(path), str(error))
    return err_decode_failed(str(path), str(error))
