"""entitycodec configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (ENTITYCODEC_JSON_INDENT, ENTITYCODEC_JSON_ENSURE_ASCII)
  3. Per-project entitycodec.yaml
  4. Global ~/.entitycodec/config.yaml
  5. Hardcoded defaults

The result is frozen: build it once at start-up and share it.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from entitycodec.serializers.json_serializer import ALLOWED_INDENTS, JsonFormat

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".entitycodec"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "entitycodec.yaml"

_KNOWN_SECTIONS: frozenset[str] = frozenset(["json"])

_TRUE_STRINGS = frozenset(["1", "true", "yes", "on"])
_FALSE_STRINGS = frozenset(["0", "false", "no", "off"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file or environment variable holds an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CodecConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    json: JsonFormat = field(default_factory=JsonFormat)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _parse_indent(value: Any, source: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"json.indent in {source} must be an integer, got {value!r}")
    try:
        indent = int(value)
    except ValueError:
        raise ConfigError(f"json.indent in {source} must be an integer, got {value!r}") from None
    if indent not in ALLOWED_INDENTS:
        allowed = " or ".join(str(i) for i in ALLOWED_INDENTS)
        raise ConfigError(f"json.indent in {source} must be {allowed}, got {value!r}")
    return indent


def _parse_bool(value: Any, key: str, source: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigError(f"{key} in {source} must be true or false, got {value!r}")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return raw


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any], source: str) -> CodecConfig:
    """Build a *CodecConfig* from a merged raw YAML dict."""
    cfg = CodecConfig()

    if "json" in data:
        j = data["json"]
        if not isinstance(j, dict):
            raise ConfigError(f"'json' section in {source} must be a mapping.")
        cfg = CodecConfig(
            json=JsonFormat(
                indent=_parse_indent(j.get("indent", cfg.json.indent), source),
                ensure_ascii=_parse_bool(
                    j.get("ensure_ascii", cfg.json.ensure_ascii), "json.ensure_ascii", source
                ),
            )
        )

    return cfg


def _apply_env_overrides(cfg: CodecConfig) -> CodecConfig:
    """Apply ENTITYCODEC_* environment variable overrides."""
    fmt = cfg.json
    if indent := os.environ.get("ENTITYCODEC_JSON_INDENT"):
        fmt = replace(fmt, indent=_parse_indent(indent, "ENTITYCODEC_JSON_INDENT"))
    if ensure_ascii := os.environ.get("ENTITYCODEC_JSON_ENSURE_ASCII"):
        fmt = replace(
            fmt,
            ensure_ascii=_parse_bool(
                ensure_ascii, "ENTITYCODEC_JSON_ENSURE_ASCII", "the environment"
            ),
        )
    return replace(cfg, json=fmt)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> CodecConfig:
    """Load and return a merged *CodecConfig*.

    Applies layers in order: global → per-project → env vars.

    Args:
        project_dir: Directory to search for *entitycodec.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Frozen *CodecConfig* with env var overrides applied.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}
    sources: list[str] = []

    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)
        sources.append(str(global_path))

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)
        sources.append(str(project_cfg_path))

    cfg = _cfg_from_dict(merged, " + ".join(sources) or "defaults")

    return _apply_env_overrides(cfg)
