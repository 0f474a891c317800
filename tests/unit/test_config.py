"""Tests for entitycodec config loader."""

from __future__ import annotations

import dataclasses
import warnings
from pathlib import Path

import pytest
import yaml

from entitycodec.config import CodecConfig, ConfigError, load_config
from entitycodec.serializers.json_serializer import JsonFormat


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_yaml(path: Path, data) -> None:
    path.write_text(yaml.dump(data), encoding="utf-8")


def _load(tmp_path: Path, global_cfg: Path | None = None) -> CodecConfig:
    missing_global = tmp_path / "nonexistent" / "config.yaml"
    return load_config(project_dir=tmp_path, global_config_path=global_cfg or missing_global)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


def test_load_config_defaults_no_files(tmp_path: Path) -> None:
    cfg = _load(tmp_path)
    assert cfg == CodecConfig()
    assert cfg.json == JsonFormat(indent=2, ensure_ascii=False)


def test_load_config_empty_project_file(tmp_path: Path) -> None:
    (tmp_path / "entitycodec.yaml").write_text("", encoding="utf-8")
    assert _load(tmp_path).json.indent == 2


def test_load_config_comment_only_file(tmp_path: Path) -> None:
    (tmp_path / "entitycodec.yaml").write_text("# nothing here\n", encoding="utf-8")
    assert _load(tmp_path).json.indent == 2


def test_config_is_frozen(tmp_path: Path) -> None:
    cfg = _load(tmp_path)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.json.indent = 4  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


def test_project_config(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"indent": 4, "ensure_ascii": True}})
    cfg = _load(tmp_path)
    assert cfg.json.indent == 4
    assert cfg.json.ensure_ascii is True


def test_global_config(tmp_path: Path) -> None:
    global_cfg = tmp_path / "global.yaml"
    _write_yaml(global_cfg, {"json": {"indent": 4}})
    assert _load(tmp_path, global_cfg).json.indent == 4


def test_project_overrides_global_partially(tmp_path: Path) -> None:
    global_cfg = tmp_path / "global.yaml"
    _write_yaml(global_cfg, {"json": {"indent": 4, "ensure_ascii": True}})
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"indent": 2}})

    cfg = _load(tmp_path, global_cfg)
    assert cfg.json.indent == 2
    assert cfg.json.ensure_ascii is True  # global value preserved


def test_env_overrides_files(tmp_path: Path, monkeypatch) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"indent": 2}})
    monkeypatch.setenv("ENTITYCODEC_JSON_INDENT", "4")
    monkeypatch.setenv("ENTITYCODEC_JSON_ENSURE_ASCII", "yes")

    cfg = _load(tmp_path)
    assert cfg.json.indent == 4
    assert cfg.json.ensure_ascii is True


def test_env_empty_value_ignored(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ENTITYCODEC_JSON_INDENT", "")
    assert _load(tmp_path).json.indent == 2


def test_defaults_to_cwd(tmp_path: Path, monkeypatch) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"indent": 4}})
    monkeypatch.chdir(tmp_path)
    assert load_config(global_config_path=tmp_path / "missing.yaml").json.indent == 4


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("indent", [0, 3, 8, "two", True, 2.0, None])
def test_invalid_indent(tmp_path: Path, indent) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"indent": indent}})
    with pytest.raises(ConfigError, match="json.indent"):
        _load(tmp_path)


def test_invalid_indent_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("ENTITYCODEC_JSON_INDENT", "3")
    with pytest.raises(ConfigError, match="ENTITYCODEC_JSON_INDENT"):
        _load(tmp_path)


@pytest.mark.parametrize("value", [1, "maybe", [True]])
def test_invalid_ensure_ascii(tmp_path: Path, value) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"ensure_ascii": value}})
    with pytest.raises(ConfigError, match="ensure_ascii"):
        _load(tmp_path)


def test_json_section_not_mapping(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": [2]})
    with pytest.raises(ConfigError, match="'json' section"):
        _load(tmp_path)


def test_top_level_not_mapping(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", ["json"])
    with pytest.raises(ConfigError, match="mapping"):
        _load(tmp_path)


def test_config_error_is_value_error() -> None:
    assert issubclass(ConfigError, ValueError)


def test_unknown_key_warns(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"xml": {"indent": 2}})
    with pytest.warns(UserWarning, match="Unknown config key 'xml'"):
        cfg = _load(tmp_path)
    assert cfg == CodecConfig()


def test_known_keys_do_not_warn(tmp_path: Path) -> None:
    _write_yaml(tmp_path / "entitycodec.yaml", {"json": {"indent": 4}})
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        _load(tmp_path)
