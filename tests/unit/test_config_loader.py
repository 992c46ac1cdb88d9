from __future__ import annotations

from pathlib import Path

import pytest

from csv2insert.config.loader import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    ConfigError,
    load_config,
    resolve_config_path,
)


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "convert.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_load_config_applies_defaults(tmp_path: Path):
    cfg = load_config(_write(tmp_path, "source_directory: ./in\noutput_directory: ./out\n"))
    assert cfg.source_directory == "./in"
    assert cfg.output_directory == "./out"
    assert cfg.max_errors == 100
    assert cfg.encoding == "utf-8"
    assert cfg.timezone == "UTC"
    assert cfg.file_pattern == "*.csv"
    assert cfg.tzinfo.key == "UTC"


def test_load_config_full(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "file_pattern: \"users_*.csv\"\n"
    write_config.write_text(text.replace("timezone: UTC", "timezone: Asia/Tokyo"), encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.timezone == "Asia/Tokyo"
    assert cfg.file_pattern == "users_*.csv"


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(tmp_path / "nope.yml")


def test_invalid_yaml(tmp_path: Path):
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(_write(tmp_path, "source_directory: [unclosed\n"))


def test_top_level_must_be_mapping(tmp_path: Path):
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize("text", [
    "output_directory: ./out\n",
    "source_directory: ./in\n",
    "source_directory: ./in\noutput_directory: ./out\nmax_errors: 0\n",
    "source_directory: ./in\noutput_directory: ./out\nmax_errors: many\n",
    "source_directory: ./in\noutput_directory: ./out\nunknown_key: 1\n",
])
def test_schema_violations(tmp_path: Path, text: str):
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(tmp_path, text))


def test_empty_file_is_schema_violation(tmp_path: Path):
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(tmp_path, ""))


def test_unknown_timezone(tmp_path: Path):
    text = "source_directory: ./in\noutput_directory: ./out\ntimezone: Mars/Olympus\n"
    with pytest.raises(ConfigError, match="unknown timezone"):
        load_config(_write(tmp_path, text))


def test_unknown_encoding(tmp_path: Path):
    text = "source_directory: ./in\noutput_directory: ./out\nencoding: no-such-codec\n"
    with pytest.raises(ConfigError, match="unknown encoding"):
        load_config(_write(tmp_path, text))


def test_resolve_config_path_precedence(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert resolve_config_path(None) == DEFAULT_CONFIG_PATH
    monkeypatch.setenv(CONFIG_ENV_VAR, "env.yml")
    assert resolve_config_path(None) == Path("env.yml")
    assert resolve_config_path("cli.yml") == Path("cli.yml")
