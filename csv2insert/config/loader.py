from __future__ import annotations

import codecs
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as SchemaValidationError

from ..validation.collector import DEFAULT_MAX_ERRORS

"""Config loader.

Responsibilities:
- Load YAML config (default config/convert.yml, overridable by CSV2INSERT_CONFIG)
- Validate against config_schema.json (additional keys rejected)
- Apply defaults (max_errors=100, encoding=utf-8, timezone=UTC, file_pattern=*.csv)
"""

__all__ = [
    "ConfigError",
    "ConvertConfig",
    "load_config",
    "resolve_config_path",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/convert.yml")
CONFIG_ENV_VAR = "CSV2INSERT_CONFIG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ConvertConfig:
    source_directory: str  # directory scanned for CSV files
    output_directory: str  # generated .sql files go here
    max_errors: int = DEFAULT_MAX_ERRORS  # error collector capacity per file
    encoding: str = "utf-8"  # input file encoding
    timezone: str = "UTC"  # zone of generated_at / output file stamp
    file_pattern: str = "*.csv"

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def resolve_config_path(cli_path: str | None = None) -> Path:
    """--config wins, then $CSV2INSERT_CONFIG, then config/convert.yml."""
    if cli_path:
        return Path(cli_path)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or data violates the schema
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except SchemaValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path) -> ConvertConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config validation failed: top level must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    tz = data.get("timezone", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    encoding = data.get("encoding", "utf-8")
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        raise ConfigError(f"unknown encoding: {encoding}") from e

    return ConvertConfig(
        source_directory=data["source_directory"],
        output_directory=data["output_directory"],
        max_errors=data.get("max_errors", DEFAULT_MAX_ERRORS),
        encoding=encoding,
        timezone=tz,
        file_pattern=data.get("file_pattern", "*.csv"),
    )
