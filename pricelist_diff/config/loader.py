from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    AppConfig,
    ComparisonConfig,
    DatabaseConfig,
    ExportConfig,
    ZeroRowConfig,
    ZeroRowPolicy,
)

"""Config loader.

Responsibilities:
- Load the YAML config (default config/pricelist.yml)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for every missing key
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "default_config",
]

DEFAULT_CONFIG_PATH = Path("config/pricelist.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it.
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def default_config() -> AppConfig:
    return AppConfig()


def _build(data: dict[str, Any]) -> AppConfig:
    zr = data.get("zero_rows", {})
    cmp_raw = data.get("comparison", {})
    exp = data.get("export", {})
    db_raw = data.get("database", {})

    zero_defaults = ZeroRowConfig()
    zero_rows = ZeroRowConfig(
        legacy_policy=ZeroRowPolicy(zr.get("legacy_policy", zero_defaults.legacy_policy.value)),
        positions=tuple(zr.get("positions", zero_defaults.positions)),
        window=zr.get("window", zero_defaults.window),
    )
    cmp_defaults = ComparisonConfig()
    comparison = ComparisonConfig(
        columns=cmp_raw.get("columns", cmp_defaults.columns),
        temp_marker=cmp_raw.get("temp_marker", cmp_defaults.temp_marker),
        year_context_label=cmp_raw.get("year_context_label", cmp_defaults.year_context_label),
        timeout_seconds=float(cmp_raw.get("timeout_seconds", cmp_defaults.timeout_seconds)),
    )
    exp_defaults = ExportConfig()
    export = ExportConfig(
        sheet_name=exp.get("sheet_name", exp_defaults.sheet_name),
        column_widths=tuple(exp.get("column_widths", exp_defaults.column_widths)),
        default_width=exp.get("default_width", exp_defaults.default_width),
    )
    database = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
    )
    return AppConfig(zero_rows=zero_rows, comparison=comparison, export=export, database=database)


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return _build(data)
