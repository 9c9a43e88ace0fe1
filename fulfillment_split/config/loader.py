from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from fulfillment_split.models.config_models import (
    DEFAULT_HEADER_SCAN_ROWS,
    DEFAULT_PAGE_SIZE,
    AnalyzerConfig,
    ColumnLayout,
)

"""Config loader.

Responsibilities:
- Load a YAML config (default config/analyzer.yml)
- Validate it against config_schema.json (shipped next to this module)
- Apply defaults for every missing key
- Let RECORD_URL_TEMPLATE from the environment override the file
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/analyzer.yml")
CONFIG_PATH_ENV = "FULFILLMENT_SPLIT_CONFIG"
URL_TEMPLATE_ENV = "RECORD_URL_TEMPLATE"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the data
            fails validation (unknown keys, wrong types, out-of-range values).
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


def _apply_env_overrides(cfg: AnalyzerConfig) -> AnalyzerConfig:
    template = os.getenv(URL_TEMPLATE_ENV)
    if not template:
        return cfg
    if "{record_id}" not in template:
        raise ConfigError(f"{URL_TEMPLATE_ENV} must contain '{{record_id}}': {template}")
    return replace(cfg, record_url_template=template)


def default_config() -> AnalyzerConfig:
    """Defaults used when no config file exists (env overrides still apply)."""
    return _apply_env_overrides(AnalyzerConfig())


def load_config(path: Path) -> AnalyzerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    layout_raw = data.get("column_layout", {})
    layout = ColumnLayout(
        order_number_index=layout_raw.get("order_number_index", 2),
        location_index=layout_raw.get("location_index", 3),
    )
    cfg = AnalyzerConfig(
        source_directory=data.get("source_directory"),
        header_scan_rows=data.get("header_scan_rows", DEFAULT_HEADER_SCAN_ROWS),
        column_layout=layout,
        na_strings=data.get("na_strings"),
        record_url_template=data.get("record_url_template"),
        page_size=data.get("page_size", DEFAULT_PAGE_SIZE),
    )
    return _apply_env_overrides(cfg)


def resolve_config(explicit: Path | None = None) -> AnalyzerConfig:
    """Pick the config source for a CLI run.

    Order: explicit --config path, then $FULFILLMENT_SPLIT_CONFIG, then
    config/analyzer.yml if present, otherwise built-in defaults. An explicit
    or env-provided path that does not exist is an error.
    """
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()
