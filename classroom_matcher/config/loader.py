from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_COLUMN_WIDTHS,
    DEFAULT_PRIMARY_ALIASES,
    DEFAULT_REFERENCE_ALIASES,
    ColumnAliases,
    MatcherConfig,
)

"""Config loader.

Responsibilities:
- Resolve the config path (--config > $CLASSROOM_MATCHER_CONFIG > config/matcher.yml)
- Load YAML and validate it against the bundled JSON schema
- Merge provided values over the built-in defaults
"""

SCHEMA_PATH = Path(__file__).parent / "schema.json"
DEFAULT_CONFIG_PATH = Path("config/matcher.yml")
CONFIG_ENV_VAR = "CLASSROOM_MATCHER_CONFIG"


class ConfigError(Exception):
    pass


def resolve_config_path(cli_value: str | None) -> tuple[Path, bool]:
    """Return (path, explicit). explicit=False only for the implicit default path."""
    if cli_value:
        return Path(cli_value), True
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value), True
    return DEFAULT_CONFIG_PATH, False


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the data violates the schema
            (unknown keys, wrong types, bad file extensions).
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


def _merge_aliases(
    defaults: dict[str, tuple[str, ...]], overrides: dict[str, list[str]] | None
) -> dict[str, tuple[str, ...]]:
    merged = dict(defaults)
    for field_name, names in (overrides or {}).items():
        merged[field_name] = tuple(names)
    return merged


def load_config(path: Path, *, required: bool = True) -> MatcherConfig:
    """Load MatcherConfig from YAML.

    A missing file is an error when ``required`` is True; otherwise built-in defaults are
    returned.
    """
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return MatcherConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top-level value must be a mapping")

    _validate_config_schema(data)

    widths = dict(DEFAULT_COLUMN_WIDTHS)
    widths.update(data.get("column_widths") or {})
    aliases = ColumnAliases(
        primary=_merge_aliases(DEFAULT_PRIMARY_ALIASES, data.get("primary_aliases")),
        reference=_merge_aliases(DEFAULT_REFERENCE_ALIASES, data.get("reference_aliases")),
    )
    defaults = MatcherConfig()
    return MatcherConfig(
        output_directory=data.get("output_directory", defaults.output_directory),
        csv_filename=data.get("csv_filename", defaults.csv_filename),
        xlsx_filename=data.get("xlsx_filename", defaults.xlsx_filename),
        sheet_name=data.get("sheet_name", defaults.sheet_name),
        column_widths=widths,
        aliases=aliases,
    )
