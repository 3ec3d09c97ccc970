from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_VOCABULARY,
    VARIANT_DAY_BLOCKS,
    VARIANT_RECEIPT_JOIN,
    ActivityConfig,
    HeaderVocabulary,
    ReconcileConfig,
    SheetLayout,
)
from ..models.day_block import ColumnRole

"""Config loader.

Responsibilities:
- Load the YAML config (default: config/stock_sheet.yml)
- Validate it against the bundled JSON schema
- Apply defaults for every optional key and build ReconcileConfig
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "build_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/stock_sheet.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing / not valid JSON, or the config data
            fails schema validation (missing required keys, wrong types,
            unknown keys).
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


def build_config(data: dict[str, Any]) -> ReconcileConfig:
    """Build ReconcileConfig from already-validated data, applying defaults."""
    layout_raw = data.get("layout") or {}
    defaults = SheetLayout()
    layout = SheetLayout(
        base_offset=layout_raw.get("base_offset", defaults.base_offset),
        block_width=layout_raw.get("block_width", defaults.block_width),
        max_days=layout_raw.get("max_days", defaults.max_days),
        category_column=layout_raw.get("category_column", defaults.category_column),
        code_column=layout_raw.get("code_column", defaults.code_column),
        name_column=layout_raw.get("name_column", defaults.name_column),
        header_row=layout_raw.get("header_row", defaults.header_row),
    )

    vocab_raw = data.get("vocabulary")
    vocabulary = HeaderVocabulary.from_mapping(vocab_raw) if vocab_raw else DEFAULT_VOCABULARY

    fallback_raw = data.get("positional_fallback")
    positional_fallback: tuple[ColumnRole, ...] | None = None
    if fallback_raw is not None:
        if len(fallback_raw) != layout.block_width:
            raise ConfigError(
                f"positional_fallback must list {layout.block_width} roles, got {len(fallback_raw)}"
            )
        positional_fallback = tuple(ColumnRole(r) for r in fallback_raw)

    activity_raw = data.get("activity") or {}
    activity = ActivityConfig(
        include_carried_stock=bool(activity_raw.get("include_carried_stock", True)),
    )

    variant = data.get("variant") or VARIANT_DAY_BLOCKS
    receipts = data.get("receipts")
    if variant == VARIANT_RECEIPT_JOIN and not receipts:
        raise ConfigError("receipts source is required for variant receipt_join")

    return ReconcileConfig(
        source=data["source"],
        output=data.get("output"),
        sheet_name=data.get("sheet_name"),
        layout=layout,
        vocabulary=vocabulary,
        positional_fallback=positional_fallback,
        activity=activity,
        variant=variant,
        receipts=receipts,
    )


def load_config(path: Path, source_override: str | None = None) -> ReconcileConfig:
    """Load, validate and build the run configuration.

    Args:
        path: YAML config file
        source_override: Replaces ``source`` (CLI --source / STOCK_SHEET_SOURCE)
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    if source_override:
        data = {**data, "source": source_override}

    _validate_config_schema(data)
    return build_config(data)
