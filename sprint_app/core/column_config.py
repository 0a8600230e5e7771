"""Load and expose table column configuration from YAML (with fallbacks)."""

from __future__ import annotations

from pathlib import Path

import yaml

from .config import ERROR_LOG_COLUMNS, PREVIEW_COLUMNS

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {
        "preview": list(PREVIEW_COLUMNS),
        "errors": list(ERROR_LOG_COLUMNS),
    }


def load_column_sets(base_path: str | Path | None = None):
    global _CACHE
    if _CACHE is not None:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "columns.yaml"
    if not yaml_path.exists():
        _CACHE = _defaults()
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except yaml.YAMLError:
        _CACHE = _defaults()
        return _CACHE
    sets = data.get("sets", {}) if isinstance(data, dict) else {}
    defaults = _defaults()
    _CACHE = {name: list(sets.get(name) or cols) for name, cols in defaults.items()}
    return _CACHE


def reset_column_sets() -> None:
    global _CACHE
    _CACHE = None


def get_columns(set_name: str) -> list[str]:
    sets = load_column_sets()
    return sets.get(set_name, [])
