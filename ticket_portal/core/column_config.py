"""Load and expose table column configuration from YAML (with fallbacks)."""

from __future__ import annotations

from pathlib import Path

import yaml

from .config import DISPLAY_ORDER_ADMIN, DISPLAY_ORDER_TICKET_LIST, TICKET_CORE_COLUMNS

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {
        "core": list(TICKET_CORE_COLUMNS),
        "ticket_list": list(DISPLAY_ORDER_TICKET_LIST),
        "admin": list(DISPLAY_ORDER_ADMIN),
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
    sets = data.get("sets", {}) or {}
    _CACHE = {name: sets.get(name) or default for name, default in _defaults().items()}
    return _CACHE


def reset_cache() -> None:
    global _CACHE
    _CACHE = None


def get_columns(set_name: str) -> list[str]:
    sets = load_column_sets()
    return sets.get(set_name, [])
