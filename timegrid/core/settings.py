from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

ENV_OVERRIDES = {
    "lookback_days": "TIMEGRID_LOOKBACK_DAYS",
    "overfetch_days": "TIMEGRID_OVERFETCH_DAYS",
    "fetch_window_days": "TIMEGRID_FETCH_WINDOW_DAYS",
}


@dataclass(frozen=True)
class GridSettings:
    lookback_days: int = 30
    overfetch_days: int = 30
    fetch_window_days: int = 30
    duration_units_per_hour: int = 3_600_000


def _load_grid_table(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp) or {}


def load_settings(path: Path | None = None) -> GridSettings:
    """Read grid defaults from YAML, then apply environment overrides."""

    table = _load_grid_table(path or CONFIG_DIR / "grid.yaml")
    known = {name: int(value) for name, value in table.items() if name in GridSettings.__dataclass_fields__}
    settings = GridSettings(**known)

    overrides: dict[str, int] = {}
    for field_name, env_name in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw:
            overrides[field_name] = int(raw)
    if overrides:
        settings = replace(settings, **overrides)

    if settings.fetch_window_days < 1 or settings.duration_units_per_hour < 1:
        raise ValueError("fetch_window_days and duration_units_per_hour must be positive")
    if settings.lookback_days < 0 or settings.overfetch_days < 0:
        raise ValueError("lookback_days and overfetch_days must not be negative")
    return settings


_settings: GridSettings | None = None


def get_settings() -> GridSettings:
    """Return the process-wide grid settings."""

    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings (used in tests)."""

    global _settings
    _settings = None
