from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timegrid.core.days import build_day_range
from timegrid.core.settings import GridSettings, load_settings
from timegrid.domain import DimensionTables, ListSubject, TagSubject, Timing, UserSubject
from timegrid.exporters.grid_csv import export_grid_csv, grid_frame
from timegrid.exporters.grid_xlsx import export_grid_workbook


def _tables() -> DimensionTables:
    return DimensionTables(
        lists={"1": ListSubject(id="1", name="Website", space="Client A", entries={"2024-03-01": Timing(units=9_000_000, reference_units={"alice": 9_000_000}, bookings=2)})},
        users={"101": UserSubject(id="101", name="alice", entries={"2024-03-01": Timing(units=9_000_000, reference_units={"Client A > Website": 9_000_000}, bookings=2)})},
        tags={"billable": TagSubject(id="billable", name="billable", entries={"2024-03-01": Timing(units=3_600_000, reference_units={"x": 3_600_000}, bookings=1)})},
    )


def test_bundled_settings_match_defaults(monkeypatch):
    for name in ("TIMEGRID_LOOKBACK_DAYS", "TIMEGRID_OVERFETCH_DAYS", "TIMEGRID_FETCH_WINDOW_DAYS"):
        monkeypatch.delenv(name, raising=False)
    assert load_settings() == GridSettings()


def test_env_overrides_yaml(tmp_path, monkeypatch):
    config = tmp_path / "grid.yaml"
    config.write_text("lookback_days: 14\nduration_units_per_hour: 60\nunknown: 1\n", encoding="utf-8")
    monkeypatch.setenv("TIMEGRID_OVERFETCH_DAYS", "45")

    settings = load_settings(config)

    assert settings.lookback_days == 14
    assert settings.duration_units_per_hour == 60
    assert settings.overfetch_days == 45
    assert settings.fetch_window_days == 30


def test_missing_yaml_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("TIMEGRID_LOOKBACK_DAYS", raising=False)
    monkeypatch.delenv("TIMEGRID_OVERFETCH_DAYS", raising=False)
    monkeypatch.delenv("TIMEGRID_FETCH_WINDOW_DAYS", raising=False)
    assert load_settings(tmp_path / "missing.yaml") == GridSettings()


def test_grid_frame_is_long_form():
    frame = grid_frame(_tables())

    assert list(frame.columns) == ["dimension", "subject_id", "subject_name", "day", "hours", "bookings"]
    assert list(frame["dimension"]) == ["list", "user", "tag"]
    assert frame.loc[frame["dimension"] == "user", "hours"].item() == 2.5


def test_export_grid_csv(tmp_path):
    path = export_grid_csv(tmp_path / "out" / "grid.csv", _tables())

    frame = pd.read_csv(path, dtype={"subject_id": str})
    assert len(frame) == 3
    assert set(frame["subject_id"]) == {"1", "101", "billable"}


def test_export_grid_workbook(tmp_path):
    day_range = build_day_range(datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc))

    path = export_grid_workbook(tmp_path / "grid.xlsx", _tables(), day_range)

    workbook = load_workbook(path)
    lists = workbook["Lists"]
    assert lists.cell(row=1, column=2).value == "2024-02-19"
    assert lists.cell(row=1, column=33).value == "Total"
    assert lists.cell(row=2, column=1).value == "Client A > Website"
    # 2024-03-01 is the 12th visible day
    assert lists.cell(row=2, column=13).value == 2.5
    assert lists.cell(row=2, column=33).value == "=SUM(B2:AF2)"
    assert workbook["Tags"].cell(row=2, column=1).value == "#billable"


@pytest.mark.parametrize("name", ["TIMEGRID_LOOKBACK_DAYS", "TIMEGRID_OVERFETCH_DAYS"])
def test_negative_spans_are_rejected(tmp_path, monkeypatch, name):
    monkeypatch.setenv(name, "-1")
    with pytest.raises(ValueError):
        load_settings(tmp_path / "missing.yaml")
