#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timegrid.application.timing import parse_entries
from timegrid.core.aggregation import aggregate
from timegrid.core.days import build_day_range
from timegrid.core.settings import get_settings
from timegrid.exporters.grid_csv import export_grid_csv
from timegrid.exporters.grid_xlsx import export_grid_workbook


def main() -> None:
    parser = argparse.ArgumentParser(description="Aggregate a time entries file into grid exports")
    parser.add_argument("--entries", required=True, help="JSON file with a top-level 'data' list")
    parser.add_argument("--output-dir", required=True, help="Directory for grid.csv and grid.xlsx")
    parser.add_argument("--end", default=None, help="ISO timestamp of the last visible moment (default: now)")
    args = parser.parse_args()

    payload = json.loads(Path(args.entries).read_text(encoding="utf-8"))
    rows = payload.get("data", []) if isinstance(payload, dict) else payload

    settings = get_settings()
    end_time = datetime.fromisoformat(args.end) if args.end else None
    day_range = build_day_range(end_time, settings.lookback_days, settings.overfetch_days)
    tables = aggregate(parse_entries(rows), settings.duration_units_per_hour)

    output_dir = Path(args.output_dir)
    csv_path = export_grid_csv(output_dir / "grid.csv", tables)
    xlsx_path = export_grid_workbook(output_dir / "grid.xlsx", tables, day_range)
    print(f"Grid exported: {csv_path}, {xlsx_path}")


if __name__ == "__main__":
    main()
