from __future__ import annotations

from pathlib import Path

import pandas as pd

from timegrid.domain import DimensionTables, Subject

COLUMNS = ["dimension", "subject_id", "subject_name", "day", "hours", "bookings"]


def _subject_rows(dimension: str, subjects: list[Subject]) -> list[dict]:
    rows = []
    for subject in subjects:
        for day, timing in sorted(subject.entries.items()):
            rows.append(
                {
                    "dimension": dimension,
                    "subject_id": subject.id,
                    "subject_name": subject.name,
                    "day": day,
                    "hours": round(timing.hours, 4),
                    "bookings": timing.bookings,
                }
            )
    return rows


def grid_frame(tables: DimensionTables) -> pd.DataFrame:
    records = [
        *_subject_rows("list", tables.sorted_lists()),
        *_subject_rows("user", tables.sorted_users()),
        *_subject_rows("tag", tables.sorted_tags()),
    ]
    return pd.DataFrame(records, columns=COLUMNS)


def export_grid_csv(path: Path, tables: DimensionTables) -> Path:
    df = grid_frame(tables)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    return path
