"""Excel workbook export of the utilization grid."""

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from timegrid.core.days import DayRange
from timegrid.domain import DimensionTables, Subject

SHEET_TITLES = {"list": "Lists", "user": "Users", "tag": "Tags"}


def _label(subject: Subject) -> str:
    if subject.target_type == "list":
        return f"{subject.space} > {subject.name}"
    if subject.target_type == "tag":
        return f"#{subject.name}"
    return subject.name


def write_dimension_sheet(ws, subjects: list[Subject], day_range: DayRange) -> None:
    """
    Write one dimension to a worksheet.

    Row 1 holds the visible days, column A the subject labels, the last
    column a SUM over the row.
    """
    days = list(day_range)
    headers = [""] + days + ["Total"]
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)

    first_day_col = get_column_letter(2)
    last_day_col = get_column_letter(len(days) + 1)
    total_col = len(days) + 2

    for row_idx, subject in enumerate(subjects, start=2):
        ws.cell(row=row_idx, column=1, value=_label(subject))
        for col_idx, day in enumerate(days, start=2):
            timing = subject.entries.get(day)
            if timing is not None:
                ws.cell(row=row_idx, column=col_idx, value=round(timing.hours, 2))
        ws.cell(row=row_idx, column=total_col, value=f"=SUM({first_day_col}{row_idx}:{last_day_col}{row_idx})")

    ws.column_dimensions["A"].width = 32


def export_grid_workbook(path: Path, tables: DimensionTables, day_range: DayRange) -> Path:
    wb = Workbook()

    ws_users = wb.active
    ws_users.title = SHEET_TITLES["user"]
    write_dimension_sheet(ws_users, tables.sorted_users(), day_range)

    ws_tags = wb.create_sheet(title=SHEET_TITLES["tag"])
    write_dimension_sheet(ws_tags, tables.sorted_tags(), day_range)

    ws_lists = wb.create_sheet(title=SHEET_TITLES["list"])
    lists = sorted(tables.lists.values(), key=lambda item: (item.space.lower(), item.name.lower(), item.id))
    write_dimension_sheet(ws_lists, lists, day_range)

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(path))
    return path
