from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Header, HTTPException, Query
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from timegrid.application import get_timing_service
from timegrid.application.timing import TimingSnapshot
from timegrid.core.cycles import CycleWindow
from timegrid.core.exports import discard_export, export_path
from timegrid.core.schema import TimePlan
from timegrid.domain import Subject, Timing
from timegrid.exporters.grid_csv import export_grid_csv
from timegrid.exporters.grid_xlsx import export_grid_workbook

router = APIRouter(prefix="/timing", tags=["timing"])


def require_token(authorization: str | None) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return authorization


def _serialise_timing(timing: Timing) -> dict[str, Any]:
    return {"hours": timing.hours, "bookings": timing.bookings, "references": dict(timing.references)}


def _serialise_window(window: CycleWindow) -> dict[str, Any]:
    return {
        "time_plan": window.plan.model_dump(mode="json"),
        "start_day": window.start_day,
        "end_day": window.end_day,
        "used_hours": window.used_hours,
        "visible_days": window.visible_days,
        "over_budget": window.over_budget,
    }


def _serialise_windows(windows: dict[str, CycleWindow]) -> dict[str, Any]:
    return {day: _serialise_window(window) for day, window in windows.items()}


def _serialise_subject(subject: Subject, snapshot: TimingSnapshot) -> dict[str, Any]:
    row: dict[str, Any] = {"id": subject.id, "name": subject.name}
    if subject.target_type == "list":
        row["space"] = subject.space
    row["entries"] = {day: _serialise_timing(timing) for day, timing in sorted(subject.entries.items())}
    row["windows"] = _serialise_windows(snapshot.windows_for(subject.target_type, subject.id))
    return row


def serialise_snapshot(snapshot: TimingSnapshot) -> dict[str, Any]:
    tables = snapshot.tables
    return {
        "days": list(snapshot.day_range),
        "lists": [_serialise_subject(item, snapshot) for item in tables.sorted_lists()],
        "users": [_serialise_subject(item, snapshot) for item in tables.sorted_users()],
        "tags": [_serialise_subject(item, snapshot) for item in tables.sorted_tags()],
        "time_plans": [plan.model_dump(mode="json") for plan in snapshot.plans],
    }


@router.get("")
async def get_timing(
    end: datetime | None = Query(default=None),
    authorization: str | None = Header(default=None),
) -> dict:
    token = require_token(authorization)
    snapshot = await get_timing_service().build_timing(token, end)
    return serialise_snapshot(snapshot)


@router.post("/preview")
async def preview_plan(
    pending: TimePlan,
    end: datetime | None = Query(default=None),
    authorization: str | None = Header(default=None),
) -> dict:
    """Windows of the edited plan's target, including the unsaved edit."""
    token = require_token(authorization)
    windows = await get_timing_service().preview(token, pending, end)
    return {
        "target_type": pending.target_type,
        "target_id": pending.target_id,
        "windows": _serialise_windows(windows),
    }


@router.get("/export")
async def export_timing(
    format: str = Query(default="xlsx"),
    end: datetime | None = Query(default=None),
    authorization: str | None = Header(default=None),
) -> FileResponse:
    token = require_token(authorization)
    if format not in {"csv", "xlsx"}:
        raise HTTPException(status_code=400, detail="format must be csv or xlsx")

    snapshot = await get_timing_service().build_timing(token, end)
    filename = f"timing-{snapshot.day_range.first}-{snapshot.day_range.last}.{format}"
    target = export_path(filename)
    if format == "csv":
        export_grid_csv(target, snapshot.tables)
        media_type = "text/csv"
    else:
        export_grid_workbook(target, snapshot.tables, snapshot.day_range)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    return FileResponse(
        target,
        media_type=media_type,
        filename=filename,
        background=BackgroundTask(discard_export, target),
    )
