"""Application service that assembles the utilization grid for a caller."""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from pydantic import ValidationError

from timegrid.application.plans import PlanService
from timegrid.core.aggregation import aggregate
from timegrid.core.cycles import CycleWindow, overlay, overlay_tables
from timegrid.core.days import DayRange, build_day_range, split_range
from timegrid.core.plan_merge import merge_plans
from timegrid.core.schema import TimeEntry, TimePlan
from timegrid.core.settings import get_settings
from timegrid.domain import DimensionTables
from timegrid.infrastructure import get_entry_source
from timegrid.infrastructure.clickup import team_member_ids

logger = logging.getLogger(__name__)


@dataclass
class TimingSnapshot:
    """Everything one grid request produces."""

    day_range: DayRange
    tables: DimensionTables
    plans: list[TimePlan]
    windows: dict[tuple[str, str], dict[str, CycleWindow]] = field(default_factory=dict)
    team_ids: list[str] = field(default_factory=list)

    def windows_for(self, target_type: str, target_id: str) -> dict[str, CycleWindow]:
        return self.windows.get((target_type, target_id), {})


def _entry_identity(raw: dict[str, Any]) -> str:
    entry_id = raw.get("id")
    if entry_id not in (None, ""):
        return f"id:{entry_id}"
    return "raw:" + json.dumps(raw, sort_keys=True, default=str)


def deduplicate_entries(batches: Iterable[Iterable[dict[str, Any]]]) -> list[dict[str, Any]]:
    """Join fetched batches, keeping the first copy of every entry id."""

    seen: set[str] = set()
    unique: list[dict[str, Any]] = []
    for batch in batches:
        for raw in batch:
            identity = _entry_identity(raw)
            if identity in seen:
                continue
            seen.add(identity)
            unique.append(raw)
    return unique


def parse_entries(rows: Iterable[dict[str, Any]]) -> list[TimeEntry]:
    entries: list[TimeEntry] = []
    for row in rows:
        try:
            entries.append(TimeEntry.model_validate(row))
        except ValidationError as exc:
            logger.warning("dropping malformed time entry %s: %s", row.get("id"), exc.errors()[:1])
    return entries


class TimingService:
    """Fetches entries for a caller's teams and builds grid snapshots."""

    def __init__(self, plans: PlanService) -> None:
        self._plans = plans

    async def _fetch_entries(self, token: str, teams: list[dict[str, Any]], day_range: DayRange) -> list[dict[str, Any]]:
        settings = get_settings()
        source = get_entry_source()
        windows = split_range(day_range.overfetch_start, day_range.end_time, settings.fetch_window_days)

        requests = []
        for team in teams:
            members = team_member_ids(team)
            for start, end in windows:
                requests.append(
                    asyncio.to_thread(
                        source.fetch_time_entries,
                        token,
                        str(team["id"]),
                        start=start,
                        end=end,
                        assignees=members,
                    )
                )

        batches = await asyncio.gather(*requests)
        unique = deduplicate_entries(batches)
        logger.info(
            "fetched %d time entries (%d unique) from %d teams in %d requests",
            sum(len(batch) for batch in batches),
            len(unique),
            len(teams),
            len(requests),
        )
        return unique

    async def fetch_team_ids(self, token: str) -> list[str]:
        teams = await asyncio.to_thread(get_entry_source().fetch_teams, token)
        return [str(team["id"]) for team in teams if team.get("id") is not None]

    async def build_timing(self, token: str, end_time: datetime | None = None) -> TimingSnapshot:
        settings = get_settings()
        day_range = build_day_range(end_time, settings.lookback_days, settings.overfetch_days)

        teams = await asyncio.to_thread(get_entry_source().fetch_teams, token)
        teams = [team for team in teams if team.get("id") is not None]
        team_ids = [str(team["id"]) for team in teams]

        raw_entries = await self._fetch_entries(token, teams, day_range)
        tables = aggregate(parse_entries(raw_entries), settings.duration_units_per_hour)

        plans = self._plans.list_plans(team_ids, day_range.first_date, day_range.last_date)
        windows = overlay_tables(tables, plans, day_range)
        return TimingSnapshot(day_range=day_range, tables=tables, plans=plans, windows=windows, team_ids=team_ids)

    async def preview(self, token: str, pending: TimePlan, end_time: datetime | None = None) -> dict[str, CycleWindow]:
        """Windows of the pending plan's target as if ``pending`` were saved."""

        snapshot = await self.build_timing(token, end_time)
        subject = snapshot.tables.find(pending.target_type, pending.target_id)
        if subject is None:
            return {}
        if pending.is_tombstone:
            # zero hours deletes the edited plan
            plans = [plan for plan in snapshot.plans if plan.id != pending.id]
        else:
            plans = merge_plans(snapshot.plans, pending)
        return overlay(subject, plans, snapshot.day_range)
