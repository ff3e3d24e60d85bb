"""Overlay recurring time plans onto a subject's day-keyed hours.

A plan repeats every ``cycle_days`` days from ``cycle_start`` until
``cycle_end``.  Each repetition that touches the visible day range becomes a
:class:`CycleWindow`, placed on its start day or, when it began earlier, on the
first visible day.  Used hours always cover the window's real start, so the
subject's entries must include the overfetch range.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator

from timegrid.core.days import DayRange, day_key, iter_days, parse_day
from timegrid.core.schema import TimePlan
from timegrid.domain import MILLIS_PER_HOUR, DimensionTables, Subject


@dataclass(frozen=True)
class CycleWindow:
    plan: TimePlan
    start_day: str
    end_day: str
    used_hours: float
    placement_day: str
    visible_days: int

    @property
    def over_budget(self) -> bool:
        return self.used_hours > self.plan.hours

    @property
    def remaining_hours(self) -> float:
        return self.plan.hours - self.used_hours


def plans_for(subject: Subject, plans: Iterable[TimePlan]) -> list[TimePlan]:
    return [plan for plan in plans if plan.target_type == subject.target_type and plan.target_id == subject.id]


def iter_cycles(plan: TimePlan, first: date, last: date) -> Iterator[tuple[date, date]]:
    """Yield ``(start, end)`` of every cycle of ``plan`` that touches ``first..last``.

    Cycles are clipped at ``min(plan.cycle_end, last)``; enumeration never
    passes that bound.
    """

    bound = min(plan.cycle_end, last)
    step = timedelta(days=plan.cycle_days)

    # jump close to the visible range instead of walking every past cycle
    skip = max(0, (first - plan.cycle_start).days // plan.cycle_days - 1)
    cycle_start = plan.cycle_start + step * skip

    while cycle_start <= bound:
        cycle_end = min(cycle_start + step, bound)
        if not (cycle_end < first or cycle_start > last):
            yield cycle_start, cycle_end
        cycle_start += step


def _visible_days(placement: date, start: date, end: date, last: date, cycle_days: int) -> int:
    return min(
        (placement - start).days + cycle_days,
        (last - placement).days + 1,
        (end - placement).days + 1,
    )


def overlay(subject: Subject, plans: Iterable[TimePlan], day_range: DayRange) -> dict[str, CycleWindow]:
    """Return the cycle windows of ``subject`` keyed by placement day."""

    first = day_range.first_date
    last = day_range.last_date
    windows: dict[str, CycleWindow] = {}

    for plan in plans_for(subject, plans):
        for cycle_start, cycle_end in iter_cycles(plan, first, last):
            start_key = day_key(cycle_start)
            placement_key = start_key if start_key in day_range else day_range.first

            used_units = 0
            units_per_hour = MILLIS_PER_HOUR
            for current in iter_days(cycle_start, cycle_end):
                timing = subject.entries.get(day_key(current))
                if timing is not None:
                    used_units += timing.units
                    units_per_hour = timing.units_per_hour

            # last write wins when two cycles share a placement day
            windows[placement_key] = CycleWindow(
                plan=plan,
                start_day=start_key,
                end_day=day_key(cycle_end),
                used_hours=used_units / units_per_hour,
                placement_day=placement_key,
                visible_days=_visible_days(parse_day(placement_key), cycle_start, cycle_end, last, plan.cycle_days),
            )
    return windows


def overlay_tables(
    tables: DimensionTables,
    plans: Iterable[TimePlan],
    day_range: DayRange,
) -> dict[tuple[str, str], dict[str, CycleWindow]]:
    """Compute windows for every subject that has at least one window."""

    plan_list = list(plans)
    targeted = {(plan.target_type, plan.target_id) for plan in plan_list}
    results: dict[tuple[str, str], dict[str, CycleWindow]] = {}
    for subject in tables.subjects():
        key = (subject.target_type, subject.id)
        if key not in targeted:
            continue
        windows = overlay(subject, plan_list, day_range)
        if windows:
            results[key] = windows
    return results
