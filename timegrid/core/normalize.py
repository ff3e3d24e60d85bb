from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from timegrid.core.days import day_key
from timegrid.core.schema import TimeEntry
from timegrid.domain import MILLIS_PER_HOUR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedEntry:
    day: str
    units: int
    user_id: str
    user_name: str
    list_id: str
    list_name: str
    space_name: str
    tag_names: tuple[str, ...] = ()
    units_per_hour: int = MILLIS_PER_HOUR

    @property
    def hours(self) -> float:
        return self.units / self.units_per_hour

    @property
    def project_path(self) -> str:
        return f"{self.space_name} > {self.list_name}"

    @property
    def tag_reference(self) -> str:
        return f"{self.space_name} > {self.list_name} > {self.user_name}"


def parse_duration(value: Any) -> int | None:
    """Return ``value`` as a whole, non-negative number of units or ``None``."""

    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    try:
        duration = int(text)
    except ValueError:
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number) or number < 0:
            return None
        duration = round(number)
    if duration < 0:
        return None
    return duration


def collect_tag_names(entry: TimeEntry) -> tuple[str, ...]:
    """Union of entry and task tag names, first occurrence wins the order."""

    names: list[str] = []
    seen: set[str] = set()
    for tag in [*entry.tags, *entry.task_tags]:
        if tag.name in seen:
            continue
        seen.add(tag.name)
        names.append(tag.name)
    return tuple(names)


def normalize_entry(entry: TimeEntry, units_per_hour: int = MILLIS_PER_HOUR) -> NormalizedEntry | None:
    duration = parse_duration(entry.duration)
    if duration is None:
        logger.debug("skipping time entry %s with unusable duration %r", entry.id, entry.duration)
        return None

    return NormalizedEntry(
        day=day_key(entry.end),
        units=duration,
        user_id=entry.user.id,
        user_name=entry.user.username,
        list_id=entry.task_location.list_id,
        list_name=entry.task_location.list_name,
        space_name=entry.task_location.space_name,
        tag_names=collect_tag_names(entry),
        units_per_hour=units_per_hour,
    )
