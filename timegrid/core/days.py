"""Calendar-day bucketing for the utilization grid.

Every timestamp in the system is reduced to a UTC ``YYYY-MM-DD`` key.  ISO
day keys sort chronologically, so range checks compare strings directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

DEFAULT_LOOKBACK_DAYS = 30
DEFAULT_OVERFETCH_DAYS = 30

ONE_DAY = timedelta(days=1)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_key(timestamp: datetime | date) -> str:
    """Return the UTC calendar day of ``timestamp`` as ``YYYY-MM-DD``."""

    if isinstance(timestamp, datetime):
        return _as_utc(timestamp).date().isoformat()
    return timestamp.isoformat()


def parse_day(key: str) -> date:
    return date.fromisoformat(key)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""

    current = start
    while current <= end:
        yield current
        current += ONE_DAY


@dataclass(frozen=True)
class DayRange:
    """Visible grid days plus the wider window entries must be fetched for."""

    days: tuple[str, ...]
    start_time: datetime
    end_time: datetime
    overfetch_start: datetime

    @property
    def first(self) -> str:
        return self.days[0]

    @property
    def last(self) -> str:
        return self.days[-1]

    @property
    def first_date(self) -> date:
        return parse_day(self.first)

    @property
    def last_date(self) -> date:
        return parse_day(self.last)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.first <= key <= self.last

    def __iter__(self) -> Iterator[str]:
        return iter(self.days)

    def __len__(self) -> int:
        return len(self.days)


def build_day_range(
    end_time: datetime | None = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    overfetch_days: int = DEFAULT_OVERFETCH_DAYS,
) -> DayRange:
    if lookback_days < 0 or overfetch_days < 0:
        raise ValueError("lookback_days and overfetch_days must not be negative")
    end = _as_utc(end_time) if end_time is not None else datetime.now(timezone.utc)
    start = end - timedelta(days=lookback_days, seconds=1)

    # counted back from the end date so a midnight ``end`` keeps its own day
    last_day = end.date()
    days = tuple(day_key(last_day - timedelta(days=offset)) for offset in range(lookback_days, -1, -1))

    return DayRange(
        days=days,
        start_time=start,
        end_time=end,
        overfetch_start=start - timedelta(days=overfetch_days),
    )


def split_range(start: datetime, end: datetime, window_days: int) -> list[tuple[datetime, datetime]]:
    """Cut ``start..end`` into consecutive sub-ranges of at most ``window_days``."""

    if window_days < 1:
        raise ValueError("window_days must be positive")
    step = timedelta(days=window_days)
    windows: list[tuple[datetime, datetime]] = []
    position = start
    while position < end:
        upper = min(position + step, end)
        windows.append((position, upper))
        position = upper
    if not windows:
        windows.append((start, end))
    return windows
