from __future__ import annotations

import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timegrid.core.days import build_day_range, day_key, iter_days, split_range


@pytest.mark.parametrize(
    "end_time",
    [
        datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc),
        datetime(2024, 3, 20, 0, 0, tzinfo=timezone.utc),
        datetime(2024, 3, 20, 23, 59, 59, tzinfo=timezone.utc),
        datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc),
    ],
)
def test_day_range_has_31_consecutive_days_ending_on_end_day(end_time):
    day_range = build_day_range(end_time)

    assert len(day_range) == 31
    assert day_range.last == end_time.date().isoformat()
    dates = [date.fromisoformat(day) for day in day_range]
    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(dates, dates[1:]))


def test_day_range_boundaries_and_overfetch():
    end_time = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)

    day_range = build_day_range(end_time)

    assert day_range.first == "2024-02-19"
    assert day_range.last == "2024-03-20"
    assert day_range.start_time == end_time - timedelta(days=30, seconds=1)
    assert day_range.overfetch_start == day_range.start_time - timedelta(days=30)
    assert "2024-03-01" in day_range
    assert "2024-02-18" not in day_range
    assert "2024-03-21" not in day_range


def test_naive_end_time_is_utc():
    day_range = build_day_range(datetime(2024, 3, 20, 12, 0))
    assert day_range.end_time.tzinfo == timezone.utc
    assert day_range.last == "2024-03-20"


def test_custom_lookback():
    day_range = build_day_range(datetime(2024, 3, 20, tzinfo=timezone.utc), lookback_days=6, overfetch_days=0)
    assert list(day_range) == [f"2024-03-{day:02d}" for day in range(14, 21)]
    assert day_range.overfetch_start == day_range.start_time


def test_day_key_uses_utc_calendar_day():
    offset = timezone(timedelta(hours=-2))
    assert day_key(datetime(2024, 3, 5, 23, 30, tzinfo=offset)) == "2024-03-06"
    assert day_key(date(2024, 3, 5)) == "2024-03-05"


def test_iter_days_is_inclusive():
    days = list(iter_days(date(2024, 2, 28), date(2024, 3, 1)))
    assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_split_range_covers_span_without_gaps():
    end = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)
    start = end - timedelta(days=60, seconds=1)

    windows = split_range(start, end, 30)

    assert len(windows) == 3
    assert windows[0][0] == start
    assert windows[-1][1] == end
    assert all(previous[1] == current[0] for previous, current in zip(windows, windows[1:]))


def test_split_range_rejects_empty_window():
    with pytest.raises(ValueError):
        split_range(datetime(2024, 1, 1), datetime(2024, 1, 2), 0)


@pytest.mark.parametrize("lookback, overfetch", [(-1, 30), (30, -1)])
def test_day_range_rejects_negative_spans(lookback, overfetch):
    with pytest.raises(ValueError):
        build_day_range(datetime(2024, 3, 20, tzinfo=timezone.utc), lookback, overfetch)
