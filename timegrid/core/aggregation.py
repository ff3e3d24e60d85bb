"""Fold time entries into the list, user and tag dimension tables."""

from __future__ import annotations

import logging
from typing import Iterable

from timegrid.core.normalize import MILLIS_PER_HOUR, NormalizedEntry, normalize_entry
from timegrid.core.schema import TimeEntry
from timegrid.domain import DimensionTables, ListSubject, TagSubject, Timing, UserSubject

logger = logging.getLogger(__name__)


def _accumulate(entries: dict[str, Timing], item: NormalizedEntry, reference: str) -> None:
    timing = entries.get(item.day)
    if timing is None:
        timing = Timing(units_per_hour=item.units_per_hour)
        entries[item.day] = timing
    timing.add(reference, item.units)


def _fold(tables: DimensionTables, item: NormalizedEntry) -> None:
    project = tables.lists.get(item.list_id)
    if project is None:
        project = ListSubject(id=item.list_id, name=item.list_name, space=item.space_name)
        tables.lists[item.list_id] = project
    _accumulate(project.entries, item, item.user_name)

    user = tables.users.get(item.user_id)
    if user is None:
        user = UserSubject(id=item.user_id, name=item.user_name)
        tables.users[item.user_id] = user
    _accumulate(user.entries, item, item.project_path)

    for tag_name in item.tag_names:
        tag = tables.tags.get(tag_name)
        if tag is None:
            tag = TagSubject(id=tag_name, name=tag_name)
            tables.tags[tag_name] = tag
        _accumulate(tag.entries, item, item.tag_reference)


def aggregate(entries: Iterable[TimeEntry], units_per_hour: int = MILLIS_PER_HOUR) -> DimensionTables:
    """Build fresh dimension tables from a complete set of time entries.

    The result does not depend on the order of ``entries``.  Entries whose
    duration cannot be used are left out of every table.
    """

    tables = DimensionTables()
    skipped = 0
    for entry in entries:
        item = normalize_entry(entry, units_per_hour)
        if item is None:
            skipped += 1
            continue
        _fold(tables, item)

    if skipped:
        logger.debug("aggregation skipped %d malformed time entries", skipped)
    return tables


def _merge_entries(target: dict[str, Timing], source: dict[str, Timing]) -> None:
    for day, timing in source.items():
        existing = target.get(day)
        if existing is None:
            target[day] = timing.copy()
        else:
            existing.absorb(timing)


def _copy_entries(entries: dict[str, Timing]) -> dict[str, Timing]:
    return {day: timing.copy() for day, timing in entries.items()}


def merge_tables(left: DimensionTables, right: DimensionTables) -> DimensionTables:
    """Key-wise sum of two dimension tables; neither input is modified."""

    merged = DimensionTables(
        lists={key: ListSubject(s.id, s.name, s.space, _copy_entries(s.entries)) for key, s in left.lists.items()},
        users={key: UserSubject(s.id, s.name, _copy_entries(s.entries)) for key, s in left.users.items()},
        tags={key: TagSubject(s.id, s.name, _copy_entries(s.entries)) for key, s in left.tags.items()},
    )

    for key, subject in right.lists.items():
        target = merged.lists.setdefault(key, ListSubject(subject.id, subject.name, subject.space))
        _merge_entries(target.entries, subject.entries)
    for key, subject in right.users.items():
        target = merged.users.setdefault(key, UserSubject(subject.id, subject.name))
        _merge_entries(target.entries, subject.entries)
    for key, subject in right.tags.items():
        target = merged.tags.setdefault(key, TagSubject(subject.id, subject.name))
        _merge_entries(target.entries, subject.entries)
    return merged
