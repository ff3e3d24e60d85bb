from __future__ import annotations

from typing import Sequence

from timegrid.core.schema import TimePlan


def merge_plans(persisted: Sequence[TimePlan], pending: TimePlan | None = None) -> list[TimePlan]:
    """Overlay an unsaved plan edit onto the stored plans.

    A pending plan whose id matches a stored plan replaces it at the same
    position; any other pending plan (including id ``0``, "not saved yet") is
    appended.
    """

    merged = list(persisted)
    if pending is None:
        return merged

    for index, plan in enumerate(merged):
        if plan.id == pending.id:
            merged[index] = pending
            return merged

    merged.append(pending)
    return merged
