"""Infrastructure layer for time plan persistence."""
from __future__ import annotations

from datetime import date
from typing import Iterable, Protocol

from timegrid.core.schema import TimePlan


class PlanRepository(Protocol):
    """Persistence contract for time plans."""

    def list_plans(
        self,
        team_ids: Iterable[str],
        first: date | None = None,
        last: date | None = None,
    ) -> list[TimePlan]: ...

    def get_plan(self, plan_id: int) -> TimePlan | None: ...

    def create_plan(self, plan: TimePlan) -> TimePlan: ...

    def update_plan(self, plan: TimePlan) -> TimePlan: ...

    def delete_plan(self, plan_id: int) -> None: ...

    def reset(self) -> None: ...


class InMemoryPlanRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._plans: dict[int, TimePlan] = {}
        self._id_counter = 0

    def list_plans(
        self,
        team_ids: Iterable[str],
        first: date | None = None,
        last: date | None = None,
    ) -> list[TimePlan]:
        teams = set(team_ids)
        plans = [plan for plan in self._plans.values() if plan.team_id in teams]
        if first is not None:
            plans = [plan for plan in plans if plan.cycle_end >= first]
        if last is not None:
            plans = [plan for plan in plans if plan.cycle_start <= last]
        return sorted(plans, key=lambda plan: plan.id)

    def get_plan(self, plan_id: int) -> TimePlan | None:
        return self._plans.get(plan_id)

    def create_plan(self, plan: TimePlan) -> TimePlan:
        self._id_counter += 1
        stored = plan.model_copy(update={"id": self._id_counter})
        self._plans[stored.id] = stored
        return stored

    def update_plan(self, plan: TimePlan) -> TimePlan:
        if plan.id not in self._plans:
            raise KeyError(plan.id)
        self._plans[plan.id] = plan
        return plan

    def delete_plan(self, plan_id: int) -> None:
        self._plans.pop(plan_id, None)

    def reset(self) -> None:
        self._plans.clear()
        self._id_counter = 0
