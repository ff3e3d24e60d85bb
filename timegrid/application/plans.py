"""Application service for time plan maintenance."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal

from timegrid.core.schema import TimePlan
from timegrid.core.validation import PlanAccessError, validate_plan_for_save
from timegrid.infrastructure import PlanRepository

SaveOutcome = Literal["created", "updated", "deleted"]


@dataclass
class SaveResult:
    outcome: SaveOutcome
    plan: TimePlan | None = None


class PlanService:
    """Coordinates plan create/update/delete for a caller's teams."""

    def __init__(self, repository: PlanRepository) -> None:
        self._repository = repository

    def list_plans(
        self,
        team_ids: Iterable[str],
        first: date | None = None,
        last: date | None = None,
    ) -> list[TimePlan]:
        return self._repository.list_plans(team_ids, first, last)

    def save_plan(self, plan: TimePlan, team_ids: Iterable[str]) -> SaveResult:
        """Store ``plan``; zero or negative hours delete an existing plan."""

        teams = {str(team_id) for team_id in team_ids}
        validate_plan_for_save(plan, teams)

        if plan.id > 0:
            existing = self._repository.get_plan(plan.id)
            if existing is None or existing.team_id != plan.team_id:
                raise PlanAccessError("Not found")
            if plan.is_tombstone:
                self._repository.delete_plan(plan.id)
                return SaveResult(outcome="deleted")
            return SaveResult(outcome="updated", plan=self._repository.update_plan(plan))

        return SaveResult(outcome="created", plan=self._repository.create_plan(plan))

    def reset(self) -> None:
        self._repository.reset()
