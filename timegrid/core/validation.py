from __future__ import annotations

from timegrid.core.schema import TimePlan


class ValidationError(Exception):
    """Raised when a plan cannot be stored as submitted."""


class PlanAccessError(Exception):
    """Raised when a plan belongs to a team the caller cannot reach."""


def validate_plan_for_save(plan: TimePlan, team_ids: set[str]) -> None:
    if plan.team_id not in team_ids:
        raise PlanAccessError("Team not found")
    if plan.is_tombstone and plan.id <= 0:
        raise ValidationError("Hours must be greater than 0")
    if not plan.target_id.strip():
        raise ValidationError("target_id is required")
