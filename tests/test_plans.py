from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError as ModelValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timegrid.application import PlanService
from timegrid.core.plan_merge import merge_plans
from timegrid.core.schema import TimePlan
from timegrid.core.validation import PlanAccessError, ValidationError
from timegrid.infrastructure import InMemoryPlanRepository


def _plan(**overrides) -> TimePlan:
    data = {
        "id": 5,
        "team_id": "team-1",
        "name": "Support",
        "target_type": "list",
        "target_id": "42",
        "cycle_start": "2024-03-01",
        "cycle_end": "2024-06-30",
        "cycle_days": 14,
        "hours": 20,
    }
    data.update(overrides)
    return TimePlan.model_validate(data)


@pytest.fixture()
def service() -> PlanService:
    return PlanService(InMemoryPlanRepository())


def test_merge_without_pending_returns_copy():
    persisted = [_plan()]
    merged = merge_plans(persisted, None)
    assert merged == persisted
    assert merged is not persisted


def test_merge_replaces_matching_id_in_place():
    persisted = [_plan(id=4), _plan(), _plan(id=6)]
    pending = _plan(hours=3)

    merged = merge_plans(persisted, pending)

    assert [plan.id for plan in merged] == [4, 5, 6]
    assert merged[1].hours == 3
    assert persisted[1].hours == 20


def test_merge_appends_unsaved_plan():
    persisted = [_plan()]
    pending = _plan(id=0, hours=3)

    merged = merge_plans(persisted, pending)

    assert len(merged) == 2
    assert merged[0] is persisted[0]
    assert merged[1].id == 0
    assert len(persisted) == 1


def test_plan_model_rejects_invalid_cycles():
    with pytest.raises(ModelValidationError):
        _plan(cycle_days=0)
    with pytest.raises(ModelValidationError):
        _plan(cycle_start="2024-07-01", cycle_end="2024-06-30")
    with pytest.raises(ModelValidationError):
        _plan(target_type="folder")


def test_plan_model_accepts_stored_timestamps():
    plan = _plan(cycle_start="2024-03-01T00:00:00.000Z", cycle_end="2024-06-30T00:00:00Z", team_id=9001)
    assert plan.cycle_start.isoformat() == "2024-03-01"
    assert plan.team_id == "9001"


def test_create_assigns_new_id(service):
    result = service.save_plan(_plan(id=0), ["team-1"])

    assert result.outcome == "created"
    assert result.plan.id == 1
    assert service.list_plans(["team-1"]) == [result.plan]


def test_update_replaces_stored_values(service):
    created = service.save_plan(_plan(id=0), ["team-1"]).plan

    result = service.save_plan(_plan(id=created.id, hours=35, name="Support Q2"), ["team-1"])

    assert result.outcome == "updated"
    stored = service.list_plans(["team-1"])
    assert stored[0].hours == 35
    assert stored[0].name == "Support Q2"


def test_zero_hours_deletes_existing_plan(service):
    created = service.save_plan(_plan(id=0), ["team-1"]).plan

    result = service.save_plan(_plan(id=created.id, hours=0), ["team-1"])

    assert result.outcome == "deleted"
    assert service.list_plans(["team-1"]) == []


def test_zero_hours_without_id_is_rejected(service):
    with pytest.raises(ValidationError):
        service.save_plan(_plan(id=0, hours=0), ["team-1"])


def test_foreign_team_is_rejected(service):
    with pytest.raises(PlanAccessError):
        service.save_plan(_plan(id=0), ["team-2"])


def test_update_of_unknown_or_foreign_plan_is_rejected(service):
    created = service.save_plan(_plan(id=0, team_id="team-2"), ["team-2"]).plan

    with pytest.raises(PlanAccessError):
        service.save_plan(_plan(id=created.id), ["team-1", "team-2"])
    with pytest.raises(PlanAccessError):
        service.save_plan(_plan(id=99), ["team-1"])


def test_list_plans_filters_by_team_and_range(service):
    service.save_plan(_plan(id=0, cycle_start="2024-01-01", cycle_end="2024-01-31"), ["team-1"])
    current = service.save_plan(_plan(id=0), ["team-1"]).plan
    service.save_plan(_plan(id=0, team_id="team-2"), ["team-2"])

    visible = service.list_plans(["team-1"], date(2024, 2, 19), date(2024, 3, 20))

    assert visible == [current]
