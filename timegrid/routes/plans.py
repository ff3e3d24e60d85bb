from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException
from fastapi.responses import JSONResponse

from timegrid.application import get_plan_service, get_timing_service
from timegrid.core.schema import TimePlan
from timegrid.core.validation import PlanAccessError, ValidationError
from timegrid.routes.timing import require_token

router = APIRouter(prefix="/plans", tags=["plans"])


@router.get("")
async def list_plans(authorization: str | None = Header(default=None)) -> dict:
    token = require_token(authorization)
    team_ids = await get_timing_service().fetch_team_ids(token)
    plans = get_plan_service().list_plans(team_ids)
    return {"items": [plan.model_dump(mode="json") for plan in plans]}


@router.post("")
async def save_plan(plan: TimePlan, authorization: str | None = Header(default=None)) -> JSONResponse:
    """Create, update or (with ``hours <= 0``) delete a time plan."""
    token = require_token(authorization)
    team_ids = await get_timing_service().fetch_team_ids(token)

    try:
        result = get_plan_service().save_plan(plan, team_ids)
    except PlanAccessError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    status_code = 201 if result.outcome == "created" else 200
    body: dict = {"success": True, "outcome": result.outcome}
    if result.plan is not None:
        body["plan"] = result.plan.model_dump(mode="json")
    return JSONResponse(body, status_code=status_code)
