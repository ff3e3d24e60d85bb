"""Application services."""

from .plans import PlanService, SaveResult
from .timing import TimingService, TimingSnapshot
from timegrid.infrastructure import InMemoryPlanRepository, reset_entry_source

_repository = InMemoryPlanRepository()
_plan_service = PlanService(_repository)
_timing_service = TimingService(_plan_service)


def get_plan_service() -> PlanService:
    """Return the singleton plan service for the process."""

    return _plan_service


def get_timing_service() -> TimingService:
    """Return the singleton timing service for the process."""

    return _timing_service


def reset_timing_state() -> None:
    """Reset stored plans and the configured provider (used in tests)."""

    _plan_service.reset()
    reset_entry_source()


__all__ = [
    "PlanService",
    "SaveResult",
    "TimingService",
    "TimingSnapshot",
    "get_plan_service",
    "get_timing_service",
    "reset_timing_state",
]
