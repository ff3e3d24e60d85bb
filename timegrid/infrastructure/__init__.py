"""Infrastructure layer exports."""

from .clickup import ClickUpClient, ClickUpError
from .entries import NoOpEntrySource, TimeEntrySource, configure_entry_source, get_entry_source, reset_entry_source
from .plans import InMemoryPlanRepository, PlanRepository

__all__ = [
    "ClickUpClient",
    "ClickUpError",
    "InMemoryPlanRepository",
    "NoOpEntrySource",
    "PlanRepository",
    "TimeEntrySource",
    "configure_entry_source",
    "get_entry_source",
    "reset_entry_source",
]
