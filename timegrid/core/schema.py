from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TargetType = Literal["list", "user", "tag"]


class EntryUser(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str
    username: str


class TaskLocation(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    list_id: str
    list_name: str
    space_name: str
    folder_name: str | None = None


class Tag(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class TimeEntry(BaseModel):
    """A single logged work interval as delivered by the time-tracking provider."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: str | None = None
    user: EntryUser
    task_location: TaskLocation
    end: datetime
    # parsed by the normalizer, malformed values are skipped there
    duration: Any = None
    tags: list[Tag] = Field(default_factory=list)
    task_tags: list[Tag] = Field(default_factory=list)

    @field_validator("end", mode="before")
    @classmethod
    def _parse_epoch_millis(cls, value: Any) -> Any:
        # The provider sends epoch milliseconds, usually as a numeric string.
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lstrip("-").isdigit():
            value = int(value.strip())
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as exc:
                raise ValueError(f"end timestamp out of range: {value}") from exc
        return value

    @field_validator("end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class TimePlan(BaseModel):
    """Recurring hour budget attached to a list, a user or a tag."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    id: int = 0
    team_id: str
    name: str = ""
    target_type: TargetType
    target_id: str
    cycle_start: date
    cycle_end: date
    cycle_days: int = Field(ge=1)
    hours: float

    @field_validator("cycle_start", "cycle_end", mode="before")
    @classmethod
    def _date_from_timestamp(cls, value: Any) -> Any:
        # Stored plans serialise their dates as full ISO timestamps.
        if isinstance(value, datetime):
            return value.astimezone(timezone.utc).date() if value.tzinfo else value.date()
        if isinstance(value, str) and "T" in value:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
            return parsed.astimezone(timezone.utc).date() if parsed.tzinfo else parsed.date()
        return value

    @model_validator(mode="after")
    def _check_cycle_bounds(self) -> "TimePlan":
        if self.cycle_end < self.cycle_start:
            raise ValueError("cycle_end must not be before cycle_start")
        return self

    @property
    def is_tombstone(self) -> bool:
        return self.hours <= 0

    def intersects(self, first: date, last: date) -> bool:
        return self.cycle_end >= first and self.cycle_start <= last
