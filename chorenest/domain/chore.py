"""Chore domain models and enums."""

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from chorenest.domain.schedule import (
    Month,
    MonthDay,
    RecurrencePattern,
    ScheduleType,
    Weekday,
    decode_json,
    parse_calendar_date,
)


class ChoreStatus(StrEnum):
    """Chore lifecycle status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"
    DELETED = "DELETED"


class Chore(BaseModel):
    """Chore data transfer object with its schedule shape."""

    id: str = Field(..., description="Unique chore ID from database")
    name: str = Field(..., description="Chore name (e.g., 'Take out trash')")
    description: str = Field(default="", description="Detailed chore description")
    status: ChoreStatus = Field(default=ChoreStatus.ACTIVE, description="Lifecycle status")
    schedule_type: ScheduleType | str | None = Field(
        default=ScheduleType.SIMPLE,
        union_mode="left_to_right",
        description="Generator strategy; unknown values fall back to SIMPLE",
    )
    recurrence_pattern: RecurrencePattern | str | None = Field(
        default=None,
        union_mode="left_to_right",
        description="Interval step; None means a one-time chore",
    )
    interval_value: int = Field(default=1, ge=1, description="Multiplier applied to the recurrence step")
    weekdays: list[Weekday] = Field(default_factory=list, description="Weekdays for weekly sets (0 = Sunday)")
    month_days: list[MonthDay] = Field(default_factory=list, description="Days of month for monthly sets")
    months: list[Month] = Field(default_factory=list, description="Months carried over from templates")
    start_date: date | None = Field(default=None, description="First eligible day; today when unset")
    end_date: date | None = Field(default=None, description="Last eligible day (inclusive)")
    is_time_sensitive: bool = Field(default=False, description="Whether the chore must happen at time_of_day")
    time_of_day: str | None = Field(default=None, description="Time-of-day period tag")
    next_occurrence: date | None = Field(default=None, description="Cached next occurrence date")
    created: str | None = Field(default=None, description="Creation timestamp")
    updated: str | None = Field(default=None, description="Last update timestamp")

    @field_validator("weekdays", "month_days", "months", mode="before")
    @classmethod
    def _decode_day_lists(cls, v: Any) -> Any:
        return decode_json(v) or []

    @field_validator("start_date", "end_date", "next_occurrence", mode="before")
    @classmethod
    def _strip_time(cls, v: Any) -> Any:
        return parse_calendar_date(v)

    @field_validator("interval_value", mode="before")
    @classmethod
    def _default_interval(cls, v: Any) -> Any:
        return 1 if v is None else v
