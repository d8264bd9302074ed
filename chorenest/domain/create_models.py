"""Pydantic models for creating records in database."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from chorenest.domain.chore import ChoreStatus
from chorenest.domain.schedule import (
    MonthDay,
    RecurrencePattern,
    RulePayload,
    ScheduleType,
    TemplateConfig,
    Weekday,
    parse_calendar_date,
)


class ChoreCreate(BaseModel):
    """Pydantic model for creating a chore record."""

    name: str = Field(..., min_length=1, description="Chore name")
    description: str = Field(default="", description="Detailed chore description")
    status: ChoreStatus = Field(default=ChoreStatus.ACTIVE, description="Initial status")
    schedule_type: ScheduleType = Field(default=ScheduleType.SIMPLE, description="Generator strategy")
    recurrence_pattern: RecurrencePattern | None = Field(default=None, description="Interval step")
    interval_value: int = Field(default=1, ge=1, description="Step multiplier")
    weekdays: list[Weekday] = Field(default_factory=list, description="Weekdays (0 = Sunday)")
    month_days: list[MonthDay] = Field(default_factory=list, description="Days of month")
    start_date: date | None = Field(default=None, description="First eligible day")
    end_date: date | None = Field(default=None, description="Last eligible day (inclusive)")
    is_time_sensitive: bool = Field(default=False, description="Time sensitive flag")
    time_of_day: str | None = Field(default=None, description="Time-of-day period tag")

    @field_validator("status")
    @classmethod
    def validate_not_deleted(cls, v: ChoreStatus) -> ChoreStatus:
        """Chores cannot be created in the soft-deleted state."""
        if v == ChoreStatus.DELETED:
            msg = "Cannot create a chore with status DELETED"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_date_bounds(self) -> "ChoreCreate":
        """End date must not precede start date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            msg = "end_date must be on or after start_date"
            raise ValueError(msg)
        return self


class RuleCreate(RulePayload):
    """Pydantic model for creating a schedule rule record."""


class ExceptionCreate(BaseModel):
    """Pydantic model for creating a schedule exception record."""

    exception_date: date = Field(..., description="Occurrence date being overridden")
    rescheduled_date: date | None = Field(default=None, description="New date; omit to cancel")
    reason: str | None = Field(default=None, description="Free-text reason")

    @field_validator("exception_date", "rescheduled_date", mode="before")
    @classmethod
    def _strip_time(cls, v: Any) -> Any:
        return parse_calendar_date(v)


class TemplateCreate(BaseModel):
    """Pydantic model for creating a schedule template record."""

    name: str = Field(..., min_length=1, description="Template name")
    description: str | None = Field(default=None, description="Template description")
    schedule_type: ScheduleType | str = Field(..., union_mode="left_to_right", description="Generator strategy")
    schedule_config: TemplateConfig = Field(default_factory=TemplateConfig, description="Schedule shape and rules")
