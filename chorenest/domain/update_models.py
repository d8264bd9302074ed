"""Update models for database operations."""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from chorenest.domain.create_models import ExceptionCreate, RuleCreate
from chorenest.domain.schedule import (
    Month,
    MonthDay,
    RecurrencePattern,
    ScheduleType,
    TemplateConfig,
    Weekday,
    parse_calendar_date,
)


class ScheduleUpdate(BaseModel):
    """Schedule-shape fields written by PUT /chores/{id}/schedule."""

    schedule_type: ScheduleType = ScheduleType.SIMPLE
    recurrence_pattern: RecurrencePattern | None = None
    interval_value: int = Field(default=1, ge=1)
    weekdays: list[Weekday] = Field(default_factory=list)
    month_days: list[MonthDay] = Field(default_factory=list)
    months: list[Month] = Field(default_factory=list)
    start_date: date | None = None
    end_date: date | None = None
    time_of_day: str | None = None
    is_time_sensitive: bool = False

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _strip_time(cls, v: Any) -> Any:
        return parse_calendar_date(v)

    @field_validator("interval_value", mode="before")
    @classmethod
    def _default_interval(cls, v: Any) -> Any:
        return 1 if v is None else v

    @model_validator(mode="after")
    def validate_date_bounds(self) -> "ScheduleUpdate":
        """End date must not precede start date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            msg = "end_date must be on or after start_date"
            raise ValueError(msg)
        return self


class RuleUpdate(RuleCreate):
    """Full replacement of a rule's type, value and priority."""


class ExceptionUpdate(ExceptionCreate):
    """Full replacement of an exception's dates and reason."""


class TemplateUpdate(BaseModel):
    """Partial update of a schedule template."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    schedule_type: ScheduleType | str | None = Field(default=None, union_mode="left_to_right")
    schedule_config: TemplateConfig | None = None
