"""Schedule domain models and enums."""

import json
from datetime import date
from enum import Enum, StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator, model_validator


Weekday = Annotated[int, Field(ge=0, le=6)]
MonthDay = Annotated[int, Field(ge=1, le=31)]
Month = Annotated[int, Field(ge=1, le=12)]


class ScheduleType(StrEnum):
    """Top-level strategy selecting which occurrence generator runs."""

    SIMPLE = "SIMPLE"
    RECURRING = "RECURRING"
    CONDITIONAL = "CONDITIONAL"
    CUSTOM = "CUSTOM"


class RecurrencePattern(StrEnum):
    """Fixed-interval recurrence step."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class RuleType(StrEnum):
    """Filter applied to the candidate pool of a conditional schedule."""

    DAY_OF_WEEK = "DAY_OF_WEEK"
    DAY_OF_MONTH = "DAY_OF_MONTH"
    LAST_OF_MONTH = "LAST_OF_MONTH"
    SCHOOL_DAY = "SCHOOL_DAY"
    WORKDAY = "WORKDAY"
    EXCLUDE_DAYS = "EXCLUDE_DAYS"
    INTERVAL = "INTERVAL"


class LastOfMonthKind(StrEnum):
    """Which day counts as the end of the month."""

    LAST_DAY = "LAST_DAY"
    LAST_WORKDAY = "LAST_WORKDAY"


def coerce_enum(enum_cls: type[Enum], value: Any) -> Any:
    """Return the enum member for a known value, the raw value otherwise."""
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value


def decode_json(value: Any) -> Any:
    """Decode JSON text stored in a TEXT column; pass anything else through."""
    if isinstance(value, str | bytes):
        return json.loads(value) if value else None
    return value


def parse_calendar_date(value: Any) -> Any:
    """Accept ISO dates with a trailing time component (e.g. "2024-01-01T00:00:00Z")."""
    if isinstance(value, str) and len(value) > 10 and value[10] in ("T", " "):
        return value[:10]
    return value


def sunday_weekday(day: date) -> int:
    """Weekday number with 0 = Sunday and 6 = Saturday."""
    return day.isoweekday() % 7


# Rule payloads


class DaysRuleValue(BaseModel):
    """Payload for DAY_OF_WEEK, DAY_OF_MONTH and EXCLUDE_DAYS rules."""

    days: list[int] = Field(default_factory=list, description="Weekdays (0 = Sunday) or days of month")


class LastOfMonthRuleValue(BaseModel):
    """Payload for LAST_OF_MONTH rules."""

    type: LastOfMonthKind | str | None = Field(default=None, union_mode="left_to_right")


class IntervalRuleValue(BaseModel):
    """Payload for INTERVAL rules."""

    reference_date: date | None = Field(default=None, description="Anchor date; defaults to the chore start")
    interval: int = Field(default=1, ge=1, description="Keep every Nth day counted from the anchor")

    @field_validator("reference_date", mode="before")
    @classmethod
    def _strip_time(cls, v: Any) -> Any:
        return parse_calendar_date(v)


RULE_VALUE_MODELS: dict[RuleType, type[BaseModel] | None] = {
    RuleType.DAY_OF_WEEK: DaysRuleValue,
    RuleType.DAY_OF_MONTH: DaysRuleValue,
    RuleType.EXCLUDE_DAYS: DaysRuleValue,
    RuleType.LAST_OF_MONTH: LastOfMonthRuleValue,
    RuleType.INTERVAL: IntervalRuleValue,
    RuleType.WORKDAY: None,
    RuleType.SCHOOL_DAY: None,
}

_DAY_RANGES: dict[RuleType, tuple[int, int]] = {
    RuleType.DAY_OF_WEEK: (0, 6),
    RuleType.EXCLUDE_DAYS: (0, 6),
    RuleType.DAY_OF_MONTH: (1, 31),
}


class RulePayload(BaseModel):
    """Rule fields as submitted by clients or stored in templates.

    The shape of ``rule_value`` is checked against what ``rule_type`` requires.
    """

    rule_type: RuleType = Field(..., description="Rule kind")
    rule_value: dict[str, Any] = Field(default_factory=dict, description="Typed payload for the rule kind")
    priority: int = Field(default=1, description="Ascending priority; lower runs first")

    @field_validator("rule_value", mode="before")
    @classmethod
    def _decode_value(cls, v: Any) -> Any:
        return decode_json(v) or {}

    @model_validator(mode="after")
    def _check_value_shape(self) -> "RulePayload":
        value_model = RULE_VALUE_MODELS[self.rule_type]
        if value_model is None:
            return self

        parsed = value_model.model_validate(self.rule_value)

        if isinstance(parsed, DaysRuleValue):
            if not parsed.days:
                msg = f"{self.rule_type} rule requires a non-empty 'days' list"
                raise ValueError(msg)
            low, high = _DAY_RANGES[self.rule_type]
            if any(day < low or day > high for day in parsed.days):
                msg = f"{self.rule_type} days must be between {low} and {high}"
                raise ValueError(msg)
        elif isinstance(parsed, LastOfMonthRuleValue) and not isinstance(parsed.type, LastOfMonthKind):
            msg = "LAST_OF_MONTH rule requires type LAST_DAY or LAST_WORKDAY"
            raise ValueError(msg)
        elif isinstance(parsed, IntervalRuleValue) and "interval" not in self.rule_value:
            msg = "INTERVAL rule requires an 'interval'"
            raise ValueError(msg)

        return self


class ScheduleRule(BaseModel):
    """Stored rule belonging to one chore."""

    id: str
    chore_id: str
    rule_type: RuleType | str = Field(..., union_mode="left_to_right")
    rule_value: dict[str, Any] = Field(default_factory=dict)
    priority: int = 1
    created: str | None = None
    updated: str | None = None

    @field_validator("rule_value", mode="before")
    @classmethod
    def _decode_value(cls, v: Any) -> Any:
        return decode_json(v) or {}


class ScheduleException(BaseModel):
    """Date-keyed override that cancels or reschedules one occurrence."""

    id: str
    chore_id: str
    exception_date: date
    rescheduled_date: date | None = None
    reason: str | None = None
    created: str | None = None
    updated: str | None = None

    @field_validator("exception_date", "rescheduled_date", mode="before")
    @classmethod
    def _strip_time(cls, v: Any) -> Any:
        return parse_calendar_date(v)


class TemplateConfig(BaseModel):
    """Schedule shape carried by a template."""

    recurrence_pattern: RecurrencePattern | None = None
    interval_value: int = Field(default=1, ge=1)
    weekdays: list[Weekday] = Field(default_factory=list)
    month_days: list[MonthDay] = Field(default_factory=list)
    months: list[Month] = Field(default_factory=list)
    is_time_sensitive: bool = False
    time_of_day: str | None = None
    rules: list[RulePayload] = Field(default_factory=list)

    @field_validator("interval_value", mode="before")
    @classmethod
    def _default_interval(cls, v: Any) -> Any:
        return 1 if v is None else v


class ScheduleTemplate(BaseModel):
    """Named, reusable bundle of schedule shape and rules."""

    id: str
    name: str
    description: str | None = None
    schedule_type: ScheduleType | str = Field(..., union_mode="left_to_right")
    schedule_config: TemplateConfig = Field(default_factory=TemplateConfig)
    created: str | None = None
    updated: str | None = None

    @field_validator("schedule_config", mode="before")
    @classmethod
    def _decode_config(cls, v: Any) -> Any:
        return decode_json(v) or {}


class Occurrence(BaseModel):
    """One concrete calendar-date instance of a chore (never persisted)."""

    date: date
    chore_id: str
    is_time_sensitive: bool = False
    time_of_day: str | None = None
    original_date: date | None = None
    is_rescheduled: bool = False
    is_cancelled: bool = False
    reason: str | None = None
