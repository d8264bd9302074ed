"""Domain models and DTOs."""

from chorenest.domain.chore import Chore, ChoreStatus
from chorenest.domain.create_models import ChoreCreate, ExceptionCreate, RuleCreate, TemplateCreate
from chorenest.domain.schedule import (
    LastOfMonthKind,
    Occurrence,
    RecurrencePattern,
    RuleType,
    ScheduleException,
    ScheduleRule,
    ScheduleTemplate,
    ScheduleType,
    TemplateConfig,
)
from chorenest.domain.update_models import ExceptionUpdate, RuleUpdate, ScheduleUpdate, TemplateUpdate


__all__ = [
    "Chore",
    "ChoreCreate",
    "ChoreStatus",
    "ExceptionCreate",
    "ExceptionUpdate",
    "LastOfMonthKind",
    "Occurrence",
    "RecurrencePattern",
    "RuleCreate",
    "RuleType",
    "RuleUpdate",
    "ScheduleException",
    "ScheduleRule",
    "ScheduleTemplate",
    "ScheduleType",
    "ScheduleUpdate",
    "TemplateConfig",
    "TemplateCreate",
    "TemplateUpdate",
]
