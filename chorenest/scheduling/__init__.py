"""Pure occurrence generation: generators, rule filters and the exception overlay."""

from chorenest.scheduling.generators import (
    generate_conditional_occurrences,
    generate_recurring_occurrences,
    generate_simple_occurrences,
)
from chorenest.scheduling.overlay import apply_exceptions
from chorenest.scheduling.rules import apply_rules, evaluate_rule
from chorenest.scheduling.school_calendar import NoSchoolCalendar, SchoolCalendarProvider, StaticSchoolCalendar


__all__ = [
    "NoSchoolCalendar",
    "SchoolCalendarProvider",
    "StaticSchoolCalendar",
    "apply_exceptions",
    "apply_rules",
    "evaluate_rule",
    "generate_conditional_occurrences",
    "generate_recurring_occurrences",
    "generate_simple_occurrences",
]
