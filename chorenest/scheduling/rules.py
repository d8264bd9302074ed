"""Rule evaluation for conditional and custom schedules.

Every rule is a per-date filter: it receives the candidate dates left by the
previous rule and returns the subset it keeps, preserving order.
"""

import calendar
import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, timedelta
from operator import attrgetter
from typing import Any

from pydantic import ValidationError

from chorenest.core.config import constants
from chorenest.core.errors import ComputationError
from chorenest.domain.chore import Chore
from chorenest.domain.schedule import (
    DaysRuleValue,
    IntervalRuleValue,
    LastOfMonthKind,
    LastOfMonthRuleValue,
    RuleType,
    ScheduleRule,
    coerce_enum,
    sunday_weekday,
)


logger = logging.getLogger(__name__)

RuleFilter = Callable[..., list[date]]


def last_workday_of_month(year: int, month: int) -> date:
    """Walk back from the month's last day until a Monday-Friday is found."""
    day = date(year, month, calendar.monthrange(year, month)[1])
    while sunday_weekday(day) not in constants.WORKDAYS:
        day -= timedelta(days=1)
    return day


def is_last_of_month(day: date, kind: LastOfMonthKind | str | None) -> bool:
    """Check whether a date is the month's last day or last workday."""
    match kind:
        case LastOfMonthKind.LAST_DAY:
            return day.day == calendar.monthrange(day.year, day.month)[1]
        case LastOfMonthKind.LAST_WORKDAY:
            return day == last_workday_of_month(day.year, day.month)
        case _:
            return False


def _day_of_week(candidates: list[date], value: dict[str, Any], **_: Any) -> list[date]:
    days = set(DaysRuleValue.model_validate(value).days)
    return [day for day in candidates if sunday_weekday(day) in days]


def _day_of_month(candidates: list[date], value: dict[str, Any], **_: Any) -> list[date]:
    days = set(DaysRuleValue.model_validate(value).days)
    return [day for day in candidates if day.day in days]


def _last_of_month(candidates: list[date], value: dict[str, Any], **_: Any) -> list[date]:
    kind = LastOfMonthRuleValue.model_validate(value).type
    return [day for day in candidates if is_last_of_month(day, kind)]


def _workday(candidates: list[date], _value: dict[str, Any], **_: Any) -> list[date]:
    return [day for day in candidates if sunday_weekday(day) in constants.WORKDAYS]


def _exclude_days(candidates: list[date], value: dict[str, Any], **_: Any) -> list[date]:
    days = set(DaysRuleValue.model_validate(value).days)
    return [day for day in candidates if sunday_weekday(day) not in days]


def _interval(candidates: list[date], value: dict[str, Any], *, anchor: date, **_: Any) -> list[date]:
    parsed = IntervalRuleValue.model_validate(value)
    reference = parsed.reference_date or anchor
    return [day for day in candidates if (day - reference).days % parsed.interval == 0]


def _school_day(
    candidates: list[date], _value: dict[str, Any], *, school_days: frozenset[date], **_: Any
) -> list[date]:
    return [day for day in candidates if day in school_days]


_RULE_FILTERS: dict[RuleType, RuleFilter] = {
    RuleType.DAY_OF_WEEK: _day_of_week,
    RuleType.DAY_OF_MONTH: _day_of_month,
    RuleType.LAST_OF_MONTH: _last_of_month,
    RuleType.WORKDAY: _workday,
    RuleType.EXCLUDE_DAYS: _exclude_days,
    RuleType.INTERVAL: _interval,
    RuleType.SCHOOL_DAY: _school_day,
}


def evaluate_rule(
    rule: ScheduleRule,
    candidates: Sequence[date],
    chore: Chore,
    *,
    today: date | None = None,
    school_days: frozenset[date] = frozenset(),
) -> list[date]:
    """Filter candidate dates through a single rule.

    Args:
        rule: Rule to apply
        candidates: Candidate dates in chronological order
        chore: Owning chore; its start date anchors INTERVAL rules without a reference date
        today: Fallback anchor when the chore has no start date
        school_days: Days accepted by SCHOOL_DAY rules

    Returns:
        The kept dates, in their original order

    Raises:
        ComputationError: If the stored rule value cannot be interpreted
    """
    rule_type = coerce_enum(RuleType, rule.rule_type)
    if not isinstance(rule_type, RuleType):
        logger.warning("Ignoring unknown rule type", extra={"rule_id": rule.id, "rule_type": rule.rule_type})
        return list(candidates)

    anchor = chore.start_date or today or date.today()
    try:
        return _RULE_FILTERS[rule_type](list(candidates), rule.rule_value, anchor=anchor, school_days=school_days)
    except ValidationError as e:
        msg = f"Rule {rule.id} has a malformed {rule_type} value"
        raise ComputationError(msg) from e


def apply_rules(
    rules: Iterable[ScheduleRule],
    candidates: Sequence[date],
    chore: Chore,
    *,
    today: date | None = None,
    school_days: frozenset[date] = frozenset(),
) -> list[date]:
    """Chain rules in ascending priority, each consuming the previous rule's output."""
    kept = list(candidates)
    for rule in sorted(rules, key=attrgetter("priority")):
        kept = evaluate_rule(rule, kept, chore, today=today, school_days=school_days)
    return kept
