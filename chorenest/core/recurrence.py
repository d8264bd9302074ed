"""Recurrence utilities for chore scheduling."""

from collections.abc import Iterable, Iterator, Sequence
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from croniter import croniter

from chorenest.domain.schedule import RecurrencePattern, ScheduleType, coerce_enum


if TYPE_CHECKING:
    from chorenest.domain.chore import Chore
    from chorenest.domain.schedule import ScheduleRule


WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def weekdays_to_cron(weekdays: Iterable[int]) -> str:
    """Build a daily-at-midnight CRON expression restricted to weekdays (0 = Sunday)."""
    days = ",".join(str(day) for day in sorted(set(weekdays)))
    return f"0 0 * * {days}"


def month_days_to_cron(month_days: Iterable[int]) -> str:
    """Build a midnight CRON expression restricted to days of the month.

    Months lacking a configured day (e.g. the 31st in April) are skipped, not clamped.
    """
    days = ",".join(str(day) for day in sorted(set(month_days)))
    return f"0 0 {days} * *"


def iter_cron_dates(cron_expr: str, start: date) -> Iterator[date]:
    """Yield calendar dates matching a CRON expression, starting with ``start`` itself if it matches."""
    base = datetime.combine(start, time.min) - timedelta(seconds=1)
    itr = croniter(cron_expr, base)
    while True:
        yield itr.get_next(datetime).date()


def ordinal(day: int) -> str:
    """Render a day of month as 1st, 2nd, 3rd, 4th, ..."""
    suffix = "th"
    if day in (1, 21, 31):
        suffix = "st"
    elif day in (2, 22):
        suffix = "nd"
    elif day in (3, 23):
        suffix = "rd"
    return f"{day}{suffix}"


def _every(interval: int, unit: str, single: str) -> str:
    if interval == 1:
        return single
    return f"every {interval} {unit}s"


def _interval_phrase(pattern: RecurrencePattern | str, interval: int) -> str:
    match pattern:
        case RecurrencePattern.DAILY:
            return _every(interval, "day", "daily")
        case RecurrencePattern.WEEKLY:
            return _every(interval, "week", "weekly")
        case RecurrencePattern.BIWEEKLY:
            return f"every {2 * interval} weeks"
        case RecurrencePattern.MONTHLY:
            return _every(interval, "month", "monthly")
        case RecurrencePattern.YEARLY:
            return _every(interval, "year", "yearly")
        case _:
            return _every(interval, "day", "daily")


def describe_schedule(chore: "Chore", rules: Sequence["ScheduleRule"] = ()) -> str:
    """Convert a chore's schedule shape to human-readable text.

    Args:
        chore: Chore whose schedule fields are described
        rules: The chore's rules (only counted for conditional schedules)

    Returns:
        Description such as "every Monday, Friday until 2024-06-30"
    """
    schedule_type = coerce_enum(ScheduleType, chore.schedule_type)
    pattern = coerce_enum(RecurrencePattern, chore.recurrence_pattern)

    if schedule_type in (ScheduleType.CONDITIONAL, ScheduleType.CUSTOM):
        noun = "rule" if len(rules) == 1 else "rules"
        text = f"custom schedule ({len(rules)} {noun})"
    elif schedule_type == ScheduleType.RECURRING and pattern == RecurrencePattern.WEEKLY and chore.weekdays:
        names = [WEEKDAY_NAMES[day] for day in sorted(set(chore.weekdays))]
        text = f"every {', '.join(names)}"
    elif schedule_type == ScheduleType.RECURRING and pattern == RecurrencePattern.MONTHLY and chore.month_days:
        days = [ordinal(day) for day in sorted(set(chore.month_days))]
        text = f"monthly on the {', '.join(days)}"
    elif not pattern:
        when = chore.start_date.isoformat() if chore.start_date else "today"
        return f"one time on {when}"
    else:
        text = _interval_phrase(pattern, chore.interval_value)

    if chore.end_date:
        text = f"{text} until {chore.end_date.isoformat()}"
    return text
