"""Occurrence generators: simple interval, structured recurring and rule-based."""

import logging
from collections.abc import Sequence
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from chorenest.core.config import constants
from chorenest.core.errors import ComputationError
from chorenest.core.recurrence import iter_cron_dates, month_days_to_cron, weekdays_to_cron
from chorenest.domain.chore import Chore
from chorenest.domain.schedule import Occurrence, RecurrencePattern, ScheduleRule, coerce_enum
from chorenest.scheduling.rules import apply_rules


logger = logging.getLogger(__name__)


def effective_start(chore: Chore, today: date | None = None) -> date:
    """The chore's start date, or today when it has none."""
    return chore.start_date or today or date.today()


def make_occurrence(chore: Chore, day: date) -> Occurrence:
    """Wrap a date as an occurrence of the chore."""
    return Occurrence(
        date=day,
        chore_id=chore.id,
        is_time_sensitive=chore.is_time_sensitive,
        time_of_day=chore.time_of_day,
    )


def advance(start: date, pattern: RecurrencePattern | str, steps: int) -> date:
    """Move ``steps`` recurrence steps forward from ``start``.

    Month and year steps are computed from the anchor so that a chore starting on the
    31st lands on the last day of shorter months and returns to the 31st afterwards.

    Raises:
        ComputationError: If the result falls outside the supported calendar range
    """
    try:
        match coerce_enum(RecurrencePattern, pattern):
            case RecurrencePattern.DAILY:
                return start + timedelta(days=steps)
            case RecurrencePattern.WEEKLY:
                return start + timedelta(days=constants.DAYS_PER_WEEK * steps)
            case RecurrencePattern.BIWEEKLY:
                return start + timedelta(days=constants.DAYS_PER_BIWEEK * steps)
            case RecurrencePattern.MONTHLY:
                return start + relativedelta(months=steps)
            case RecurrencePattern.YEARLY:
                return start + relativedelta(years=steps)
            case _:
                return start + timedelta(days=steps)
    except (OverflowError, ValueError) as e:
        msg = f"Cannot advance {start.isoformat()} by {steps} {pattern} step(s): {e}"
        raise ComputationError(msg) from e


def generate_simple_occurrences(chore: Chore, count: int, *, today: date | None = None) -> list[Occurrence]:
    """Expand a start date and fixed interval into up to ``count`` occurrences.

    One-time chores (no recurrence pattern) always yield exactly one occurrence.
    """
    start = effective_start(chore, today)

    if not chore.recurrence_pattern:
        return [make_occurrence(chore, start)]

    occurrences: list[Occurrence] = []
    for index in range(count):
        current = advance(start, chore.recurrence_pattern, index * chore.interval_value)
        if chore.end_date and current > chore.end_date:
            break
        occurrences.append(make_occurrence(chore, current))

    return occurrences


def generate_recurring_occurrences(chore: Chore, count: int, *, today: date | None = None) -> list[Occurrence]:
    """Expand weekly weekday sets or monthly day-of-month sets.

    Any other pattern/set combination falls back to the simple generator.
    """
    pattern = coerce_enum(RecurrencePattern, chore.recurrence_pattern)

    if pattern == RecurrencePattern.WEEKLY and chore.weekdays:
        cron_expr = weekdays_to_cron(chore.weekdays)
    elif pattern == RecurrencePattern.MONTHLY and chore.month_days:
        cron_expr = month_days_to_cron(chore.month_days)
    else:
        return generate_simple_occurrences(chore, count, today=today)

    start = effective_start(chore, today)
    occurrences: list[Occurrence] = []
    try:
        matching_dates = iter_cron_dates(cron_expr, start)
        while len(occurrences) < count:
            current = next(matching_dates)
            if chore.end_date and current > chore.end_date:
                break
            occurrences.append(make_occurrence(chore, current))
    except (ValueError, OverflowError) as e:
        msg = f"Cannot expand '{cron_expr}' from {start.isoformat()}: {e}"
        raise ComputationError(msg) from e

    return occurrences


def build_candidate_pool(start: date, size: int, end_date: date | None = None) -> list[date]:
    """Consecutive days from ``start``, at most ``size`` of them, never past ``end_date``."""
    pool: list[date] = []
    current = start
    try:
        for _ in range(size):
            if end_date and current > end_date:
                break
            pool.append(current)
            current += timedelta(days=1)
    except OverflowError as e:
        msg = f"Candidate pool from {start.isoformat()} runs past the end of the calendar"
        raise ComputationError(msg) from e
    return pool


def generate_conditional_occurrences(
    chore: Chore,
    rules: Sequence[ScheduleRule],
    count: int,
    *,
    today: date | None = None,
    school_days: frozenset[date] = frozenset(),
    pool_multiplier: int = 3,
    adaptive: bool = False,
    max_pool_days: int = 3660,
) -> list[Occurrence]:
    """Filter a daily candidate pool through the chore's rules.

    The pool starts at ``count * pool_multiplier`` days. With ``adaptive`` set, it is
    doubled while the rules leave fewer than ``count`` dates, the pool was not cut
    short by the end date, and it is still below ``max_pool_days``.
    """
    start = effective_start(chore, today)
    pool_size = count * pool_multiplier
    if adaptive:
        pool_size = min(pool_size, max(max_pool_days, count))

    while True:
        pool = build_candidate_pool(start, pool_size, chore.end_date)
        kept = apply_rules(rules, pool, chore, today=today, school_days=school_days)

        exhausted = len(pool) < pool_size or pool_size >= max_pool_days
        if not adaptive or len(kept) >= count or exhausted:
            break

        pool_size = min(pool_size * 2, max_pool_days)
        logger.debug(
            "Widening candidate pool",
            extra={"chore_id": chore.id, "pool_size": pool_size, "kept": len(kept), "requested": count},
        )

    return [make_occurrence(chore, day) for day in kept[:count]]
