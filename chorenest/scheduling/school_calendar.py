"""School calendar collaborators used by SCHOOL_DAY rules."""

from collections.abc import Iterable
from datetime import date
from typing import Protocol


class SchoolCalendarProvider(Protocol):
    """Source of the days school is in session."""

    async def get_school_days(self, *, start: date, end: date) -> frozenset[date]:
        """Return school days within [start, end]."""
        ...


class NoSchoolCalendar:
    """Default provider: no school days are known, so SCHOOL_DAY rules keep nothing."""

    async def get_school_days(self, *, start: date, end: date) -> frozenset[date]:
        return frozenset()


class StaticSchoolCalendar:
    """Provider backed by a fixed list of dates (date objects or YYYY-MM-DD strings)."""

    def __init__(self, days: Iterable[date | str]) -> None:
        self._days = frozenset(day if isinstance(day, date) else date.fromisoformat(day) for day in days)

    async def get_school_days(self, *, start: date, end: date) -> frozenset[date]:
        return frozenset(day for day in self._days if start <= day <= end)
