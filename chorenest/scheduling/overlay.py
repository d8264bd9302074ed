"""Exception overlay: cancel or move generated occurrences by date."""

from collections.abc import Iterable, Sequence
from datetime import date

from chorenest.domain.schedule import Occurrence, ScheduleException


def apply_exceptions(occurrences: Sequence[Occurrence], exceptions: Iterable[ScheduleException]) -> list[Occurrence]:
    """Overlay date-keyed exceptions onto generated occurrences.

    An occurrence is matched on its original date (or its date, if it was never moved),
    so running the overlay twice gives the same result. When several exceptions share
    a date, the first one wins. Cancelled occurrences stay in the list, flagged.
    Output order follows input order; rescheduled entries are not re-sorted.
    """
    by_date: dict[date, ScheduleException] = {}
    for exception in exceptions:
        by_date.setdefault(exception.exception_date, exception)

    if not by_date:
        return list(occurrences)

    result: list[Occurrence] = []
    for occurrence in occurrences:
        key = occurrence.original_date or occurrence.date
        exception = by_date.get(key)
        if exception is None:
            result.append(occurrence)
        elif exception.rescheduled_date:
            result.append(
                occurrence.model_copy(
                    update={
                        "date": exception.rescheduled_date,
                        "original_date": key,
                        "is_rescheduled": True,
                        "is_cancelled": False,
                        "reason": exception.reason,
                    }
                )
            )
        else:
            result.append(occurrence.model_copy(update={"is_cancelled": True, "reason": exception.reason}))

    return result
