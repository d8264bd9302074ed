"""Unit tests for the exception overlay."""

from datetime import date

import pytest

from chorenest.scheduling.generators import generate_simple_occurrences
from chorenest.scheduling.overlay import apply_exceptions
from tests.unit.factories import make_chore, make_exception


@pytest.fixture
def daily_occurrences():
    """Five daily occurrences from 2024-01-01."""
    return generate_simple_occurrences(make_chore(recurrence_pattern="DAILY"), 5)


@pytest.mark.unit
class TestApplyExceptions:
    """Tests for apply_exceptions function."""

    def test_no_exceptions_leaves_occurrences_unchanged(self, daily_occurrences):
        """Test an empty exception list is a no-op."""
        assert apply_exceptions(daily_occurrences, []) == daily_occurrences

    def test_cancelled_occurrence_keeps_its_date(self, daily_occurrences):
        """Test an exception without a new date cancels in place."""
        result = apply_exceptions(daily_occurrences, [make_exception(date(2024, 1, 2), reason="Holiday")])

        cancelled = result[1]
        assert cancelled.date == date(2024, 1, 2)
        assert cancelled.is_cancelled is True
        assert cancelled.is_rescheduled is False
        assert cancelled.reason == "Holiday"
        assert len(result) == len(daily_occurrences)

    def test_rescheduled_occurrence(self, daily_occurrences):
        """Test an exception with a new date moves the occurrence."""
        exception = make_exception(date(2024, 1, 3), rescheduled_date=date(2024, 1, 10), reason="Away")

        result = apply_exceptions(daily_occurrences, [exception])

        moved = result[2]
        assert moved.date == date(2024, 1, 10)
        assert moved.original_date == date(2024, 1, 3)
        assert moved.is_rescheduled is True
        assert moved.is_cancelled is False
        assert moved.reason == "Away"

    def test_rescheduled_entries_keep_generation_order(self, daily_occurrences):
        """Test moved occurrences are not re-sorted."""
        exception = make_exception(date(2024, 1, 1), rescheduled_date=date(2024, 1, 20))

        result = apply_exceptions(daily_occurrences, [exception])

        assert [occ.date for occ in result] == [
            date(2024, 1, 20),
            date(2024, 1, 2),
            date(2024, 1, 3),
            date(2024, 1, 4),
            date(2024, 1, 5),
        ]

    def test_unmatched_exception_is_ignored(self, daily_occurrences):
        """Test exceptions for dates outside the list change nothing."""
        assert apply_exceptions(daily_occurrences, [make_exception(date(2024, 2, 1))]) == daily_occurrences

    def test_first_exception_for_a_date_wins(self, daily_occurrences):
        """Test only the first of several exceptions on the same date applies."""
        exceptions = [
            make_exception(date(2024, 1, 4), rescheduled_date=date(2024, 1, 6), reason="first"),
            make_exception(date(2024, 1, 4), reason="second"),
        ]

        result = apply_exceptions(daily_occurrences, exceptions)

        assert result[3].date == date(2024, 1, 6)
        assert result[3].reason == "first"
        assert result[3].is_cancelled is False

    def test_overlay_is_idempotent(self, daily_occurrences):
        """Test applying the same exceptions twice gives the same result."""
        exceptions = [
            make_exception(date(2024, 1, 1), rescheduled_date=date(2024, 1, 2)),
            make_exception(date(2024, 1, 2), reason="Cancelled"),
            make_exception(date(2024, 1, 5), rescheduled_date=date(2024, 1, 7)),
        ]

        once = apply_exceptions(daily_occurrences, exceptions)
        twice = apply_exceptions(once, exceptions)

        assert twice == once

    def test_moved_occurrence_is_not_matched_by_its_new_date(self, daily_occurrences):
        """Test a move onto another exception's date does not chain."""
        exceptions = [
            make_exception(date(2024, 1, 1), rescheduled_date=date(2024, 1, 2)),
            make_exception(date(2024, 1, 2), reason="Cancelled"),
        ]

        result = apply_exceptions(daily_occurrences, exceptions)

        assert result[0].date == date(2024, 1, 2)
        assert result[0].is_rescheduled is True
        assert result[0].is_cancelled is False
        assert result[1].is_cancelled is True

    def test_input_is_not_mutated(self, daily_occurrences):
        """Test the overlay returns copies."""
        apply_exceptions(daily_occurrences, [make_exception(date(2024, 1, 1))])

        assert daily_occurrences[0].is_cancelled is False
