"""Unit tests for chore_service module."""

import pytest
from pydantic import ValidationError

from chorenest.core.errors import NotFoundError
from chorenest.domain.chore import ChoreStatus
from chorenest.domain.create_models import ChoreCreate
from chorenest.domain.schedule import RecurrencePattern, ScheduleType
from chorenest.services import chore_service


@pytest.mark.unit
class TestCreateChore:
    """Tests for create_chore function."""

    async def test_create_recurring_chore(self, patched_db):
        """Test creating a chore with a weekday set."""
        result = await chore_service.create_chore(
            chore=ChoreCreate(
                name="Laundry",
                schedule_type=ScheduleType.RECURRING,
                recurrence_pattern=RecurrencePattern.WEEKLY,
                weekdays=[1, 4],
            )
        )

        assert result.id
        assert result.name == "Laundry"
        assert result.schedule_type == ScheduleType.RECURRING
        assert result.weekdays == [1, 4]
        assert result.status == ChoreStatus.ACTIVE
        assert result.next_occurrence is None

    def test_create_rejects_deleted_status(self):
        """Test chores cannot start out soft-deleted."""
        with pytest.raises(ValidationError, match="Cannot create a chore with status DELETED"):
            ChoreCreate(name="Ghost", status=ChoreStatus.DELETED)

    def test_create_rejects_inverted_dates(self):
        """Test end_date before start_date is rejected."""
        with pytest.raises(ValidationError, match="end_date must be on or after start_date"):
            ChoreCreate(name="Backwards", start_date="2024-02-01", end_date="2024-01-01")


@pytest.mark.unit
class TestGetChore:
    """Tests for get_chore_by_id function."""

    async def test_get_existing_chore(self, chore_factory):
        """Test reading a stored chore."""
        created = await chore_factory(name="Vacuum")

        chore = await chore_service.get_chore_by_id(chore_id=created["id"])

        assert chore.name == "Vacuum"

    async def test_get_missing_chore(self, patched_db):
        """Test a missing id raises NotFoundError."""
        with pytest.raises(NotFoundError, match="Chore with ID nope not found"):
            await chore_service.get_chore_by_id(chore_id="nope")


@pytest.mark.unit
class TestListChores:
    """Tests for list_chores function."""

    async def test_list_excludes_deleted_and_orders_by_name(self, chore_factory):
        """Test the default listing hides deleted chores."""
        await chore_factory(name="Windows")
        await chore_factory(name="Bins")
        await chore_factory(name="Attic", status="DELETED")

        chores = await chore_service.list_chores()

        assert [c.name for c in chores] == ["Bins", "Windows"]

    async def test_list_by_status(self, chore_factory):
        """Test filtering by an explicit status."""
        await chore_factory(name="Active")
        await chore_factory(name="Paused", status="INACTIVE")

        chores = await chore_service.list_chores(status=ChoreStatus.INACTIVE)

        assert [c.name for c in chores] == ["Paused"]


@pytest.mark.unit
class TestDeleteChore:
    """Tests for delete_chore function."""

    async def test_soft_delete(self, chore_factory, patched_db):
        """Test deletion keeps the record with status DELETED."""
        created = await chore_factory(name="Dust")

        deleted = await chore_service.delete_chore(chore_id=created["id"])

        assert deleted.status == ChoreStatus.DELETED
        record = await patched_db.get_record("chores", created["id"])
        assert record["status"] == "DELETED"

        with pytest.raises(NotFoundError):
            await chore_service.get_chore_by_id(chore_id=created["id"])

        listed = await chore_service.list_chores(status=ChoreStatus.DELETED)
        assert [c.id for c in listed] == [created["id"]]

    async def test_delete_twice(self, chore_factory):
        """Test deleting an already deleted chore reports it as missing."""
        created = await chore_factory()
        await chore_service.delete_chore(chore_id=created["id"])

        with pytest.raises(NotFoundError):
            await chore_service.delete_chore(chore_id=created["id"])
