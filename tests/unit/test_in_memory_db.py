"""Tests for InMemoryDBClient implementation."""

import pytest

from chorenest.core.db_client import DatabaseError, RecordNotFoundError


@pytest.mark.unit
class TestInMemoryDBClient:
    """Test suite for InMemoryDBClient."""

    async def test_create_and_get_record(self, in_memory_db):
        """Test creating a record and reading it back."""
        created = await in_memory_db.create_record("chores", {"name": "Dishes"})
        record = await in_memory_db.get_record("chores", created["id"])

        assert record["name"] == "Dishes"
        assert "created" in record
        assert "updated" in record

    async def test_create_record_invalid_data(self, in_memory_db):
        """Test creating a record with invalid data raises error."""
        with pytest.raises(DatabaseError, match="Data must be a dictionary"):
            await in_memory_db.create_record("chores", "invalid")

    async def test_get_record_not_found(self, in_memory_db):
        """Test getting a non-existent record raises error."""
        with pytest.raises(RecordNotFoundError, match="Record not found"):
            await in_memory_db.get_record("chores", "nonexistent")

    async def test_update_and_delete_record(self, in_memory_db):
        """Test updating then deleting a record."""
        created = await in_memory_db.create_record("chores", {"name": "Original"})

        updated = await in_memory_db.update_record("chores", created["id"], {"name": "Renamed"})
        assert updated["name"] == "Renamed"

        await in_memory_db.delete_record("chores", created["id"])
        with pytest.raises(RecordNotFoundError):
            await in_memory_db.get_record("chores", created["id"])

    async def test_returned_records_are_copies(self, in_memory_db):
        """Test mutating a returned record does not change the stored one."""
        created = await in_memory_db.create_record("chores", {"weekdays": [1]})
        created["weekdays"].append(2)

        record = await in_memory_db.get_record("chores", created["id"])

        assert record["weekdays"] == [1]

    async def test_list_records_filter_and_sort(self, in_memory_db):
        """Test filtering with && and != and sorting by name."""
        await in_memory_db.create_record("chores", {"name": "Vacuum", "status": "ACTIVE"})
        await in_memory_db.create_record("chores", {"name": "Dishes", "status": "ACTIVE"})
        await in_memory_db.create_record("chores", {"name": "Bins", "status": "DELETED"})

        records = await in_memory_db.list_records("chores", filter_query='status != "DELETED"', sort="+name")

        assert [r["name"] for r in records] == ["Dishes", "Vacuum"]

    async def test_list_records_sorts_ids_numerically(self, in_memory_db):
        """Test "-id" sorts ids as numbers, newest first."""
        for name in ("a", "b", "c"):
            await in_memory_db.create_record("rules", {"name": name})

        records = await in_memory_db.list_records("rules", sort="-id")

        assert [r["name"] for r in records] == ["c", "b", "a"]

    async def test_list_records_pagination(self, in_memory_db):
        """Test page and per_page slicing."""
        for i in range(5):
            await in_memory_db.create_record("chores", {"name": f"chore-{i}"})

        page = await in_memory_db.list_records("chores", page=2, per_page=2, sort="+id")

        assert [r["name"] for r in page] == ["chore-2", "chore-3"]

    async def test_transaction_rolls_back_on_error(self, in_memory_db):
        """Test a failing transaction restores the previous state."""
        kept = await in_memory_db.create_record("chores", {"name": "Keep"})

        with pytest.raises(RuntimeError):
            async with in_memory_db.transaction():
                await in_memory_db.delete_record("chores", kept["id"])
                await in_memory_db.create_record("chores", {"name": "Discard"})
                raise RuntimeError("abort")

        records = await in_memory_db.list_records("chores")
        assert [r["name"] for r in records] == ["Keep"]

    async def test_transaction_commits_on_success(self, in_memory_db):
        """Test a successful transaction keeps its changes."""
        async with in_memory_db.transaction():
            await in_memory_db.create_record("chores", {"name": "Saved"})

        records = await in_memory_db.list_records("chores", filter_query='name = "Saved"')
        assert len(records) == 1
