"""Pytest configuration and fixtures for unit tests."""

from typing import Any

import pytest

from chorenest.services.schedule_service import ScheduleService
from chorenest.services.schedule_store import DbScheduleStore
from tests.unit.factories import TODAY
from tests.unit.mocks import InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches chorenest.core.db_client functions to use InMemoryDBClient."""
    monkeypatch.setattr("chorenest.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("chorenest.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("chorenest.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("chorenest.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("chorenest.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("chorenest.core.db_client.transaction", in_memory_db.transaction)

    return in_memory_db


@pytest.fixture
def schedule_service(patched_db):
    """ScheduleService over the in-memory database with a fixed today."""
    return ScheduleService(store=DbScheduleStore(), clock=lambda: TODAY)


@pytest.fixture
def chore_factory(patched_db):
    """Factory inserting chore records straight into the in-memory database."""

    async def _create_chore(**kwargs: Any) -> dict[str, Any]:
        data = {
            "name": "Test Chore",
            "description": "",
            "status": "ACTIVE",
            "schedule_type": "SIMPLE",
            "recurrence_pattern": None,
            "interval_value": 1,
            "weekdays": [],
            "month_days": [],
            "months": [],
            "start_date": "2024-01-01",
            "end_date": None,
            "is_time_sensitive": False,
            "time_of_day": None,
            "next_occurrence": None,
            **kwargs,
        }
        return await patched_db.create_record(collection="chores", data=data)

    return _create_chore
