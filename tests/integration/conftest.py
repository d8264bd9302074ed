"""Pytest configuration and fixtures for integration tests against a real SQLite file."""

import pytest

from chorenest.core import db_client
from chorenest.core.config import settings
from chorenest.services.schedule_service import ScheduleService
from chorenest.services.schedule_store import DbScheduleStore
from tests.unit.factories import TODAY


@pytest.fixture
async def sqlite_db(tmp_path, monkeypatch):
    """Point the db client at a fresh database file and create the schema."""
    monkeypatch.setattr(settings, "sqlite_db_path", str(tmp_path / "chorenest.db"))
    await db_client.init_db()
    yield
    await db_client.close_connection()


@pytest.fixture
def store(sqlite_db):
    return DbScheduleStore()


@pytest.fixture
def service(store):
    """ScheduleService over SQLite with today fixed to 2024-01-01."""
    return ScheduleService(store=store, clock=lambda: TODAY)
