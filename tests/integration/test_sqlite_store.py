"""Integration tests for the SQLite-backed schedule store."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock

import pytest

from chorenest.core import db_client
from chorenest.core.config import settings
from chorenest.core.db_client import DatabaseError
from chorenest.core.errors import NotFoundError
from chorenest.domain.chore import ChoreStatus
from chorenest.domain.create_models import ChoreCreate, ExceptionCreate, RuleCreate, TemplateCreate
from chorenest.domain.schedule import RuleType, ScheduleType
from chorenest.domain.update_models import TemplateUpdate
from chorenest.services import chore_service
from tests.unit.factories import TODAY


async def _daily_chore(name: str = "Dishes", **fields) -> str:
    chore = await chore_service.create_chore(
        chore=ChoreCreate(name=name, recurrence_pattern="DAILY", start_date=TODAY, **fields)
    )
    return chore.id


@pytest.mark.integration
class TestChorePersistence:
    """Chore rows round-trip through SQLite."""

    async def test_list_columns_round_trip(self, sqlite_db):
        chore = await chore_service.create_chore(
            chore=ChoreCreate(
                name="Laundry",
                schedule_type=ScheduleType.RECURRING,
                recurrence_pattern="WEEKLY",
                weekdays=[5, 1],
                is_time_sensitive=True,
            )
        )

        loaded = await chore_service.get_chore_by_id(chore_id=chore.id)

        assert loaded.weekdays == [5, 1]
        assert loaded.month_days == []
        assert loaded.is_time_sensitive is True
        assert loaded.created is not None

    async def test_soft_delete(self, sqlite_db):
        chore_id = await _daily_chore()

        await chore_service.delete_chore(chore_id=chore_id)

        assert await chore_service.list_chores() == []
        assert [c.id for c in await chore_service.list_chores(status=ChoreStatus.DELETED)] == [chore_id]
        with pytest.raises(NotFoundError):
            await chore_service.get_chore_by_id(chore_id=chore_id)

    async def test_non_numeric_id_is_not_found(self, sqlite_db):
        with pytest.raises(NotFoundError):
            await chore_service.get_chore_by_id(chore_id="abc")


@pytest.mark.integration
class TestSchedulePersistence:
    """Generation, rules and exceptions backed by SQLite."""

    async def test_next_occurrence_is_persisted(self, service, store):
        chore_id = await _daily_chore()

        await service.generate_occurrences(chore_id, 3)

        assert (await store.get_chore(chore_id)).next_occurrence == TODAY
        due = await service.get_chores_due_today()
        assert [c.id for c in due] == [chore_id]

    async def test_rules_ordered_by_priority(self, service):
        chore_id = await _daily_chore(schedule_type=ScheduleType.CONDITIONAL)
        await service.add_rule(chore_id, RuleCreate(rule_type=RuleType.INTERVAL, rule_value={"interval": 14}, priority=2))
        await service.add_rule(chore_id, RuleCreate(rule_type=RuleType.DAY_OF_WEEK, rule_value={"days": [1]}, priority=1))

        rules = await service.list_rules(chore_id)

        assert [rule.rule_type for rule in rules] == [RuleType.DAY_OF_WEEK, RuleType.INTERVAL]
        assert rules[0].rule_value == {"days": [1]}
        assert rules[0].chore_id == chore_id

        occurrences = await service.generate_occurrences(chore_id, 3)
        assert [occ.date for occ in occurrences] == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]

    async def test_exception_overlay(self, service):
        chore_id = await _daily_chore()
        await service.add_exception(
            chore_id,
            ExceptionCreate(exception_date=date(2024, 1, 2), rescheduled_date=date(2024, 1, 9), reason="Away"),
        )

        occurrences = await service.generate_occurrences(chore_id, 3)

        assert occurrences[1].date == date(2024, 1, 9)
        assert occurrences[1].original_date == date(2024, 1, 2)
        assert occurrences[1].is_rescheduled is True

    async def test_filter_injection_returns_nothing(self, service, store):
        """Test a crafted chore id matches no rows."""
        chore_id = await _daily_chore()
        await service.add_rule(chore_id, RuleCreate(rule_type=RuleType.WORKDAY))

        assert await store.list_rules('1" || true || "') == []
        assert len(await store.list_rules(chore_id)) == 1


@pytest.mark.integration
class TestTemplatePersistence:
    """Templates and their application backed by SQLite."""

    async def _template(self, service):
        return await service.create_template(
            TemplateCreate(
                name="Workdays",
                schedule_type=ScheduleType.CONDITIONAL,
                schedule_config={"time_of_day": "evening", "rules": [{"rule_type": "WORKDAY"}]},
            )
        )

    async def test_template_config_round_trip(self, service):
        template = await self._template(service)

        loaded = await service.get_template(template.id)
        renamed = await service.update_template(template.id, TemplateUpdate(name="Weekdays"))

        assert loaded.schedule_config.time_of_day == "evening"
        assert [rule.rule_type for rule in loaded.schedule_config.rules] == [RuleType.WORKDAY]
        assert renamed.name == "Weekdays"
        assert renamed.schedule_config.time_of_day == "evening"

    async def test_apply_template_replaces_rules(self, service):
        chore_id = await _daily_chore()
        await service.add_rule(chore_id, RuleCreate(rule_type=RuleType.DAY_OF_MONTH, rule_value={"days": [1]}))
        template = await self._template(service)

        chore = await service.apply_template(chore_id, template.id)

        assert chore.schedule_type == ScheduleType.CONDITIONAL
        assert chore.time_of_day == "evening"
        assert [rule.rule_type for rule in await service.list_rules(chore_id)] == [RuleType.WORKDAY]

    async def test_apply_template_rolls_back(self, service, store, monkeypatch):
        """Test a failure while creating rules leaves the chore and its rules untouched."""
        chore_id = await _daily_chore()
        await service.add_rule(chore_id, RuleCreate(rule_type=RuleType.DAY_OF_MONTH, rule_value={"days": [1]}))
        template = await self._template(service)
        monkeypatch.setattr(store, "create_rule", AsyncMock(side_effect=DatabaseError("disk full")))

        with pytest.raises(DatabaseError):
            await service.apply_template(chore_id, template.id)

        chore = await store.get_chore(chore_id)
        assert chore.schedule_type == ScheduleType.SIMPLE
        assert chore.time_of_day is None
        assert [rule.rule_type for rule in await store.list_rules(chore_id)] == [RuleType.DAY_OF_MONTH]


def _slow_create_rule(store, monkeypatch, *, fail: bool = False):
    """Make each rule insert yield to the event loop before it runs."""
    original = store.create_rule

    async def create_rule(chore_id, rule):
        await asyncio.sleep(0.01)
        if fail:
            raise DatabaseError("disk full")
        return await original(chore_id, rule)

    monkeypatch.setattr(store, "create_rule", create_rule)


@pytest.mark.integration
class TestConcurrentTemplateApplication:
    """apply_template against other readers and writers sharing the database."""

    async def _chore_with_rules(self, service, name: str = "Dishes") -> str:
        chore_id = await _daily_chore(name)
        for day in (1, 2, 3):
            await service.add_rule(chore_id, RuleCreate(rule_type=RuleType.DAY_OF_MONTH, rule_value={"days": [day]}))
        return chore_id

    async def _template(self, service):
        return await service.create_template(
            TemplateCreate(
                name="Workdays mid-month",
                schedule_type=ScheduleType.CONDITIONAL,
                schedule_config={
                    "rules": [
                        {"rule_type": "WORKDAY"},
                        {"rule_type": "DAY_OF_MONTH", "rule_value": {"days": [15]}, "priority": 2},
                    ]
                },
            )
        )

    async def test_reader_never_sees_partial_rule_set(self, service, store, monkeypatch):
        """Test a reader sees either the old three rules or the new two, nothing in between."""
        chore_id = await self._chore_with_rules(service)
        template = await self._template(service)
        _slow_create_rule(store, monkeypatch)

        apply_task = asyncio.create_task(service.apply_template(chore_id, template.id))
        counts = set()
        while not apply_task.done():
            counts.add(len(await store.list_rules(chore_id)))
            await asyncio.sleep(0)
        await apply_task
        counts.add(len(await store.list_rules(chore_id)))

        assert 3 in counts
        assert counts <= {3, 2}
        assert [rule.rule_type for rule in await store.list_rules(chore_id)] == [
            RuleType.WORKDAY,
            RuleType.DAY_OF_MONTH,
        ]

    async def test_overlapping_applications_both_succeed(self, service, store, monkeypatch):
        first = await self._chore_with_rules(service, "Dishes")
        second = await self._chore_with_rules(service, "Laundry")
        template = await self._template(service)
        _slow_create_rule(store, monkeypatch)

        results = await asyncio.gather(
            service.apply_template(first, template.id),
            service.apply_template(second, template.id),
        )

        assert [chore.schedule_type for chore in results] == [ScheduleType.CONDITIONAL, ScheduleType.CONDITIONAL]
        for chore_id in (first, second):
            rules = await store.list_rules(chore_id)
            assert [rule.rule_type for rule in rules] == [RuleType.WORKDAY, RuleType.DAY_OF_MONTH]

    async def test_concurrent_write_does_not_commit_failed_application(self, service, store, monkeypatch):
        """Test a write elsewhere during a failing apply_template persists without leaking its changes."""
        chore_id = await self._chore_with_rules(service)
        other = await chore_service.create_chore(
            chore=ChoreCreate(name="Bins", recurrence_pattern="WEEKLY", start_date=date(2024, 1, 5))
        )
        template = await self._template(service)
        _slow_create_rule(store, monkeypatch, fail=True)

        failed, generated = await asyncio.gather(
            service.apply_template(chore_id, template.id),
            service.generate_occurrences(other.id, 2),
            return_exceptions=True,
        )

        assert isinstance(failed, DatabaseError)
        assert [occ.date for occ in generated] == [date(2024, 1, 5), date(2024, 1, 12)]
        assert (await store.get_chore(other.id)).next_occurrence == date(2024, 1, 5)
        chore = await store.get_chore(chore_id)
        assert chore.schedule_type == ScheduleType.SIMPLE
        assert len(await store.list_rules(chore_id)) == 3


@pytest.mark.integration
class TestTransactions:
    """db_client.transaction() on a real database file."""

    async def test_locked_database_raises_database_error(self, sqlite_db, monkeypatch):
        """Test a transaction that cannot take the write lock fails with DatabaseError."""
        monkeypatch.setattr(settings, "sqlite_busy_timeout_ms", 0)
        locked = asyncio.Event()
        release = asyncio.Event()

        async def hold_lock():
            async with db_client.transaction():
                await db_client.create_record(collection="chores", data={"name": "Held"})
                locked.set()
                await release.wait()

        holder = asyncio.create_task(hold_lock())
        await locked.wait()
        try:
            with pytest.raises(DatabaseError, match="Failed to start transaction"):
                async with db_client.transaction():
                    pass
        finally:
            release.set()
            await holder

        assert len(await db_client.list_records(collection="chores")) == 1

    async def test_nested_transaction_joins_outer(self, sqlite_db):
        with pytest.raises(RuntimeError):
            async with db_client.transaction():
                await db_client.create_record(collection="chores", data={"name": "Outer"})
                async with db_client.transaction():
                    await db_client.create_record(collection="chores", data={"name": "Inner"})
                raise RuntimeError("abort")

        assert await db_client.list_records(collection="chores") == []
