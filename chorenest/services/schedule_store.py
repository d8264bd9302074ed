"""Storage port for the scheduling service and its SQLite-backed implementation."""

import logging
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from datetime import date
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from chorenest.core import db_client
from chorenest.core.config import constants
from chorenest.core.errors import ComputationError, NotFoundError
from chorenest.domain.chore import Chore, ChoreStatus
from chorenest.domain.create_models import ExceptionCreate, RuleCreate, TemplateCreate
from chorenest.domain.schedule import RulePayload, ScheduleException, ScheduleRule, ScheduleTemplate
from chorenest.domain.update_models import ExceptionUpdate, RuleUpdate, TemplateUpdate


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

CHORES = "chores"
RULES = "schedule_rules"
EXCEPTIONS = "schedule_exceptions"
TEMPLATES = "schedule_templates"


class ScheduleStore(Protocol):
    """Persistence operations the scheduling service depends on."""

    def transaction(self) -> AbstractAsyncContextManager[None]: ...

    async def get_chore(self, chore_id: str) -> Chore: ...

    async def list_active_chores(self) -> list[Chore]: ...

    async def list_chores_due_on(self, day: date) -> list[Chore]: ...

    async def update_chore(self, chore_id: str, data: dict[str, Any]) -> Chore: ...

    async def set_next_occurrence(self, chore_id: str, day: date) -> None: ...

    async def list_rules(self, chore_id: str) -> list[ScheduleRule]: ...

    async def get_rule(self, chore_id: str, rule_id: str) -> ScheduleRule: ...

    async def create_rule(self, chore_id: str, rule: RuleCreate | RulePayload) -> ScheduleRule: ...

    async def update_rule(self, chore_id: str, rule_id: str, rule: RuleUpdate) -> ScheduleRule: ...

    async def delete_rule(self, chore_id: str, rule_id: str) -> None: ...

    async def replace_rules(self, chore_id: str, rules: Sequence[RulePayload]) -> list[ScheduleRule]: ...

    async def list_exceptions(self, chore_id: str) -> list[ScheduleException]: ...

    async def get_exception(self, chore_id: str, exception_id: str) -> ScheduleException: ...

    async def create_exception(self, chore_id: str, exception: ExceptionCreate) -> ScheduleException: ...

    async def update_exception(
        self, chore_id: str, exception_id: str, exception: ExceptionUpdate
    ) -> ScheduleException: ...

    async def delete_exception(self, chore_id: str, exception_id: str) -> None: ...

    async def list_templates(self) -> list[ScheduleTemplate]: ...

    async def get_template(self, template_id: str) -> ScheduleTemplate: ...

    async def create_template(self, template: TemplateCreate) -> ScheduleTemplate: ...

    async def update_template(self, template_id: str, template: TemplateUpdate) -> ScheduleTemplate: ...

    async def delete_template(self, template_id: str) -> None: ...


def _to_model(model_cls: type[ModelT], record: dict[str, Any]) -> ModelT:
    """Validate a stored record, treating unreadable rows as a computation failure."""
    try:
        return model_cls.model_validate(record)
    except ValidationError as e:
        msg = f"Stored {model_cls.__name__} {record.get('id')} is corrupt: {e.error_count()} invalid field(s)"
        raise ComputationError(msg) from e


def _rule_data(chore_id: str, rule: RulePayload) -> dict[str, Any]:
    return {"chore_id": chore_id, **rule.model_dump(mode="json")}


class DbScheduleStore:
    """ScheduleStore backed by the module-level db_client functions."""

    def transaction(self) -> AbstractAsyncContextManager[None]:
        return db_client.transaction()

    async def _get(self, collection: str, resource: str, record_id: str) -> dict[str, Any]:
        try:
            return await db_client.get_record(collection=collection, record_id=record_id)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError(resource, record_id) from e

    async def _get_owned(self, collection: str, resource: str, chore_id: str, record_id: str) -> dict[str, Any]:
        """Fetch a child record and check it belongs to the chore."""
        record = await self._get(collection, resource, record_id)
        if str(record.get("chore_id")) != str(chore_id):
            raise NotFoundError(resource, record_id)
        return record

    # Chores

    async def get_chore(self, chore_id: str) -> Chore:
        """Load a chore; soft-deleted chores are reported as missing."""
        chore = _to_model(Chore, await self._get(CHORES, "chore", chore_id))
        if chore.status == ChoreStatus.DELETED:
            raise NotFoundError("chore", chore_id)
        return chore

    async def list_active_chores(self) -> list[Chore]:
        records = await db_client.list_records(
            collection=CHORES,
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            filter_query=f'status = "{ChoreStatus.ACTIVE}"',
            sort="+name",
        )
        return [_to_model(Chore, record) for record in records]

    async def list_chores_due_on(self, day: date) -> list[Chore]:
        records = await db_client.list_records(
            collection=CHORES,
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            filter_query=f'status = "{ChoreStatus.ACTIVE}" && next_occurrence = "{day.isoformat()}"',
            sort="+name",
        )
        return [_to_model(Chore, record) for record in records]

    async def update_chore(self, chore_id: str, data: dict[str, Any]) -> Chore:
        try:
            record = await db_client.update_record(collection=CHORES, record_id=chore_id, data=data)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("chore", chore_id) from e
        return _to_model(Chore, record)

    async def set_next_occurrence(self, chore_id: str, day: date) -> None:
        await db_client.update_record(collection=CHORES, record_id=chore_id, data={"next_occurrence": day.isoformat()})

    # Rules

    async def list_rules(self, chore_id: str) -> list[ScheduleRule]:
        """Rules of a chore, priority ascending with insertion order breaking ties."""
        records = await db_client.list_records(
            collection=RULES,
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            filter_query=f'chore_id = "{db_client.sanitize_param(chore_id)}"',
            sort="+id",
        )
        rules = [_to_model(ScheduleRule, record) for record in records]
        return sorted(rules, key=lambda rule: rule.priority)

    async def get_rule(self, chore_id: str, rule_id: str) -> ScheduleRule:
        return _to_model(ScheduleRule, await self._get_owned(RULES, "rule", chore_id, rule_id))

    async def create_rule(self, chore_id: str, rule: RuleCreate | RulePayload) -> ScheduleRule:
        record = await db_client.create_record(collection=RULES, data=_rule_data(chore_id, rule))
        return _to_model(ScheduleRule, record)

    async def update_rule(self, chore_id: str, rule_id: str, rule: RuleUpdate) -> ScheduleRule:
        await self._get_owned(RULES, "rule", chore_id, rule_id)
        record = await db_client.update_record(collection=RULES, record_id=rule_id, data=rule.model_dump(mode="json"))
        return _to_model(ScheduleRule, record)

    async def delete_rule(self, chore_id: str, rule_id: str) -> None:
        await self._get_owned(RULES, "rule", chore_id, rule_id)
        await db_client.delete_record(collection=RULES, record_id=rule_id)

    async def replace_rules(self, chore_id: str, rules: Sequence[RulePayload]) -> list[ScheduleRule]:
        """Delete every rule of the chore and create the given ones in their place."""
        for existing in await self.list_rules(chore_id):
            await db_client.delete_record(collection=RULES, record_id=existing.id)
        return [await self.create_rule(chore_id, rule) for rule in rules]

    # Exceptions

    async def list_exceptions(self, chore_id: str) -> list[ScheduleException]:
        records = await db_client.list_records(
            collection=EXCEPTIONS,
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            filter_query=f'chore_id = "{db_client.sanitize_param(chore_id)}"',
            sort="+id",
        )
        return [_to_model(ScheduleException, record) for record in records]

    async def get_exception(self, chore_id: str, exception_id: str) -> ScheduleException:
        return _to_model(ScheduleException, await self._get_owned(EXCEPTIONS, "exception", chore_id, exception_id))

    async def create_exception(self, chore_id: str, exception: ExceptionCreate) -> ScheduleException:
        data = {"chore_id": chore_id, **exception.model_dump(mode="json")}
        record = await db_client.create_record(collection=EXCEPTIONS, data=data)
        return _to_model(ScheduleException, record)

    async def update_exception(
        self, chore_id: str, exception_id: str, exception: ExceptionUpdate
    ) -> ScheduleException:
        await self._get_owned(EXCEPTIONS, "exception", chore_id, exception_id)
        record = await db_client.update_record(
            collection=EXCEPTIONS, record_id=exception_id, data=exception.model_dump(mode="json")
        )
        return _to_model(ScheduleException, record)

    async def delete_exception(self, chore_id: str, exception_id: str) -> None:
        await self._get_owned(EXCEPTIONS, "exception", chore_id, exception_id)
        await db_client.delete_record(collection=EXCEPTIONS, record_id=exception_id)

    # Templates

    async def list_templates(self) -> list[ScheduleTemplate]:
        records = await db_client.list_records(
            collection=TEMPLATES,
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            sort="+name",
        )
        return [_to_model(ScheduleTemplate, record) for record in records]

    async def get_template(self, template_id: str) -> ScheduleTemplate:
        return _to_model(ScheduleTemplate, await self._get(TEMPLATES, "template", template_id))

    async def create_template(self, template: TemplateCreate) -> ScheduleTemplate:
        record = await db_client.create_record(collection=TEMPLATES, data=template.model_dump(mode="json"))
        return _to_model(ScheduleTemplate, record)

    async def update_template(self, template_id: str, template: TemplateUpdate) -> ScheduleTemplate:
        data = template.model_dump(mode="json", exclude_unset=True)
        if not data:
            return await self.get_template(template_id)
        try:
            record = await db_client.update_record(collection=TEMPLATES, record_id=template_id, data=data)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("template", template_id) from e
        return _to_model(ScheduleTemplate, record)

    async def delete_template(self, template_id: str) -> None:
        try:
            await db_client.delete_record(collection=TEMPLATES, record_id=template_id)
        except db_client.RecordNotFoundError as e:
            raise NotFoundError("template", template_id) from e
