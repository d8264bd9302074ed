"""Schedule orchestration: occurrence generation, rules, exceptions and templates."""

import logging
from collections.abc import Callable
from datetime import date, timedelta

from pydantic import BaseModel

from chorenest.core.config import Settings, settings
from chorenest.core.errors import ErrorCode, ScheduleValidationError
from chorenest.core.logging import log_with_chore_context, span
from chorenest.core.recurrence import describe_schedule
from chorenest.domain.chore import Chore
from chorenest.domain.create_models import ExceptionCreate, RuleCreate, TemplateCreate
from chorenest.domain.schedule import (
    Occurrence,
    RuleType,
    ScheduleException,
    ScheduleRule,
    ScheduleTemplate,
    ScheduleType,
    coerce_enum,
)
from chorenest.domain.update_models import ExceptionUpdate, RuleUpdate, ScheduleUpdate, TemplateUpdate
from chorenest.scheduling.generators import (
    effective_start,
    generate_conditional_occurrences,
    generate_recurring_occurrences,
    generate_simple_occurrences,
)
from chorenest.scheduling.overlay import apply_exceptions
from chorenest.scheduling.school_calendar import NoSchoolCalendar, SchoolCalendarProvider
from chorenest.services.schedule_store import DbScheduleStore, ScheduleStore


logger = logging.getLogger(__name__)


class ChoreOccurrences(BaseModel):
    """A chore paired with its occurrences inside a date window."""

    chore: Chore
    occurrences: list[Occurrence]


class ScheduleService:
    """Generates occurrences and manages the schedule data of chores.

    Storage, the school calendar and the clock are injected so the service can be
    exercised against the in-memory database and a fixed "today".
    """

    def __init__(
        self,
        *,
        store: ScheduleStore,
        school_calendar: SchoolCalendarProvider | None = None,
        clock: Callable[[], date] = date.today,
        config: Settings = settings,
    ) -> None:
        self.store = store
        self.school_calendar = school_calendar or NoSchoolCalendar()
        self.clock = clock
        self.config = config

    def _check_count(self, count: int | None) -> int:
        if count is None:
            return self.config.default_occurrence_count
        if count < 1:
            msg = f"count must be at least 1, got {count}"
            raise ScheduleValidationError(msg)
        if count > self.config.max_occurrence_count:
            msg = f"count must be at most {self.config.max_occurrence_count}, got {count}"
            raise ScheduleValidationError(msg)
        return count

    async def _school_days_for(self, chore: Chore, rules: list[ScheduleRule], count: int) -> frozenset[date]:
        """Fetch school days covering the widest candidate pool, only when a SCHOOL_DAY rule exists."""
        if not any(coerce_enum(RuleType, rule.rule_type) == RuleType.SCHOOL_DAY for rule in rules):
            return frozenset()

        start = effective_start(chore, self.clock())
        days = count * self.config.candidate_pool_multiplier
        if self.config.adaptive_candidate_pool:
            days = max(days, self.config.max_candidate_pool_days)
        end = start + timedelta(days=days)
        if chore.end_date and chore.end_date < end:
            end = chore.end_date
        return await self.school_calendar.get_school_days(start=start, end=end)

    async def _compute(self, chore: Chore, count: int) -> list[Occurrence]:
        """Run the generator for the chore's schedule type and overlay its exceptions."""
        today = self.clock()

        match coerce_enum(ScheduleType, chore.schedule_type):
            case ScheduleType.RECURRING:
                occurrences = generate_recurring_occurrences(chore, count, today=today)
            case ScheduleType.CONDITIONAL | ScheduleType.CUSTOM:
                rules = await self.store.list_rules(chore.id)
                occurrences = generate_conditional_occurrences(
                    chore,
                    rules,
                    count,
                    today=today,
                    school_days=await self._school_days_for(chore, rules, count),
                    pool_multiplier=self.config.candidate_pool_multiplier,
                    adaptive=self.config.adaptive_candidate_pool,
                    max_pool_days=self.config.max_candidate_pool_days,
                )
            case _:
                occurrences = generate_simple_occurrences(chore, count, today=today)

        exceptions = await self.store.list_exceptions(chore.id)
        return apply_exceptions(occurrences, exceptions)

    async def generate_occurrences(self, chore_id: str, count: int | None = None) -> list[Occurrence]:
        """Generate the next occurrences of a chore and cache the first one.

        Args:
            chore_id: Chore to schedule
            count: Number of occurrences to generate (defaults to DEFAULT_OCCURRENCE_COUNT)

        Returns:
            Occurrences in generation order, exceptions applied

        Raises:
            NotFoundError: If the chore does not exist or is soft-deleted
            ScheduleValidationError: If count is out of bounds
            ComputationError: If date arithmetic fails
        """
        with span("schedule_service.generate_occurrences"):
            count = self._check_count(count)
            chore = await self.store.get_chore(chore_id)
            occurrences = await self._compute(chore, count)

            # A cancelled first entry leaves the cached value untouched.
            if occurrences and not occurrences[0].is_cancelled:
                await self.store.set_next_occurrence(chore.id, occurrences[0].date)

            log_with_chore_context(
                logger,
                "info",
                "Generated occurrences",
                chore_id=chore.id,
                schedule_type=str(chore.schedule_type),
                requested=count,
                generated=len(occurrences),
            )
            return occurrences

    async def update_schedule(self, chore_id: str, update: ScheduleUpdate) -> Chore:
        """Overwrite the schedule-shape fields of a chore."""
        with span("schedule_service.update_schedule"):
            await self.store.get_chore(chore_id)
            chore = await self.store.update_chore(chore_id, update.model_dump(mode="json"))
            logger.info("Updated schedule", extra={"chore_id": chore_id, "schedule_type": update.schedule_type})
            return chore

    # Rules

    async def list_rules(self, chore_id: str) -> list[ScheduleRule]:
        with span("schedule_service.list_rules"):
            await self.store.get_chore(chore_id)
            return await self.store.list_rules(chore_id)

    async def add_rule(self, chore_id: str, rule: RuleCreate) -> ScheduleRule:
        with span("schedule_service.add_rule"):
            await self.store.get_chore(chore_id)
            created = await self.store.create_rule(chore_id, rule)
            logger.info("Added rule", extra={"chore_id": chore_id, "rule_id": created.id, "rule_type": rule.rule_type})
            return created

    async def update_rule(self, chore_id: str, rule_id: str, rule: RuleUpdate) -> ScheduleRule:
        with span("schedule_service.update_rule"):
            await self.store.get_chore(chore_id)
            return await self.store.update_rule(chore_id, rule_id, rule)

    async def delete_rule(self, chore_id: str, rule_id: str) -> None:
        with span("schedule_service.delete_rule"):
            await self.store.get_chore(chore_id)
            await self.store.delete_rule(chore_id, rule_id)
            logger.info("Deleted rule", extra={"chore_id": chore_id, "rule_id": rule_id})

    # Exceptions

    async def list_exceptions(self, chore_id: str) -> list[ScheduleException]:
        with span("schedule_service.list_exceptions"):
            await self.store.get_chore(chore_id)
            return await self.store.list_exceptions(chore_id)

    async def add_exception(self, chore_id: str, exception: ExceptionCreate) -> ScheduleException:
        with span("schedule_service.add_exception"):
            await self.store.get_chore(chore_id)
            created = await self.store.create_exception(chore_id, exception)
            logger.info(
                "Added exception",
                extra={
                    "chore_id": chore_id,
                    "exception_id": created.id,
                    "exception_date": exception.exception_date.isoformat(),
                    "cancels": exception.rescheduled_date is None,
                },
            )
            return created

    async def update_exception(self, chore_id: str, exception_id: str, exception: ExceptionUpdate) -> ScheduleException:
        with span("schedule_service.update_exception"):
            await self.store.get_chore(chore_id)
            return await self.store.update_exception(chore_id, exception_id, exception)

    async def delete_exception(self, chore_id: str, exception_id: str) -> None:
        with span("schedule_service.delete_exception"):
            await self.store.get_chore(chore_id)
            await self.store.delete_exception(chore_id, exception_id)
            logger.info("Deleted exception", extra={"chore_id": chore_id, "exception_id": exception_id})

    # Templates

    async def list_templates(self) -> list[ScheduleTemplate]:
        with span("schedule_service.list_templates"):
            return await self.store.list_templates()

    async def get_template(self, template_id: str) -> ScheduleTemplate:
        with span("schedule_service.get_template"):
            return await self.store.get_template(template_id)

    async def create_template(self, template: TemplateCreate) -> ScheduleTemplate:
        with span("schedule_service.create_template"):
            created = await self.store.create_template(template)
            logger.info("Created template", extra={"template_id": created.id, "template_name": created.name})
            return created

    async def update_template(self, template_id: str, template: TemplateUpdate) -> ScheduleTemplate:
        with span("schedule_service.update_template"):
            return await self.store.update_template(template_id, template)

    async def delete_template(self, template_id: str) -> None:
        with span("schedule_service.delete_template"):
            await self.store.delete_template(template_id)
            logger.info("Deleted template", extra={"template_id": template_id})

    async def apply_template(self, chore_id: str, template_id: str) -> Chore:
        """Copy a template's schedule shape onto a chore and replace its rules.

        The chore update, rule deletion and rule creation commit together or not at all.
        Occurrences are not regenerated here.

        Raises:
            NotFoundError: If the template or the chore does not exist
        """
        with span("schedule_service.apply_template"):
            template = await self.store.get_template(template_id)
            await self.store.get_chore(chore_id)

            config = template.schedule_config
            data = {
                "schedule_type": str(template.schedule_type),
                "recurrence_pattern": str(config.recurrence_pattern) if config.recurrence_pattern else None,
                "interval_value": config.interval_value,
                "weekdays": config.weekdays,
                "month_days": config.month_days,
                "months": config.months,
                "is_time_sensitive": config.is_time_sensitive,
                "time_of_day": config.time_of_day,
            }

            async with self.store.transaction():
                chore = await self.store.update_chore(chore_id, data)
                rules = await self.store.replace_rules(chore_id, config.rules)

            logger.info(
                "Applied template",
                extra={"chore_id": chore_id, "template_id": template_id, "rules": len(rules)},
            )
            return chore

    # Queries

    async def get_chores_due_today(self) -> list[Chore]:
        """Active chores whose cached next occurrence is today, ordered by name."""
        with span("schedule_service.get_chores_due_today"):
            return await self.store.list_chores_due_on(self.clock())

    async def get_chores_for_date_range(self, start: date, end: date) -> list[ChoreOccurrences]:
        """Occurrences of every active chore falling within [start, end].

        Each chore is expanded to RANGE_OCCURRENCE_COUNT occurrences before filtering, so
        very frequent chores may be cut off before the end of a long window. Cached
        next occurrences are not touched.
        """
        with span("schedule_service.get_chores_for_date_range"):
            if start > end:
                msg = f"start_date {start.isoformat()} is after end_date {end.isoformat()}"
                raise ScheduleValidationError(msg, code=ErrorCode.ERR_INVALID_SCHEDULE)

            results: list[ChoreOccurrences] = []
            for chore in await self.store.list_active_chores():
                occurrences = await self._compute(chore, self.config.range_occurrence_count)
                in_range = [occ for occ in occurrences if start <= occ.date <= end]
                if in_range:
                    results.append(ChoreOccurrences(chore=chore, occurrences=in_range))

            logger.debug(
                "Computed date range",
                extra={"start": start.isoformat(), "end": end.isoformat(), "chores": len(results)},
            )
            return results

    async def describe(self, chore_id: str) -> str:
        """Human-readable summary of a chore's schedule."""
        chore = await self.store.get_chore(chore_id)
        rules: list[ScheduleRule] = []
        if coerce_enum(ScheduleType, chore.schedule_type) in (ScheduleType.CONDITIONAL, ScheduleType.CUSTOM):
            rules = await self.store.list_rules(chore.id)
        return describe_schedule(chore, rules)


def build_schedule_service() -> ScheduleService:
    """Service wired to the SQLite store and application settings."""
    return ScheduleService(store=DbScheduleStore())
