"""HTTP routes for chore schedules, rules, exceptions and templates."""

from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from chorenest.core.config import constants
from chorenest.domain.create_models import ExceptionCreate, RuleCreate, TemplateCreate
from chorenest.domain.update_models import ExceptionUpdate, RuleUpdate, ScheduleUpdate, TemplateUpdate
from chorenest.interface.responses import success_response
from chorenest.services.schedule_service import ScheduleService, build_schedule_service


router = APIRouter(tags=["schedule"])


def get_schedule_service() -> ScheduleService:
    """Dependency provider for the schedule service."""
    return build_schedule_service()


# Due queries are registered before any /chores/{chore_id} route.


@router.get("/chores/due/today")
async def chores_due_today(service: ScheduleService = Depends(get_schedule_service)) -> JSONResponse:
    chores = await service.get_chores_due_today()
    return success_response(chores, count=len(chores), message="Chores due today")


@router.get("/chores/due/range")
async def chores_due_in_range(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Occurrences of active chores between two dates (default: today and the following week)."""
    start = start_date or service.clock()
    end = end_date or start + timedelta(days=service.config.due_range_default_days)
    results = await service.get_chores_for_date_range(start, end)
    return success_response(
        results,
        count=len(results),
        message=f"Chores due between {start.isoformat()} and {end.isoformat()}",
    )


# Occurrences


@router.get("/chores/{chore_id}/schedule")
async def get_schedule(
    chore_id: str,
    count: int | None = Query(default=None),
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    occurrences = await service.generate_occurrences(chore_id, count)
    return success_response(occurrences, count=len(occurrences), message="Schedule generated")


@router.get("/chores/{chore_id}/schedule/occurrences")
async def get_occurrences(
    chore_id: str,
    count: int | None = Query(default=None),
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    occurrences = await service.generate_occurrences(chore_id, count)
    return success_response(occurrences, count=len(occurrences), message="Occurrences generated")


@router.put("/chores/{chore_id}/schedule")
async def update_schedule(
    chore_id: str,
    update: ScheduleUpdate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Replace a chore's schedule shape and return it with freshly generated occurrences."""
    await service.update_schedule(chore_id, update)
    occurrences = await service.generate_occurrences(chore_id)
    chore = await service.store.get_chore(chore_id)
    return success_response({"chore": chore, "occurrences": occurrences}, message="Schedule updated")


# Rules


@router.get("/chores/{chore_id}/schedule/rules")
async def list_rules(chore_id: str, service: ScheduleService = Depends(get_schedule_service)) -> JSONResponse:
    rules = await service.list_rules(chore_id)
    return success_response(rules, count=len(rules), message="Rules retrieved")


@router.post("/chores/{chore_id}/schedule/rules")
async def create_rule(
    chore_id: str,
    rule: RuleCreate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    created = await service.add_rule(chore_id, rule)
    return success_response(created, message="Rule created", status_code=constants.HTTP_CREATED)


@router.put("/chores/{chore_id}/schedule/rules/{rule_id}")
async def update_rule(
    chore_id: str,
    rule_id: str,
    rule: RuleUpdate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    updated = await service.update_rule(chore_id, rule_id, rule)
    return success_response(updated, message="Rule updated")


@router.delete("/chores/{chore_id}/schedule/rules/{rule_id}")
async def delete_rule(
    chore_id: str,
    rule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    await service.delete_rule(chore_id, rule_id)
    return success_response(message="Rule deleted")


# Exceptions


@router.get("/chores/{chore_id}/schedule/exceptions")
async def list_exceptions(chore_id: str, service: ScheduleService = Depends(get_schedule_service)) -> JSONResponse:
    exceptions = await service.list_exceptions(chore_id)
    return success_response(exceptions, count=len(exceptions), message="Exceptions retrieved")


@router.post("/chores/{chore_id}/schedule/exceptions")
async def create_exception(
    chore_id: str,
    exception: ExceptionCreate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    created = await service.add_exception(chore_id, exception)
    return success_response(created, message="Exception created", status_code=constants.HTTP_CREATED)


@router.put("/chores/{chore_id}/schedule/exceptions/{exception_id}")
async def update_exception(
    chore_id: str,
    exception_id: str,
    exception: ExceptionUpdate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    updated = await service.update_exception(chore_id, exception_id, exception)
    return success_response(updated, message="Exception updated")


@router.delete("/chores/{chore_id}/schedule/exceptions/{exception_id}")
async def delete_exception(
    chore_id: str,
    exception_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    await service.delete_exception(chore_id, exception_id)
    return success_response(message="Exception deleted")


# Templates


@router.post("/chores/{chore_id}/schedule/apply-template/{template_id}")
async def apply_template(
    chore_id: str,
    template_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    """Apply a template to a chore, then regenerate its occurrences."""
    await service.apply_template(chore_id, template_id)
    occurrences = await service.generate_occurrences(chore_id)
    chore = await service.store.get_chore(chore_id)
    return success_response({"chore": chore, "occurrences": occurrences}, message="Template applied")


@router.get("/schedule/templates")
async def list_templates(service: ScheduleService = Depends(get_schedule_service)) -> JSONResponse:
    templates = await service.list_templates()
    return success_response(templates, count=len(templates), message="Templates retrieved")


@router.post("/schedule/templates")
async def create_template(
    template: TemplateCreate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    created = await service.create_template(template)
    return success_response(created, message="Template created", status_code=constants.HTTP_CREATED)


@router.get("/schedule/templates/{template_id}")
async def get_template(template_id: str, service: ScheduleService = Depends(get_schedule_service)) -> JSONResponse:
    template = await service.get_template(template_id)
    return success_response(template, message="Template retrieved")


@router.put("/schedule/templates/{template_id}")
async def update_template(
    template_id: str,
    template: TemplateUpdate,
    service: ScheduleService = Depends(get_schedule_service),
) -> JSONResponse:
    updated = await service.update_template(template_id, template)
    return success_response(updated, message="Template updated")


@router.delete("/schedule/templates/{template_id}")
async def delete_template(template_id: str, service: ScheduleService = Depends(get_schedule_service)) -> JSONResponse:
    await service.delete_template(template_id)
    return success_response(message="Template deleted")
