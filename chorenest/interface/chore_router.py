"""HTTP routes for chore CRUD."""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from chorenest.core.config import constants
from chorenest.domain.chore import ChoreStatus
from chorenest.domain.create_models import ChoreCreate
from chorenest.interface.responses import success_response
from chorenest.services import chore_service


router = APIRouter(prefix="/chores", tags=["chores"])


@router.post("")
async def create_chore(chore: ChoreCreate) -> JSONResponse:
    created = await chore_service.create_chore(chore=chore)
    return success_response(created, message="Chore created", status_code=constants.HTTP_CREATED)


@router.get("")
async def list_chores(status: ChoreStatus | None = Query(default=None)) -> JSONResponse:
    chores = await chore_service.list_chores(status=status)
    return success_response(chores, count=len(chores), message="Chores retrieved")


@router.get("/{chore_id}")
async def get_chore(chore_id: str) -> JSONResponse:
    chore = await chore_service.get_chore_by_id(chore_id=chore_id)
    return success_response(chore, message="Chore retrieved")


@router.delete("/{chore_id}")
async def delete_chore(chore_id: str) -> JSONResponse:
    """Soft delete: the chore is kept with status DELETED."""
    await chore_service.delete_chore(chore_id=chore_id)
    return success_response(message="Chore deleted")
