"""Chore service for CRUD operations."""

import logging

from chorenest.core import db_client
from chorenest.core.config import constants
from chorenest.core.errors import NotFoundError
from chorenest.core.logging import span
from chorenest.domain.chore import Chore, ChoreStatus
from chorenest.domain.create_models import ChoreCreate


logger = logging.getLogger(__name__)


async def create_chore(*, chore: ChoreCreate) -> Chore:
    """Create a new chore.

    Args:
        chore: Validated chore payload

    Returns:
        Created chore

    Raises:
        db_client.DatabaseError: If database operation fails
    """
    with span("chore_service.create_chore"):
        record = await db_client.create_record(collection="chores", data=chore.model_dump(mode="json"))
        logger.info("Created chore: %s (schedule: %s)", chore.name, chore.schedule_type)
        return Chore.model_validate(record)


async def get_chore_by_id(*, chore_id: str) -> Chore:
    """Get chore by ID.

    Raises:
        NotFoundError: If the chore does not exist or was deleted
    """
    try:
        record = await db_client.get_record(collection="chores", record_id=chore_id)
    except db_client.RecordNotFoundError as e:
        raise NotFoundError("chore", chore_id) from e

    chore = Chore.model_validate(record)
    if chore.status == ChoreStatus.DELETED:
        raise NotFoundError("chore", chore_id)
    return chore


async def list_chores(*, status: ChoreStatus | None = None) -> list[Chore]:
    """List chores ordered by name, optionally filtered by status.

    Deleted chores are only returned when asked for explicitly.
    """
    with span("chore_service.list_chores"):
        if status:
            filter_query = f'status = "{status}"'
        else:
            filter_query = f'status != "{ChoreStatus.DELETED}"'

        records = await db_client.list_records(
            collection="chores",
            per_page=constants.DEFAULT_PER_PAGE_LIMIT,
            filter_query=filter_query,
            sort="+name",
        )

        logger.debug("Retrieved %d chores with filter: %s", len(records), filter_query)
        return [Chore.model_validate(record) for record in records]


async def delete_chore(*, chore_id: str) -> Chore:
    """Soft delete a chore by marking it DELETED.

    Its rules and exceptions are kept; deleted chores are skipped by scheduling.
    """
    with span("chore_service.delete_chore"):
        await get_chore_by_id(chore_id=chore_id)
        record = await db_client.update_record(
            collection="chores",
            record_id=chore_id,
            data={"status": ChoreStatus.DELETED},
        )
        logger.info("Soft deleted chore %s", chore_id)
        return Chore.model_validate(record)
