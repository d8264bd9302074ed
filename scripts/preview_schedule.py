#!/usr/bin/env python3
"""Print the upcoming occurrences of a chore.

Usage:
    uv run python scripts/preview_schedule.py <chore_id> [--count N]
    uv run python scripts/preview_schedule.py --due-today
"""

import asyncio
import logging
import sys

from chorenest.core.db_client import close_connection
from chorenest.core.errors import ScheduleError
from chorenest.services.schedule_service import build_schedule_service


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def preview(chore_id: str, count: int | None) -> None:
    """Generate occurrences for one chore and print them with its description."""
    service = build_schedule_service()
    logger.info(await service.describe(chore_id))

    for occurrence in await service.generate_occurrences(chore_id, count):
        flags = []
        if occurrence.is_rescheduled and occurrence.original_date:
            flags.append(f"moved from {occurrence.original_date.isoformat()}")
        if occurrence.is_cancelled:
            flags.append("cancelled")
        if occurrence.reason:
            flags.append(occurrence.reason)
        suffix = f" ({', '.join(flags)})" if flags else ""
        logger.info(f"  {occurrence.date.isoformat()}{suffix}")


async def list_due_today() -> None:
    service = build_schedule_service()
    for chore in await service.get_chores_due_today():
        logger.info(f"{chore.id} - {chore.name}")


def print_usage() -> None:
    """Print usage information."""
    logger.info(__doc__)


async def main() -> None:
    """Main entry point."""
    args = sys.argv[1:]

    if not args or "--help" in args or "-h" in args:
        print_usage()
        return

    try:
        if "--due-today" in args:
            await list_due_today()
            return

        count = None
        if "--count" in args:
            count_index = args.index("--count")
            if count_index + 1 >= len(args) or not args[count_index + 1].isdigit():
                print_usage()
                sys.exit(1)
            count = int(args[count_index + 1])

        await preview(args[0], count)
    except ScheduleError as e:
        logger.error(e.message)
        sys.exit(1)
    finally:
        await close_connection()


if __name__ == "__main__":
    asyncio.run(main())
