#!/usr/bin/env python3
"""Create the SQLite tables and indexes without starting the API."""

import asyncio
import logging

from chorenest.core.config import settings
from chorenest.core.db_client import close_connection, init_db


logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def main() -> None:
    await init_db()
    logger.info(f"Schema ready at {settings.sqlite_db_path}")
    await close_connection()


if __name__ == "__main__":
    asyncio.run(main())
