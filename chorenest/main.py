"""chorenest - chore occurrence scheduling service."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from chorenest.core.config import constants, settings
from chorenest.core.db_client import close_connection, init_db
from chorenest.core.logging import configure_logfire, instrument_fastapi
from chorenest.interface.chore_router import router as chore_router
from chorenest.interface.responses import register_exception_handlers
from chorenest.interface.schedule_router import router as schedule_router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Startup
    configure_logfire()

    await init_db()
    logger.info("Database initialized", extra={"db_path": settings.sqlite_db_path})

    yield
    # Shutdown
    await close_connection()


app = FastAPI(
    title="chorenest",
    description="Chore occurrence scheduling service",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

register_exception_handlers(app)

# schedule_router first: /chores/due/* must match before /chores/{chore_id}
app.include_router(schedule_router)
app.include_router(chore_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=constants.HTTP_OK)
