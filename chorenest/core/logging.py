"""Logging and observability configuration using Pydantic Logfire.

All modules use Python's standard logging library (logging.getLogger(__name__));
Logfire captures and enriches those records once configured.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Message", chore_id="123", request_id="abc")
"""

import logging

import logfire
from fastapi import FastAPI

from chorenest.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment."""
    logfire.configure(
        token=settings.logfire_token,
        service_name="chorenest",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("schedule_service.generate_occurrences"):
            ...
    """
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (chore_id, request_id, operation_type, etc.)
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)


def log_with_chore_context(
    logger: logging.Logger,
    level: str,
    message: str,
    chore_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message with chore context.

    Usage:
        log_with_chore_context(logger, "info", "Occurrences generated", chore_id="12", count=10)
    """
    context = {"chore_id": chore_id, **extra} if chore_id else extra
    log_with_context(logger, level, message, **context)
