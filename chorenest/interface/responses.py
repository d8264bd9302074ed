"""Response envelope and exception handlers shared by the HTTP routers."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chorenest.core.config import constants
from chorenest.core.db_client import DatabaseError
from chorenest.core.errors import (
    ErrorCode,
    ScheduleError,
    classify_error_with_response,
)


logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def success_response(
    data: Any = None,
    *,
    message: str = "OK",
    status_code: int = constants.HTTP_OK,
    count: int | None = None,
) -> JSONResponse:
    """Wrap a payload in the {success, data, count, message, timestamp} envelope."""
    content: dict[str, Any] = {"success": True, "message": message, "timestamp": _timestamp()}
    if data is not None:
        content["data"] = jsonable_encoder(data)
    if count is not None:
        content["count"] = count
    return JSONResponse(content=content, status_code=status_code)


def error_response(*, code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content={"success": False, "code": code, "message": message, "timestamp": _timestamp()},
        status_code=status_code,
    )


async def _handle_classified(request: Request, exc: Exception) -> JSONResponse:
    error = classify_error_with_response(exc)
    extra = {
        "path": request.url.path,
        "code": error.code,
        "severity": error.severity.value,
        "category": error.category.value,
        "error": str(exc),
    }
    if error.status_code < constants.HTTP_SERVER_ERROR:
        logger.warning("request_failed", extra=extra)
    else:
        logger.error("request_failed", extra=extra, exc_info=exc)
    return error_response(code=error.code, message=error.message, status_code=error.status_code)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.warning("request_validation_failed", extra={"path": request.url.path, "errors": len(errors)})
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}" for error in errors
    )
    return error_response(
        code=ErrorCode.ERR_INVALID_SCHEDULE,
        message=f"Invalid request: {details}",
        status_code=constants.HTTP_UNPROCESSABLE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map scheduling, storage and request validation errors onto the error envelope."""
    app.add_exception_handler(ScheduleError, _handle_classified)
    app.add_exception_handler(DatabaseError, _handle_classified)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(Exception, _handle_classified)
