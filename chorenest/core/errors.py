"""Error taxonomy and classification for the scheduling service."""

from enum import Enum

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from chorenest.core.config import constants
from chorenest.core.db_client import DatabaseError, RecordNotFoundError


class ErrorCategory(Enum):
    """Categories of errors that can occur while scheduling."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    COMPUTATION = "computation"
    DATABASE = "database"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Lookup errors
    ERR_CHORE_NOT_FOUND = "ERR_CHORE_NOT_FOUND"
    ERR_RULE_NOT_FOUND = "ERR_RULE_NOT_FOUND"
    ERR_EXCEPTION_NOT_FOUND = "ERR_EXCEPTION_NOT_FOUND"
    ERR_TEMPLATE_NOT_FOUND = "ERR_TEMPLATE_NOT_FOUND"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"

    # Validation errors
    ERR_INVALID_SCHEDULE = "ERR_INVALID_SCHEDULE"
    ERR_INVALID_RULE = "ERR_INVALID_RULE"

    # Computation errors
    ERR_SCHEDULE_COMPUTATION = "ERR_SCHEDULE_COMPUTATION"

    # Storage errors
    ERR_DATABASE = "ERR_DATABASE"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


_NOT_FOUND_CODES: dict[str, str] = {
    "chore": ErrorCode.ERR_CHORE_NOT_FOUND,
    "rule": ErrorCode.ERR_RULE_NOT_FOUND,
    "exception": ErrorCode.ERR_EXCEPTION_NOT_FOUND,
    "template": ErrorCode.ERR_TEMPLATE_NOT_FOUND,
}


class ScheduleError(Exception):
    """Base class for errors raised by the scheduling core."""

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(self, message: str, *, code: str = ErrorCode.ERR_UNKNOWN) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class NotFoundError(ScheduleError):
    """A chore, rule, exception or template id does not resolve."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(
            f"{resource.capitalize()} with ID {resource_id} not found",
            code=_NOT_FOUND_CODES.get(resource, ErrorCode.ERR_NOT_FOUND),
        )
        self.resource = resource
        self.resource_id = resource_id


class ScheduleValidationError(ScheduleError):
    """A schedule, rule or exception payload is malformed."""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, code: str = ErrorCode.ERR_INVALID_SCHEDULE) -> None:
        super().__init__(message, code=code)


class ComputationError(ScheduleError):
    """Date arithmetic failed, e.g. on a corrupt stored date or calendar overflow."""

    category = ErrorCategory.COMPUTATION

    def __init__(self, message: str) -> None:
        super().__init__(message, code=ErrorCode.ERR_SCHEDULE_COMPUTATION)


class ErrorResponse(BaseModel):
    """Structured error response for the HTTP boundary."""

    code: str
    message: str
    status_code: int
    severity: ErrorSeverity
    category: ErrorCategory = ErrorCategory.UNKNOWN


def classify_error_with_response(exception: Exception) -> ErrorResponse:
    """Classify an error and return a structured response.

    Args:
        exception: The exception raised while handling a request

    Returns:
        ErrorResponse with code, message, HTTP status, severity and category
    """
    if isinstance(exception, NotFoundError):
        return ErrorResponse(
            code=exception.code,
            message=exception.message,
            status_code=constants.HTTP_NOT_FOUND,
            severity=ErrorSeverity.LOW,
            category=exception.category,
        )

    if isinstance(exception, ScheduleValidationError):
        return ErrorResponse(
            code=exception.code,
            message=exception.message,
            status_code=constants.HTTP_UNPROCESSABLE,
            severity=ErrorSeverity.LOW,
            category=exception.category,
        )

    if isinstance(exception, PydanticValidationError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_SCHEDULE,
            message=f"Invalid payload: {exception.error_count()} validation error(s)",
            status_code=constants.HTTP_UNPROCESSABLE,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
        )

    if isinstance(exception, ComputationError):
        return ErrorResponse(
            code=exception.code,
            message=f"Error generating schedule: {exception.message}",
            status_code=constants.HTTP_SERVER_ERROR,
            severity=ErrorSeverity.HIGH,
            category=exception.category,
        )

    if isinstance(exception, RecordNotFoundError):
        return ErrorResponse(
            code=ErrorCode.ERR_NOT_FOUND,
            message=str(exception),
            status_code=constants.HTTP_NOT_FOUND,
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.NOT_FOUND,
        )

    if isinstance(exception, DatabaseError):
        return ErrorResponse(
            code=ErrorCode.ERR_DATABASE,
            message="A storage error occurred.",
            status_code=constants.HTTP_SERVER_ERROR,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.DATABASE,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        status_code=constants.HTTP_SERVER_ERROR,
        severity=ErrorSeverity.MEDIUM,
    )
