"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TITLE = "INVALID_TITLE"
    DUE_DATE_IN_PAST = "DUE_DATE_IN_PAST"
    DUE_DATE_TOO_FAR = "DUE_DATE_TOO_FAR"

    # Remote sync errors (reported through the sync status, never raised to clients)
    SYNC_ERROR = "SYNC_ERROR"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Task input rejected before any mutation."""

    def __init__(
        self,
        message: str,
        field: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details={"field": field, "reason": error_code.value},
        )


class InvalidTitleError(ValidationError):
    """Title is empty once surrounding whitespace is removed."""

    def __init__(self) -> None:
        super().__init__(
            message="Task title must not be empty",
            field="title",
            error_code=ErrorCode.INVALID_TITLE,
        )


class DueDateInPastError(ValidationError):
    """Due date lies before the current time."""

    def __init__(self, due_date: str) -> None:
        super().__init__(
            message=f"Due date is in the past: {due_date}",
            field="due_date",
            error_code=ErrorCode.DUE_DATE_IN_PAST,
        )


class DueDateTooFarError(ValidationError):
    """Due date lies beyond the furthest day a task may be planned for."""

    def __init__(self, due_date: str, latest: str) -> None:
        super().__init__(
            message=f"Due date is too far ahead: {due_date} (latest allowed day is {latest})",
            field="due_date",
            error_code=ErrorCode.DUE_DATE_TOO_FAR,
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            status_code=404,
            details={"task_id": task_id},
        )


class PersistenceError(AppException):
    """Underlying storage write or read failed."""

    def __init__(self, message: str = "Storage operation failed") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=500,
        )


class SyncError(AppException):
    """Remote sync failed. Only ever surfaces through the sync status."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.SYNC_ERROR,
            message=message,
            status_code=502,
        )
