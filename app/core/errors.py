"""
Custom exception hierarchy for the activity tracker.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class TrackerException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# --- 400 -------------------------------------------------------------------

class InvalidIntervalValueError(TrackerException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INTERVAL_VALUE"

    def __init__(self, interval_type: str, value: int, low: int, high: int):
        super().__init__(
            message=f"{interval_type} value must be between {low} and {high}. Received {value}.",
            details={"type": interval_type, "value": value, "min": low, "max": high},
        )


class InvalidDateRangeError(TrackerException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "INVALID_DATE_RANGE"

    def __init__(self, start_date: date, end_date: date):
        super().__init__(
            message=f"End date {end_date} is before start date {start_date}.",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )


# --- 401 -------------------------------------------------------------------

class AuthenticationError(TrackerException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_FAILED"

    def __init__(self, message: str = "Authentication required."):
        super().__init__(message=message)


# --- 404 -------------------------------------------------------------------

class NotFoundError(TrackerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    resource = "Resource"

    def __init__(self, resource_id: int):
        super().__init__(
            message=f"{self.resource} {resource_id} not found.",
            details={"id": resource_id},
        )


class ActivityNotFoundError(NotFoundError):
    code = "ACTIVITY_NOT_FOUND"
    resource = "Activity"


class ActivityLogNotFoundError(NotFoundError):
    code = "ACTIVITY_LOG_NOT_FOUND"
    resource = "Activity log"


class CommentNotFoundError(NotFoundError):
    code = "COMMENT_NOT_FOUND"
    resource = "Comment"


class ExcludedIntervalNotFoundError(NotFoundError):
    code = "EXCLUDED_INTERVAL_NOT_FOUND"
    resource = "Excluded interval"


# --- 409 -------------------------------------------------------------------

class DuplicateExcludedIntervalError(TrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_EXCLUDED_INTERVAL"

    def __init__(self, frequency: str, interval_type: str, value: int):
        super().__init__(
            message="This excluded interval already exists.",
            details={"frequency": frequency, "type": interval_type, "value": value},
        )


class LogsAlreadyGeneratedError(TrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "LOGS_ALREADY_GENERATED"

    def __init__(self, day: date):
        super().__init__(
            message=f"Activity logs for {day} have already been generated.",
            details={"date": str(day)},
        )


class ActivityLogExistsError(TrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "ACTIVITY_LOG_EXISTS"

    def __init__(self, activity_id: int, period_start: Any):
        super().__init__(
            message=f"Activity {activity_id} already has a log starting at {period_start}.",
            details={"activity_id": activity_id, "period_start": str(period_start)},
        )


class EmailAlreadyRegisteredError(TrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "EMAIL_ALREADY_REGISTERED"

    def __init__(self, email: str):
        super().__init__(
            message="User with this email already exists.",
            details={"email": email},
        )


# --- 500 -------------------------------------------------------------------

class GenerationError(TrackerException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "GENERATION_FAILED"

    def __init__(self, day: date, reason: str):
        super().__init__(
            message=f"Activity log generation for {day} failed; no entries were saved.",
            details={"date": str(day), "reason": reason},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def tracker_exception_handler(request: Request, exc: TrackerException) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 400 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
