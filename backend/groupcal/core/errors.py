"""
Centralized error handling for calendar failures.
Exception types plus a reusable helper so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_SERVICE_UNAVAILABLE = 503  # store unreachable
STATUS_INTERNAL_ERROR = 500


class CalendarError(Exception):
    """Base for every error the calendar engine raises on purpose."""


class InvalidRangeError(CalendarError, ValueError):
    """Date range ends before it starts, or hour grid is outside 0-24."""


class InvalidSessionError(CalendarError, ValueError):
    """Scheduled session fields are missing or start >= end."""


class StoreUnavailableError(CalendarError):
    """Persistence read or write failed. Recoverable: callers degrade or revert."""


class NotFoundError(CalendarError):
    pass


class PermissionDeniedError(CalendarError):
    pass


# ---------------------------------------------------------------------------
# Error rules: (exception type, status_code). First match wins.
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

CALENDAR_ERROR_RULES: list[tuple[type[Exception], int]] = [
    (InvalidRangeError, STATUS_BAD_REQUEST),
    (InvalidSessionError, STATUS_BAD_REQUEST),
    (NotFoundError, STATUS_NOT_FOUND),
    (PermissionDeniedError, STATUS_FORBIDDEN),
    (StoreUnavailableError, STATUS_SERVICE_UNAVAILABLE),
]


def calendar_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from a calendar service into an HTTPException.
    Uses CALENDAR_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for exc_type, status_code in CALENDAR_ERROR_RULES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail={"success": False, "error": str(exc)})
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail={"success": False, "error": str(exc)})
