"""
Custom exception classes for unified error handling.

Each error carries the HTTP status it maps to; routes convert caught errors
with `app_error_to_http`, and anything that escapes a route is rendered by
the application's AppBaseError handler with the same JSON body.
"""

from fastapi import HTTPException, status


class AppBaseError(Exception):
    """Base exception for all application errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "detail": self.detail,
            "type": type(self).__name__,
        }


class InvalidGranularityError(AppBaseError):
    """Raised when a calendar view is requested with an unknown granularity."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            message=f"Unknown calendar view '{value}'",
            detail="Supported views: day, week, month.",
        )


class StudentNotSelectedError(AppBaseError):
    """Raised when a calendar operation is attempted without a student."""
    def __init__(self, message: str = "A student must be selected."):
        super().__init__(
            message=message,
            detail="Select a student before viewing or editing their calendar.",
        )


class EventNotFoundError(AppBaseError):
    """Raised when an event id does not exist for the selected student."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(
            message=f"Calendar event '{event_id}' not found",
            detail="The event may have been deleted. Refresh the calendar.",
        )


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AppBaseError, status_code: int | None = None) -> HTTPException:
    """Convert an AppBaseError to an HTTPException with consistent JSON body."""
    return HTTPException(
        status_code=status_code or error.status_code,
        detail=error.to_dict(),
    )
