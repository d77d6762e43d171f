"""
Custom exceptions and error handling for Layover.

Defines application-specific exceptions with error codes for consistent
error handling across the store, the client sync layer and the Lambda API.

Cross-principal access is always reported as NotFoundError, never as a
distinct "forbidden" error, so callers cannot discover other users' trips.

Usage:
    from layover.errors import NotFoundError, ErrorCode

    raise NotFoundError("Trip 42 not found", code=ErrorCode.NOT_FOUND)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for client-facing error messages."""

    # Authentication errors
    AUTH_FAILED = "AUTH_FAILED"
    INVALID_TOKEN = "INVALID_TOKEN"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMPTY_NAME = "EMPTY_NAME"
    EMPTY_TITLE = "EMPTY_TITLE"
    EMPTY_LOCATION_NAME = "EMPTY_LOCATION_NAME"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Lookup errors
    NOT_FOUND = "NOT_FOUND"
    INVALID_SHARE_LINK = "INVALID_SHARE_LINK"

    # Transient errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    SEARCH_FAILED = "SEARCH_FAILED"

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.AUTH_FAILED: "Authentication failed. Please sign in again.",
    ErrorCode.INVALID_TOKEN: "Your session has expired. Please sign in again.",
    ErrorCode.NOT_AUTHENTICATED: "Please sign in to manage your trips.",
    ErrorCode.VALIDATION_ERROR: "Some information is missing or invalid. Please check and try again.",
    ErrorCode.EMPTY_NAME: "Please enter a name.",
    ErrorCode.EMPTY_TITLE: "Please enter a title.",
    ErrorCode.EMPTY_LOCATION_NAME: "Please enter a location.",
    ErrorCode.INVALID_DATE_RANGE: "End date is required when start date is set and cannot be before it.",
    ErrorCode.INVALID_REQUEST: "Invalid request format. Please try again.",
    ErrorCode.NOT_FOUND: "Not found.",
    ErrorCode.INVALID_SHARE_LINK: "Trip not found. This shared link may be invalid or expired.",
    ErrorCode.STORE_UNAVAILABLE: "Your itinerary is temporarily unavailable. Please try again.",
    ErrorCode.SEARCH_FAILED: "Location search failed. You can still enter the location manually.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}


class LayoverError(Exception):
    """Base exception for all Layover errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.INTERNAL_ERROR])


class AuthenticationError(LayoverError):
    """Authentication failed or no principal is available."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUTH_FAILED):
        super().__init__(message, code=code)


class ValidationError(LayoverError):
    """Malformed input: a required field is empty or dates are out of order.

    Recoverable locally; never retried.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, code=code)


class NotFoundError(LayoverError):
    """Unknown id, id owned by another principal, or unknown share token."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NOT_FOUND):
        super().__init__(message, code=code)


class TransientError(LayoverError):
    """Backend or network unavailable. Eligible for a user-triggered retry."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.STORE_UNAVAILABLE):
        super().__init__(message, code=code)
