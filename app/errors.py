"""Domain errors mapped to the API error envelope"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class InvalidInputError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid input"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class SlotUnavailableError(AppError):
    status_code = 400
    code = "SLOT_UNAVAILABLE"
    default_message = "The selected time slot is not available"


class InvalidTimeRangeError(AppError):
    status_code = 400
    code = "INVALID_TIME_RANGE"
    default_message = "Start time must be before end time"


class InvalidDateRangeError(AppError):
    status_code = 400
    code = "INVALID_DATE_RANGE"
    default_message = "Start date must not be after end date"


class InvalidStateError(AppError):
    status_code = 400
    code = "INVALID_STATE"
    default_message = "Reservation can no longer be changed"


class PastReservationError(AppError):
    status_code = 400
    code = "PAST_RESERVATION"
    default_message = "Past reservations cannot be changed"


class CancellationDeadlinePassedError(AppError):
    status_code = 400
    code = "CANCELLATION_DEADLINE_PASSED"
    default_message = "The cancellation deadline has passed"


class DuplicateRecordError(AppError):
    status_code = 409
    code = "DUPLICATE_RECORD"
    default_message = "A record with the same value already exists"


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Insufficient permissions"


class FeatureDisabledError(AppError):
    status_code = 403
    code = "FEATURE_DISABLED"
    default_message = "This feature is not enabled"

    def __init__(self, feature: str):
        super().__init__(details={"feature": feature})
        self.feature = feature


class RateLimitExceededError(AppError):
    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"
    default_message = "Too many requests"

    def __init__(self, retry_after: int):
        super().__init__(
            f"Too many requests. Retry after {retry_after} seconds.",
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class EmailNotConfiguredError(AppError):
    code = "EMAIL_NOT_CONFIGURED"
    default_message = "Email delivery is not configured"
