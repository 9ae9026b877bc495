"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthError,
    CalendarApiError,
    NotFoundError,
    RateLimitError,
    SessionExpiredError,
    TransientServerError,
    UnknownError,
    ValidationError,
    classify_status,
    is_not_found,
    is_retryable_status,
)

__all__ = [
    "AuthError",
    "CalendarApiError",
    "NotFoundError",
    "RateLimitError",
    "SessionExpiredError",
    "TransientServerError",
    "UnknownError",
    "ValidationError",
    "classify_status",
    "is_not_found",
    "is_retryable_status",
]
