"""Envelope padrão das respostas da API de calendário.

Formato: {"success": bool, "data"?: ..., "error"?: str, "warning"?: str}.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from app.observability import get_correlation_id
from utils.errors import (
    AuthError,
    CalendarApiError,
    NotFoundError,
    RateLimitError,
    TransientServerError,
    ValidationError,
    is_not_found,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
UNAVAILABLE_MESSAGE = "Calendar service unavailable. Please try again later."
AUTH_MESSAGE = "Authentication failed"
NOT_FOUND_MESSAGE = "Resource not found"
UNEXPECTED_MESSAGE = "An unexpected error occurred"


def success_response(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    warning: str | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": True, "data": data}
    if warning:
        body["warning"] = warning
    return JSONResponse(content=body, status_code=status_code)


def error_response(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(content={"success": False, "error": message}, status_code=status_code)


def _status_and_message(exc: CalendarApiError) -> tuple[int, str]:
    if isinstance(exc, AuthError):
        return status.HTTP_401_UNAUTHORIZED, AUTH_MESSAGE
    if isinstance(exc, NotFoundError) or is_not_found(exc):
        return status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE
    if isinstance(exc, RateLimitError):
        return status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMIT_MESSAGE
    if isinstance(exc, TransientServerError):
        return status.HTTP_503_SERVICE_UNAVAILABLE, UNAVAILABLE_MESSAGE
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST, str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_MESSAGE


def handle_api_error(exc: CalendarApiError, *, action: str) -> JSONResponse:
    """Converte a taxonomia de erros em resposta HTTP com envelope."""
    status_code, message = _status_and_message(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "calendar_api_request_failed",
        extra={
            "component": "calendar_api",
            "action": action,
            "result": "error",
            "status_code": status_code,
            "error_type": type(exc).__name__,
            "provider_status_code": exc.status_code,
            "correlation_id": get_correlation_id(),
        },
    )
    return error_response(message, status_code)
