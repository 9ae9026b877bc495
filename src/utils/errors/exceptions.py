"""Taxonomia de erros do provedor de calendário.

Toda falha remota vira uma subclasse de CalendarApiError carregando o
status HTTP original, para que retry, refresh de credencial e a camada
HTTP classifiquem sem inspecionar a exceção do SDK.
"""

from __future__ import annotations

RETRYABLE_SERVER_STATUSES = frozenset({429, 500, 503})
_AUTH_STATUSES = frozenset({401, 403})
_NOT_FOUND_STATUSES = frozenset({404, 410})
# 4xx terminais: não mudam de resultado com nova tentativa.
_TERMINAL_CLIENT_STATUSES = _AUTH_STATUSES | _NOT_FOUND_STATUSES | {400}


class CalendarApiError(Exception):
    """Base para falhas de chamadas ao calendário sem dados sensíveis."""

    default_message = "calendar_api_error"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        is_retryable: bool | None = None,
    ) -> None:
        super().__init__(message or self.default_message)
        self.status_code = status_code
        self.is_retryable = (
            is_retryable if is_retryable is not None else is_retryable_status(status_code)
        )


class AuthError(CalendarApiError):
    """Credencial ausente, expirada ou recusada (401/403)."""

    default_message = "authentication_failed"


class SessionExpiredError(AuthError):
    """Refresh e nova tentativa falharam; usuário precisa logar de novo."""

    default_message = "session_expired"


class NotFoundError(CalendarApiError):
    """Recurso inexistente no provedor (404/410)."""

    default_message = "resource_not_found"


class RateLimitError(CalendarApiError):
    """Quota do provedor excedida (429)."""

    default_message = "rate_limit_exceeded"


class TransientServerError(CalendarApiError):
    """Falha transitória do provedor ou da rede (5xx, timeout)."""

    default_message = "calendar_service_unavailable"


class ValidationError(CalendarApiError):
    """Corpo de requisição malformado (400 ou validação local)."""

    default_message = "invalid_request"


class UnknownError(CalendarApiError):
    """Qualquer falha sem classe específica."""

    default_message = "unexpected_calendar_error"


def is_retryable_status(status_code: int | None) -> bool:
    """Política de retry por status HTTP.

    Retentamos 429 e 5xx, além de 4xx não terminais (408, 409, 412...).
    Falhas sem status não são retentadas aqui; erros de rede chegam já
    classificados como TransientServerError.
    """
    if status_code is None:
        return False
    if status_code in RETRYABLE_SERVER_STATUSES or status_code >= 500:
        return True
    return 400 <= status_code < 500 and status_code not in _TERMINAL_CLIENT_STATUSES


def classify_status(status_code: int | None, message: str | None = None) -> CalendarApiError:
    """Constrói a exceção da taxonomia correspondente ao status."""
    if status_code in _AUTH_STATUSES:
        return AuthError(message, status_code=status_code)
    if status_code in _NOT_FOUND_STATUSES:
        return NotFoundError(message, status_code=status_code)
    if status_code == 429:
        return RateLimitError(message, status_code=status_code)
    if status_code is not None and status_code >= 500:
        return TransientServerError(message, status_code=status_code)
    if status_code == 400:
        return ValidationError(message, status_code=status_code)
    return UnknownError(message, status_code=status_code)


def is_not_found(exc: BaseException) -> bool:
    """Reconhece 404 por tipo, status ou texto da mensagem."""
    if isinstance(exc, NotFoundError):
        return True
    status_code = getattr(exc, "status_code", None) or getattr(exc, "code", None)
    if status_code in _NOT_FOUND_STATUSES:
        return True
    return "404" in str(exc)
