"""Executor de retry com backoff exponencial para chamadas ao provedor.

Política de classificação vem de CalendarApiError.is_retryable (ver
utils.errors). Tentativas são sequenciais; ao esgotar ou em erro
terminal a exceção original sobe sem alteração.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from app.observability import get_correlation_id, record_retry
from utils.errors import CalendarApiError, RateLimitError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0
DEFAULT_RATE_LIMIT_DELAY_SECONDS = 2.0
MAX_BACKOFF_SECONDS = 30.0


def is_retryable_error(exc: BaseException) -> bool:
    """Somente erros da taxonomia marcados como retentáveis."""
    return isinstance(exc, CalendarApiError) and exc.is_retryable


def _status_code(exc: BaseException) -> int | None:
    return getattr(exc, "status_code", None)


class RetryExecutor:
    """Executa uma operação async com até max_retries novas tentativas.

    Em 429 aplica um cooldown extra de 2x rate_limit_delay antes do
    backoff. Backoff: base_delay * 2**attempt, com attempt a partir de 0.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay_seconds: float = DEFAULT_BASE_DELAY_SECONDS,
        rate_limit_delay_seconds: float = DEFAULT_RATE_LIMIT_DELAY_SECONDS,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._max_retries = max_retries
        self._base_delay_seconds = base_delay_seconds
        self._rate_limit_delay_seconds = rate_limit_delay_seconds
        self._sleep = sleep

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def backoff_delay(self, attempt: int) -> float:
        return min(self._base_delay_seconds * (2**attempt), MAX_BACKOFF_SECONDS)

    async def run(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        max_retries: int | None = None,
        operation_name: str = "calendar_call",
    ) -> T:
        """Executa operation; total de chamadas <= max_retries + 1."""
        retries = self._max_retries if max_retries is None else max_retries
        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as exc:
                if attempt >= retries or not is_retryable_error(exc):
                    self._log_give_up(operation_name, attempt, exc)
                    raise

                if isinstance(exc, RateLimitError):
                    await self._sleep(self._rate_limit_delay_seconds * 2)

                delay = self.backoff_delay(attempt)
                record_retry(operation_name, attempt + 1, delay, _status_code(exc))
                await self._sleep(delay)
                attempt += 1

    def _log_give_up(self, operation_name: str, attempt: int, exc: BaseException) -> None:
        if attempt == 0 and not is_retryable_error(exc):
            return
        logger.warning(
            "calendar_retry_exhausted",
            extra={
                "component": "retry_executor",
                "action": operation_name,
                "result": "exhausted",
                "attempts": attempt + 1,
                "error_type": type(exc).__name__,
                "status_code": _status_code(exc),
                "correlation_id": get_correlation_id(),
            },
        )
