"""Limitador local de requisições ao provedor de calendário.

Janela fixa de 60s: ao atingir a quota, aguarda um cooldown fixo e
reinicia a janela. É apenas consultivo; a autoridade é o 429 do
provedor, tratado pelo RetryExecutor. Cada gateway possui sua própria
instância.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from app.observability import record_rate_limit_wait

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

WINDOW_SECONDS = 60.0
DEFAULT_MAX_PER_MINUTE = 500
DEFAULT_COOLDOWN_SECONDS = 2.0


class RateLimiter:
    """Contador por janela com pausa ao estourar a quota."""

    __slots__ = (
        "_clock",
        "_cooldown_seconds",
        "_lock",
        "_max_per_minute",
        "_request_count",
        "_sleep",
        "_window_started_at",
    )

    def __init__(
        self,
        max_per_minute: int = DEFAULT_MAX_PER_MINUTE,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_per_minute < 1:
            raise ValueError("max_per_minute deve ser >= 1")
        self._max_per_minute = max_per_minute
        self._cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._sleep = sleep
        self._request_count = 0
        self._window_started_at = clock()
        self._lock = asyncio.Lock()

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def window_started_at(self) -> float:
        return self._window_started_at

    async def acquire(self) -> None:
        """Reserva uma vaga na janela atual, aguardando se necessário."""
        async with self._lock:
            now = self._clock()
            if now - self._window_started_at >= WINDOW_SECONDS:
                self._reset(now)

            if self._request_count >= self._max_per_minute:
                record_rate_limit_wait(self._cooldown_seconds, self._request_count)
                await self._sleep(self._cooldown_seconds)
                self._reset(self._clock())

            self._request_count += 1

    def _reset(self, now: float) -> None:
        self._request_count = 0
        self._window_started_at = now
