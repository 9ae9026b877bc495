"""Serviço de sincronização consumido pela camada de visualização.

Une gateway, cache e refresher de credenciais:
- leituras passam pelo cache (stale-while-revalidate por TTL)
- mutações invalidam as janelas que intersectam o evento
- falhas de recarga mantem os dados em cache (stale-while-error)

Toda chamada remota usa CredentialRefresher.call_with_credentials com o
store do usuário.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from app.domain.calendar_event import ListEventsParams
from app.observability import get_correlation_id
from app.services.deletion_reconciler import DeleteOutcome, DeletionReconciler
from config.logging import log_fallback
from utils.errors import AuthError, CalendarApiError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from app.domain.calendar_event import CalendarEvent, EventDraft, EventPatch
    from app.domain.view_range import CalendarWindow
    from app.protocols.credential_store import CredentialStoreProtocol
    from app.services.calendar_gateway import CalendarGateway
    from app.services.credential_refresher import CredentialRefresher
    from app.services.event_cache import CacheChange, EventCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COMPONENT = "calendar_sync"


class CalendarSyncService:
    """Interface de eventos para a interface: listar, criar, editar, excluir."""

    def __init__(
        self,
        gateway: CalendarGateway,
        cache: EventCache,
        refresher: CredentialRefresher,
        credentials: CredentialStoreProtocol,
        *,
        calendar_id: str | None = None,
    ) -> None:
        self._gateway = gateway
        self._cache = cache
        self._refresher = refresher
        self._credentials = credentials
        self._calendar_id = calendar_id
        self._active_window: CalendarWindow | None = None
        self._background: dict[str, asyncio.Task[list[CalendarEvent]]] = {}
        self._reconciler = DeletionReconciler(
            self._delete_remote,
            cache,
            refresh=self.refresh_active,
        )

    @property
    def cache(self) -> EventCache:
        return self._cache

    @property
    def active_window(self) -> CalendarWindow | None:
        return self._active_window

    async def list_for_range(self, window: CalendarWindow) -> list[CalendarEvent]:
        """Eventos da janela, do cache quando possível.

        Entrada ausente: busca aguardada. Entrada invalidada por mutação:
        busca aguardada, com fallback para o cache em erro. Entrada velha
        por TTL: devolve o cache e recarrega em background.
        """
        entry = self._cache.get(window.key)
        if entry is None:
            return await self.fetch(window)
        if entry.invalidated:
            try:
                return await self.fetch(window)
            except AuthError:
                raise
            except CalendarApiError as exc:
                log_fallback(logger, _COMPONENT, reason=type(exc).__name__)
                return list(entry.events)
        if self._cache.is_stale(entry):
            self._schedule_refetch(window)
        return list(entry.events)

    async def fetch(self, window: CalendarWindow) -> list[CalendarEvent]:
        """Busca a janela no provedor e grava no cache se ainda válida."""
        ticket = self._cache.begin_fetch(window.key, window)
        params = ListEventsParams(
            calendar_id=self._calendar_id,
            time_min=window.start,
            time_max=window.end,
            max_results=window.max_results,
        )
        try:
            events = await self._with_credentials(
                lambda token: self._gateway.list_events(token, params)
            )
            self._cache.store(window.key, window, events, ticket)
        finally:
            self._cache.end_fetch(window.key)
        return events

    async def refresh(self, window: CalendarWindow) -> list[CalendarEvent]:
        return await self.fetch(window)

    def invalidate(self, key: str) -> bool:
        return self._cache.invalidate(key)

    def subscribe(self, listener: Callable[[CacheChange], None]) -> Callable[[], None]:
        return self._cache.subscribe(listener)

    async def activate(self, window: CalendarWindow) -> list[CalendarEvent]:
        """Define a janela visível e devolve seus eventos."""
        self._active_window = window
        return await self.list_for_range(window)

    async def refresh_active(self) -> None:
        if self._active_window is None:
            return
        await self.fetch(self._active_window)

    async def create_event(self, draft: EventDraft | Mapping[str, Any]) -> CalendarEvent:
        event = await self._with_credentials(
            lambda token: self._gateway.create_event(token, draft, self._calendar_id)
        )
        self._cache.invalidate_overlapping(event.start, event.end)
        return event

    async def update_event(
        self,
        event_id: str,
        patch: EventPatch | Mapping[str, Any],
    ) -> CalendarEvent:
        previous = self._cache.find_event(event_id)
        event = await self._with_credentials(
            lambda token: self._gateway.update_event(token, event_id, patch, self._calendar_id)
        )
        if previous is not None:
            self._cache.invalidate_overlapping(previous.start, previous.end)
        self._cache.invalidate_overlapping(event.start, event.end)
        return event

    async def delete_event(self, event_id: str) -> DeleteOutcome:
        return await self._reconciler.delete_event(event_id)

    async def aclose(self) -> None:
        """Aguarda as recargas em background pendentes."""
        pending = list(self._background.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._background.clear()

    async def _delete_remote(self, event_id: str) -> None:
        await self._with_credentials(
            lambda token: self._gateway.delete_event(token, event_id, self._calendar_id)
        )

    async def _with_credentials(self, operation: Callable[[str], Awaitable[T]]) -> T:
        return await self._refresher.call_with_credentials(self._credentials, operation)

    def _schedule_refetch(self, window: CalendarWindow) -> None:
        if window.key in self._background:
            return
        task = asyncio.ensure_future(self._background_refetch(window))
        self._background[window.key] = task
        task.add_done_callback(lambda _done: self._background.pop(window.key, None))

    async def _background_refetch(self, window: CalendarWindow) -> list[CalendarEvent]:
        try:
            return await self.fetch(window)
        except CalendarApiError as exc:
            log_fallback(logger, _COMPONENT, reason=type(exc).__name__)
            logger.warning(
                "calendar_background_refetch_failed",
                extra={
                    "component": _COMPONENT,
                    "action": "background_refetch",
                    "result": "error",
                    "cache_key": window.key,
                    "error_type": type(exc).__name__,
                    "correlation_id": get_correlation_id(),
                },
            )
            return []
