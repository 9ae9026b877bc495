"""Remoção otimista de eventos com rollback e delete idempotente.

O evento sai do cache antes da chamada remota. 404 do provedor conta
como sucesso (o evento já não existe); qualquer outro erro restaura o
snapshot e propaga. Deletes não são cancelados pelo chamador.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import log_fallback
from utils.errors import is_not_found

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.services.event_cache import CacheSnapshot, EventCache

logger = logging.getLogger(__name__)

ALREADY_DELETED_WARNING = "Event not found or already deleted"


@dataclass(frozen=True, slots=True)
class DeleteOutcome:
    removed: bool = True
    warning: str | None = None


async def delete_remote_event(
    delete_call: Callable[[str], Awaitable[None]],
    event_id: str,
) -> DeleteOutcome:
    """Executa o delete remoto; 404 vira sucesso com warning.

    Qualquer outro erro sobe sem alteração.
    """
    try:
        await delete_call(event_id)
    except Exception as exc:
        if not is_not_found(exc):
            raise
        return DeleteOutcome(removed=True, warning=ALREADY_DELETED_WARNING)
    return DeleteOutcome(removed=True)


class DeletionReconciler:
    """Coordena cache e provedor durante a exclusão de um evento.

    Args:
        delete_call: Chamada remota que exclui o evento pelo id.
        cache: Cache compartilhado com as janelas visíveis.
        refresh: Recarga da janela ativa após a exclusão (opcional).
    """

    __slots__ = ("_cache", "_delete_call", "_refresh")

    def __init__(
        self,
        delete_call: Callable[[str], Awaitable[None]],
        cache: EventCache,
        refresh: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._delete_call = delete_call
        self._cache = cache
        self._refresh = refresh

    async def delete_event(self, event_id: str) -> DeleteOutcome:
        task = asyncio.ensure_future(self._reconcile(event_id))
        return await asyncio.shield(task)

    async def _reconcile(self, event_id: str) -> DeleteOutcome:
        snapshot = self._cache.remove_event(event_id)
        try:
            outcome = await delete_remote_event(self._delete_call, event_id)
        except Exception as exc:
            self._cache.restore(snapshot)
            self._log("rolled_back", event_id, error_type=type(exc).__name__)
            raise
        self._log("already_deleted" if outcome.warning else "deleted", event_id)

        self._invalidate_covering(snapshot)
        await self._refresh_active()
        return outcome

    def _invalidate_covering(self, snapshot: CacheSnapshot) -> None:
        removed = snapshot.removed_event
        if removed is None:
            # Sem a data do evento não dá para saber quais janelas o continham.
            self._cache.invalidate_all()
            return
        self._cache.invalidate_overlapping(removed.start, removed.end)

    async def _refresh_active(self) -> None:
        if self._refresh is None:
            return
        try:
            await self._refresh()
        except Exception as exc:
            log_fallback(logger, "deletion_reconciler", reason=type(exc).__name__)

    def _log(self, result: str, event_id: str, *, error_type: str | None = None) -> None:
        logger.info(
            "calendar_event_delete",
            extra={
                "component": "deletion_reconciler",
                "action": "delete_event",
                "result": result,
                "event_id": event_id,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )
