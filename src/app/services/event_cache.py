"""Cache em memória de janelas de eventos, com LRU, TTL e notificações.

Cada entrada guarda a lista normalizada de uma janela. Escritas carregam
um ticket de geração obtido em begin_fetch: se a chave for invalidada
durante a busca, o resultado antigo é descartado em store. Buscas em
andamento registram sua janela, então invalidações por intervalo também
alcançam chaves que ainda não têm entrada.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from app.observability import record_cache_lookup

if TYPE_CHECKING:
    from datetime import datetime

    from app.domain.calendar_event import CalendarEvent
    from app.domain.view_range import CalendarWindow

logger = logging.getLogger(__name__)

ChangeKind = Literal["updated", "invalidated", "evicted"]


@dataclass(slots=True)
class CacheEntry:
    key: str
    window: CalendarWindow
    events: list[CalendarEvent]
    stored_at: float
    invalidated: bool = False


@dataclass(frozen=True, slots=True)
class CacheChange:
    key: str
    kind: ChangeKind


@dataclass(frozen=True, slots=True)
class CacheSnapshot:
    """Estado anterior das entradas tocadas por uma remoção otimista."""

    event_id: str
    entries: dict[str, list[CalendarEvent]] = field(default_factory=dict)
    owners: dict[str, CacheEntry] = field(default_factory=dict)

    @property
    def removed_event(self) -> CalendarEvent | None:
        for events in self.entries.values():
            for event in events:
                if event.id == self.event_id:
                    return event
        return None


CacheListener = Callable[[CacheChange], None]


class EventCache:
    """Mapa chave de janela -> eventos, limitado por quantidade de entradas."""

    def __init__(
        self,
        max_entries: int = 64,
        ttl_seconds: float = 300.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_entries = max_entries
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._generations: dict[str, int] = {}
        self._inflight: dict[str, tuple[CalendarWindow, int]] = {}
        self._listeners: list[CacheListener] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def get(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            record_cache_lookup(key, "miss")
            return None
        self._entries.move_to_end(key)
        record_cache_lookup(key, "stale" if self.is_stale(entry) else "hit")
        return entry

    def is_stale(self, entry: CacheEntry) -> bool:
        """Entrada invalidada ou mais velha que o TTL."""
        return entry.invalidated or self._clock() - entry.stored_at >= self._ttl_seconds

    def begin_fetch(self, key: str, window: CalendarWindow | None = None) -> int:
        """Ticket de geração para uma busca que vai escrever em key.

        Com window, a busca fica registrada até end_fetch e invalidações
        que intersectam a janela descartam o resultado mesmo sem entrada.
        """
        if window is not None:
            _, pending = self._inflight.get(key, (window, 0))
            self._inflight[key] = (window, pending + 1)
        return self._generations.get(key, 0)

    def end_fetch(self, key: str) -> None:
        """Encerra o registro aberto por begin_fetch(key, window)."""
        current = self._inflight.get(key)
        if current is None:
            return
        window, pending = current
        if pending <= 1:
            del self._inflight[key]
        else:
            self._inflight[key] = (window, pending - 1)

    def store(
        self,
        key: str,
        window: CalendarWindow,
        events: list[CalendarEvent],
        ticket: int,
    ) -> bool:
        """Grava a janela se nenhuma invalidação ocorreu desde o ticket."""
        if ticket != self._generations.get(key, 0):
            logger.debug(
                "event_cache_store_discarded",
                extra={"component": "event_cache", "cache_key": key, "result": "superseded"},
            )
            return False
        self._entries[key] = CacheEntry(
            key=key,
            window=window,
            events=list(events),
            stored_at=self._clock(),
        )
        self._entries.move_to_end(key)
        self._emit(CacheChange(key, "updated"))
        self._evict_overflow()
        return True

    def invalidate(self, key: str) -> bool:
        """Marca a entrada como stale e descarta buscas em andamento."""
        self._generations[key] = self._generations.get(key, 0) + 1
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.invalidated = True
        self._emit(CacheChange(key, "invalidated"))
        return True

    def invalidate_overlapping(self, start: datetime, end: datetime) -> list[str]:
        """Invalida toda janela que intersecta [start, end]."""
        keys = [key for key, entry in self._entries.items() if entry.window.overlaps(start, end)]
        keys += [
            key
            for key, (window, _) in self._inflight.items()
            if key not in self._entries and window.overlaps(start, end)
        ]
        for key in keys:
            self.invalidate(key)
        return keys

    def invalidate_all(self) -> list[str]:
        keys = list(self._entries)
        keys += [key for key in self._inflight if key not in self._entries]
        for key in keys:
            self.invalidate(key)
        return keys

    def find_event(self, event_id: str) -> CalendarEvent | None:
        for entry in self._entries.values():
            for event in entry.events:
                if event.id == event_id:
                    return event
        return None

    def remove_event(self, event_id: str) -> CacheSnapshot:
        """Remove o evento de todas as entradas, devolvendo o estado anterior."""
        snapshot = CacheSnapshot(event_id=event_id)
        for key, entry in self._entries.items():
            remaining = [event for event in entry.events if event.id != event_id]
            if len(remaining) == len(entry.events):
                continue
            snapshot.entries[key] = entry.events
            snapshot.owners[key] = entry
            entry.events = remaining
        for key in snapshot.entries:
            self._emit(CacheChange(key, "updated"))
        return snapshot

    def restore(self, snapshot: CacheSnapshot) -> None:
        """Desfaz remove_event nas entradas que não foram regravadas depois."""
        for key, events in snapshot.entries.items():
            entry = self._entries.get(key)
            if entry is None or entry is not snapshot.owners.get(key):
                continue
            entry.events = list(events)
            self._emit(CacheChange(key, "updated"))

    def subscribe(self, listener: CacheListener) -> Callable[[], None]:
        """Registra listener de mudanças; devolve a função de cancelamento."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _evict_overflow(self) -> None:
        while len(self._entries) > self._max_entries:
            key, _ = self._entries.popitem(last=False)
            self._emit(CacheChange(key, "evicted"))

    def _emit(self, change: CacheChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(
                    "event_cache_listener_failed",
                    extra={
                        "component": "event_cache",
                        "cache_key": change.key,
                        "result": change.kind,
                    },
                )
