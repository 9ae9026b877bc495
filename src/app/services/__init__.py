"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.calendar_gateway import CalendarGateway
from app.services.calendar_sync import CalendarSyncService
from app.services.credential_refresher import CredentialRefresher
from app.services.deletion_reconciler import (
    ALREADY_DELETED_WARNING,
    DeleteOutcome,
    DeletionReconciler,
)
from app.services.event_cache import CacheChange, CacheEntry, CacheSnapshot, EventCache
from app.services.rate_limiter import RateLimiter
from app.services.retry_executor import RetryExecutor
from app.services.view_state import ViewStateController

__all__ = [
    "ALREADY_DELETED_WARNING",
    "CacheChange",
    "CacheEntry",
    "CacheSnapshot",
    "CalendarGateway",
    "CalendarSyncService",
    "CredentialRefresher",
    "DeleteOutcome",
    "DeletionReconciler",
    "EventCache",
    "RateLimiter",
    "RetryExecutor",
    "ViewStateController",
]
