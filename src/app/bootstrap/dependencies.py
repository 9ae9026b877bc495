"""Factories de dependências — criação de implementações concretas.

Este módulo centraliza a criação do gateway de calendário, do refresher
de credenciais e do serviço de sincronização a partir das settings de
ambiente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.normalizers.google_calendar import GoogleCalendarEventNormalizer
from app.infra.auth.google_token_issuer import create_google_token_issuer
from app.infra.calendar.google_calendar_client import GoogleCalendarClient
from app.services.calendar_gateway import CalendarGateway
from app.services.calendar_sync import CalendarSyncService
from app.services.credential_refresher import CredentialRefresher
from app.services.event_cache import EventCache
from app.services.rate_limiter import RateLimiter
from app.services.retry_executor import RetryExecutor
from config.settings import get_calendar_settings

if TYPE_CHECKING:
    from app.protocols.calendar_provider import CalendarProviderProtocol
    from app.protocols.credential_store import CredentialStoreProtocol, TokenIssuerProtocol
    from config.settings import CalendarSettings

logger = logging.getLogger(__name__)


def create_token_issuer() -> TokenIssuerProtocol:
    issuer = create_google_token_issuer()
    logger.info("token_issuer_created", extra={"component": "bootstrap", "backend": "google"})
    return issuer


def create_credential_refresher(issuer: TokenIssuerProtocol) -> CredentialRefresher:
    return CredentialRefresher(issuer)


def create_calendar_gateway(
    provider: CalendarProviderProtocol | None = None,
    settings: CalendarSettings | None = None,
) -> CalendarGateway:
    """Cria gateway com limiter, retry e normalizer conforme settings.

    Args:
        provider: Provedor remoto; default é a API v3 do Google.
        settings: CalendarSettings; default lê do ambiente.
    """
    calendar = settings or get_calendar_settings()
    gateway = CalendarGateway(
        provider or GoogleCalendarClient(),
        normalizer=GoogleCalendarEventNormalizer(),
        rate_limiter=RateLimiter(
            calendar.max_requests_per_minute,
            calendar.rate_limit_delay_seconds,
        ),
        retry_executor=RetryExecutor(
            calendar.max_retries,
            calendar.retry_base_delay_seconds,
            calendar.rate_limit_delay_seconds,
        ),
        default_calendar_id=calendar.google_calendar_id,
        default_max_results=calendar.default_max_results,
        month_max_results=calendar.month_max_results,
        timezone=calendar.calendar_timezone,
    )
    logger.info(
        "calendar_gateway_created",
        extra={
            "component": "bootstrap",
            "calendar_id": calendar.google_calendar_id,
            "timezone": calendar.calendar_timezone,
        },
    )
    return gateway


def create_calendar_sync(
    gateway: CalendarGateway,
    refresher: CredentialRefresher,
    credentials: CredentialStoreProtocol,
    settings: CalendarSettings | None = None,
) -> CalendarSyncService:
    """Cria serviço de sincronização com cache próprio para um usuário."""
    calendar = settings or get_calendar_settings()
    return CalendarSyncService(
        gateway,
        EventCache(calendar.cache_max_entries, calendar.cache_ttl_seconds),
        refresher,
        credentials,
        calendar_id=calendar.google_calendar_id,
    )
