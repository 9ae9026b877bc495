"""Settings de integração com Google Calendar.

Centralizar a leitura de env aqui evita espalhar parse de configuração
pelo gateway, pelo cache e pelo controlador de visualização.
"""

from __future__ import annotations

import os
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalendarSettings(BaseModel):
    """Configurações do gateway de calendário e do cache de eventos."""

    model_config = ConfigDict(extra="ignore")

    google_calendar_id: str = Field(
        default="primary",
        description="ID do calendário padrão no Google Calendar.",
    )
    calendar_timezone: str = Field(
        default="UTC",
        description="Timezone usada para limites de dia, semana e mês.",
    )
    max_requests_per_minute: int = Field(
        default=500,
        ge=1,
        description="Quota local por janela de um minuto (throttle consultivo).",
    )
    rate_limit_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Pausa aplicada ao atingir a quota ou receber 429.",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Tentativas extras para falhas transitórias.",
    )
    retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base do backoff exponencial (base * 2**tentativa).",
    )
    default_max_results: int = Field(
        default=100,
        ge=1,
        le=2500,
        description="maxResults padrão de listagens.",
    )
    month_max_results: int = Field(
        default=500,
        ge=1,
        le=2500,
        description="maxResults da visão mensal.",
    )
    cache_max_entries: int = Field(
        default=64,
        ge=1,
        description="Quantidade máxima de janelas mantidas no cache (LRU).",
    )
    cache_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Idade a partir da qual uma janela em cache fica stale.",
    )

    @field_validator("calendar_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"timezone inválida: {value}") from exc
        return value


def _parse_int(key: str, default: int) -> int:
    raw_value = os.getenv(key, "").strip()
    return int(raw_value) if raw_value else default


def _parse_float(key: str, default: float) -> float:
    raw_value = os.getenv(key, "").strip()
    return float(raw_value) if raw_value else default


def _load_calendar_from_env() -> CalendarSettings:
    """Carrega CalendarSettings a partir de variáveis de ambiente."""
    return CalendarSettings(
        google_calendar_id=os.getenv("GOOGLE_CALENDAR_ID", "primary") or "primary",
        calendar_timezone=os.getenv("CALENDAR_TIMEZONE", "UTC"),
        max_requests_per_minute=_parse_int("CALENDAR_MAX_REQUESTS_PER_MINUTE", 500),
        rate_limit_delay_seconds=_parse_float("CALENDAR_RATE_LIMIT_DELAY_SECONDS", 2.0),
        max_retries=_parse_int("CALENDAR_MAX_RETRIES", 3),
        retry_base_delay_seconds=_parse_float("CALENDAR_RETRY_BASE_DELAY_SECONDS", 1.0),
        default_max_results=_parse_int("CALENDAR_DEFAULT_MAX_RESULTS", 100),
        month_max_results=_parse_int("CALENDAR_MONTH_MAX_RESULTS", 500),
        cache_max_entries=_parse_int("CALENDAR_CACHE_MAX_ENTRIES", 64),
        cache_ttl_seconds=_parse_float("CALENDAR_CACHE_TTL_SECONDS", 300.0),
    )


@lru_cache(maxsize=1)
def get_calendar_settings() -> CalendarSettings:
    """Retorna instância cacheada de CalendarSettings."""
    return _load_calendar_from_env()


__all__ = ["CalendarSettings", "get_calendar_settings"]
