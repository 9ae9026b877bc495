"""Configuração centralizada de logging.

Um único handler JSON no root logger, com service, correlation_id e
máscara de tokens OAuth. Os loggers do SDK do Google e do httpx ficam em
WARNING: em INFO eles registram cada requisição HTTP, inclusive as do
endpoint de token.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="agenda_pyloto")
    logger = get_logger(__name__)
    logger.info("calendar_events_listed", extra={"count": 12})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, SecretRedactionFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "agenda_pyloto"

NOISY_LOGGERS = (
    "googleapiclient.discovery",
    "googleapiclient.discovery_cache",
    "google.auth.transport",
    "httpx",
    "httpcore",
)


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Chamada uma vez no bootstrap. Em DEBUG os loggers de terceiros
    seguem o nível pedido; nos demais níveis ficam em WARNING.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(SecretRedactionFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    third_party_level = level_upper if level_upper == "DEBUG" else "WARNING"
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra resposta degradada (ex.: eventos em cache após falha de recarga).

    Args:
        logger: Logger do módulo que aplicou o fallback.
        component: Componente (ex: "calendar_sync").
        reason: Classe do erro que causou o fallback.
        elapsed_ms: Tempo decorrido em ms, quando medido.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = elapsed_ms

    logger.info(
        "Fallback applied for %s",
        component,
        extra=extra,
    )
