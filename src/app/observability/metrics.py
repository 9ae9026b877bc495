"""Registro de métricas via structured logging.

As métricas são logs estruturados com `metric_type`, agregáveis depois
(BigQuery, Cloud Logging). Nenhum valor de token ou PII é registrado.

Métricas suportadas:
- latency: tempo de cada chamada ao provedor de calendário
- retry: cada nova tentativa do executor de retry
- rate_limit_wait: pausas do limitador local
- cache_lookup: hit/miss/stale do cache de janelas
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    result: str = "ok",
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "calendar_gateway")
        operation: Nome da operação (ex: "list_events")
        latency_ms: Latência em milissegundos
        result: Resultado resumido ("ok" ou nome da classe de erro)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "result": result,
            "correlation_id": get_correlation_id(),
        },
    )


def record_retry(
    operation: str,
    attempt: int,
    delay_seconds: float,
    status_code: int | None = None,
) -> None:
    """Registra nova tentativa agendada pelo executor de retry."""
    logger.info(
        "metric_retry",
        extra={
            "metric_type": "retry",
            "component": "retry_executor",
            "operation": operation,
            "attempt": attempt,
            "delay_seconds": round(delay_seconds, 3),
            "status_code": status_code,
            "correlation_id": get_correlation_id(),
        },
    )


def record_rate_limit_wait(wait_seconds: float, request_count: int) -> None:
    """Registra pausa do limitador local ao atingir a quota."""
    logger.warning(
        "metric_rate_limit_wait",
        extra={
            "metric_type": "rate_limit_wait",
            "component": "rate_limiter",
            "wait_seconds": wait_seconds,
            "request_count": request_count,
            "correlation_id": get_correlation_id(),
        },
    )


def record_cache_lookup(key: str, result: str) -> None:
    """Registra consulta ao cache de eventos (hit, miss ou stale)."""
    logger.debug(
        "metric_cache_lookup",
        extra={
            "metric_type": "cache_lookup",
            "component": "event_cache",
            "cache_key": key,
            "result": result,
            "correlation_id": get_correlation_id(),
        },
    )
