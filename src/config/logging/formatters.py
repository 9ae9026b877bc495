"""Formatter JSON dos logs estruturados.

Cada linha traz asctime, level, logger, message, correlation_id e
service; os campos de `extra` (component, action, result, status_code,
cache_key...) entram no mesmo objeto.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = frozenset(
    {
        "asctime",
        "levelname",
        "name",
        "message",
        "correlation_id",
        "service",
    }
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Formatter JSON com nomes de campo padronizados.

    Exemplo:
        {"asctime": "2026-03-15 10:30:00,120", "level": "WARNING",
         "logger": "app.services.retry_executor",
         "message": "calendar_retry_exhausted", "correlation_id": "9f2c...",
         "service": "agenda_pyloto", "attempts": 4, "status_code": 503}
    """
    format_string = " ".join(f"%({name})s" for name in sorted(REQUIRED_LOG_FIELDS))
    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        json_ensure_ascii=False,
    )
