"""Filters de logging para injeção de contexto e máscara de segredos.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: agenda_pyloto)

Tokens OAuth nunca devem aparecer em log; o SecretRedactionFilter
mascara qualquer atributo de record com nome de credencial.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

SENSITIVE_FIELDS = frozenset(
    {
        "access_token",
        "refresh_token",
        "client_secret",
        "authorization",
    }
)
REDACTED = "[redacted]"
_BEARER_PATTERN = re.compile(r"(?i)\b(bearer\s+)[A-Za-z0-9._~+/=-]+")


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SecretRedactionFilter(logging.Filter):
    """Mascara campos sensíveis de `extra` e headers Bearer na mensagem."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field_name in SENSITIVE_FIELDS:
            if getattr(record, field_name, None):
                setattr(record, field_name, REDACTED)
        if isinstance(record.msg, str) and not record.args:
            record.msg = _BEARER_PATTERN.sub(rf"\g<1>{REDACTED}", record.msg)
        return True
