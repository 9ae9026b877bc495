"""Correlation_id por requisição HTTP, visível em todos os logs.

O valor vive numa ContextVar: tasks criadas durante a requisição (refresh
de token compartilhado, recarga de janela em background) herdam o id de
quem as disparou.

Uso:
    with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

CORRELATION_HEADER = "x-correlation-id"
_MAX_INBOUND_LENGTH = 128

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str:
    """correlation_id do contexto atual ("" fora de uma requisição)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; valores vazios ou longos demais geram um novo.

    Returns:
        Token para desfazer com reset_correlation_id().
    """
    candidate = (correlation_id or "").strip()
    if not candidate or len(candidate) > _MAX_INBOUND_LENGTH:
        candidate = generate_correlation_id()
    return _correlation_id.set(candidate)


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Vincula um correlation_id ao bloco e restaura o anterior na saída."""
    token = set_correlation_id(correlation_id)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)
