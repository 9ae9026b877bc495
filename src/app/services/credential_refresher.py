"""Renovação de access_token com single-flight e retry único em 401.

O refresher é compartilhado pelo processo (ver app.bootstrap): trocas
concorrentes do mesmo refresh_token aguardam uma única chamada ao
emissor. Tokens nunca aparecem nos logs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from app.observability import get_correlation_id
from utils.errors import AuthError, SessionExpiredError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.domain.credentials import TokenGrant
    from app.protocols.credential_store import CredentialStoreProtocol, TokenIssuerProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COMPONENT = "credential_refresher"


class CredentialRefresher:
    """Garante um access_token válido para chamadas ao provedor."""

    def __init__(self, issuer: TokenIssuerProtocol) -> None:
        self._issuer = issuer
        self._inflight: dict[str, asyncio.Task[TokenGrant]] = {}

    @property
    def refresh_in_flight(self) -> bool:
        return bool(self._inflight)

    async def ensure_access_token(
        self,
        access_token: str | None,
        refresh_token: str | None,
    ) -> str:
        """Devolve o access_token atual ou troca o refresh_token por um novo.

        Raises:
            AuthError: sem credenciais ou troca recusada.
        """
        if access_token:
            return access_token
        if not refresh_token:
            raise AuthError("no credentials", status_code=401)
        grant = await self.refresh(refresh_token)
        return grant.access_token

    async def refresh(self, refresh_token: str) -> TokenGrant:
        """Troca o refresh_token; chamadas concorrentes compartilham a troca."""
        task = self._inflight.get(refresh_token)
        if task is None:
            task = asyncio.ensure_future(self._exchange(refresh_token))
            self._inflight[refresh_token] = task
            task.add_done_callback(lambda _done: self._inflight.pop(refresh_token, None))
        else:
            self._log("joined_inflight", logging.DEBUG)
        # shield: cancelar um chamador não cancela a troca dos demais.
        return await asyncio.shield(task)

    async def _exchange(self, refresh_token: str) -> TokenGrant:
        try:
            grant = await self._issuer.exchange_refresh_token(refresh_token)
        except AuthError:
            self._log("rejected", logging.WARNING)
            raise
        except Exception as exc:
            self._log("failed", logging.WARNING, error_type=type(exc).__name__)
            raise AuthError("token_refresh_failed", status_code=401) from exc
        self._log("refreshed", logging.INFO)
        return grant

    async def call_with_credentials(
        self,
        store: CredentialStoreProtocol,
        operation: Callable[[str], Awaitable[T]],
    ) -> T:
        """Executa operation(access_token) com refresh e nova tentativa única.

        Tokens renovados são persistidos no store. Se a chamada falhar com
        AuthError, renova uma vez e tenta de novo; uma segunda falha (ou
        ausência de refresh_token) vira SessionExpiredError.
        """
        access_token = store.get_access_token()
        if not access_token:
            refresh_token = store.get_refresh_token()
            if not refresh_token:
                raise AuthError("no credentials", status_code=401)
            access_token = await self._refresh_into(store, refresh_token)

        try:
            return await operation(access_token)
        except SessionExpiredError:
            raise
        except AuthError as exc:
            retry_token = await self._recover_token(store, access_token, exc)

        try:
            return await operation(retry_token)
        except AuthError as exc:
            self._log("session_expired", logging.WARNING)
            raise SessionExpiredError(status_code=401) from exc

    async def _recover_token(
        self,
        store: CredentialStoreProtocol,
        rejected_token: str,
        error: AuthError,
    ) -> str:
        current = store.get_access_token()
        if current and current != rejected_token:
            # Outra chamada já renovou o token enquanto esta falhava.
            return current
        refresh_token = store.get_refresh_token()
        if not refresh_token:
            raise SessionExpiredError(status_code=401) from error
        try:
            return await self._refresh_into(store, refresh_token)
        except AuthError as exc:
            raise SessionExpiredError(status_code=401) from exc

    async def _refresh_into(self, store: CredentialStoreProtocol, refresh_token: str) -> str:
        grant = await self.refresh(refresh_token)
        store.save_access_token(grant.access_token, grant.expires_in_seconds)
        return grant.access_token

    def _log(self, result: str, level: int, *, error_type: str | None = None) -> None:
        logger.log(
            level,
            "credential_refresh",
            extra={
                "component": _COMPONENT,
                "action": "refresh_access_token",
                "result": result,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )
