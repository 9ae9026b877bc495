"""Contratos consumidos da camada de autenticação."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.credentials import TokenGrant


@runtime_checkable
class CredentialStoreProtocol(Protocol):
    """Onde o par de credenciais do usuário vive (cookies, sessão...)."""

    def get_access_token(self) -> str | None: ...

    def get_refresh_token(self) -> str | None: ...

    def save_access_token(self, access_token: str, expires_in_seconds: int) -> None:
        """Persiste o access_token renovado pelo refresher."""
        ...


@runtime_checkable
class TokenIssuerProtocol(Protocol):
    """Emissor de credenciais de curta duração."""

    async def exchange_refresh_token(self, refresh_token: str) -> TokenGrant:
        """Troca o refresh_token; AuthError se revogado ou inválido."""
        ...
