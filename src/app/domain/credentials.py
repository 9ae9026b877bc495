"""Credenciais OAuth emprestadas da camada de autenticação."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACCESS_TOKEN_TTL_SECONDS = 3600


class TokenGrant(BaseModel):
    """Resultado da troca de refresh_token por um novo access_token."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1)
    expires_in_seconds: int = Field(default=DEFAULT_ACCESS_TOKEN_TTL_SECONDS, ge=0)


__all__ = ["DEFAULT_ACCESS_TOKEN_TTL_SECONDS", "TokenGrant"]
