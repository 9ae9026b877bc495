"""Settings de credenciais OAuth do Google.

O fluxo de login/consentimento fica fora deste serviço; aqui só existe
o necessário para trocar refresh_token por access_token e para ler os
cookies gravados pela camada de autenticação.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleAuthSettings(BaseModel):
    """Configurações do client OAuth usado no refresh de tokens."""

    model_config = ConfigDict(extra="ignore")

    client_id: str = Field(default="", description="Client ID do app Google.")
    client_secret: str = Field(default="", description="Client Secret do app Google.")
    token_uri: str = Field(default=GOOGLE_TOKEN_URI, description="Endpoint de token OAuth 2.0.")
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout da chamada ao endpoint de token.",
    )
    access_token_cookie: str = Field(default="google_access_token")
    refresh_token_cookie: str = Field(default="google_refresh_token")
    secure_cookies: bool = Field(
        default=False,
        description="Marca cookies de token como Secure (produção).",
    )

    def validate_credentials(self) -> list[str]:
        """Valida configurações minimas para refresh de token."""
        errors: list[str] = []
        if not self.client_id:
            errors.append("GOOGLE_CLIENT_ID não configurado")
        if not self.client_secret:
            errors.append("GOOGLE_CLIENT_SECRET não configurado")
        return errors


def _load_google_auth_from_env() -> GoogleAuthSettings:
    """Carrega GoogleAuthSettings de variáveis de ambiente."""
    return GoogleAuthSettings(
        client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
        token_uri=os.getenv("GOOGLE_TOKEN_URI", GOOGLE_TOKEN_URI),
        request_timeout_seconds=float(os.getenv("GOOGLE_TOKEN_TIMEOUT_SECONDS", "10")),
        access_token_cookie=os.getenv("ACCESS_TOKEN_COOKIE", "google_access_token"),
        refresh_token_cookie=os.getenv("REFRESH_TOKEN_COOKIE", "google_refresh_token"),
        secure_cookies=os.getenv("ENVIRONMENT", "development").lower() == "production",
    )


@lru_cache(maxsize=1)
def get_google_auth_settings() -> GoogleAuthSettings:
    """Retorna instância cacheada de GoogleAuthSettings."""
    return _load_google_auth_from_env()


__all__ = ["GOOGLE_TOKEN_URI", "GoogleAuthSettings", "get_google_auth_settings"]
