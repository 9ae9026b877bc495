"""Credential store baseado nos cookies (ou Bearer) da requisição.

Tokens renovados durante a requisição ficam pendentes e são gravados
como cookie httpOnly na resposta por apply_cookies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from app.protocols.credential_store import CredentialStoreProtocol
from config.settings import get_google_auth_settings

if TYPE_CHECKING:
    from fastapi import Response

    from config.settings import GoogleAuthSettings

_BEARER_PREFIX = "bearer "


class RequestCredentialStore(CredentialStoreProtocol):
    """Par de credenciais do usuário lido da requisição HTTP."""

    def __init__(
        self,
        *,
        access_token: str | None,
        refresh_token: str | None,
        settings: GoogleAuthSettings,
    ) -> None:
        self._access_token = access_token or None
        self._refresh_token = refresh_token or None
        self._settings = settings
        self._pending: tuple[str, int] | None = None

    @classmethod
    def from_request(
        cls,
        request: Request,
        settings: GoogleAuthSettings | None = None,
    ) -> RequestCredentialStore:
        auth = settings or get_google_auth_settings()
        access_token = request.cookies.get(auth.access_token_cookie)
        if not access_token:
            header = request.headers.get("authorization", "")
            if header.lower().startswith(_BEARER_PREFIX):
                access_token = header[len(_BEARER_PREFIX) :].strip()
        return cls(
            access_token=access_token,
            refresh_token=request.cookies.get(auth.refresh_token_cookie),
            settings=auth,
        )

    def get_access_token(self) -> str | None:
        return self._access_token

    def get_refresh_token(self) -> str | None:
        return self._refresh_token

    def save_access_token(self, access_token: str, expires_in_seconds: int) -> None:
        self._access_token = access_token
        self._pending = (access_token, expires_in_seconds)

    def apply_cookies(self, response: Response) -> Response:
        """Grava o access_token renovado (se houver) como cookie httpOnly."""
        if self._pending is None:
            return response
        token, max_age = self._pending
        response.set_cookie(
            key=self._settings.access_token_cookie,
            value=token,
            max_age=max_age,
            path="/",
            httponly=True,
            secure=self._settings.secure_cookies,
            samesite="lax",
        )
        return response


def get_request_credentials(request: Request) -> RequestCredentialStore:
    """Dependency FastAPI: credential store da requisição atual."""
    return RequestCredentialStore.from_request(request)
