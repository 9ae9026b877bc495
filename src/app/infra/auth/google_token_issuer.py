"""Emissor de access_token via endpoint OAuth 2.0 do Google."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.domain.credentials import DEFAULT_ACCESS_TOKEN_TTL_SECONDS, TokenGrant
from app.observability import get_correlation_id
from app.protocols.credential_store import TokenIssuerProtocol
from utils.errors import AuthError, TransientServerError

if TYPE_CHECKING:
    from config.settings import GoogleAuthSettings

logger = logging.getLogger(__name__)

_COMPONENT = "google_token_issuer"


class GoogleTokenIssuer(TokenIssuerProtocol):
    """Troca refresh_token por access_token (grant_type=refresh_token).

    Erros 400/401 do endpoint (invalid_grant, token revogado) viram
    AuthError; 5xx e falhas de rede viram TransientServerError.
    """

    def __init__(
        self,
        *,
        client_id: str,
        client_secret: str,
        token_uri: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_uri = token_uri
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def exchange_refresh_token(self, refresh_token: str) -> TokenGrant:
        if not refresh_token or not refresh_token.strip():
            raise AuthError("refresh_token_missing", status_code=401)

        form = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self._token_uri, data=form)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            self._log("transport_error", error_type=type(exc).__name__)
            raise TransientServerError("token_endpoint_unreachable", is_retryable=True) from exc

        if response.status_code >= 500:
            self._log("server_error", status_code=response.status_code)
            raise TransientServerError("token_endpoint_error", status_code=response.status_code)
        if response.status_code >= 400:
            self._log("rejected", status_code=response.status_code)
            raise AuthError(_oauth_error_code(response), status_code=401)

        return self._parse_grant(response)

    def _parse_grant(self, response: httpx.Response) -> TokenGrant:
        try:
            payload: Any = response.json()
        except ValueError as exc:
            self._log("invalid_json", status_code=response.status_code)
            raise AuthError("token_response_invalid", status_code=401) from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token:
            self._log("missing_access_token", status_code=response.status_code)
            raise AuthError("token_response_missing_access_token", status_code=401)

        expires_in = payload.get("expires_in")
        self._log("refreshed", status_code=response.status_code, level=logging.INFO)
        return TokenGrant(
            access_token=access_token,
            expires_in_seconds=(
                int(expires_in)
                if isinstance(expires_in, int | float)
                else DEFAULT_ACCESS_TOKEN_TTL_SECONDS
            ),
        )

    def _log(
        self,
        result: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        level: int = logging.WARNING,
    ) -> None:
        logger.log(
            level,
            "google_token_exchange",
            extra={
                "component": _COMPONENT,
                "action": "exchange_refresh_token",
                "result": result,
                "status_code": status_code,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )


def _oauth_error_code(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return "refresh_token_rejected"
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return f"refresh_token_rejected:{payload['error']}"
    return "refresh_token_rejected"


def create_google_token_issuer(settings: GoogleAuthSettings | None = None) -> GoogleTokenIssuer:
    """Factory do emissor com settings do ambiente."""
    from config.settings import get_google_auth_settings

    auth = settings or get_google_auth_settings()
    return GoogleTokenIssuer(
        client_id=auth.client_id,
        client_secret=auth.client_secret,
        token_uri=auth.token_uri,
        timeout_seconds=auth.request_timeout_seconds,
    )
