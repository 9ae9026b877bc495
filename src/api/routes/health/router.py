"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import SERVICE_NAME
from config.settings import get_calendar_settings, get_google_auth_settings

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {"status": self.status, "error": self.error}


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check() -> JSONResponse:
    """Readiness probe — configuração de calendário e OAuth carregadas."""
    calendar_check = _check_calendar_settings()
    oauth_check = _check_google_oauth()
    ready = calendar_check.status == "ok" and oauth_check.status in {"ok", "degraded"}

    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "calendar_settings": calendar_check.as_dict(),
            "google_oauth": oauth_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_calendar_settings() -> DependencyCheck:
    try:
        get_calendar_settings()
    except ValueError as exc:
        logger.warning("readiness_calendar_settings_invalid", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    return DependencyCheck(status="ok")


def _check_google_oauth() -> DependencyCheck:
    # Sem client OAuth os access_tokens ainda funcionam; só o refresh falha.
    errors = get_google_auth_settings().validate_credentials()
    if errors:
        return DependencyCheck(status="degraded", error="not_configured")
    return DependencyCheck(status="ok")
