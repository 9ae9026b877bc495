"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_calendar_gateway

    # Na inicialização do serviço
    initialize_app()

    # Dependências compartilhadas (singletons)
    gateway = get_calendar_gateway()
    refresher = get_credential_refresher()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_base_settings, get_calendar_settings, get_google_auth_settings

if TYPE_CHECKING:
    from app.protocols.credential_store import TokenIssuerProtocol
    from app.services.calendar_gateway import CalendarGateway
    from app.services.credential_refresher import CredentialRefresher

# Nome do serviço para logs e métricas
SERVICE_NAME = "agenda_pyloto"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço. Configura logging
    estruturado JSON com correlation_id e mascaramento de tokens.
    """
    configure_logging(
        level=get_base_settings().log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(
        f"google_auth: {error}" for error in get_google_auth_settings().validate_credentials()
    )
    # CalendarSettings valida os campos na construção; aqui só forçamos o load.
    get_calendar_settings()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": base.environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": base.environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if base.requires_strict_validation:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {base.environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters de dependências (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_token_issuer() -> TokenIssuerProtocol:
    """Obtém emissor de access_token (singleton)."""
    from app.bootstrap.dependencies import create_token_issuer

    return create_token_issuer()


@lru_cache(maxsize=1)
def get_credential_refresher() -> CredentialRefresher:
    """Obtém refresher compartilhado (single-flight por processo)."""
    from app.bootstrap.dependencies import create_credential_refresher

    return create_credential_refresher(get_token_issuer())


@lru_cache(maxsize=1)
def get_calendar_gateway() -> CalendarGateway:
    """Obtém gateway de calendário (singleton, com rate limiter próprio)."""
    from app.bootstrap.dependencies import create_calendar_gateway

    return create_calendar_gateway()
