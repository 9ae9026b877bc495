"""Settings base do Agenda Pyloto.

Ambiente, identificação do serviço, nível de log e origens CORS do
frontend de calendário.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "test", "staging", "production"]

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_ANY_ORIGIN = "*"


@dataclass(frozen=True)
class BaseSettings:
    """Configurações comuns do serviço.

    Attributes:
        environment: development|test|staging|production
        service_name: Nome do serviço nos logs
        debug: Modo debug ativo
        log_level: Nível do root logger
        cors_allowed_origins: Origens do frontend autorizadas a enviar os
            cookies de token
    """

    environment: Environment = "development"
    service_name: str = "agenda-pyloto"
    debug: bool = False
    log_level: str = "INFO"
    cors_allowed_origins: tuple[str, ...] = field(default=(_ANY_ORIGIN,))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def requires_strict_validation(self) -> bool:
        """Staging e produção não sobem com configuração incompleta."""
        return self.environment in {"staging", "production"}

    def validate(self) -> list[str]:
        """Lista de erros de configuração (vazia = OK)."""
        errors: list[str] = []
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")
        if self.requires_strict_validation and _ANY_ORIGIN in self.cors_allowed_origins:
            errors.append("CORS_ALLOWED_ORIGINS não pode ser '*' com cookies de token")
        return errors


def _parse_environment(env_str: str) -> Environment:
    env_lower = env_str.strip().lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    if env_lower == "test":
        return "test"
    return "development"


def _parse_origins(raw_value: str) -> tuple[str, ...]:
    origins = tuple(origin.strip() for origin in raw_value.split(",") if origin.strip())
    return origins or (_ANY_ORIGIN,)


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "agenda-pyloto"),
        debug=os.getenv("DEBUG", "").lower() in ("true", "1", "yes"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_allowed_origins=_parse_origins(os.getenv("CORS_ALLOWED_ORIGINS", "")),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
