"""Agregador de settings do Agenda Pyloto.

Re-exporta as settings e getters de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.calendar import (
    CalendarSettings,
    get_calendar_settings,
)
from config.settings.google_auth import (
    GOOGLE_TOKEN_URI,
    GoogleAuthSettings,
    get_google_auth_settings,
)

__all__ = [
    "GOOGLE_TOKEN_URI",
    "BaseSettings",
    "CalendarSettings",
    "Environment",
    "GoogleAuthSettings",
    "get_base_settings",
    "get_calendar_settings",
    "get_google_auth_settings",
]
