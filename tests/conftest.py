"""Configuração do pytest para o projeto Agenda_Pyloto."""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import (  # noqa: E402
    get_base_settings,
    get_calendar_settings,
    get_google_auth_settings,
)

_SETTINGS_GETTERS = (get_base_settings, get_calendar_settings, get_google_auth_settings)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Settings são cacheadas por processo; cada teste lê o ambiente de novo."""
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()
    yield
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()
