"""Testes das settings carregadas do ambiente."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.bootstrap import validate_runtime_settings
from config.settings import (
    GOOGLE_TOKEN_URI,
    CalendarSettings,
    GoogleAuthSettings,
    get_base_settings,
    get_calendar_settings,
    get_google_auth_settings,
)


class TestCalendarSettings:
    """Testes para CalendarSettings."""

    def test_defaults(self) -> None:
        settings = CalendarSettings()
        assert settings.google_calendar_id == "primary"
        assert settings.max_requests_per_minute == 500
        assert settings.rate_limit_delay_seconds == 2.0
        assert settings.max_retries == 3
        assert settings.default_max_results == 100
        assert settings.month_max_results == 500

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_CALENDAR_ID", "team@group.calendar.google.com")
        monkeypatch.setenv("CALENDAR_TIMEZONE", "America/Sao_Paulo")
        monkeypatch.setenv("CALENDAR_MAX_RETRIES", "5")
        monkeypatch.setenv("CALENDAR_CACHE_TTL_SECONDS", "30")

        settings = get_calendar_settings()

        assert settings.google_calendar_id == "team@group.calendar.google.com"
        assert settings.calendar_timezone == "America/Sao_Paulo"
        assert settings.max_retries == 5
        assert settings.cache_ttl_seconds == 30.0

    def test_empty_calendar_id_falls_back_to_primary(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GOOGLE_CALENDAR_ID", "")
        assert get_calendar_settings().google_calendar_id == "primary"

    def test_invalid_timezone_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CalendarSettings(calendar_timezone="Marte/Olympus")

    def test_quota_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            CalendarSettings(max_requests_per_minute=0)


class TestGoogleAuthSettings:
    """Testes para GoogleAuthSettings."""

    def test_missing_client_is_reported(self) -> None:
        errors = GoogleAuthSettings().validate_credentials()
        assert errors == [
            "GOOGLE_CLIENT_ID não configurado",
            "GOOGLE_CLIENT_SECRET não configurado",
        ]

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_CLIENT_ID", "client-id")
        monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "client-secret")
        monkeypatch.setenv("ENVIRONMENT", "production")

        settings = get_google_auth_settings()

        assert settings.validate_credentials() == []
        assert settings.token_uri == GOOGLE_TOKEN_URI
        assert settings.secure_cookies is True


class TestRuntimeValidation:
    """Testes para validate_runtime_settings."""

    def test_development_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
        monkeypatch.delenv("GOOGLE_CLIENT_SECRET", raising=False)

        validate_runtime_settings()

    def test_production_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
        monkeypatch.delenv("GOOGLE_CLIENT_SECRET", raising=False)

        with pytest.raises(RuntimeError, match="google_auth"):
            validate_runtime_settings()


class TestBaseSettings:
    """Testes para BaseSettings."""

    def test_cors_origins_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "https://agenda.example.com, http://localhost:3000")

        settings = get_base_settings()

        assert settings.cors_allowed_origins == (
            "https://agenda.example.com",
            "http://localhost:3000",
        )

    def test_wildcard_origin_is_rejected_in_production(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)

        settings = get_base_settings()

        assert settings.is_production
        assert settings.validate() == ["CORS_ALLOWED_ORIGINS não pode ser '*' com cookies de token"]

    def test_wildcard_origin_is_fine_in_development(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)

        assert get_base_settings().validate() == []
