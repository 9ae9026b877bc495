"""Testes para config.logging.

Cobre: configure_logging, get_logger, log_fallback, CorrelationIdFilter,
SecretRedactionFilter e create_json_formatter.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    SecretRedactionFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    log_fallback,
)
from config.logging.config import DEFAULT_SERVICE_NAME, NOISY_LOGGERS, VALID_LOG_LEVELS
from config.logging.filters import REDACTED


def _record(msg: str = "calendar_events_listed", *args: object) -> logging.LogRecord:
    return logging.LogRecord(
        name="app.services.calendar_gateway",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    @pytest.mark.parametrize("level", ["DEBUG", "info", "Warning", "ERROR", "CRITICAL"])
    def test_sets_root_level_case_insensitive(self, level: str) -> None:
        configure_logging(level=level)
        assert logging.getLogger().level == getattr(logging, level.upper())

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="VERBOSE")

    def test_replaces_existing_handlers(self) -> None:
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1

    def test_handler_has_context_and_redaction_filters(self) -> None:
        configure_logging(correlation_id_getter=lambda: "corr-1")
        filters = logging.getLogger().handlers[0].filters
        assert any(isinstance(f, CorrelationIdFilter) for f in filters)
        assert any(isinstance(f, SecretRedactionFilter) for f in filters)

    def test_third_party_loggers_are_quieted(self) -> None:
        configure_logging(level="INFO")
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_keeps_third_party_loggers_verbose(self) -> None:
        configure_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "agenda_pyloto"


class TestGetLogger:
    """Testes para get_logger."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("app.services.event_cache")
        assert logger.name == "app.services.event_cache"
        assert logger is get_logger("app.services.event_cache")


class TestLogFallback:
    """Testes para log_fallback."""

    def test_basic_fallback(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "calendar_sync")
        args, kwargs = logger.info.call_args
        assert args == ("Fallback applied for %s", "calendar_sync")
        assert kwargs["extra"] == {"fallback_used": True, "component": "calendar_sync"}

    def test_fallback_with_reason_and_elapsed(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(
            logger,
            "deletion_reconciler",
            reason="TransientServerError",
            elapsed_ms=12.5,
        )
        extra = logger.info.call_args[1]["extra"]
        assert extra["reason"] == "TransientServerError"
        assert extra["elapsed_ms"] == 12.5


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_adds_correlation_id_and_service(self) -> None:
        record = _record()
        assert CorrelationIdFilter("agenda", lambda: "corr-123").filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "agenda"

    def test_preserves_explicit_correlation_id(self) -> None:
        record = _record()
        record.correlation_id = "explicit-id"
        CorrelationIdFilter("agenda", lambda: "from-getter").filter(record)
        assert record.correlation_id == "explicit-id"

    def test_empty_string_without_getter(self) -> None:
        record = _record()
        CorrelationIdFilter("agenda").filter(record)
        assert record.correlation_id == ""


class TestSecretRedactionFilter:
    """Testes para SecretRedactionFilter."""

    def test_tokens_in_extra_are_masked(self) -> None:
        record = _record()
        record.access_token = "ya29.secret"
        record.refresh_token = "1//refresh"

        assert SecretRedactionFilter().filter(record) is True
        assert record.access_token == REDACTED
        assert record.refresh_token == REDACTED

    def test_bearer_in_message_is_masked(self) -> None:
        record = _record("upstream rejected Authorization: Bearer ya29.a0AfH6SM")
        SecretRedactionFilter().filter(record)
        assert record.getMessage() == f"upstream rejected Authorization: Bearer {REDACTED}"

    def test_other_fields_are_untouched(self) -> None:
        record = _record()
        record.component = "credential_refresher"
        SecretRedactionFilter().filter(record)
        assert record.component == "credential_refresher"
        assert not hasattr(record, "access_token")


class TestCreateJsonFormatter:
    """Testes para create_json_formatter."""

    def test_field_constants(self) -> None:
        assert {"asctime", "levelname", "name", "message", "correlation_id", "service"} == (
            REQUIRED_LOG_FIELDS
        )
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_formats_record_with_renamed_fields(self) -> None:
        record = _record()
        record.correlation_id = "abc-123"
        record.service = "agenda_pyloto"
        record.cache_key = "events:month:2024:03"

        payload = json.loads(create_json_formatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "app.services.calendar_gateway"
        assert payload["message"] == "calendar_events_listed"
        assert payload["correlation_id"] == "abc-123"
        assert payload["cache_key"] == "events:month:2024:03"

    def test_configured_handler_never_prints_tokens(self) -> None:
        configure_logging(level="INFO", service_name="redaction_test")
        handler = logging.getLogger().handlers[0]
        record = _record()
        record.access_token = "ya29.secret"

        for filter_ in handler.filters:
            filter_.filter(record)
        output = handler.formatter.format(record)

        assert "ya29.secret" not in output
        assert REDACTED in output
