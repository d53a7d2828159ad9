"""Testes para config.logging.

Cobre: configure_logging, log_fallback, CorrelationIdFilter,
SensitiveDataFilter e create_json_formatter.
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
    SensitiveDataFilter,
    configure_logging,
    create_json_formatter,
    log_fallback,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


def _record(msg: str = "payment_created", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="app.use_cases.payments",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestConfigureLogging:
    @pytest.mark.parametrize(
        ("level", "expected"),
        [("INFO", logging.INFO), ("debug", logging.DEBUG), ("Warning", logging.WARNING)],
    )
    def test_level_is_case_insensitive(self, level: str, expected: int) -> None:
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="VERBOSE")

    def test_replaces_handlers_and_installs_filters(self) -> None:
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]

        configure_logging(correlation_id_getter=lambda: "corr-1")

        assert len(root.handlers) == 1
        filters = root.handlers[0].filters
        assert any(isinstance(f, CorrelationIdFilter) for f in filters)
        assert any(isinstance(f, SensitiveDataFilter) for f in filters)

    def test_constants(self) -> None:
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS
        assert DEFAULT_SERVICE_NAME == "axionpay-core"


class TestLogFallback:
    def test_fallback_extra(self) -> None:
        logger = MagicMock(spec=logging.Logger)

        log_fallback(logger, "br_code_merchant", reason="merchant_defaults")

        args, kwargs = logger.info.call_args
        assert args == ("Fallback applied for %s", "br_code_merchant")
        assert kwargs["extra"] == {
            "fallback_used": True,
            "component": "br_code_merchant",
            "reason": "merchant_defaults",
        }

    def test_optional_fields_omitted(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "br_code_merchant", elapsed_ms=1.5)
        extra = logger.info.call_args[1]["extra"]
        assert "reason" not in extra
        assert extra["elapsed_ms"] == 1.5


class TestCorrelationIdFilter:
    def test_injects_correlation_and_service(self) -> None:
        record = _record()
        assert CorrelationIdFilter("axionpay-core", lambda: "corr-123").filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "axionpay-core"

    def test_preserves_explicit_correlation_id(self) -> None:
        record = _record(correlation_id="explicit-id")
        CorrelationIdFilter("svc", lambda: "from-getter").filter(record)
        assert record.correlation_id == "explicit-id"

    def test_empty_without_getter(self) -> None:
        record = _record()
        CorrelationIdFilter("svc").filter(record)
        assert record.correlation_id == ""


class TestSensitiveDataFilter:
    def test_redacts_structured_extra(self) -> None:
        record = _record(
            provider_raw={"id": "ch_1", "card": {"cvv": "123"}},
            error=[{"card_hash": "abc"}],
            transaction_id="tx_1",
        )

        assert SensitiveDataFilter().filter(record) is True

        assert record.provider_raw == {"id": "ch_1", "card": {"cvv": "***"}}
        assert record.error == [{"card_hash": "***"}]
        assert record.transaction_id == "tx_1"

    def test_message_untouched(self) -> None:
        record = _record(msg="cvv=123")
        SensitiveDataFilter().filter(record)
        assert record.getMessage() == "cvv=123"


class TestCreateJsonFormatter:
    def test_required_fields(self) -> None:
        assert frozenset({"asctime", "levelname", "name", "message", "correlation_id", "service"}) == (
            REQUIRED_LOG_FIELDS
        )
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_formats_record_as_json(self) -> None:
        record = _record(correlation_id="abc-123", service="axionpay-core", transaction_id="tx_1")

        output = json.loads(create_json_formatter().format(record))

        assert output["message"] == "payment_created"
        assert output["logger"] == "app.use_cases.payments"
        assert output["level"] == "INFO"
        assert output["correlation_id"] == "abc-123"
        assert output["transaction_id"] == "tx_1"
