"""Tests for logging configuration and formatters."""

import io
import json
import logging
import sys

import pytest

from archive_normalizer.logging import ComponentLoggerAdapter, get_logger
from archive_normalizer.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from archive_normalizer.logging.context import log_context

KEY_VALUE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def make_record(message="Converted document", level=logging.INFO, extra=None):
    """Build a LogRecord the way a logger call would."""
    return logging.getLogger("archive_normalizer.test").makeRecord(
        "archive_normalizer.test", level, "service.py", 1, message, (), None, extra=extra
    )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_mandatory_fields(self):
        log_obj = json.loads(JSONFormatter().format(make_record()))

        assert log_obj["level"] == "INFO"
        assert log_obj["message"] == "Converted document"
        assert log_obj["logger"] == "archive_normalizer.test"
        assert "timestamp" in log_obj

    def test_extra_fields(self):
        record = make_record(
            extra={"event": "normalization.document.normalized", "output_length": 42, "used_fallback": False}
        )

        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["event"] == "normalization.document.normalized"
        assert log_obj["output_length"] == 42
        assert log_obj["used_fallback"] is False

    def test_non_ascii_kept_readable(self):
        output = JSONFormatter().format(make_record("Artículo sin página"))
        assert "Artículo sin página" in output

    def test_unserializable_values_become_strings(self):
        record = make_record(extra={"source": ValueError("bad")})
        assert json.loads(JSONFormatter().format(record))["source"] == "bad"

    def test_exception_included(self):
        try:
            raise ValueError("RTF parser failed")
        except ValueError:
            record = logging.getLogger("t").makeRecord(
                "t", logging.ERROR, "rtf.py", 1, "Fallback", (), sys.exc_info()
            )

        log_obj = json.loads(JSONFormatter().format(record))

        assert "RTF parser failed" in log_obj["exc_info"]

    def test_timestamp_format(self):
        """ISO-8601 with milliseconds and a Z suffix: YYYY-MM-DDTHH:MM:SS.sssZ."""
        timestamp = json.loads(JSONFormatter().format(make_record()))["timestamp"]

        assert timestamp.endswith("Z")
        assert "T" in timestamp
        assert len(timestamp) == 24

    def test_standard_attributes_not_duplicated(self):
        log_obj = json.loads(JSONFormatter().format(make_record(extra={"event": "x"})))

        assert "name" not in log_obj
        assert "levelname" not in log_obj
        assert "msg" not in log_obj


class TestKeyValueFormatter:
    """Tests for KeyValueFormatter."""

    def test_basic_line(self):
        output = KeyValueFormatter(KEY_VALUE_FORMAT).format(make_record())

        assert "[INFO]" in output
        assert "archive_normalizer.test: Converted document" in output

    def test_extras_sorted_as_key_value(self):
        record = make_record(extra={"event": "rtf.converted", "source_length": 120})

        output = KeyValueFormatter(KEY_VALUE_FORMAT).format(record)

        assert output.endswith("event=rtf.converted source_length=120")

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, "true"),
            (None, "null"),
            ("", '""'),
            ("Sin contenido", '"Sin contenido"'),
            ("a=b", '"a=b"'),
            ("cp1252", "cp1252"),
            (7, "7"),
        ],
    )
    def test_value_formatting(self, value, expected):
        record = make_record(extra={"value": value})
        assert KeyValueFormatter(KEY_VALUE_FORMAT).format(record).endswith(f"value={expected}")

    def test_service_and_environment_hidden(self):
        record = make_record()
        ContextualFilter(environment="production").filter(record)

        output = KeyValueFormatter(KEY_VALUE_FORMAT).format(record)

        assert "service=" not in output
        assert "environment=" not in output


class TestContextualFilter:
    """Tests for ContextualFilter."""

    def test_adds_static_fields(self):
        record = make_record()

        assert ContextualFilter(environment="staging").filter(record) is True
        assert record.service == SERVICE_NAME
        assert record.environment == "staging"

    def test_adds_context_fields(self):
        record = make_record()
        with log_context(document_id=2548, batch_id="hemeroteca-1878"):
            ContextualFilter().filter(record)

        assert record.document_id == 2548
        assert record.batch_id == "hemeroteca-1878"

    def test_explicit_extra_wins_over_context(self):
        record = make_record(extra={"document_id": 1})
        with log_context(document_id=2548):
            ContextualFilter().filter(record)

        assert record.document_id == 1

    def test_full_pipeline(self):
        record = make_record(extra={"event": "normalization.html.fallback"})
        with log_context(document_id=2548):
            ContextualFilter(environment="test").filter(record)

        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["service"] == "archive-normalizer"
        assert log_obj["environment"] == "test"
        assert log_obj["document_id"] == 2548
        assert log_obj["event"] == "normalization.html.fallback"


class TestComponentLogger:
    """Tests for get_logger and the component adapter."""

    def test_plain_logger_without_component(self):
        assert isinstance(get_logger("archive_normalizer.x"), logging.Logger)

    def test_component_added(self):
        adapter = get_logger("archive_normalizer.x", component="rtf")
        _, kwargs = adapter.process("msg", {"extra": {"event": "rtf.converted"}})

        assert isinstance(adapter, ComponentLoggerAdapter)
        assert kwargs["extra"] == {"component": "rtf", "event": "rtf.converted"}

    def test_call_site_component_wins(self):
        adapter = get_logger("archive_normalizer.x", component="rtf")
        _, kwargs = adapter.process("msg", {"extra": {"component": "cli"}})

        assert kwargs["extra"]["component"] == "cli"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_invalid_level(self, restore_root_logger):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="LOUD")

    def test_invalid_format(self, restore_root_logger):
        with pytest.raises(ValueError, match="Invalid log format"):
            configure_logging(format_type="xml")

    def test_json_format(self, restore_root_logger):
        configure_logging(level="DEBUG", format_type="json", environment="test")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)

    def test_key_value_format(self, restore_root_logger):
        configure_logging(level="warning", format_type="key-value")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert isinstance(root_logger.handlers[0].formatter, KeyValueFormatter)

    def test_handler_writes_to_stderr(self, restore_root_logger, monkeypatch):
        """Logs stay off stdout, which carries converted documents."""
        fake_stderr = io.StringIO()
        monkeypatch.setattr(sys, "stderr", fake_stderr)

        configure_logging(level="INFO", format_type="json", environment="test")
        with log_context(document_id="a.rtf"):
            logging.getLogger("archive_normalizer.test").info("Converted", extra={"event": "x"})

        log_obj = json.loads(fake_stderr.getvalue().strip().splitlines()[-1])
        assert log_obj["document_id"] == "a.rtf"
        assert log_obj["environment"] == "test"
