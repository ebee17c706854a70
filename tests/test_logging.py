"""Tests for structured logging configuration."""

import json
import logging
import sys

from heard.app.core.config import Settings
from heard.app.core.logging import (
    ContextFilter,
    JSONFormatter,
    get_log_context,
    get_logger,
    get_logging_config,
    setup_logging,
)


def _record(msg="Test message", level=logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestJSONFormatter:
    """Test JSON formatter for structured logging."""

    def test_basic_json_format(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data
        assert data["source"]["file"] == "test.py"
        assert data["source"]["line"] == 1

    def test_context_fields_are_top_level(self):
        record = _record("Rate limit exceeded for votes")
        record.request_id = "req-1"
        record.client_hash = "3f2a9c"
        record.action_kind = "votes"

        data = json.loads(JSONFormatter().format(record))

        assert data["request_id"] == "req-1"
        assert data["client_hash"] == "3f2a9c"
        assert data["action_kind"] == "votes"
        assert "extra" not in data

    def test_placeholder_context_is_omitted(self):
        record = _record()
        ContextFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))

        assert "request_id" not in data
        assert "client_hash" not in data

    def test_other_fields_go_under_extra(self):
        record = _record("Application startup complete")
        record.rate_limits = {"votes": "50/86400000ms"}
        record.debug_mode = False

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"]["rate_limits"] == {"votes": "50/86400000ms"}
        assert data["extra"]["debug_mode"] is False

    def test_exception_info(self):
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record("Error occurred", logging.ERROR, sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        exception_text = "".join(data["exception"])
        assert "ValueError" in exception_text
        assert "Test error" in exception_text


class TestContextFilter:

    def test_adds_default_fields(self):
        record = _record()

        assert ContextFilter().filter(record) is True
        assert record.request_id == "-"
        assert record.client_hash == "-"

    def test_preserves_existing_values(self):
        record = _record()
        record.request_id = "existing"

        ContextFilter().filter(record)

        assert record.request_id == "existing"


class TestGetLoggingConfig:

    def test_default_text_format(self):
        config = get_logging_config(Settings(_env_file=None, log_format="text"))

        assert "json" not in config["formatters"]
        assert config["handlers"]["console"]["formatter"] == "standard"
        assert "context" in config["handlers"]["console"]["filters"]

    def test_structured_format(self):
        config = get_logging_config(
            Settings(_env_file=None, log_format="structured", log_level="debug")
        )

        assert config["handlers"]["console"]["formatter"] == "structured"
        assert config["handlers"]["console"]["level"] == "DEBUG"
        assert config["loggers"]["heard"]["level"] == "DEBUG"

    def test_json_format(self):
        config = get_logging_config(
            Settings(_env_file=None, log_format="JSON", log_level="WARNING")
        )

        assert "json" in config["formatters"]
        assert config["handlers"]["console"]["formatter"] == "json"


class TestHelpers:

    def test_get_logger_default_name(self):
        assert get_logger().name == "heard"
        assert get_logger("heard.custom").name == "heard.custom"

    def test_log_context_drops_none(self):
        context = get_log_context(request_id="req-1", client_hash=None, action_kind="votes")

        assert context == {"request_id": "req-1", "action_kind": "votes"}


class TestIntegration:

    def test_json_logging_output(self, capsys):
        setup_logging(Settings(_env_file=None, log_format="json", log_level="INFO"))
        logger = get_logger("heard.test")

        logger.info(
            "Integration test",
            extra=get_log_context(client_hash="abc123", action_kind="submissions"),
        )

        data = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert data["logger"] == "heard.test"
        assert data["message"] == "Integration test"
        assert data["client_hash"] == "abc123"
        assert data["action_kind"] == "submissions"
        assert "request_id" not in data
