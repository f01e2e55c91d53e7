"""Tests for hubsummary.logging module."""

from __future__ import annotations

import io
import json
import logging
import sys

from hubsummary.logging import LOGGER_NAME, JSONFormatter, configure_logging


def make_record(msg: str, level: int = logging.INFO, **attrs) -> logging.LogRecord:
    record = logging.LogRecord(
        name="hubsummary.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_format(self):
        parsed = json.loads(JSONFormatter().format(make_record("hello world")))
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "hubsummary.test"
        assert parsed["message"] == "hello world"
        assert "timestamp" in parsed

    def test_format_with_data(self):
        record = make_record("with data", logging.DEBUG, hubsummary_data={"chars": 120, "model": "m"})
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["data"] == {"chars": 120, "model": "m"}

    def test_format_without_data(self):
        parsed = json.loads(JSONFormatter().format(make_record("no data", logging.WARNING)))
        assert "data" not in parsed

    def test_format_with_exception(self):
        try:
            raise ValueError("bad payload")
        except ValueError:
            record = make_record("failed", logging.ERROR, exc_info=sys.exc_info())
        parsed = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad payload" in parsed["exc_info"]


class TestConfigureLogging:
    """Tests for configure_logging."""

    def teardown_method(self):
        logger = logging.getLogger(LOGGER_NAME)
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)

    def test_default_configuration(self):
        configure_logging(logging.DEBUG)
        logger = logging.getLogger(LOGGER_NAME)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_level_name(self):
        configure_logging("warning")
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_json_format(self):
        configure_logging(logging.INFO, json_format=True)
        logger = logging.getLogger(LOGGER_NAME)
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_custom_handler(self):
        handler = logging.StreamHandler()
        configure_logging(logging.WARNING, handler=handler)
        assert handler in logging.getLogger(LOGGER_NAME).handlers

    def test_no_duplicate_handlers(self):
        """Calling configure_logging twice with same handler shouldn't duplicate."""
        handler = logging.StreamHandler()
        configure_logging(logging.DEBUG, handler=handler)
        configure_logging(logging.DEBUG, handler=handler)
        count = sum(1 for h in logging.getLogger(LOGGER_NAME).handlers if h is handler)
        assert count == 1

    def test_default_handler_replaced(self):
        """Repeated default configuration keeps a single stream handler."""
        configure_logging(logging.INFO)
        configure_logging(logging.DEBUG, json_format=True)
        handlers = logging.getLogger(LOGGER_NAME).handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)

    def test_child_loggers_emit_json(self):
        stream = io.StringIO()
        configure_logging(logging.INFO, json_format=True, handler=logging.StreamHandler(stream))
        logging.getLogger("hubsummary.router").info("Extracted %d chars", 42)
        parsed = json.loads(stream.getvalue().strip())
        assert parsed["logger"] == "hubsummary.router"
        assert parsed["message"] == "Extracted 42 chars"
