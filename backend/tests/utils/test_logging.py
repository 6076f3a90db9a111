# backend/tests/utils/test_logging.py
"""
Tests for logging configuration.
"""

import json
import logging

import pytest

from portfolio_tracker.utils.logging import JsonFormatter, _get_log_level


class TestLogLevel:

    def test_known_levels(self):
        assert _get_log_level("debug") == logging.DEBUG
        assert _get_log_level(" WARN ") == logging.WARNING

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            _get_log_level("LOUD")


class TestJsonFormatter:

    def test_one_object_per_record(self):
        record = logging.LogRecord(
            "portfolio_tracker.test", logging.INFO, __file__, 1, "Portfolio %s valued", (7,), None
        )
        record.correlation_id = "trace-7"
        record.portfolio_id = 7

        entry = json.loads(JsonFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "portfolio_tracker.test"
        assert entry["message"] == "Portfolio 7 valued"
        assert entry["correlation_id"] == "trace-7"
        assert entry["extra"] == {"portfolio_id": 7}
