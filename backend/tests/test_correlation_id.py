# backend/tests/test_correlation_id.py
"""
Tests for correlation ID middleware and context management.
"""

import logging

from portfolio_tracker.utils.context import clear_correlation_id, get_correlation_id, set_correlation_id
from portfolio_tracker.utils.logging import NO_CORRELATION_ID, CorrelationIdFilter


class TestCorrelationIdContext:
    """Tests for correlation ID context functions."""

    def test_get_returns_none_when_not_set(self):
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_and_get_correlation_id(self):
        set_correlation_id("test-correlation-123")
        assert get_correlation_id() == "test-correlation-123"
        clear_correlation_id()

    def test_filter_stamps_records(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        set_correlation_id("trace-1")
        CorrelationIdFilter().filter(record)
        clear_correlation_id()

        assert record.correlation_id == "trace-1"

    def test_filter_without_request(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

        clear_correlation_id()
        CorrelationIdFilter().filter(record)

        assert record.correlation_id == NO_CORRELATION_ID


class TestCorrelationIdMiddleware:
    """Tests for correlation ID middleware."""

    def test_generates_correlation_id_when_not_provided(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        correlation_id = response.headers["X-Correlation-ID"]
        assert len(correlation_id) == 36  # UUID length
        assert correlation_id.count("-") == 4

    def test_uses_provided_correlation_id(self, client):
        response = client.get("/health/live", headers={"X-Correlation-ID": "my-trace-123"})

        assert response.headers["X-Correlation-ID"] == "my-trace-123"

    def test_uses_request_id_header_as_fallback(self, client):
        response = client.get("/health/live", headers={"X-Request-ID": "my-request-456"})

        assert response.headers["X-Correlation-ID"] == "my-request-456"

    def test_prefers_correlation_id_over_request_id(self, client):
        response = client.get(
            "/health/live",
            headers={"X-Correlation-ID": "correlation-123", "X-Request-ID": "request-456"},
        )

        assert response.headers["X-Correlation-ID"] == "correlation-123"

    def test_error_responses_carry_the_id(self, client):
        response = client.get("/portfolios/999", headers={"X-Correlation-ID": "trace-404"})

        assert response.status_code == 404
        assert response.headers["X-Correlation-ID"] == "trace-404"

    def test_different_requests_get_different_ids(self, client):
        id1 = client.get("/health/live").headers["X-Correlation-ID"]
        id2 = client.get("/health/live").headers["X-Correlation-ID"]

        assert id1 != id2
