"""
Tests for health check endpoints.
"""
import logging

from fastapi.testclient import TestClient

from jongque.utils.my_logging import CorrelationIdFilter, correlation_id_var


class TestHealth:
    """Tests for health check endpoints."""

    def test_basic_health(self, client: TestClient):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client: TestClient):
        """Should report the database and skip redis while caching is off."""
        response = client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["database"] == "healthy"
        assert data["redis"] == "disabled"
        assert data["overall"] == "healthy"

    def test_correlation_id_is_echoed(self, client: TestClient):
        response = client.get("/health/", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"


class TestCorrelationLogging:
    """Tests for correlation ids on log records."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("jongque.test", logging.INFO, __file__, 1, "hello", None, None)

    def test_filter_uses_current_correlation_id(self):
        token = correlation_id_var.set("req-42")
        try:
            record = self._record()
            assert CorrelationIdFilter().filter(record) is True
            assert record.correlation_id == "req-42"
        finally:
            correlation_id_var.reset(token)

    def test_filter_outside_request(self):
        record = self._record()
        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"

    def test_context_is_cleared_after_request(self, client: TestClient):
        """Should not leak a request's id into later log lines."""
        client.get("/health/", headers={"X-Correlation-ID": "abc-123"})

        assert correlation_id_var.get() == "-"
