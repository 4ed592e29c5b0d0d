"""Unit tests for RequestLoggingMiddleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from freshspot.infrastructure.observability.logging import get_correlation_id
from freshspot.infrastructure.observability.middleware import RequestLoggingMiddleware


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        """Create a FastAPI app with middleware for testing."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"correlation_id": get_correlation_id()}

        @app.get("/missing")
        async def missing_endpoint():
            raise HTTPException(status_code=404)

        @app.get("/error")
        async def error_endpoint():
            raise ValueError("Test error")

        return app

    @pytest.fixture
    def client(self, app: FastAPI) -> TestClient:
        """Create a test client."""
        return TestClient(app, raise_server_exceptions=False)

    def test_successful_request_logs_start_and_completion(self, client: TestClient):
        """Test one line on the way in, one with status and duration on the way out."""
        with patch(
            "freshspot.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            response = client.get("/test")

        assert response.status_code == 200
        assert mock_logger.info.call_count == 2
        completion = mock_logger.info.call_args_list[1][0][0]
        assert completion.startswith("✓ GET /test → 200")
        assert "ms" in completion

    def test_incoming_correlation_id_is_used_and_echoed(self, client: TestClient):
        """Test X-Correlation-ID flows into the route and back out."""
        response = client.get("/test", headers={"X-Correlation-ID": "from-client"})

        assert response.json() == {"correlation_id": "from-client"}
        assert response.headers["X-Correlation-ID"] == "from-client"

    def test_correlation_id_generated_when_absent(self, client: TestClient):
        """Test every request gets an id even without the header."""
        response = client.get("/test")

        generated = response.headers["X-Correlation-ID"]
        assert generated
        assert response.json() == {"correlation_id": generated}

    def test_error_status_marked(self, client: TestClient):
        """Test 4xx responses get the failure mark."""
        with patch(
            "freshspot.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            response = client.get("/missing")

        assert response.status_code == 404
        assert mock_logger.info.call_args_list[1][0][0].startswith("✗ GET /missing → 404")

    def test_unhandled_exception_logged(self, client: TestClient):
        """Test crashes are logged with the exception and re-raised."""
        with patch(
            "freshspot.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            response = client.get("/error")

        assert response.status_code == 500
        mock_logger.exception.assert_called_once()
        assert mock_logger.exception.call_args[1]["extra"]["error_type"] == "ValueError"
