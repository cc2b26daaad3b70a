"""
Unit tests for main application and health check
"""
import logging

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app


@pytest.mark.asyncio
class TestHealthAPI:
    """Test health check API"""

    async def test_health_check(self):
        """Test health check endpoint returns ok"""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == "xinhua-insight"
        assert "version" in data

    async def test_cors_headers(self):
        """Test CORS preflight is answered"""
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.options(
                "/api/health",
                headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"}
            )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers


@pytest.mark.asyncio
class TestLogsAPI:
    """Test recent log retrieval"""

    async def test_logs_returned(self):
        from src.utils import setup_log_buffer
        setup_log_buffer()
        logging.getLogger("src.test").warning("buffered message")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/logs", params={"count": 10})

        assert response.status_code == 200
        entries = [(e["logger"], e["message"]) for e in response.json()["logs"]]
        assert ("src.test", "buffered message") in entries

    async def test_logs_filtered_by_component(self):
        from src.utils import setup_log_buffer
        setup_log_buffer()
        logging.getLogger("src.test").warning("[BATCH] Analyzing 1/3")
        logging.getLogger("src.test").warning("[PROXY] Relay 1/4 failed")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/logs", params={"component": "batch"})

        data = response.json()
        assert data["logs"]
        assert all(e["component"] == "BATCH" for e in data["logs"])
        assert "PROXY" in data["components"]
