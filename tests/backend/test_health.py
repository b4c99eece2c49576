"""
Tests for health check endpoints.

These tests verify:
- Basic health endpoint returns 200
- Readiness check reports record store, MongoDB and Redis status
- Health degrades gracefully when services are down
"""

from unittest.mock import AsyncMock, patch


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_endpoint_returns_200_when_api_running(self, client):
        """Basic health check should return 200 if API is up."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_endpoint_lists_docs(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"


class TestReadinessEndpoint:
    """Tests for GET /health/ready endpoint."""

    def test_readiness_healthy_when_all_dependencies_up(self, client, healthy_connections):
        response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["record_store"] == "healthy"
        assert data["checks"]["mongodb"] == "healthy"
        assert data["checks"]["redis"] == "healthy"
        assert data["cache"]["services"]["keys"] == 1

    def test_readiness_reports_mongodb_unhealthy_when_connection_fails(self, client, healthy_connections):
        with patch("vault.routers.health.ping_mongo", AsyncMock(side_effect=Exception("Connection refused"))):
            response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert "unhealthy" in data["checks"]["mongodb"]
        assert data["checks"]["redis"] == "healthy"

    def test_readiness_reports_record_store_unhealthy(self, client, app, healthy_connections):
        async def broken():
            raise Exception("sheet offline")

        app.state.directory.store.fetch_services = broken

        data = client.get("/health/ready").json()

        assert data["status"] == "degraded"
        assert "sheet offline" in data["checks"]["record_store"]


class TestConfigEndpoint:

    def test_skip_auth_reported_off_by_default(self, client):
        assert client.get("/config").json() == {"skip_auth": False}
