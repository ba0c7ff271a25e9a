"""Test health endpoints"""

from unittest.mock import MagicMock

import redis

from form_builder.main import app
from form_builder.models.database import get_redis


class TestHealthEndpoint:
    """Test health endpoint is accessible"""

    def test_health_endpoint(self, client):
        """Test that the health endpoint is accessible"""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "form-builder"

    def test_detailed_health_endpoint(self, client):
        """Database and Redis checks pass against the test backends"""
        response = client.get("/health/detailed")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks == {"database": "healthy", "redis": "healthy"}

    def test_detailed_health_reports_redis_outage(self, client):
        """An unreachable Redis makes the service unhealthy"""
        broken = MagicMock()
        broken.ping.side_effect = redis.ConnectionError("refused")
        app.dependency_overrides[get_redis] = lambda: broken

        response = client.get("/health/detailed")

        assert response.status_code == 503
        detail = response.json()["detail"]
        assert detail["status"] == "unhealthy"
        assert detail["checks"]["database"] == "healthy"
        assert detail["checks"]["redis"].startswith("unhealthy")
