"""
Unit Tests for Health Check Endpoints

Tests the /api/v1/health and /api/v1/ready endpoints.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from cardiochat.api.main import app, config


class TestHealthEndpoint:
    """Test suite for health check endpoint."""

    @pytest.fixture
    def client(self):
        """Create test client."""
        return TestClient(app)

    def test_health_returns_correct_structure(self, client):
        """Test that health endpoint returns correct response structure."""
        response = client.get("/api/v1/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert isinstance(data["timestamp"], str)

    def test_root_describes_api(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "CardioChat API"


class TestReadinessEndpoint:
    """Test suite for readiness check endpoint."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    def test_ready_when_orchestrator_loaded(self, client):
        with patch("cardiochat.api.main.app_state", {"orchestrator": MagicMock()}):
            response = client.get("/api/v1/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        assert response.json()["checks"] == {"orchestrator": True}

    def test_not_ready_without_orchestrator(self, client):
        with patch("cardiochat.api.main.app_state", {"orchestrator": None}):
            response = client.get("/api/v1/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"


def test_app_debug_follows_settings():
    assert app.debug is config.debug
