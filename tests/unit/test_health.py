"""Tests for health check endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from intake import __version__


class TestHealth:
    """Tests for /api/health."""

    def test_health_is_healthy(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["uptime_seconds"] >= 0


class TestReady:
    """Tests for /api/ready."""

    def test_ready_when_database_answers(self, client: TestClient) -> None:
        session = AsyncMock()
        maker = MagicMock(return_value=MagicMock())
        maker.return_value.__aenter__ = AsyncMock(return_value=session)
        maker.return_value.__aexit__ = AsyncMock(return_value=False)

        with patch("intake.routers.health.get_session_maker", return_value=maker):
            response = client.get("/api/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"]["status"] == "healthy"
        session.execute.assert_awaited_once()

    def test_unready_without_database(self, client: TestClient) -> None:
        with patch(
            "intake.routers.health.get_session_maker",
            side_effect=OSError("connection refused to 10.0.0.5"),
        ):
            response = client.get("/api/ready")

        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["database"] == {
            "status": "unhealthy",
            "latency_ms": None,
            "error": "database unavailable",
        }
        assert "10.0.0.5" not in response.text


def test_api_info(client: TestClient) -> None:
    response = client.get("/api/")

    assert response.status_code == 200
    assert response.json()["name"] == "Intake Funnel API"
    assert response.json()["env"] == "test"
