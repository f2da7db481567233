from unittest.mock import patch
from fastapi.testclient import TestClient

from app.main import app


class TestAppConfiguration:
    """Test FastAPI app configuration."""

    def test_app_title(self):
        assert app.title == "Shepherd Volunteer API"

    def test_cors_middleware_configured(self):
        middleware_types = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_types

    def test_routes_registered(self):
        paths = {route.path for route in app.routes}
        assert "/opportunities/" in paths
        assert "/opportunities/{opportunity_id}/signup" in paths
        assert "/opportunities/{opportunity_id}/signups/{signup_id}" in paths
        assert "/volunteers/{volunteer_id}" in paths


class TestHealthEndpoint:
    def test_health_endpoint(self):
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestLifespan:
    @patch("app.main.setup_telemetry")
    @patch("app.main.create_db_and_tables")
    @patch("app.main.setup_logging")
    def test_startup_runs_setup_in_order(
        self, mock_logging, mock_create_tables, mock_telemetry
    ):
        with TestClient(app):
            pass

        mock_logging.assert_called_once()
        mock_create_tables.assert_called_once()
        mock_telemetry.assert_called_once_with(app)
