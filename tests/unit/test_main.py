"""Tests for the FastAPI application factory module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from relationship_api.core.config import Settings
from relationship_api.main import create_app


def _settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite:///:memory:")


class TestCreateApp:
    """Tests for create_app."""

    @pytest.fixture
    def app(self):
        with patch("relationship_api.main.get_settings", return_value=_settings()):
            return create_app()

    def test_app_is_created(self, app) -> None:
        assert app.title == "Relationship API"

    def test_app_has_openapi_schema(self, app) -> None:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/openapi.json")
        assert response.status_code == 200
        paths = response.json()["paths"]
        assert "/api/v1/geocoding/resolve" in paths
        assert "/api/v1/organizations" in paths
        assert "/api/v1/map" in paths
        assert "/api/v1/geography/divisions" in paths

    def test_value_error_handler_registered(self, app) -> None:
        assert app.exception_handlers.get(ValueError) is not None


class TestAppLifespan:
    """Tests for lifespan management."""

    async def test_lifespan_wires_services_and_drains(self) -> None:
        from relationship_api.main import lifespan

        mock_app = MagicMock()

        with (
            patch("relationship_api.main.get_settings", return_value=_settings()),
            patch("relationship_api.main.setup_logging") as mock_setup_logging,
            patch("relationship_api.main.init_engine") as mock_init_engine,
            patch("relationship_api.main.get_session_factory") as mock_factory,
            patch("relationship_api.main.dispose_engine", new_callable=AsyncMock) as mock_dispose,
        ):
            async with lifespan(mock_app):
                mock_setup_logging.assert_called_once()
                mock_init_engine.assert_called_once()
                services = mock_app.state.services
                assert services.task_runner.is_running
                assert services.resolver.cache is services.cache

            mock_factory.assert_called_once()
            mock_dispose.assert_awaited_once()
            assert services.task_runner.is_running is False
