"""Tests for the application factory and CLI argument handling."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from moviedb.domain.entities.settings import AppTheme
from moviedb.domain.exceptions import StorageError
from moviedb.infrastructure.config import AppConfig
from moviedb.interfaces.cli.cli import _cli_overrides, _parse_args, start
from moviedb.interfaces.main import build_app


class TestBuildApp:
    def test_healthz(self) -> None:
        client = TestClient(build_app(AppConfig()))

        resp = client.get("/healthz")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_core_error_is_503(self) -> None:
        app = build_app(AppConfig())
        app.state.settings_store = AsyncMock()
        app.state.settings_store.set_theme = AsyncMock(
            side_effect=StorageError("disk full")
        )
        client = TestClient(app)

        resp = client.put("/settings/theme", json={"theme": AppTheme.DARK.value})

        assert resp.status_code == 503
        assert resp.json() == {
            "error": "StorageError",
            "message": "disk full",
            "retryable": False,
        }

    def test_routes_registered(self) -> None:
        paths = {route.path for route in build_app(AppConfig()).routes}
        assert {
            "/movies/{category}",
            "/movies/details/{movie_id}",
            "/tv/{category}",
            "/search/{search_filter}",
            "/person/{person_id}",
            "/settings",
        } <= paths


class TestCli:
    def test_overrides_only_set_flags(self) -> None:
        args = _parse_args(["--language", "he", "--log-level", "DEBUG"])
        assert _cli_overrides(args) == {"default_language": "he", "log_level": "DEBUG"}

    def test_start_runs_uvicorn_without_log_config(self) -> None:
        with patch("moviedb.interfaces.cli.cli.configure_logging") as configure, patch(
            "moviedb.interfaces.cli.cli.uvicorn.run"
        ) as run:
            start(["--host", "0.0.0.0", "--port", "9000"])

        configure.assert_called_once()
        run.assert_called_once()
        kwargs = run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 9000
        assert kwargs["log_config"] is None


class TestLifespan:
    def test_wires_repositories_around_one_coordinator(self, tmp_path) -> None:
        config = AppConfig(cache_dir=tmp_path / "cache", default_language="ar")
        app = build_app(config)

        with TestClient(app) as client:
            resp = client.get("/settings")

            assert resp.status_code == 200
            assert resp.json()["language"] == "ar"
            assert resp.json()["api_language"] == "ar-SA"
            # movies, tv, search and movie details listen for changes.
            assert app.state.language_coordinator.listener_count == 4

        # Shutdown unregisters every repository.
        assert app.state.language_coordinator.listener_count == 0

    def test_cache_can_be_cleared_end_to_end(self, tmp_path) -> None:
        app = build_app(AppConfig(cache_dir=tmp_path / "cache"))

        with TestClient(app) as client:
            resp = client.delete("/settings/cache")

        assert resp.status_code == 200
        assert resp.json()["status"] == "cleared"
