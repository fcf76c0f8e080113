"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from moviedb.infrastructure.config import AppConfig, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MOVIEDB_TMDB_API_KEY",
        "MOVIEDB_TMDB_BASE_URL",
        "MOVIEDB_LOG_LEVEL",
        "MOVIEDB_LOG_FORMAT",
        "MOVIEDB_DEFAULT_LANGUAGE",
        "MOVIEDB_ENVIRONMENT",
        "MOVIEDB_CACHE_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config()
        assert config.tmdb_api_key is None
        assert config.tmdb_base_url == "https://api.themoviedb.org/3"
        assert config.log_level == "INFO"
        assert config.log_format == "console"
        assert config.default_language is None

    def test_yaml_layer(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "tmdb:\n  api_key: yaml-key\nlocale:\n  default_language: he\n",
            encoding="utf-8",
        )

        config = load_config(config_path=path)

        assert config.tmdb_api_key == "yaml-key"
        assert config.default_language == "he"

    def test_env_overrides_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: DEBUG\n", encoding="utf-8")
        monkeypatch.setenv("MOVIEDB_LOG_LEVEL", "WARNING")

        assert load_config(config_path=path).log_level == "WARNING"

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MOVIEDB_DEFAULT_LANGUAGE", "ar")

        config = load_config(cli_overrides={"default_language": "hi"})

        assert config.default_language == "hi"

    def test_prod_defaults_to_json_logs(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MOVIEDB_ENVIRONMENT", "prod")
        assert load_config().log_format == "json"

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nope.yaml")

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(config_path=path)


class TestAppConfig:
    def test_blank_language_is_none(self) -> None:
        assert AppConfig(default_language="  ").default_language is None

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(http_timeout_seconds=0)

    def test_sectioned_dump_masks_key(self) -> None:
        dumped = AppConfig(tmdb_api_key="secret").to_sectioned_dict()
        assert dumped["tmdb"]["api_key"] == "***"
        assert dumped["cache"]["max_concurrent"] == 10
