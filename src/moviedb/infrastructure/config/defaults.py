"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "moviedb",
    "environment": "dev",
    "tmdb": {
        "api_key": None,
        "base_url": "https://api.themoviedb.org/3",
    },
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "moviedb-core/0.1.0",
    },
    "locale": {
        "default_language": None,  # Detected from the process locale if unset
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "dir": "./.cache/moviedb",
        "max_concurrent": 10,
    },
}
