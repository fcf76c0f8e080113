"""User settings persistence backed by CachePort (diskcache)."""

from __future__ import annotations

from typing import AsyncIterator

import structlog

from moviedb.application.observable import ObservableValue
from moviedb.domain.entities.settings import AppTheme
from moviedb.domain.exceptions import StorageError
from moviedb.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

_LANGUAGE_KEY: str = "settings:language"
_THEME_KEY: str = "settings:theme"


class CacheSettingsStore:
    """Persists the language code and theme.

    The language is mirrored into an in-memory cell so observers get the
    latest value immediately. Call :meth:`load` once at startup.
    """

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache
        self._language: ObservableValue[str | None] = ObservableValue(None)

    async def load(self) -> None:
        """Prime the language cell from storage."""
        self._language.set(await self.get_language())

    async def get_language(self) -> str | None:
        try:
            value = await self.cache.get(_LANGUAGE_KEY)
        except StorageError as e:
            log.warning("settings_read_failed", key=_LANGUAGE_KEY, error=str(e))
            return self._language.value
        return value or None

    async def set_language(self, code: str) -> None:
        code = code.strip()
        if not code:
            raise ValueError("language code must not be empty")
        try:
            await self.cache.set(_LANGUAGE_KEY, code, ttl=None)
        except StorageError as e:
            # Keep the in-memory value so the session still switches.
            log.warning("settings_write_failed", key=_LANGUAGE_KEY, error=str(e))
        self._language.set(code)
        log.info("language_setting_changed", language=code)

    async def get_theme(self) -> AppTheme:
        try:
            value = await self.cache.get(_THEME_KEY)
        except StorageError as e:
            log.warning("settings_read_failed", key=_THEME_KEY, error=str(e))
            return AppTheme.SYSTEM
        return AppTheme.from_value(value)

    async def set_theme(self, theme: AppTheme) -> None:
        try:
            await self.cache.set(_THEME_KEY, theme.value, ttl=None)
        except StorageError as e:
            log.warning("settings_write_failed", key=_THEME_KEY, error=str(e))
            raise
        log.info("theme_setting_changed", theme=theme.value)

    def observe_language(self) -> AsyncIterator[str | None]:
        return self._language.subscribe()
