"""Language resolution: persisted choice, then platform default, then English."""

from __future__ import annotations

import asyncio
import contextlib
import locale
from typing import AsyncIterator

import structlog

from moviedb.application.observable import ObservableValue
from moviedb.domain.entities.settings import FALLBACK_LANGUAGE, AppLanguage
from moviedb.domain.ports.settings_store import SettingsStorePort

log = structlog.get_logger(__name__)


def detect_platform_language() -> str | None:
    """Base language code of the process locale, e.g. ``"fr"`` for ``fr_FR``."""
    try:
        tag, _encoding = locale.getlocale()
    except ValueError:
        return None
    if not tag or tag in ("C", "POSIX"):
        return None
    return tag.replace("-", "_").split("_")[0].lower() or None


class LanguageProvider:
    """Publishes the effective language as a hot, replay-latest stream.

    Resolution order: persisted setting > platform default > ``"en"``.
    ``resolve()`` and ``api_language()`` never do I/O; they read the latest
    value seen on the settings stream.
    """

    def __init__(
        self,
        settings: SettingsStorePort,
        *,
        platform_default: str | None = None,
    ) -> None:
        self._settings = settings
        self._platform_default = platform_default
        self._current: ObservableValue[str] = ObservableValue(self._resolve_code(None))
        self._task: asyncio.Task[None] | None = None

    def _resolve_code(self, persisted: str | None) -> str:
        return persisted or self._platform_default or FALLBACK_LANGUAGE

    async def start(self) -> None:
        """Seed from storage and follow later setting changes."""
        if self._task is not None:
            return
        self._publish(await self._settings.get_language())
        self._task = asyncio.create_task(self._follow_settings())
        log.info("language_provider_started", language=self.resolve())

    async def aclose(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _follow_settings(self) -> None:
        async for persisted in self._settings.observe_language():
            self._publish(persisted)

    def _publish(self, persisted: str | None) -> None:
        code = self._resolve_code(persisted)
        if code == self._current.value:
            return
        log.debug("language_resolved", language=code, persisted=persisted)
        self._current.set(code)

    def current_language(self) -> AsyncIterator[str]:
        return self._current.subscribe()

    def resolve(self) -> str:
        return self._current.value

    def api_language(self) -> str:
        """``"en-US"`` style tag for known languages, the raw code otherwise."""
        code = self.resolve()
        language = AppLanguage.from_code(code)
        if language is None:
            return code
        return language.api_tag
