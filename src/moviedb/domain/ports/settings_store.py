"""Port for persisted user settings (language, theme)."""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from moviedb.domain.entities.settings import AppTheme


@runtime_checkable
class SettingsStorePort(Protocol):
    async def get_language(self) -> str | None: ...

    async def set_language(self, code: str) -> None: ...

    async def get_theme(self) -> AppTheme: ...

    async def set_theme(self, theme: AppTheme) -> None: ...

    def observe_language(self) -> AsyncIterator[str | None]:
        """Replay-of-latest stream of the persisted language code."""
        ...
