"""Ports for language resolution and language-change fan-out."""

from __future__ import annotations

from typing import AsyncIterator, Awaitable, Callable, Protocol, runtime_checkable

InvalidationCallback = Callable[[str], Awaitable[None]]


@runtime_checkable
class LanguageProviderPort(Protocol):
    def current_language(self) -> AsyncIterator[str]:
        """Hot stream of language codes, starting with the latest one."""
        ...

    def resolve(self) -> str:
        """Latest resolved language code."""
        ...

    def api_language(self) -> str:
        """Latest language formatted for the API ``language`` parameter."""
        ...


class Registration(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class LanguageChangeCoordinatorPort(Protocol):
    def register(self, callback: InvalidationCallback) -> Registration: ...
