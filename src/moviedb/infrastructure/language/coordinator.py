"""Fan-out of language changes to registered cache owners."""

from __future__ import annotations

import asyncio
import contextlib
import itertools
from types import TracebackType

import structlog

from moviedb.domain.ports.language import InvalidationCallback, LanguageProviderPort

log = structlog.get_logger(__name__)


class _Registration:
    def __init__(self, coordinator: LanguageChangeCoordinator, token: int) -> None:
        self._coordinator = coordinator
        self._token = token

    def cancel(self) -> None:
        self._coordinator._unregister(self._token)


class LanguageChangeCoordinator:
    """Invokes every registered callback once per distinct language change.

    The first language observed is the baseline and triggers nothing.
    Repeated values are ignored. Callbacks run concurrently; a failing
    callback is logged and does not affect the others.
    """

    def __init__(self, provider: LanguageProviderPort) -> None:
        self._provider = provider
        self._callbacks: dict[int, InvalidationCallback] = {}
        self._tokens = itertools.count()
        self._last: str | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def listener_count(self) -> int:
        return len(self._callbacks)

    def register(self, callback: InvalidationCallback) -> _Registration:
        token = next(self._tokens)
        self._callbacks[token] = callback
        return _Registration(self, token)

    def _unregister(self, token: int) -> None:
        self._callbacks.pop(token, None)

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def aclose(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def __aenter__(self) -> LanguageChangeCoordinator:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _run(self) -> None:
        async for language in self._provider.current_language():
            await self.notify(language)

    async def notify(self, language: str) -> None:
        """Handle one emitted language value."""
        if self._last is None:
            self._last = language
            log.debug("language_baseline", language=language)
            return
        if language == self._last:
            return

        previous, self._last = self._last, language
        # Snapshot: callbacks registered from now on see the next change.
        callbacks = tuple(self._callbacks.values())
        log.info(
            "language_changed",
            previous=previous,
            language=language,
            listeners=len(callbacks),
        )
        await asyncio.gather(*(self._invoke(cb, language) for cb in callbacks))

    async def _invoke(self, callback: InvalidationCallback, language: str) -> None:
        try:
            await callback(language)
        except Exception:
            log.error(
                "language_listener_failed",
                language=language,
                listener=getattr(callback, "__qualname__", repr(callback)),
                exc_info=True,
            )
