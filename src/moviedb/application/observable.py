"""Replay-of-latest value cell.

Every subscriber first receives the current value, then every later
``set()`` in order. Subscribers get their own unbounded queue, so a slow
consumer never drops values and never blocks the publisher. The queue
lives until the iterator is closed (``aclose()``, or finalisation by the
event loop), so long-lived subscribers must keep reading or close.

Usage::

    cell = ObservableValue("en")

    async for value in cell.subscribe():
        ...

    cell.set("fr")
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Generic, TypeVar

T = TypeVar("T")


class ObservableValue(Generic[T]):
    """Publish/subscribe value cell with replay of the latest value."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: set[asyncio.Queue[T]] = set()

    @property
    def value(self) -> T:
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def set(self, value: T) -> None:
        self._value = value
        # Copy: subscribers may detach while we iterate.
        for queue in tuple(self._subscribers):
            queue.put_nowait(value)

    async def subscribe(self) -> AsyncIterator[T]:
        queue: asyncio.Queue[T] = asyncio.Queue()
        queue.put_nowait(self._value)
        self._subscribers.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._subscribers.discard(queue)
