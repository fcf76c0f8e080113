"""Offline-first read helper for single-object lookups."""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from moviedb.domain.entities.result import AppResult, Success

T = TypeVar("T")


async def offline_first(
    read_cache: Callable[[], Awaitable[T | None]],
    fetch: Callable[[], Awaitable[AppResult[T]]],
    write_cache: Callable[[T], Awaitable[None]],
) -> AppResult[T]:
    """Serve from cache when present; otherwise fetch and store on success.

    The network result is returned as-is, success or failure.
    """
    cached = await read_cache()
    if cached is not None:
        return Success(cached)

    result = await fetch()
    if isinstance(result, Success):
        await write_cache(result.data)
    return result
