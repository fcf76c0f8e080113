"""Diskcache adapter - SQLite-based on-device store without daemon process."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import structlog
from diskcache import Cache as DiskCache
from diskcache import Timeout as DiskcacheTimeout

from moviedb.domain.exceptions import StorageError

log = structlog.get_logger(__name__)

T = TypeVar("T")

_STORAGE_EXCEPTIONS = (OSError, sqlite3.Error, DiskcacheTimeout)


class DiskcacheAdapter:
    """Async wrapper for diskcache.Cache (sync-only library).

    - Uses `asyncio.to_thread` for I/O (no blocking of the event loop).
    - Semaphore prevents too many parallel disk writes (SQLite lock contention).
    - Library errors surface as ``StorageError``.
    - Implements context manager (`async with`).

    Args:
        directory: SQLite DB path (default: `./cache`).
        ttl_seconds: Default TTL for `set()`; ``None`` = entries never expire.
        max_concurrent: Max parallel disk ops (default: 10, tunable).
    """

    def __init__(
        self,
        directory: str | Path = "./cache",
        ttl_seconds: int | None = None,
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self._cache: DiskCache | None = None
        self._semaphore = asyncio.Semaphore(max_concurrent)

        log.info(
            "diskcache_adapter_init",
            directory=str(self.directory),
            default_ttl=ttl_seconds,
            max_concurrent=max_concurrent,
        )

    # --- Context Manager ---
    async def __aenter__(self) -> DiskcacheAdapter:
        """Open SQLite cache (lazy, on first access)."""
        if self._cache is None:
            try:
                self._cache = await asyncio.to_thread(DiskCache, str(self.directory))
            except _STORAGE_EXCEPTIONS as e:
                raise StorageError(f"Cannot open cache at {self.directory}: {e}") from e
            log.info("diskcache_opened", path=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Cleanup: close cache, release locks."""
        await self.aclose()

    async def aclose(self) -> None:
        if self._cache is not None:
            await asyncio.to_thread(self._cache.close)
            self._cache = None
            log.info("diskcache_closed", directory=str(self.directory))

    def _require_open(self) -> DiskCache:
        if self._cache is None:
            raise StorageError(
                "Cache not initialized. "
                "Use 'async with cache:' or await cache.__aenter__()"
            )
        return self._cache

    async def _run(self, op: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        async with self._semaphore:
            try:
                return await asyncio.to_thread(fn, *args, **kwargs)
            except _STORAGE_EXCEPTIONS as e:
                log.error("diskcache_io_error", op=op, error=str(e))
                raise StorageError(f"diskcache {op} failed: {e}") from e

    # --- CachePort implementation ---
    async def get(self, key: str) -> Optional[Any]:
        """Read from cache (sync disk I/O -> to_thread)."""
        cache = self._require_open()
        value = await self._run("get", cache.get, key, default=None)
        log.debug("cache_get", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Write to cache with TTL (default: self.default_ttl)."""
        cache = self._require_open()
        expire_time = ttl if ttl is not None else self.default_ttl
        await self._run("set", cache.set, key, value, expire=expire_time)
        log.debug("cache_set", key=key, ttl=expire_time)

    async def delete(self, key: str) -> bool:
        """Delete key. True = successfully deleted."""
        if self._cache is None:
            return False
        deleted = await self._run("delete", self._cache.delete, key)
        log.debug("cache_delete", key=key, deleted=deleted)
        return bool(deleted)

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        if self._cache is None:
            return False
        cache = self._cache
        # diskcache.Cache.__contains__ checks existence + expiry
        return await self._run("exists", cache.__contains__, key)

    async def clear(self) -> None:
        """Delete ALL keys."""
        if self._cache is None:
            return
        await self._run("clear", self._cache.clear)
        log.warning("cache_cleared", directory=str(self.directory))
