"""Pagination cursor persistence backed by CachePort (diskcache)."""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict

import structlog

from moviedb.domain.entities.categories import ContentCategory
from moviedb.domain.entities.pagination import PaginationCursor
from moviedb.domain.exceptions import StorageError
from moviedb.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)


def _cursor_key(category_key: str) -> str:
    return f"cursor:{category_key}"


def _serialize_cursor(cursor: PaginationCursor) -> str:
    return json.dumps(
        {
            "current_page": cursor.current_page,
            "total_pages": cursor.total_pages,
            "max_page": cursor.max_page,
        }
    )


def _deserialize_cursor(category_key: str, data: str) -> PaginationCursor:
    d = json.loads(data)
    current_page = int(d["current_page"])
    return PaginationCursor(
        category_key=category_key,
        current_page=current_page,
        total_pages=int(d["total_pages"]),
        max_page=int(d.get("max_page", current_page)),
    )


class CachePaginationStateStore:
    """Stores one cursor per category via CachePort.

    Key schema:
    - ``cursor:{category_key}`` → JSON ``{current_page, total_pages, max_page}``

    Pagination state is best-effort: storage failures are logged and
    swallowed, reads fall back to the zero-state.
    """

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get_cursor(self, category: ContentCategory) -> PaginationCursor:
        key = _cursor_key(category.key)
        try:
            data = await self.cache.get(key)
        except StorageError as e:
            log.warning("cursor_read_failed", category=category.key, error=str(e))
            return PaginationCursor.zero(category.key)

        if data is None:
            return PaginationCursor.zero(category.key)

        try:
            return _deserialize_cursor(category.key, data)
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
            log.error("cursor_deserialize_error", key=key, error=str(e))
            return PaginationCursor.zero(category.key)

    async def advance(
        self, category: ContentCategory, new_page: int, total_pages: int
    ) -> None:
        if new_page < 1:
            raise ValueError(f"new_page must be >= 1, got {new_page}")
        if total_pages < 0:
            raise ValueError(f"total_pages must be >= 0, got {total_pages}")

        if total_pages and new_page > total_pages:
            # The API shrank its page count; keep current_page <= total_pages.
            log.warning(
                "cursor_total_pages_below_page",
                category=category.key,
                page=new_page,
                total_pages=total_pages,
            )
            total_pages = new_page

        async with self._locks[category.key]:
            previous = await self.get_cursor(category)
            cursor = PaginationCursor(
                category_key=category.key,
                current_page=new_page,
                total_pages=total_pages,
                max_page=max(previous.max_page, new_page),
            )
            try:
                await self.cache.set(
                    _cursor_key(category.key), _serialize_cursor(cursor), ttl=None
                )
            except StorageError as e:
                log.warning("cursor_write_failed", category=category.key, error=str(e))
                return

        log.debug(
            "cursor_advanced",
            category=category.key,
            page=new_page,
            total_pages=total_pages,
            max_page=cursor.max_page,
        )

    async def reset(self, category: ContentCategory) -> None:
        async with self._locks[category.key]:
            try:
                await self.cache.delete(_cursor_key(category.key))
            except StorageError as e:
                log.warning("cursor_reset_failed", category=category.key, error=str(e))
                return
        log.debug("cursor_reset", category=category.key)
