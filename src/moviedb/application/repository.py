"""Generic paged repository: cache-first page loading, invalidation on
language change, per-category load state.

One instance serves one content family. Loads for the same category are
serialised by a per-category lock: a second caller waits, then re-checks
the cursor, so a duplicate request for an already fetched page is served
from the cache. Different categories never block each other.

Remote failures are returned as ``Failure`` and leave cache and cursor
untouched. Storage failures are absorbed: a failed read is a cache miss,
a failed write leaves the cursor where it was.

Cancelling a load while it waits on the network leaves no trace. Once the
page has arrived, storing it and advancing the cursor run as one shielded
step; a cancellation that lands during that step waits for it to finish.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections import defaultdict
from typing import Any, AsyncIterator, Generic, Sequence, TypeVar

import structlog

from moviedb.application.families import ContentFamily
from moviedb.application.observable import ObservableValue
from moviedb.domain.entities.categories import ContentCategory, category_from_key
from moviedb.domain.entities.pagination import (
    CachedEntity,
    CategoryState,
    LoadStatus,
    PageLoad,
    PaginationCursor,
)
from moviedb.domain.entities.result import AppResult, Failure, Success
from moviedb.domain.exceptions import DeserializationError, StorageError
from moviedb.domain.ports.language import (
    LanguageChangeCoordinatorPort,
    LanguageProviderPort,
)
from moviedb.domain.ports.local_cache import LocalDataSourcePort
from moviedb.domain.ports.pagination_store import PaginationStateStorePort
from moviedb.domain.ports.remote import RemoteDataSourcePort

log = structlog.get_logger(__name__)

E = TypeVar("E")


class PagedRepository(Generic[E]):
    def __init__(
        self,
        family: ContentFamily[E],
        *,
        remote: RemoteDataSourcePort,
        local: LocalDataSourcePort,
        pagination: PaginationStateStorePort,
        language: LanguageProviderPort,
        coordinator: LanguageChangeCoordinatorPort,
    ) -> None:
        self._family = family
        self._remote = remote
        self._local = local
        self._pagination = pagination
        self._language = language
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._states: dict[str, ObservableValue[CategoryState[E]]] = {}
        self._known: dict[str, ContentCategory] = {
            c.key: c for c in family.categories
        }
        self._registration = coordinator.register(self.on_language_changed)

    @property
    def family(self) -> ContentFamily[E]:
        return self._family

    def close(self) -> None:
        """Stop receiving language-change notifications."""
        self._registration.cancel()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def _state(self, category: ContentCategory) -> ObservableValue[CategoryState[E]]:
        cell = self._states.get(category.key)
        if cell is None:
            cell = ObservableValue(CategoryState(category_key=category.key))
            self._states[category.key] = cell
        return cell

    def _publish(self, category: ContentCategory, **changes: Any) -> None:
        cell = self._state(category)
        cell.set(dataclasses.replace(cell.value, **changes))

    def observe(self, category: ContentCategory) -> AsyncIterator[CategoryState[E]]:
        """Stream of state snapshots; the category is visible while observed."""
        self._track(category)
        return self._state(category).subscribe()

    def state(self, category: ContentCategory) -> CategoryState[E]:
        return self._state(category).value

    def is_visible(self, category: ContentCategory) -> bool:
        cell = self._states.get(category.key)
        return cell is not None and cell.subscriber_count > 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_page(
        self, category: ContentCategory, requested_page: int
    ) -> AppResult[PageLoad[E]]:
        """Return pages ``1..requested_page``, fetching only what is missing."""
        if requested_page < 1:
            raise ValueError(f"requested_page must be >= 1, got {requested_page}")
        self._track(category)
        async with self._locks[category.key]:
            return await self._load_locked(category, requested_page)

    async def load_next_page(self, category: ContentCategory) -> AppResult[PageLoad[E]]:
        cursor = await self._pagination.get_cursor(category)
        return await self.load_page(category, cursor.max_page + 1)

    async def refresh(self, category: ContentCategory) -> AppResult[PageLoad[E]]:
        """Drop the category's cache and cursor, then load page 1 again."""
        self._track(category)
        async with self._locks[category.key]:
            await self._invalidate(category)
            log.info(
                "category_refresh", family=self._family.name, category=category.key
            )
            return await self._load_locked(category, 1)

    async def cached_items(self, category: ContentCategory) -> list[E]:
        entities = await self._read_cache(category)
        return self._decode(entities or [])

    async def _load_locked(
        self, category: ContentCategory, page: int
    ) -> AppResult[PageLoad[E]]:
        cursor = await self._pagination.get_cursor(category)

        if cursor.is_exhausted_at(page):
            log.debug(
                "page_beyond_last",
                category=category.key,
                page=page,
                total_pages=cursor.total_pages,
            )
            items = await self.cached_items(category)
            return Success(
                PageLoad(
                    category_key=category.key,
                    page=page,
                    total_pages=cursor.total_pages,
                    items=items,
                    new_items=[],
                    from_cache=True,
                    exhausted=True,
                )
            )

        if page <= cursor.max_page:
            cached = await self._read_cache(category)
            if cached:
                log.debug("page_cache_hit", category=category.key, page=page)
                return Success(self._page_from_cache(category, page, cursor, cached))

        return await self._fetch(category, page)

    def _page_from_cache(
        self,
        category: ContentCategory,
        page: int,
        cursor: PaginationCursor,
        cached: Sequence[CachedEntity],
    ) -> PageLoad[E]:
        upto = [e for e in cached if e.page <= page]
        return PageLoad(
            category_key=category.key,
            page=page,
            total_pages=cursor.total_pages,
            items=self._decode(upto),
            new_items=self._decode([e for e in upto if e.page == page]),
            from_cache=True,
            exhausted=page >= cursor.total_pages,
        )

    async def _fetch(
        self, category: ContentCategory, page: int
    ) -> AppResult[PageLoad[E]]:
        previous = self._state(category).value
        loading = LoadStatus.LOADING if page == 1 else LoadStatus.LOADING_MORE
        self._publish(category, status=loading, error=None)

        language = self._language.api_language()
        try:
            result = await self._remote.fetch(
                category.api_path, page, language, **category.params
            )
        except asyncio.CancelledError:
            self._state(category).set(previous)
            raise

        if isinstance(result, Failure):
            log.warning(
                "page_load_failed",
                family=self._family.name,
                category=category.key,
                page=page,
                error=result.kind,
                message=result.message,
            )
            self._publish(category, status=LoadStatus.ERROR, error=result.error)
            return result

        raw_page = result.data
        try:
            parsed = self._parse(category, raw_page.results)
        except DeserializationError as e:
            log.warning(
                "page_parse_failed", category=category.key, page=page, error=e.message
            )
            self._publish(category, status=LoadStatus.ERROR, error=e)
            return Failure(e)

        commit = asyncio.ensure_future(
            self._commit(category, page, parsed, raw_page.total_pages)
        )
        try:
            items = await asyncio.shield(commit)
        except asyncio.CancelledError:
            # Cache and cursor move together: finish the write, then give up.
            await commit
            self._state(category).set(previous)
            raise

        cursor = await self._pagination.get_cursor(category)
        self._publish(category, status=LoadStatus.LOADED, items=items, cursor=cursor)
        log.info(
            "page_loaded",
            family=self._family.name,
            category=category.key,
            page=page,
            total_pages=raw_page.total_pages,
            language=language,
            count=len(parsed),
        )
        return Success(
            PageLoad(
                category_key=category.key,
                page=page,
                total_pages=raw_page.total_pages,
                items=items,
                new_items=parsed,
                from_cache=False,
                exhausted=page >= raw_page.total_pages,
            )
        )

    async def _commit(
        self, category: ContentCategory, page: int, parsed: list[E], total_pages: int
    ) -> list[E]:
        """Store a fetched page and advance the cursor; returns pages 1..page.

        If the entities cannot be stored the cursor stays put and only the
        fetched page is returned.
        """
        if not await self._write_cache(category, page, parsed):
            return parsed
        await self._pagination.advance(category, page, total_pages)
        cached = await self._read_cache(category)
        return self._decode([e for e in cached or [] if e.page <= page])

    def _parse(
        self, category: ContentCategory, results: list[dict[str, Any]]
    ) -> list[E]:
        parsed: list[E] = []
        for raw in results:
            try:
                entity = self._family.parse(raw, category)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise DeserializationError(f"Malformed result: {e}") from e
            if entity is not None:
                parsed.append(entity)
        return parsed

    def _decode(self, entities: Sequence[CachedEntity]) -> list[E]:
        decoded: list[E] = []
        for entity in entities:
            try:
                decoded.append(self._family.from_payload(entity.payload))
            except (KeyError, TypeError, ValueError) as e:
                log.error(
                    "cached_entity_decode_error",
                    category=entity.category_key,
                    id=entity.id,
                    error=str(e),
                )
        return decoded

    # ------------------------------------------------------------------
    # Storage (errors absorbed)
    # ------------------------------------------------------------------

    async def _read_cache(
        self, category: ContentCategory
    ) -> list[CachedEntity] | None:
        try:
            return await self._local.get_all(category)
        except StorageError as e:
            log.warning("cache_read_failed", category=category.key, error=e.message)
            return None

    async def _write_cache(
        self, category: ContentCategory, page: int, parsed: list[E]
    ) -> bool:
        records = [
            (self._family.entity_id(e), self._family.to_payload(e)) for e in parsed
        ]
        try:
            await self._local.upsert(category, page, records)
        except StorageError as e:
            log.warning(
                "cache_write_failed", category=category.key, page=page, error=e.message
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def _track(self, category: ContentCategory) -> None:
        self._known.setdefault(category.key, category)

    async def _owned_categories(self) -> list[ContentCategory]:
        try:
            stored = await self._local.category_keys()
        except StorageError as e:
            log.warning("cache_categories_read_failed", error=e.message)
            stored = []
        for key in stored:
            if key in self._known or not self._family.owns(key):
                continue
            category = category_from_key(key)
            if category is not None:
                self._known[key] = category
        return list(self._known.values())

    async def _invalidate(self, category: ContentCategory) -> None:
        """Clear cache and cursor of *category*. Caller holds its lock."""
        try:
            await self._local.clear(category)
        except StorageError as e:
            log.warning("cache_clear_failed", category=category.key, error=e.message)
        await self._pagination.reset(category)
        self._publish(
            category, status=LoadStatus.EMPTY, items=[], cursor=None, error=None
        )

    async def invalidate_all(self) -> list[ContentCategory]:
        """Clear cache and cursor of every owned category; returns them."""
        categories = await self._owned_categories()
        for category in categories:
            async with self._locks[category.key]:
                await self._invalidate(category)
        return categories

    async def on_language_changed(self, language: str) -> None:
        """Invalidate every owned category, then reload the visible ones."""
        categories = await self.invalidate_all()
        log.info(
            "family_invalidated",
            family=self._family.name,
            language=language,
            categories=len(categories),
        )

        visible = [c for c in categories if self.is_visible(c)]
        if visible:
            await asyncio.gather(*(self.load_page(c, 1) for c in visible))
