"""Local entity cache backed by CachePort (diskcache)."""

from __future__ import annotations

import asyncio
import json
from collections import defaultdict
from typing import Any, Sequence

import structlog

from moviedb.domain.entities.categories import ContentCategory
from moviedb.domain.entities.pagination import CachedEntity
from moviedb.domain.ports.cache import CachePort

log = structlog.get_logger(__name__)

# Cache key for the list of category keys that hold entities.
_CATEGORIES_KEY: str = "entity:_categories"


def _entity_key(category_key: str, entity_id: int | str) -> str:
    return f"entity:{category_key}:{entity_id}"


def _index_key(category_key: str) -> str:
    return f"entity:{category_key}:_index"


def _serialize_entity(entity: CachedEntity) -> str:
    return json.dumps(
        {
            "id": entity.id,
            "page": entity.page,
            "rank": entity.rank,
            "payload": entity.payload,
        }
    )


def _deserialize_entity(category_key: str, data: str) -> CachedEntity:
    d = json.loads(data)
    return CachedEntity(
        id=d["id"],
        category_key=category_key,
        page=int(d["page"]),
        rank=int(d["rank"]),
        payload=d["payload"],
    )


class CacheLocalDataSource:
    """Stores fetched entities per category via CachePort.

    Key schema:
    - ``entity:{category_key}:{id}`` → JSON ``{id, page, rank, payload}``
    - ``entity:{category_key}:_index`` → JSON list of ids
    - ``entity:_categories`` → JSON list of category keys

    Records are unique per (category, id): re-upserting an id overwrites
    the previous record, including its page and rank. Storage failures
    propagate as ``StorageError``.
    """

    def __init__(self, cache: CachePort) -> None:
        self.cache = cache
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._categories_lock = asyncio.Lock()

    async def upsert(
        self,
        category: ContentCategory,
        page: int,
        entities: Sequence[tuple[int | str, dict[str, Any]]],
    ) -> None:
        """Store *entities* (``(id, payload)`` pairs in rank order) for *page*."""
        ck = category.key
        async with self._locks[ck]:
            index = await self._load_index(ck)
            known = set(index)
            for rank, (entity_id, payload) in enumerate(entities):
                record = CachedEntity(
                    id=entity_id, category_key=ck, page=page, rank=rank, payload=payload
                )
                await self.cache.set(
                    _entity_key(ck, entity_id), _serialize_entity(record), ttl=None
                )
                if entity_id not in known:
                    known.add(entity_id)
                    index.append(entity_id)
            await self._save_index(ck, index)

        await self._remember_category(ck)
        log.debug("entities_upserted", category=ck, page=page, count=len(entities))

    async def get_all(self, category: ContentCategory) -> list[CachedEntity]:
        """All cached entities for *category*, ordered by (page, rank)."""
        ck = category.key
        index = await self._load_index(ck)
        results: list[CachedEntity] = []
        for entity_id in index:
            key = _entity_key(ck, entity_id)
            data = await self.cache.get(key)
            if data is None:
                continue
            try:
                results.append(_deserialize_entity(ck, data))
            except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                log.error("entity_deserialize_error", key=key, error=str(e))
        results.sort(key=lambda e: (e.page, e.rank))
        return results

    async def clear(self, category: ContentCategory) -> None:
        await self._clear_key(category.key)
        async with self._categories_lock:
            categories = await self._load_categories()
            if category.key in categories:
                categories.remove(category.key)
                await self.cache.set(_CATEGORIES_KEY, json.dumps(categories), ttl=None)

    async def clear_all(self) -> None:
        async with self._categories_lock:
            categories = await self._load_categories()
            for ck in categories:
                await self._clear_key(ck)
            await self.cache.delete(_CATEGORIES_KEY)
        log.info("entity_cache_cleared", categories=len(categories))

    async def category_keys(self) -> list[str]:
        async with self._categories_lock:
            return await self._load_categories()

    # -- internal helpers --------------------------------------------------

    async def _clear_key(self, category_key: str) -> None:
        async with self._locks[category_key]:
            index = await self._load_index(category_key)
            for entity_id in index:
                await self.cache.delete(_entity_key(category_key, entity_id))
            await self.cache.delete(_index_key(category_key))
        log.debug("entities_cleared", category=category_key, count=len(index))

    async def _load_index(self, category_key: str) -> list[int | str]:
        data = await self.cache.get(_index_key(category_key))
        if data is None:
            return []
        try:
            return list(json.loads(data))
        except (json.JSONDecodeError, TypeError):
            log.error("entity_index_corrupt", category=category_key)
            return []

    async def _save_index(self, category_key: str, index: list[int | str]) -> None:
        await self.cache.set(_index_key(category_key), json.dumps(index), ttl=None)

    async def _load_categories(self) -> list[str]:
        data = await self.cache.get(_CATEGORIES_KEY)
        if data is None:
            return []
        try:
            return list(json.loads(data))
        except (json.JSONDecodeError, TypeError):
            return []

    async def _remember_category(self, category_key: str) -> None:
        async with self._categories_lock:
            categories = await self._load_categories()
            if category_key not in categories:
                categories.append(category_key)
                await self.cache.set(_CATEGORIES_KEY, json.dumps(categories), ttl=None)
