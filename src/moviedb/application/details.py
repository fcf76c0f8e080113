"""Movie and TV show details use cases.

Movie details, with their trailers and cast, are cached offline-first under
``details:movie:{id}`` and dropped on every language change. TV show details
are always fetched, together with their videos and credits.

A movie fetch that was started before a language change never writes its
result: each change bumps a generation counter, and writes carrying an older
generation are skipped.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
from typing import Any, TypeVar

import structlog

from moviedb.application.caching import offline_first
from moviedb.domain.entities.media import (
    CastMember,
    MovieDetails,
    TvShowDetails,
    Video,
)
from moviedb.domain.entities.result import AppResult, Failure, map_result
from moviedb.domain.exceptions import StorageError
from moviedb.domain.ports.cache import CachePort
from moviedb.domain.ports.language import (
    LanguageChangeCoordinatorPort,
    LanguageProviderPort,
)
from moviedb.domain.ports.remote import RemoteDataSourcePort

log = structlog.get_logger(__name__)

T = TypeVar("T")

_INDEX_KEY: str = "details:movie:_index"

_MAX_TRAILERS = 10
_TRAILER_TYPES = frozenset({"Trailer", "Teaser"})


def _movie_key(movie_id: int) -> str:
    return f"details:movie:{movie_id}"


def _movie_from_record(data: str) -> MovieDetails:
    record: dict[str, Any] = json.loads(data)
    trailers = [Video(**v) for v in record.pop("trailers", [])]
    cast = [CastMember(**c) for c in record.pop("cast", [])]
    return MovieDetails(**record, trailers=trailers, cast=cast)


def select_trailers(videos: list[Video]) -> list[Video]:
    """Trailers and teasers, official first, newest first, at most ten."""
    trailers = [v for v in videos if v.type in _TRAILER_TYPES]
    trailers.sort(key=lambda v: v.published_at, reverse=True)
    trailers.sort(key=lambda v: not v.official)
    return trailers[:_MAX_TRAILERS]


def _optional(result: AppResult[list[T]], event: str, **context: Any) -> list[T]:
    """Data of a secondary fetch; a failure degrades to an empty list."""
    if isinstance(result, Failure):
        log.info(event, error=result.kind, **context)
        return []
    return result.data


class DetailsRepository:
    def __init__(
        self,
        *,
        remote: RemoteDataSourcePort,
        cache: CachePort,
        language: LanguageProviderPort,
        coordinator: LanguageChangeCoordinatorPort,
    ) -> None:
        self._remote = remote
        self._cache = cache
        self._language = language
        self._index_lock = asyncio.Lock()
        self._generation = 0
        self._registration = coordinator.register(self.on_language_changed)

    def close(self) -> None:
        self._registration.cancel()

    async def get_movie_details(self, movie_id: int) -> AppResult[MovieDetails]:
        generation = self._generation
        language = self._language.api_language()
        return await offline_first(
            lambda: self._read_movie(movie_id),
            lambda: self._fetch_movie(movie_id, language),
            lambda details: self._write_movie(details, generation),
        )

    async def get_tv_show_details(self, tv_id: int) -> AppResult[TvShowDetails]:
        language = self._language.api_language()
        details, videos, credits = await asyncio.gather(
            self._remote.fetch_tv_show_details(tv_id, language),
            self._remote.fetch_tv_show_videos(tv_id, language),
            self._remote.fetch_tv_show_credits(tv_id, language),
        )
        if isinstance(details, Failure):
            return details

        videos_data = _optional(videos, "tv_videos_unavailable", tv_id=tv_id)
        cast = _optional(credits, "tv_credits_unavailable", tv_id=tv_id)
        trailers = select_trailers(videos_data)
        return map_result(
            details,
            lambda show: dataclasses.replace(show, trailers=trailers, cast=cast),
        )

    async def on_language_changed(self, language: str) -> None:
        count = await self.clear()
        log.info("movie_details_invalidated", language=language, count=count)

    async def clear(self) -> int:
        """Drop every cached movie; fetches already in flight are not stored.

        Returns the number of movies removed.
        """
        self._generation += 1
        async with self._index_lock:
            try:
                ids = await self._load_index()
                for movie_id in ids:
                    await self._cache.delete(_movie_key(movie_id))
                await self._cache.delete(_INDEX_KEY)
            except StorageError as e:
                log.warning("movie_details_clear_failed", error=e.message)
                return 0
        return len(ids)

    async def _fetch_movie(
        self, movie_id: int, language: str
    ) -> AppResult[MovieDetails]:
        details, videos, credits = await asyncio.gather(
            self._remote.fetch_movie_details(movie_id, language),
            self._remote.fetch_movie_videos(movie_id, language),
            self._remote.fetch_movie_credits(movie_id, language),
        )
        if isinstance(details, Failure):
            return details

        videos_data = _optional(videos, "movie_videos_unavailable", movie_id=movie_id)
        cast = _optional(credits, "movie_credits_unavailable", movie_id=movie_id)
        trailers = select_trailers(videos_data)
        return map_result(
            details,
            lambda movie: dataclasses.replace(movie, trailers=trailers, cast=cast),
        )

    # -- cache helpers -----------------------------------------------------

    async def _read_movie(self, movie_id: int) -> MovieDetails | None:
        key = _movie_key(movie_id)
        try:
            data = await self._cache.get(key)
        except StorageError as e:
            log.warning("movie_details_read_failed", key=key, error=e.message)
            return None
        if data is None:
            return None
        try:
            return _movie_from_record(data)
        except (json.JSONDecodeError, TypeError, AttributeError) as e:
            log.error("movie_details_deserialize_error", key=key, error=str(e))
            return None

    async def _write_movie(self, details: MovieDetails, generation: int) -> None:
        async with self._index_lock:
            if generation != self._generation:
                log.debug("movie_details_stale_write_skipped", movie_id=details.id)
                return
            try:
                await self._cache.set(
                    _movie_key(details.id),
                    json.dumps(dataclasses.asdict(details)),
                    ttl=None,
                )
                ids = await self._load_index()
                if details.id not in ids:
                    ids.append(details.id)
                    await self._cache.set(_INDEX_KEY, json.dumps(ids), ttl=None)
            except StorageError as e:
                log.warning(
                    "movie_details_write_failed", movie_id=details.id, error=e.message
                )

    async def _load_index(self) -> list[int]:
        data = await self._cache.get(_INDEX_KEY)
        if data is None:
            return []
        try:
            return [int(i) for i in json.loads(data)]
        except (json.JSONDecodeError, TypeError, ValueError):
            return []
