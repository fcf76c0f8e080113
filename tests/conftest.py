"""Shared test fixtures for the moviedb test suite."""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator
from unittest.mock import AsyncMock

import pytest

from moviedb.application.observable import ObservableValue
from moviedb.application.repository import PagedRepository
from moviedb.domain.entities.media import Movie
from moviedb.domain.entities.result import AppResult, Failure, Success
from moviedb.domain.exceptions import NotFoundError, StorageError
from moviedb.domain.ports.remote import RawPage
from moviedb.infrastructure.language.coordinator import LanguageChangeCoordinator
from moviedb.infrastructure.persistence.entity_cache import CacheLocalDataSource
from moviedb.infrastructure.persistence.pagination_cache import (
    CachePaginationStateStore,
)
from moviedb.infrastructure.tmdb.families import MOVIES

# ---------------------------------------------------------------------------
# Cache fixtures
# ---------------------------------------------------------------------------


class InMemoryCache:
    """Dict-backed CachePort. ``fail_reads``/``fail_writes`` simulate I/O errors."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.fail_reads = False
        self.fail_writes = False

    async def get(self, key: str) -> Any:
        if self.fail_reads:
            raise StorageError("read failed")
        return self.data.get(key)

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        if self.fail_writes:
            raise StorageError("write failed")
        self.data[key] = value

    async def delete(self, key: str) -> bool:
        if self.fail_writes:
            raise StorageError("delete failed")
        return self.data.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return key in self.data

    async def clear(self) -> None:
        self.data.clear()

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> InMemoryCache:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


@pytest.fixture()
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.exists = AsyncMock(return_value=False)
    cache.clear = AsyncMock()
    cache.aclose = AsyncMock()
    return cache


# ---------------------------------------------------------------------------
# Remote + language fakes
# ---------------------------------------------------------------------------


class FakeRemote:
    """Scripted RemoteDataSourcePort.

    ``pages`` maps ``(path, page)`` to a result; unscripted pages answer
    ``NotFoundError``. Every ``fetch`` call is recorded in ``calls``. When
    ``gate`` is set, fetches wait on it before answering.
    """

    def __init__(self) -> None:
        self.pages: dict[tuple[str, int], AppResult[RawPage]] = {}
        self.calls: list[tuple[str, int, str, dict[str, str]]] = []
        self.gate: asyncio.Event | None = None
        self.details = AsyncMock()

    def script(self, path: str, page: int, result: RawPage | Failure) -> None:
        self.pages[(path, page)] = (
            result if isinstance(result, Failure) else Success(result)
        )

    async def fetch(
        self, category_path: str, page: int, language: str, **params: str
    ) -> AppResult[RawPage]:
        self.calls.append((category_path, page, language, params))
        if self.gate is not None:
            await self.gate.wait()
        return self.pages.get(
            (category_path, page), Failure(NotFoundError(category_path))
        )

    async def fetch_movie_details(self, movie_id: int, language: str):
        return await self.details.fetch_movie_details(movie_id, language)

    async def fetch_movie_videos(self, movie_id: int, language: str):
        return await self.details.fetch_movie_videos(movie_id, language)

    async def fetch_movie_credits(self, movie_id: int, language: str):
        return await self.details.fetch_movie_credits(movie_id, language)

    async def fetch_tv_show_details(self, tv_id: int, language: str):
        return await self.details.fetch_tv_show_details(tv_id, language)

    async def fetch_tv_show_videos(self, tv_id: int, language: str):
        return await self.details.fetch_tv_show_videos(tv_id, language)

    async def fetch_tv_show_credits(self, tv_id: int, language: str):
        return await self.details.fetch_tv_show_credits(tv_id, language)

    async def fetch_person(self, person_id: int, language: str):
        return await self.details.fetch_person(person_id, language)

    async def fetch_person_credits(self, person_id: int, language: str):
        return await self.details.fetch_person_credits(person_id, language)


class FakeLanguageProvider:
    """LanguageProviderPort backed by a plain value cell."""

    def __init__(self, code: str = "en", api_tag: str = "en-US") -> None:
        self._cell: ObservableValue[str] = ObservableValue(code)
        self.api_tag = api_tag

    def switch(self, code: str, api_tag: str) -> None:
        self.api_tag = api_tag
        self._cell.set(code)

    def current_language(self) -> AsyncIterator[str]:
        return self._cell.subscribe()

    def resolve(self) -> str:
        return self._cell.value

    def api_language(self) -> str:
        return self.api_tag


@pytest.fixture()
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture()
def language() -> FakeLanguageProvider:
    return FakeLanguageProvider()


@pytest.fixture()
async def coordinator(language: FakeLanguageProvider) -> LanguageChangeCoordinator:
    coord = LanguageChangeCoordinator(language)
    # Baseline: the first observed value never invalidates.
    await coord.notify(language.resolve())
    return coord


# ---------------------------------------------------------------------------
# Repository fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def local_source(memory_cache: InMemoryCache) -> CacheLocalDataSource:
    return CacheLocalDataSource(memory_cache)


@pytest.fixture()
def pagination_store(memory_cache: InMemoryCache) -> CachePaginationStateStore:
    return CachePaginationStateStore(memory_cache)


@pytest.fixture()
def movies_repo(
    fake_remote: FakeRemote,
    local_source: CacheLocalDataSource,
    pagination_store: CachePaginationStateStore,
    language: FakeLanguageProvider,
    coordinator: LanguageChangeCoordinator,
) -> PagedRepository[Movie]:
    return PagedRepository(
        MOVIES,
        remote=fake_remote,
        local=local_source,
        pagination=pagination_store,
        language=language,
        coordinator=coordinator,
    )
