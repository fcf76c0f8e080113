"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from moviedb.application.details import DetailsRepository
from moviedb.application.person import PersonRepository
from moviedb.application.repository import PagedRepository
from moviedb.application.search import SearchRepository
from moviedb.infrastructure.cache import DiskcacheAdapter
from moviedb.infrastructure.config.schema import AppConfig
from moviedb.infrastructure.language.coordinator import LanguageChangeCoordinator
from moviedb.infrastructure.language.provider import (
    LanguageProvider,
    detect_platform_language,
)
from moviedb.infrastructure.persistence.entity_cache import CacheLocalDataSource
from moviedb.infrastructure.persistence.pagination_cache import (
    CachePaginationStateStore,
)
from moviedb.infrastructure.persistence.settings_cache import CacheSettingsStore
from moviedb.infrastructure.tmdb.client import HttpxTmdbRemoteDataSource
from moviedb.infrastructure.tmdb.families import MOVIES, SEARCH, TV_SHOWS
from moviedb.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _wire_repositories(state: AppState, remote: HttpxTmdbRemoteDataSource) -> None:
    """Build every repository around the single shared coordinator."""
    local = CacheLocalDataSource(state.cache)
    state.local_source = local
    pagination = CachePaginationStateStore(state.cache)
    shared = {
        "remote": remote,
        "local": local,
        "pagination": pagination,
        "language": state.language_provider,
        "coordinator": state.language_coordinator,
    }
    state.movies_repo = PagedRepository(MOVIES, **shared)
    state.tv_repo = PagedRepository(TV_SHOWS, **shared)
    state.search_paged_repo = PagedRepository(SEARCH, **shared)
    state.search_repo = SearchRepository(state.search_paged_repo)
    state.person_repo = PersonRepository(
        remote=remote, language=state.language_provider
    )
    state.details_repo = DetailsRepository(
        remote=remote,
        cache=state.cache,
        language=state.language_provider,
        coordinator=state.language_coordinator,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (entities, cursors and settings all live in it)
        2. HTTP client
        3. Settings store + language provider (resolved language before any load)
        4. Coordinator + repositories (repositories register on construction)
        5. Coordinator start (first observed language is the baseline)
    """
    state = cast(AppState, app.state)
    config: AppConfig = state.config

    # 1) Cache
    cache = DiskcacheAdapter(
        directory=config.cache_dir,
        max_concurrent=config.cache_max_concurrent,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", directory=str(config.cache_dir))

    # 2) HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) Settings + language
    state.settings_store = CacheSettingsStore(cache)
    await state.settings_store.load()
    platform_default = config.default_language or detect_platform_language()
    state.language_provider = LanguageProvider(
        state.settings_store, platform_default=platform_default
    )
    await state.language_provider.start()

    # 4) Coordinator + repositories
    state.language_coordinator = LanguageChangeCoordinator(state.language_provider)

    if not config.tmdb_api_key:
        log.warning("tmdb_api_key_missing", hint="set MOVIEDB_TMDB_API_KEY")
    remote = HttpxTmdbRemoteDataSource(
        api_key=config.tmdb_api_key or "",
        http_client=state.http_client,
        base_url=config.tmdb_base_url,
    )
    _wire_repositories(state, remote)
    log.info(
        "repositories_initialized",
        listeners=state.language_coordinator.listener_count,
    )

    # 5) Start listening for language changes
    await state.language_coordinator.start()

    log.info("app_startup_complete", language=state.language_provider.resolve())

    try:
        yield
    finally:
        for repo in (
            state.movies_repo,
            state.tv_repo,
            state.search_paged_repo,
            state.details_repo,
        ):
            repo.close()
        log.info("repositories_closed")

        await state.language_coordinator.aclose()
        await state.language_provider.aclose()
        log.info("language_coordination_stopped")

        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
