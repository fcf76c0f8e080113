"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from moviedb.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from moviedb.application.details import DetailsRepository
    from moviedb.application.person import PersonRepository
    from moviedb.application.repository import PagedRepository
    from moviedb.application.search import SearchRepository
    from moviedb.domain.entities.media import Movie, SearchResultItem, TvShow
    from moviedb.domain.ports import CachePort, LocalDataSourcePort
    from moviedb.infrastructure.language.coordinator import LanguageChangeCoordinator
    from moviedb.infrastructure.language.provider import LanguageProvider
    from moviedb.infrastructure.persistence.settings_cache import CacheSettingsStore


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient
    local_source: LocalDataSourcePort

    # Settings + language
    settings_store: CacheSettingsStore
    language_provider: LanguageProvider
    language_coordinator: LanguageChangeCoordinator

    # Repositories
    movies_repo: PagedRepository[Movie]
    tv_repo: PagedRepository[TvShow]
    search_paged_repo: PagedRepository[SearchResultItem]
    search_repo: SearchRepository
    person_repo: PersonRepository
    details_repo: DetailsRepository
