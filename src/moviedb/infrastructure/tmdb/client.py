"""TMDB API remote data source (async httpx implementation)."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from moviedb.domain.entities.media import (
    CastMember,
    FilmographyCredit,
    MovieDetails,
    PersonDetails,
    TvShowDetails,
    Video,
)
from moviedb.domain.entities.result import AppResult, Failure, Success
from moviedb.domain.exceptions import (
    DeserializationError,
    HttpStatusError,
    NotFoundError,
    TransportError,
)
from moviedb.domain.ports.remote import RawPage
from moviedb.infrastructure.tmdb.mappers import (
    cast_from_raw,
    filmography_from_raw,
    movie_details_from_raw,
    person_details_from_raw,
    tv_show_details_from_raw,
    videos_from_raw,
)

log = structlog.get_logger(__name__)

T = TypeVar("T")

_BASE_URL = "https://api.themoviedb.org/3"


class _RemotePage(BaseModel):
    """Envelope shared by every paged TMDB endpoint."""

    model_config = ConfigDict(extra="ignore")

    page: int
    total_pages: int
    total_results: int | None = None
    results: list[dict[str, Any]]


class HttpxTmdbRemoteDataSource:
    """Async TMDB client using httpx.

    Implements ``RemoteDataSourcePort``. One GET per call: no caching,
    no retry. Every failure comes back as a ``Failure`` value.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = _BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, language: str, **extra: Any) -> dict[str, Any]:
        return {"api_key": self._api_key, "language": language, **extra}

    async def _get(self, path: str, params: dict[str, Any]) -> AppResult[Any]:
        """GET *path* and decode the JSON body, mapping every failure."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params=params)
        except httpx.RequestError as e:
            log.warning("tmdb_network_error", path=path, error=str(e))
            return Failure(TransportError(f"Network error: {e}"))

        if resp.status_code == 401:
            log.error("tmdb_api_key_invalid", status=401)
            return Failure(HttpStatusError("Invalid TMDB API key", 401))
        if resp.status_code == 404:
            log.debug("tmdb_resource_not_found", path=path)
            return Failure(NotFoundError(f"Resource not found: {path}"))
        if resp.is_error:
            log.warning("tmdb_http_error", path=path, status=resp.status_code)
            kind = "Server" if resp.status_code >= 500 else "Client"
            return Failure(
                HttpStatusError(
                    f"{kind} error ({resp.status_code})", resp.status_code
                )
            )

        try:
            return Success(resp.json())
        except ValueError as e:
            log.warning("tmdb_deserialization_error", path=path, error=str(e))
            return Failure(DeserializationError(f"Invalid JSON from {path}"))

    # ------------------------------------------------------------------
    # Public API (RemoteDataSourcePort)
    # ------------------------------------------------------------------

    async def fetch(
        self, category_path: str, page: int, language: str, **params: str
    ) -> AppResult[RawPage]:
        """Fetch one page of a paged endpoint."""
        result = await self._get(
            category_path, self._params(language, page=page, **params)
        )
        if isinstance(result, Failure):
            return result

        try:
            envelope = _RemotePage.model_validate(result.data)
        except ValidationError as e:
            log.warning(
                "tmdb_deserialization_error",
                path=category_path,
                errors=e.error_count(),
            )
            return Failure(
                DeserializationError(f"Unexpected page shape from {category_path}")
            )

        log.debug(
            "tmdb_page_fetched",
            path=category_path,
            page=envelope.page,
            total_pages=envelope.total_pages,
            results=len(envelope.results),
        )
        return Success(
            RawPage(
                page=envelope.page,
                total_pages=envelope.total_pages,
                results=envelope.results,
                total_results=envelope.total_results,
            )
        )

    async def fetch_movie_details(
        self, movie_id: int, language: str
    ) -> AppResult[MovieDetails]:
        return await self._fetch_object(
            f"/movie/{movie_id}", language, movie_details_from_raw
        )

    async def fetch_movie_videos(
        self, movie_id: int, language: str
    ) -> AppResult[list[Video]]:
        return await self._fetch_object(
            f"/movie/{movie_id}/videos", language, videos_from_raw
        )

    async def fetch_movie_credits(
        self, movie_id: int, language: str
    ) -> AppResult[list[CastMember]]:
        return await self._fetch_object(
            f"/movie/{movie_id}/credits", language, cast_from_raw
        )

    async def fetch_tv_show_details(
        self, tv_id: int, language: str
    ) -> AppResult[TvShowDetails]:
        return await self._fetch_object(
            f"/tv/{tv_id}", language, tv_show_details_from_raw
        )

    async def fetch_tv_show_videos(
        self, tv_id: int, language: str
    ) -> AppResult[list[Video]]:
        return await self._fetch_object(
            f"/tv/{tv_id}/videos", language, videos_from_raw
        )

    async def fetch_tv_show_credits(
        self, tv_id: int, language: str
    ) -> AppResult[list[CastMember]]:
        return await self._fetch_object(
            f"/tv/{tv_id}/credits", language, cast_from_raw
        )

    async def fetch_person(
        self, person_id: int, language: str
    ) -> AppResult[PersonDetails]:
        return await self._fetch_object(
            f"/person/{person_id}", language, person_details_from_raw
        )

    async def fetch_person_credits(
        self, person_id: int, language: str
    ) -> AppResult[list[FilmographyCredit]]:
        return await self._fetch_object(
            f"/person/{person_id}/combined_credits", language, filmography_from_raw
        )

    async def _fetch_object(
        self,
        path: str,
        language: str,
        mapper: Callable[[dict[str, Any]], T],
    ) -> AppResult[T]:
        """Fetch a single JSON object and map it to a domain entity."""
        result = await self._get(path, self._params(language))
        if isinstance(result, Failure):
            return result
        if not isinstance(result.data, dict):
            log.warning("tmdb_deserialization_error", path=path, error="not an object")
            return Failure(DeserializationError(f"Expected a JSON object from {path}"))
        try:
            return Success(mapper(result.data))
        except DeserializationError as e:
            log.warning("tmdb_deserialization_error", path=path, error=e.message)
            return Failure(e)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            log.warning("tmdb_deserialization_error", path=path, error=str(e))
            return Failure(DeserializationError(f"Malformed object from {path}"))
