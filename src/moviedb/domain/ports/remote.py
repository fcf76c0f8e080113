"""Port for the metadata API transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from moviedb.domain.entities.media import (
    CastMember,
    FilmographyCredit,
    MovieDetails,
    PersonDetails,
    TvShowDetails,
    Video,
)
from moviedb.domain.entities.result import AppResult


@dataclass(frozen=True)
class RawPage:
    """One decoded page response: ``{page, total_pages, total_results?, results}``."""

    page: int
    total_pages: int
    results: list[dict[str, Any]] = field(default_factory=list)
    total_results: int | None = None


@runtime_checkable
class RemoteDataSourcePort(Protocol):
    """Async interface performing one GET per call.

    No caching, no retry, no cursor awareness. Errors are returned as
    ``Failure`` values, never raised.
    """

    async def fetch(
        self, category_path: str, page: int, language: str, **params: str
    ) -> AppResult[RawPage]:
        """Fetch one page of a paged endpoint."""
        ...

    async def fetch_movie_details(
        self, movie_id: int, language: str
    ) -> AppResult[MovieDetails]:
        """Details without trailers or cast."""
        ...

    async def fetch_movie_videos(
        self, movie_id: int, language: str
    ) -> AppResult[list[Video]]: ...

    async def fetch_movie_credits(
        self, movie_id: int, language: str
    ) -> AppResult[list[CastMember]]: ...

    async def fetch_tv_show_details(
        self, tv_id: int, language: str
    ) -> AppResult[TvShowDetails]:
        """Details without trailers or cast."""
        ...

    async def fetch_tv_show_videos(
        self, tv_id: int, language: str
    ) -> AppResult[list[Video]]: ...

    async def fetch_tv_show_credits(
        self, tv_id: int, language: str
    ) -> AppResult[list[CastMember]]: ...

    async def fetch_person(
        self, person_id: int, language: str
    ) -> AppResult[PersonDetails]:
        """Details without filmography."""
        ...

    async def fetch_person_credits(
        self, person_id: int, language: str
    ) -> AppResult[list[FilmographyCredit]]: ...
