"""Domain entities for movies, TV shows, people and search results.

Pure value objects: no framework dependencies and no I/O.
Image paths are already expanded to full URLs by the mappers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union


@dataclass(frozen=True)
class Movie:
    id: int
    title: str
    poster_path: str | None = None
    overview: str = ""
    release_date: str = ""
    vote_average: float | None = None


@dataclass(frozen=True)
class TvShow:
    id: int
    name: str
    poster_path: str | None = None
    overview: str = ""
    first_air_date: str = ""
    vote_average: float | None = None


@dataclass(frozen=True)
class Video:
    """A trailer/teaser/clip attached to a movie or TV show."""

    id: str
    key: str
    name: str
    site: str
    type: str
    official: bool = False
    published_at: str = ""


@dataclass(frozen=True)
class CastMember:
    """One billed cast entry; ``order`` is TMDB's billing position."""

    id: int
    name: str
    character: str = ""
    profile_path: str | None = None
    order: int = 0


@dataclass(frozen=True)
class MovieDetails:
    id: int
    title: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str = ""
    runtime: int | None = None
    vote_average: float | None = None
    genres: list[str] = field(default_factory=list)
    tagline: str = ""
    trailers: list[Video] = field(default_factory=list)
    cast: list[CastMember] = field(default_factory=list)


@dataclass(frozen=True)
class TvShowDetails:
    id: int
    name: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    first_air_date: str = ""
    number_of_seasons: int = 0
    number_of_episodes: int = 0
    vote_average: float | None = None
    genres: list[str] = field(default_factory=list)
    trailers: list[Video] = field(default_factory=list)
    cast: list[CastMember] = field(default_factory=list)


@dataclass(frozen=True)
class FilmographyCredit:
    id: int
    title: str
    media_type: Literal["movie", "tv"]
    character: str = ""
    poster_path: str | None = None
    release_date: str = ""
    vote_average: float | None = None


@dataclass(frozen=True)
class PersonDetails:
    id: int
    name: str
    biography: str = ""
    birthday: str | None = None
    deathday: str | None = None
    gender: str = "Not specified"
    known_for_department: str = ""
    place_of_birth: str | None = None
    profile_path: str | None = None
    also_known_as: list[str] = field(default_factory=list)
    filmography: list[FilmographyCredit] = field(default_factory=list)


# --- Search results (tagged union over media_type) ---


@dataclass(frozen=True)
class MovieItem:
    movie: Movie
    backdrop_path: str | None = None
    vote_count: int | None = None
    media_type: Literal["movie"] = "movie"

    @property
    def id(self) -> int:
        return self.movie.id


@dataclass(frozen=True)
class TvShowItem:
    tv_show: TvShow
    backdrop_path: str | None = None
    vote_count: int | None = None
    media_type: Literal["tv"] = "tv"

    @property
    def id(self) -> int:
        return self.tv_show.id


@dataclass(frozen=True)
class PersonItem:
    person_id: int
    name: str
    known_for_department: str | None = None
    profile_path: str | None = None
    media_type: Literal["person"] = "person"

    @property
    def id(self) -> int:
        return self.person_id


SearchResultItem = Union[MovieItem, TvShowItem, PersonItem]
