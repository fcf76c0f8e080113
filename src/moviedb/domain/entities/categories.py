"""Content categories: each one identifies an independent pagination sequence.

A category exposes three things to the core:

- ``key``: stable namespace for cache and cursor storage (never shared
  between categories, prefixed by content family).
- ``api_path``: TMDB endpoint path.
- ``params``: extra query parameters for the endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class ContentCategory(Protocol):
    @property
    def key(self) -> str: ...

    @property
    def api_path(self) -> str: ...

    @property
    def params(self) -> Mapping[str, str]: ...


class MovieCategory(str, Enum):
    POPULAR = "popular"
    TOP_RATED = "top_rated"
    NOW_PLAYING = "now_playing"

    @property
    def key(self) -> str:
        return f"movies:{self.value}"

    @property
    def api_path(self) -> str:
        return f"/movie/{self.value}"

    @property
    def params(self) -> Mapping[str, str]:
        return {}


class TvShowCategory(str, Enum):
    POPULAR = "popular"
    ON_THE_AIR = "on_the_air"
    TOP_RATED = "top_rated"

    @property
    def key(self) -> str:
        return f"tv:{self.value}"

    @property
    def api_path(self) -> str:
        return f"/tv/{self.value}"

    @property
    def params(self) -> Mapping[str, str]:
        return {}


_SEARCH_PATHS: dict[str, str] = {
    "all": "/search/multi",
    "movies": "/search/movie",
    "tv_shows": "/search/tv",
    "people": "/search/person",
}


class SearchFilter(str, Enum):
    ALL = "all"
    MOVIES = "movies"
    TV_SHOWS = "tv_shows"
    PEOPLE = "people"

    @property
    def api_path(self) -> str:
        return _SEARCH_PATHS[self.value]


def normalize_query(query: str) -> str:
    """Lower-case and collapse whitespace so equivalent queries share a key."""
    return " ".join(query.lower().split())


@dataclass(frozen=True)
class SearchCategory:
    """One search sequence: a filter plus the query text."""

    filter: SearchFilter
    query: str

    @property
    def key(self) -> str:
        return f"search:{self.filter.value}:{normalize_query(self.query)}"

    @property
    def api_path(self) -> str:
        return self.filter.api_path

    @property
    def params(self) -> Mapping[str, str]:
        return {"query": self.query.strip(), "include_adult": "false"}


def category_from_key(key: str) -> ContentCategory | None:
    """Rebuild a category from its storage key; ``None`` if unrecognised."""
    family, _, rest = key.partition(":")
    try:
        if family == "movies":
            return MovieCategory(rest)
        if family == "tv":
            return TvShowCategory(rest)
        if family == "search":
            filter_value, _, query = rest.partition(":")
            return SearchCategory(SearchFilter(filter_value), query)
    except ValueError:
        return None
    return None
