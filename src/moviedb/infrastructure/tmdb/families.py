"""TMDB-backed content families for the generic paged repository."""

from __future__ import annotations

from moviedb.application.families import ContentFamily
from moviedb.domain.entities.categories import MovieCategory, TvShowCategory
from moviedb.domain.entities.media import Movie, SearchResultItem, TvShow
from moviedb.infrastructure.tmdb.mappers import (
    movie_from_payload,
    movie_from_raw,
    search_item_from_payload,
    search_item_from_raw,
    to_payload,
    tv_show_from_payload,
    tv_show_from_raw,
)

MOVIES: ContentFamily[Movie] = ContentFamily(
    name="movies",
    key_prefix="movies:",
    categories=tuple(MovieCategory),
    parse=lambda raw, _category: movie_from_raw(raw),
    entity_id=lambda movie: movie.id,
    to_payload=to_payload,
    from_payload=movie_from_payload,
)

TV_SHOWS: ContentFamily[TvShow] = ContentFamily(
    name="tv_shows",
    key_prefix="tv:",
    categories=tuple(TvShowCategory),
    parse=lambda raw, _category: tv_show_from_raw(raw),
    entity_id=lambda show: show.id,
    to_payload=to_payload,
    from_payload=tv_show_from_payload,
)

# Search categories are created per query, so none are known up front.
SEARCH: ContentFamily[SearchResultItem] = ContentFamily(
    name="search",
    key_prefix="search:",
    categories=(),
    parse=search_item_from_raw,
    entity_id=lambda item: f"{item.media_type}:{item.id}",
    to_payload=to_payload,
    from_payload=search_item_from_payload,
)
