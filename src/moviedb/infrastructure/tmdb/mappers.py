"""Raw TMDB JSON → domain entities, and entities ↔ cache payloads.

Image paths are expanded to full URLs here; payloads store the expanded
entity so cached reads need no second mapping step.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from moviedb.domain.entities.categories import SearchCategory, SearchFilter
from moviedb.domain.entities.media import (
    CastMember,
    FilmographyCredit,
    Movie,
    MovieDetails,
    MovieItem,
    PersonDetails,
    PersonItem,
    SearchResultItem,
    TvShow,
    TvShowDetails,
    TvShowItem,
    Video,
)
from moviedb.domain.exceptions import DeserializationError

_IMAGE_BASE = "https://image.tmdb.org/t/p/w500"

_GENDERS = {1: "Female", 2: "Male", 3: "Non-binary"}

# Media type implied by single-type search endpoints (no media_type field).
_FILTER_MEDIA_TYPE = {
    SearchFilter.MOVIES: "movie",
    SearchFilter.TV_SHOWS: "tv",
    SearchFilter.PEOPLE: "person",
}


def image_url(path: str | None) -> str | None:
    if not path:
        return None
    return f"{_IMAGE_BASE}{path}"


def _require_id(raw: dict[str, Any]) -> int:
    value = raw.get("id")
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeserializationError(f"Missing or invalid id: {value!r}")
    return value


def _vote(raw: dict[str, Any]) -> float | None:
    value = raw.get("vote_average")
    if value is None:
        return None
    return float(value)


def _genres(raw: dict[str, Any]) -> list[str]:
    return [g["name"] for g in raw.get("genres") or [] if g.get("name")]


# ---------------------------------------------------------------------------
# List items
# ---------------------------------------------------------------------------


def movie_from_raw(raw: dict[str, Any]) -> Movie:
    return Movie(
        id=_require_id(raw),
        title=raw.get("title") or raw.get("original_title") or "",
        poster_path=image_url(raw.get("poster_path")),
        overview=raw.get("overview") or "",
        release_date=raw.get("release_date") or "",
        vote_average=_vote(raw),
    )


def tv_show_from_raw(raw: dict[str, Any]) -> TvShow:
    return TvShow(
        id=_require_id(raw),
        name=raw.get("name") or raw.get("original_name") or "",
        poster_path=image_url(raw.get("poster_path")),
        overview=raw.get("overview") or "",
        first_air_date=raw.get("first_air_date") or "",
        vote_average=_vote(raw),
    )


def search_item_from_raw(
    raw: dict[str, Any], category: SearchCategory
) -> SearchResultItem | None:
    """Map one search result; ``None`` for media types we do not model."""
    media_type = raw.get("media_type") or _FILTER_MEDIA_TYPE.get(category.filter)
    if media_type == "movie":
        return MovieItem(
            movie=movie_from_raw(raw),
            backdrop_path=image_url(raw.get("backdrop_path")),
            vote_count=raw.get("vote_count"),
        )
    if media_type == "tv":
        return TvShowItem(
            tv_show=tv_show_from_raw(raw),
            backdrop_path=image_url(raw.get("backdrop_path")),
            vote_count=raw.get("vote_count"),
        )
    if media_type == "person":
        return PersonItem(
            person_id=_require_id(raw),
            name=raw.get("name") or "",
            known_for_department=raw.get("known_for_department"),
            profile_path=image_url(raw.get("profile_path")),
        )
    return None


# ---------------------------------------------------------------------------
# Details
# ---------------------------------------------------------------------------


def movie_details_from_raw(raw: dict[str, Any]) -> MovieDetails:
    return MovieDetails(
        id=_require_id(raw),
        title=raw.get("title") or raw.get("original_title") or "",
        overview=raw.get("overview") or "",
        poster_path=image_url(raw.get("poster_path")),
        backdrop_path=image_url(raw.get("backdrop_path")),
        release_date=raw.get("release_date") or "",
        runtime=raw.get("runtime"),
        vote_average=_vote(raw),
        genres=_genres(raw),
        tagline=raw.get("tagline") or "",
    )


def video_from_raw(raw: dict[str, Any]) -> Video:
    return Video(
        id=str(raw.get("id") or ""),
        key=raw.get("key") or "",
        name=raw.get("name") or "",
        site=raw.get("site") or "",
        type=raw.get("type") or "",
        official=bool(raw.get("official")),
        published_at=raw.get("published_at") or "",
    )


def videos_from_raw(raw: dict[str, Any]) -> list[Video]:
    return [video_from_raw(v) for v in raw.get("results") or []]


def cast_member_from_raw(raw: dict[str, Any]) -> CastMember:
    return CastMember(
        id=_require_id(raw),
        name=raw.get("name") or raw.get("original_name") or "",
        character=raw.get("character") or "",
        profile_path=image_url(raw.get("profile_path")),
        order=raw.get("order") or 0,
    )


def cast_from_raw(raw: dict[str, Any]) -> list[CastMember]:
    """Cast of a credits response in billing order."""
    cast = [cast_member_from_raw(c) for c in raw.get("cast") or []]
    cast.sort(key=lambda c: c.order)
    return cast


def tv_show_details_from_raw(raw: dict[str, Any]) -> TvShowDetails:
    """Details without trailers or cast; those have their own endpoints."""
    return TvShowDetails(
        id=_require_id(raw),
        name=raw.get("name") or raw.get("original_name") or "",
        overview=raw.get("overview") or "",
        poster_path=image_url(raw.get("poster_path")),
        backdrop_path=image_url(raw.get("backdrop_path")),
        first_air_date=raw.get("first_air_date") or "",
        number_of_seasons=raw.get("number_of_seasons") or 0,
        number_of_episodes=raw.get("number_of_episodes") or 0,
        vote_average=_vote(raw),
        genres=_genres(raw),
    )


def _credit_from_raw(raw: dict[str, Any], role_field: str) -> FilmographyCredit:
    media_type = "tv" if raw.get("media_type") == "tv" else "movie"
    return FilmographyCredit(
        id=_require_id(raw),
        title=raw.get("title") or raw.get("name") or "",
        media_type=media_type,
        character=raw.get(role_field) or "",
        poster_path=image_url(raw.get("poster_path")),
        release_date=raw.get("release_date") or raw.get("first_air_date") or "",
        vote_average=_vote(raw),
    )


def filmography_from_raw(raw: dict[str, Any]) -> list[FilmographyCredit]:
    """Cast then crew credits, first occurrence per id, newest first."""
    credits = [_credit_from_raw(c, "character") for c in raw.get("cast") or []]
    credits += [_credit_from_raw(c, "job") for c in raw.get("crew") or []]
    seen: set[int] = set()
    unique: list[FilmographyCredit] = []
    for credit in credits:
        if credit.id in seen:
            continue
        seen.add(credit.id)
        unique.append(credit)
    unique.sort(key=lambda c: c.release_date, reverse=True)
    return unique


def person_details_from_raw(raw: dict[str, Any]) -> PersonDetails:
    """Details without filmography; that comes from combined credits."""
    return PersonDetails(
        id=_require_id(raw),
        name=raw.get("name") or "",
        biography=raw.get("biography") or "",
        birthday=raw.get("birthday"),
        deathday=raw.get("deathday"),
        gender=_GENDERS.get(raw.get("gender"), "Not specified"),
        known_for_department=raw.get("known_for_department") or "",
        place_of_birth=raw.get("place_of_birth"),
        profile_path=image_url(raw.get("profile_path")),
        also_known_as=list(raw.get("also_known_as") or []),
    )


# ---------------------------------------------------------------------------
# Cache payloads
# ---------------------------------------------------------------------------


def to_payload(entity: Any) -> dict[str, Any]:
    return dataclasses.asdict(entity)


def movie_from_payload(payload: dict[str, Any]) -> Movie:
    return Movie(**payload)


def tv_show_from_payload(payload: dict[str, Any]) -> TvShow:
    return TvShow(**payload)


def search_item_from_payload(payload: dict[str, Any]) -> SearchResultItem:
    media_type = payload.get("media_type")
    if media_type == "movie":
        return MovieItem(
            movie=Movie(**payload["movie"]),
            backdrop_path=payload.get("backdrop_path"),
            vote_count=payload.get("vote_count"),
        )
    if media_type == "tv":
        return TvShowItem(
            tv_show=TvShow(**payload["tv_show"]),
            backdrop_path=payload.get("backdrop_path"),
            vote_count=payload.get("vote_count"),
        )
    if media_type == "person":
        return PersonItem(**payload)
    raise ValueError(f"Unknown media_type in payload: {media_type!r}")
