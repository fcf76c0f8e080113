"""Tests for DetailsRepository and trailer selection."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from moviedb.application.details import DetailsRepository, select_trailers
from moviedb.domain.entities.media import (
    CastMember,
    MovieDetails,
    TvShowDetails,
    Video,
)
from moviedb.domain.entities.result import Failure, Success
from moviedb.domain.exceptions import NotFoundError, TransportError

_MOVIE = MovieDetails(id=550, title="Fight Club", genres=["Drama"], runtime=139)
_SHOW = TvShowDetails(id=1399, name="Game of Thrones")
_PITT = CastMember(id=287, name="Brad Pitt", character="Tyler Durden", order=0)


def _video(
    key: str, *, kind: str = "Trailer", official: bool = False, published: str = ""
) -> Video:
    return Video(
        id=key,
        key=key,
        name=key,
        site="YouTube",
        type=kind,
        official=official,
        published_at=published,
    )


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture()
def details_repo(fake_remote, memory_cache, language, coordinator) -> DetailsRepository:
    details = fake_remote.details
    details.fetch_movie_videos = AsyncMock(return_value=Success([]))
    details.fetch_movie_credits = AsyncMock(return_value=Success([]))
    details.fetch_tv_show_videos = AsyncMock(return_value=Success([]))
    details.fetch_tv_show_credits = AsyncMock(return_value=Success([]))
    return DetailsRepository(
        remote=fake_remote,
        cache=memory_cache,
        language=language,
        coordinator=coordinator,
    )


class TestSelectTrailers:
    def test_filters_orders_and_limits(self) -> None:
        videos = [
            _video("clip", kind="Clip", official=True, published="2024-01-01"),
            _video("old-fan", published="2019-01-01"),
            _video("new-official", official=True, published="2023-01-01"),
            _video("old-official", official=True, published="2020-01-01"),
            _video("teaser", kind="Teaser", published="2022-01-01"),
        ]

        keys = [v.key for v in select_trailers(videos)]

        assert keys == ["new-official", "old-official", "teaser", "old-fan"]

    def test_at_most_ten(self) -> None:
        videos = [_video(f"t{i}", published=f"2020-01-{i + 1:02d}") for i in range(15)]
        assert len(select_trailers(videos)) == 10


class TestMovieDetails:
    async def test_fetches_then_serves_from_cache(
        self, details_repo, fake_remote, memory_cache
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Success(_MOVIE)
        )

        first = await details_repo.get_movie_details(550)
        second = await details_repo.get_movie_details(550)

        assert first == Success(_MOVIE)
        assert second == Success(_MOVIE)
        fake_remote.details.fetch_movie_details.assert_awaited_once_with(550, "en-US")
        assert json.loads(memory_cache.data["details:movie:_index"]) == [550]

    async def test_trailers_and_cast_are_attached_and_cached(
        self, details_repo, fake_remote
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Success(_MOVIE)
        )
        fake_remote.details.fetch_movie_videos = AsyncMock(
            return_value=Success(
                [_video("clip", kind="Clip"), _video("trailer", official=True)]
            )
        )
        fake_remote.details.fetch_movie_credits = AsyncMock(
            return_value=Success([_PITT])
        )

        first = await details_repo.get_movie_details(550)
        second = await details_repo.get_movie_details(550)

        assert isinstance(first, Success)
        assert [v.key for v in first.data.trailers] == ["trailer"]
        assert first.data.cast == [_PITT]
        assert second == first
        fake_remote.details.fetch_movie_videos.assert_awaited_once()
        fake_remote.details.fetch_movie_credits.assert_awaited_once()

    async def test_videos_and_credits_failures_degrade_to_empty(
        self, details_repo, fake_remote
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Success(_MOVIE)
        )
        fake_remote.details.fetch_movie_videos = AsyncMock(
            return_value=Failure(TransportError("timeout"))
        )
        fake_remote.details.fetch_movie_credits = AsyncMock(
            return_value=Failure(NotFoundError("no credits"))
        )

        result = await details_repo.get_movie_details(550)

        assert result == Success(_MOVIE)

    async def test_failure_is_not_cached(
        self, details_repo, fake_remote, memory_cache
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Failure(NotFoundError("gone"))
        )

        result = await details_repo.get_movie_details(1)

        assert isinstance(result, Failure)
        assert "details:movie:1" not in memory_cache.data

    async def test_cache_write_failure_still_returns_details(
        self, details_repo, fake_remote, memory_cache
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Success(_MOVIE)
        )
        memory_cache.fail_writes = True

        assert await details_repo.get_movie_details(550) == Success(_MOVIE)

    async def test_corrupt_entry_is_refetched(
        self, details_repo, fake_remote, memory_cache
    ) -> None:
        memory_cache.data["details:movie:550"] = "not-valid-json{{{"
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Success(_MOVIE)
        )

        assert await details_repo.get_movie_details(550) == Success(_MOVIE)
        fake_remote.details.fetch_movie_details.assert_awaited_once()


class TestMovieDetailsInvalidation:
    async def test_language_change_drops_cached_details(
        self, details_repo, fake_remote, memory_cache, language, coordinator
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            return_value=Success(_MOVIE)
        )
        await details_repo.get_movie_details(550)

        language.switch("he", "he-IL")
        await coordinator.notify("he")

        assert "details:movie:550" not in memory_cache.data
        assert "details:movie:_index" not in memory_cache.data
        await details_repo.get_movie_details(550)
        fake_remote.details.fetch_movie_details.assert_awaited_with(550, "he-IL")

    async def test_fetch_started_before_language_change_is_not_stored(
        self, details_repo, fake_remote, memory_cache, language, coordinator
    ) -> None:
        release = asyncio.Event()

        async def fetch(movie_id: int, tag: str) -> Success:
            if tag == "en-US":
                await release.wait()
            return Success(MovieDetails(id=movie_id, title=f"title-{tag}"))

        fake_remote.details.fetch_movie_details = AsyncMock(side_effect=fetch)

        pending = asyncio.create_task(details_repo.get_movie_details(550))
        await _settle()
        language.switch("fr", "fr-FR")
        await coordinator.notify("fr")
        release.set()

        # The caller still gets the answer it asked for.
        stale = await pending
        assert stale.data.title == "title-en-US"
        assert "details:movie:550" not in memory_cache.data

        fresh = await details_repo.get_movie_details(550)
        assert fresh.data.title == "title-fr-FR"
        assert (await details_repo.get_movie_details(550)) == fresh

    async def test_clear_reports_removed_movies(
        self, details_repo, fake_remote, memory_cache
    ) -> None:
        fake_remote.details.fetch_movie_details = AsyncMock(
            side_effect=lambda movie_id, tag: Success(
                MovieDetails(id=movie_id, title=str(movie_id))
            )
        )
        await details_repo.get_movie_details(1)
        await details_repo.get_movie_details(2)

        assert await details_repo.clear() == 2
        assert memory_cache.data == {}


class TestTvShowDetails:
    async def test_attaches_selected_trailers_and_cast(
        self, details_repo, fake_remote
    ) -> None:
        fake_remote.details.fetch_tv_show_details = AsyncMock(
            return_value=Success(_SHOW)
        )
        fake_remote.details.fetch_tv_show_videos = AsyncMock(
            return_value=Success(
                [_video("clip", kind="Clip"), _video("trailer", official=True)]
            )
        )
        fake_remote.details.fetch_tv_show_credits = AsyncMock(
            return_value=Success([_PITT])
        )

        result = await details_repo.get_tv_show_details(1399)

        assert isinstance(result, Success)
        assert [v.key for v in result.data.trailers] == ["trailer"]
        assert result.data.cast == [_PITT]

    async def test_videos_and_credits_failures_give_empty_lists(
        self, details_repo, fake_remote
    ) -> None:
        fake_remote.details.fetch_tv_show_details = AsyncMock(
            return_value=Success(_SHOW)
        )
        fake_remote.details.fetch_tv_show_videos = AsyncMock(
            return_value=Failure(TransportError("timeout"))
        )
        fake_remote.details.fetch_tv_show_credits = AsyncMock(
            return_value=Failure(TransportError("timeout"))
        )

        result = await details_repo.get_tv_show_details(1399)

        assert isinstance(result, Success)
        assert result.data.trailers == []
        assert result.data.cast == []

    async def test_details_failure_fails_the_call(
        self, details_repo, fake_remote
    ) -> None:
        failure = Failure(NotFoundError("no such show"))
        fake_remote.details.fetch_tv_show_details = AsyncMock(return_value=failure)

        assert await details_repo.get_tv_show_details(1) is failure
