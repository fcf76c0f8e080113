"""Tests for SearchRepository."""

from __future__ import annotations

import pytest

from moviedb.application.repository import PagedRepository
from moviedb.application.search import SearchRepository
from moviedb.domain.entities.categories import SearchFilter
from moviedb.domain.entities.media import MovieItem, PersonItem, TvShowItem
from moviedb.domain.entities.result import Success
from moviedb.domain.ports.remote import RawPage
from moviedb.infrastructure.tmdb.families import SEARCH

_MULTI_RESULTS = [
    {"id": 1, "media_type": "movie", "title": "Dune"},
    {"id": 1, "media_type": "tv", "name": "Dune: Prophecy"},
    {"id": 2, "media_type": "person", "name": "Denis Villeneuve"},
    {"id": 3, "media_type": "collection", "name": "Dune Collection"},
]


@pytest.fixture()
def search_repo(
    fake_remote, local_source, pagination_store, language, coordinator
) -> SearchRepository:
    paged = PagedRepository(
        SEARCH,
        remote=fake_remote,
        local=local_source,
        pagination=pagination_store,
        language=language,
        coordinator=coordinator,
    )
    return SearchRepository(paged)


class TestSearch:
    async def test_blank_query_makes_no_request(
        self, search_repo, fake_remote
    ) -> None:
        result = await search_repo.search(SearchFilter.ALL, "   ")

        assert isinstance(result, Success)
        assert result.data.items == []
        assert result.data.exhausted is True
        assert fake_remote.calls == []

    async def test_multi_search_keeps_every_media_type(
        self, search_repo, fake_remote
    ) -> None:
        fake_remote.script(
            "/search/multi", 1, RawPage(page=1, total_pages=1, results=_MULTI_RESULTS)
        )

        result = await search_repo.search(SearchFilter.ALL, "Dune")

        items = result.data.items
        assert [type(i) for i in items] == [MovieItem, TvShowItem, PersonItem]
        # Movie 1 and show 1 share a TMDB id but are distinct cache records.
        assert [i.id for i in items] == [1, 1, 2]

    async def test_query_params_and_language(self, search_repo, fake_remote) -> None:
        fake_remote.script("/search/movie", 1, RawPage(page=1, total_pages=1))

        await search_repo.search(SearchFilter.MOVIES, "  Blade Runner ")

        path, page, language, params = fake_remote.calls[0]
        assert path == "/search/movie"
        assert language == "en-US"
        assert params == {"query": "Blade Runner", "include_adult": "false"}

    async def test_equivalent_queries_share_the_cache(
        self, search_repo, fake_remote
    ) -> None:
        fake_remote.script(
            "/search/multi", 1, RawPage(page=1, total_pages=1, results=_MULTI_RESULTS)
        )

        await search_repo.search(SearchFilter.ALL, "Dune")
        result = await search_repo.search(SearchFilter.ALL, "  dune ")

        assert result.data.from_cache is True
        assert len(fake_remote.calls) == 1

    async def test_next_page(self, search_repo, fake_remote) -> None:
        fake_remote.script(
            "/search/tv",
            1,
            RawPage(page=1, total_pages=2, results=[{"id": 1, "name": "A"}]),
        )
        fake_remote.script(
            "/search/tv",
            2,
            RawPage(page=2, total_pages=2, results=[{"id": 2, "name": "B"}]),
        )
        await search_repo.search(SearchFilter.TV_SHOWS, "a")

        result = await search_repo.load_next_page(SearchFilter.TV_SHOWS, "a")

        assert [i.tv_show.name for i in result.data.items] == ["A", "B"]
        assert result.data.exhausted is True

    async def test_observe_marks_query_visible(self, search_repo) -> None:
        stream = search_repo.observe(SearchFilter.PEOPLE, "nolan")
        state = await anext(stream)
        assert state.category_key == "search:people:nolan"
        await stream.aclose()
