"""Search use case over the generic paged repository."""

from __future__ import annotations

from typing import AsyncIterator

import structlog

from moviedb.application.repository import PagedRepository
from moviedb.domain.entities.categories import SearchCategory, SearchFilter
from moviedb.domain.entities.media import SearchResultItem
from moviedb.domain.entities.pagination import CategoryState, PageLoad
from moviedb.domain.entities.result import AppResult, Success

log = structlog.get_logger(__name__)


class SearchRepository:
    """Paged search per (filter, query).

    Every distinct normalised query is its own category, so its pages and
    cursor never mix with another query's.
    """

    def __init__(self, paged: PagedRepository[SearchResultItem]) -> None:
        self._paged = paged

    async def search(
        self, search_filter: SearchFilter, query: str, page: int = 1
    ) -> AppResult[PageLoad[SearchResultItem]]:
        """Load *page* of results for *query*.

        A blank query yields an empty, exhausted result without any request.
        """
        category = SearchCategory(search_filter, query)
        if not query.strip():
            log.debug("search_blank_query", filter=search_filter.value)
            return Success(
                PageLoad(
                    category_key=category.key,
                    page=page,
                    total_pages=0,
                    items=[],
                    new_items=[],
                    exhausted=True,
                )
            )
        return await self._paged.load_page(category, page)

    async def load_next_page(
        self, search_filter: SearchFilter, query: str
    ) -> AppResult[PageLoad[SearchResultItem]]:
        return await self._paged.load_next_page(SearchCategory(search_filter, query))

    def observe(
        self, search_filter: SearchFilter, query: str
    ) -> AsyncIterator[CategoryState[SearchResultItem]]:
        return self._paged.observe(SearchCategory(search_filter, query))
