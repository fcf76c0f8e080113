"""Port for persisted pagination cursors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from moviedb.domain.entities.categories import ContentCategory
from moviedb.domain.entities.pagination import PaginationCursor


@runtime_checkable
class PaginationStateStorePort(Protocol):
    """Best-effort cursor persistence; write failures are logged, not raised."""

    async def get_cursor(self, category: ContentCategory) -> PaginationCursor: ...

    async def advance(
        self, category: ContentCategory, new_page: int, total_pages: int
    ) -> None: ...

    async def reset(self, category: ContentCategory) -> None: ...
