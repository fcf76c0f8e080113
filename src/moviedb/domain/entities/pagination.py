"""Pagination cursor, cached entity records and per-category load state.

Pure value objects: no framework dependencies and no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from moviedb.domain.exceptions import MovieDbError

E = TypeVar("E")


@dataclass(frozen=True)
class PaginationCursor:
    """Progress marker for one category.

    ``current_page`` is the last page written, ``max_page`` the highest page
    ever written since the last reset. The cache-hit check uses ``max_page``
    so an out-of-order ``advance`` can never shrink the cached range.
    """

    category_key: str
    current_page: int = 0
    total_pages: int = 0
    max_page: int = 0

    @classmethod
    def zero(cls, category_key: str) -> PaginationCursor:
        return cls(category_key=category_key)

    @property
    def is_empty(self) -> bool:
        return self.max_page == 0

    def is_exhausted_at(self, page: int) -> bool:
        """True when *page* lies beyond the known last page."""
        return self.total_pages > 0 and page > self.total_pages


@dataclass(frozen=True)
class CachedEntity:
    """One stored record; ``rank`` is the position within its page."""

    id: int | str
    category_key: str
    page: int
    rank: int
    payload: dict[str, Any] = field(default_factory=dict)


class LoadStatus(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERROR = "error"


@dataclass(frozen=True)
class PageLoad(Generic[E]):
    """Successful outcome of loading one page of a category."""

    category_key: str
    page: int
    total_pages: int
    items: list[E]  # pages 1..page, ordered by (page, rank)
    new_items: list[E]  # the increment contributed by this call
    from_cache: bool = False
    exhausted: bool = False


@dataclass(frozen=True)
class CategoryState(Generic[E]):
    """Snapshot emitted to observers of a category."""

    category_key: str
    status: LoadStatus = LoadStatus.EMPTY
    items: list[E] = field(default_factory=list)
    cursor: PaginationCursor | None = None
    error: MovieDbError | None = None
