"""Tests for pagination value objects."""

from __future__ import annotations

import dataclasses

import pytest

from moviedb.domain.entities.pagination import (
    CategoryState,
    LoadStatus,
    PaginationCursor,
)


class TestPaginationCursor:
    def test_zero_state(self) -> None:
        cursor = PaginationCursor.zero("movies:popular")
        assert cursor.current_page == 0
        assert cursor.total_pages == 0
        assert cursor.max_page == 0
        assert cursor.is_empty

    def test_not_empty_after_a_page(self) -> None:
        cursor = PaginationCursor("movies:popular", 1, 10, 1)
        assert not cursor.is_empty

    def test_exhaustion_needs_known_total(self) -> None:
        assert not PaginationCursor.zero("k").is_exhausted_at(50)

    def test_exhausted_beyond_last_page(self) -> None:
        cursor = PaginationCursor("k", 3, 3, 3)
        assert not cursor.is_exhausted_at(3)
        assert cursor.is_exhausted_at(4)

    def test_frozen(self) -> None:
        cursor = PaginationCursor.zero("k")
        with pytest.raises(dataclasses.FrozenInstanceError):
            cursor.current_page = 2  # type: ignore[misc]


class TestCategoryState:
    def test_defaults(self) -> None:
        state: CategoryState[int] = CategoryState(category_key="tv:popular")
        assert state.status is LoadStatus.EMPTY
        assert state.items == []
        assert state.cursor is None
        assert state.error is None
