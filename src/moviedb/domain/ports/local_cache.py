"""Port for the local entity cache."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from moviedb.domain.entities.categories import ContentCategory
from moviedb.domain.entities.pagination import CachedEntity


@runtime_checkable
class LocalDataSourcePort(Protocol):
    """Async interface over cached entities keyed by (category, id).

    Implementations raise ``StorageError`` on I/O failure.
    """

    async def upsert(
        self,
        category: ContentCategory,
        page: int,
        entities: Sequence[tuple[int | str, dict[str, Any]]],
    ) -> None: ...

    async def get_all(self, category: ContentCategory) -> list[CachedEntity]: ...

    async def clear(self, category: ContentCategory) -> None: ...

    async def clear_all(self) -> None: ...

    async def category_keys(self) -> list[str]:
        """Keys of every category that currently holds entities."""
        ...
