"""Content family: everything the generic repository needs to know about one
kind of paged content (movies, TV shows, search results)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from moviedb.domain.entities.categories import ContentCategory

E = TypeVar("E")


@dataclass(frozen=True)
class ContentFamily(Generic[E]):
    """Parsing and payload codec for one family of categories.

    Attributes:
        name: Family name used in logs.
        key_prefix: Prefix shared by every category key of the family.
        categories: Categories known up front (empty for search).
        parse: Maps one raw API result to an entity, or ``None`` to skip it.
            Raises ``DeserializationError`` on malformed input.
        entity_id: Stable id of an entity within its category (unique per
            category, so multi-type families must namespace it).
        to_payload: Entity → JSON-able dict for the local cache.
        from_payload: Inverse of ``to_payload``.
    """

    name: str
    key_prefix: str
    categories: tuple[ContentCategory, ...]
    parse: Callable[[dict[str, Any], Any], E | None]
    entity_id: Callable[[E], int | str]
    to_payload: Callable[[E], dict[str, Any]]
    from_payload: Callable[[dict[str, Any]], E]

    def owns(self, category_key: str) -> bool:
        return category_key.startswith(self.key_prefix)
