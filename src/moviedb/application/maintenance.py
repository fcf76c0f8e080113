"""Wholesale reset of the cached content."""

from __future__ import annotations

from typing import Any, Sequence

import structlog

from moviedb.application.details import DetailsRepository
from moviedb.application.repository import PagedRepository
from moviedb.domain.ports.local_cache import LocalDataSourcePort

log = structlog.get_logger(__name__)


async def clear_content_cache(
    local: LocalDataSourcePort,
    repositories: Sequence[PagedRepository[Any]],
    details: DetailsRepository,
) -> int:
    """Drop every cached page, cursor and movie detail.

    Each family is invalidated under its own category locks first, so
    observers see ``EMPTY`` and cursors are reset. ``clear_all`` then removes
    entities of categories no family recognises any more. Storage errors
    from that final sweep propagate.

    Returns the number of categories invalidated.
    """
    invalidated = 0
    for repo in repositories:
        invalidated += len(await repo.invalidate_all())
    movies = await details.clear()
    await local.clear_all()
    log.info("content_cache_cleared", categories=invalidated, movie_details=movies)
    return invalidated
