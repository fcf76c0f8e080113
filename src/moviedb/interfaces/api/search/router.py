"""Search endpoint."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from moviedb.domain.entities.categories import SearchFilter
from moviedb.interfaces.api.presenter import present_page, present_result
from moviedb.interfaces.app_state import AppState

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/{search_filter}")
async def search(
    request: Request,
    search_filter: SearchFilter,
    query: str = Query(default=""),
    page: int = Query(default=1, ge=1),
) -> JSONResponse:
    """Paged search; each (filter, query) pair pages independently."""
    state = cast(AppState, request.app.state)
    result = await state.search_repo.search(search_filter, query, page)
    return present_result(result, present_page)
