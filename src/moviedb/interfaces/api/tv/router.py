"""TV show list and details endpoints."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from moviedb.domain.entities.categories import TvShowCategory
from moviedb.interfaces.api.presenter import (
    entity_to_dict,
    present_page,
    present_result,
)
from moviedb.interfaces.app_state import AppState

router = APIRouter(prefix="/tv", tags=["tv"])


@router.get("/details/{tv_id}")
async def tv_show_details(request: Request, tv_id: int) -> JSONResponse:
    """Show details with up to ten trailers."""
    state = cast(AppState, request.app.state)
    result = await state.details_repo.get_tv_show_details(tv_id)
    return present_result(result, entity_to_dict)


@router.get("/{category}")
async def tv_page(
    request: Request,
    category: TvShowCategory,
    page: int = Query(default=1, ge=1),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    result = await state.tv_repo.load_page(category, page)
    return present_result(result, present_page)


@router.post("/{category}/refresh")
async def tv_refresh(request: Request, category: TvShowCategory) -> JSONResponse:
    state = cast(AppState, request.app.state)
    result = await state.tv_repo.refresh(category)
    return present_result(result, present_page)
