"""Movie list and details endpoints."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from moviedb.domain.entities.categories import MovieCategory
from moviedb.interfaces.api.presenter import (
    entity_to_dict,
    present_page,
    present_result,
)
from moviedb.interfaces.app_state import AppState

router = APIRouter(prefix="/movies", tags=["movies"])


# Registered before /{category} so "details" is never read as a category.
@router.get("/details/{movie_id}")
async def movie_details(request: Request, movie_id: int) -> JSONResponse:
    state = cast(AppState, request.app.state)
    result = await state.details_repo.get_movie_details(movie_id)
    return present_result(result, entity_to_dict)


@router.get("/{category}")
async def movies_page(
    request: Request,
    category: MovieCategory,
    page: int = Query(default=1, ge=1),
) -> JSONResponse:
    """Movies of *category*, pages 1..page (cache first)."""
    state = cast(AppState, request.app.state)
    result = await state.movies_repo.load_page(category, page)
    return present_result(result, present_page)


@router.post("/{category}/refresh")
async def movies_refresh(request: Request, category: MovieCategory) -> JSONResponse:
    state = cast(AppState, request.app.state)
    result = await state.movies_repo.refresh(category)
    return present_result(result, present_page)
