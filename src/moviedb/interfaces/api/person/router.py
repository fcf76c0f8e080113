"""Person details endpoint."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from moviedb.interfaces.api.presenter import entity_to_dict, present_result
from moviedb.interfaces.app_state import AppState

router = APIRouter(prefix="/person", tags=["person"])


@router.get("/{person_id}")
async def person_details(request: Request, person_id: int) -> JSONResponse:
    state = cast(AppState, request.app.state)
    result = await state.person_repo.get_person_details(person_id)
    return present_result(result, entity_to_dict)
