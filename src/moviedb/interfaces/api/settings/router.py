"""User settings endpoints (language, theme, cached content)."""

from __future__ import annotations

from typing import Any, cast

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from moviedb.application.maintenance import clear_content_cache
from moviedb.domain.entities.settings import AppLanguage, AppTheme
from moviedb.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


class LanguageUpdate(BaseModel):
    language: str = Field(min_length=1, description="Language code, e.g. 'en'.")


class ThemeUpdate(BaseModel):
    theme: AppTheme


async def _settings_payload(state: AppState) -> dict[str, Any]:
    provider = state.language_provider
    return {
        "language": provider.resolve(),
        "api_language": provider.api_language(),
        "theme": (await state.settings_store.get_theme()).value,
        "supported_languages": [lang.code for lang in AppLanguage],
    }


@router.get("")
async def get_settings(request: Request) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    return await _settings_payload(state)


@router.put("/language")
async def put_language(request: Request, body: LanguageUpdate) -> dict[str, Any]:
    """Persist the language; cached content is invalidated asynchronously."""
    state = cast(AppState, request.app.state)
    await state.settings_store.set_language(body.language)
    log.info("language_update_requested", language=body.language)
    return await _settings_payload(state)


@router.put("/theme")
async def put_theme(request: Request, body: ThemeUpdate) -> dict[str, Any]:
    state = cast(AppState, request.app.state)
    await state.settings_store.set_theme(body.theme)
    return await _settings_payload(state)


@router.delete("/cache")
async def delete_cache(request: Request) -> dict[str, Any]:
    """Drop all cached pages and movie details; visible lists start empty."""
    state = cast(AppState, request.app.state)
    invalidated = await clear_content_cache(
        state.local_source,
        [state.movies_repo, state.tv_repo, state.search_paged_repo],
        state.details_repo,
    )
    return {"status": "cleared", "categories": invalidated}
