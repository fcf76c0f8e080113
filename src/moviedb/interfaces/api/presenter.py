"""JSON rendering of core results for the HTTP surface."""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, TypeVar

from fastapi.responses import JSONResponse

from moviedb.domain.entities.pagination import PageLoad
from moviedb.domain.entities.result import AppResult, Failure
from moviedb.domain.exceptions import NotFoundError

T = TypeVar("T")


def entity_to_dict(entity: Any) -> dict[str, Any]:
    return dataclasses.asdict(entity)


def present_page(load: PageLoad[Any]) -> dict[str, Any]:
    return {
        "category": load.category_key,
        "page": load.page,
        "total_pages": load.total_pages,
        "exhausted": load.exhausted,
        "from_cache": load.from_cache,
        "items": [entity_to_dict(e) for e in load.items],
        "new_items": [entity_to_dict(e) for e in load.new_items],
    }


def failure_response(failure: Failure) -> JSONResponse:
    """404 for missing entities, 502 for every other upstream failure."""
    status_code = 404 if isinstance(failure.error, NotFoundError) else 502
    return JSONResponse(
        status_code=status_code,
        content={
            "error": failure.kind,
            "message": failure.message,
            "retryable": failure.retryable,
        },
    )


def present_result(
    result: AppResult[T], render: Callable[[T], dict[str, Any]]
) -> JSONResponse:
    if isinstance(result, Failure):
        return failure_response(result)
    return JSONResponse(content=render(result.data))
