from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from moviedb.domain.exceptions import MovieDbError
from moviedb.infrastructure.config import AppConfig
from moviedb.interfaces.app_state import AppState
from moviedb.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def build_app(config: AppConfig) -> FastAPI:
    """Build the FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, cache, repositories) are created in lifespan().
    """
    app = FastAPI(
        title="moviedb",
        description="Paginated, language-aware TMDB browsing core",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from moviedb.interfaces.api.movies.router import router as movies_router
    from moviedb.interfaces.api.person.router import router as person_router
    from moviedb.interfaces.api.search.router import router as search_router
    from moviedb.interfaces.api.settings.router import router as settings_router
    from moviedb.interfaces.api.tv.router import router as tv_router

    app.include_router(movies_router)
    app.include_router(tv_router)
    app.include_router(search_router)
    app.include_router(person_router)
    app.include_router(settings_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.exception_handler(MovieDbError)
    async def movie_db_error_handler(
        request: Request, exc: MovieDbError
    ) -> JSONResponse:
        log.error(
            "unhandled_core_error",
            path=request.url.path,
            error=type(exc).__name__,
            message=exc.message,
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": type(exc).__name__,
                "message": exc.message,
                "retryable": exc.retryable,
            },
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
            )

    return app
