"""FastAPI application factory (create_app)."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.responses import Response

from episodarr.infrastructure.config import AppConfig
from episodarr.infrastructure.graceful_shutdown import GracefulShutdown
from episodarr.interfaces.api.middleware import RequestLogMiddleware
from episodarr.interfaces.app_state import AppState
from episodarr.interfaces.composition import lifespan


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, slug resolver, providers) are created in lifespan().
    """
    app = FastAPI(
        title="Episodarr",
        description="Anime episode resolution with ordered provider fallback",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config
    app.state.graceful_shutdown = GracefulShutdown()

    from episodarr.interfaces.api.episodes.router import router as episodes_router
    from episodarr.interfaces.api.providers.router import router as providers_router

    app.include_router(episodes_router, prefix="/api/v1")
    app.include_router(providers_router, prefix="/api/v1")
    # Unversioned alias of the resolution routes for existing callers.
    app.include_router(episodes_router, include_in_schema=False)

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe; 200 as long as the process is running."""
        orchestrator = getattr(app.state, "orchestrator", None)
        return {
            "status": "ok",
            "providers": orchestrator.total if orchestrator else 0,
        }

    @app.get("/api/v1/readyz")
    async def readyz() -> Response:
        """Readiness probe; 200 after startup completed, 503 otherwise."""
        gs: GracefulShutdown = app.state.graceful_shutdown
        if gs.is_ready:
            return JSONResponse({"status": "ready"}, status_code=200)
        return JSONResponse({"status": "not_ready"}, status_code=503)

    app.add_middleware(
        RequestLogMiddleware, graceful_shutdown=app.state.graceful_shutdown
    )

    return app
