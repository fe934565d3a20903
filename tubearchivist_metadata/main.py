"""FastAPI app entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from tubearchivist_metadata.core.config import settings
from tubearchivist_metadata.core.transport import create_http_client
from tubearchivist_metadata.routers import episodes, series, videos


def create_app() -> FastAPI:
    """Build FastAPI application."""

    app = FastAPI(title="TubeArchivist Metadata", version="0.1.0")
    app.include_router(series.router)
    app.include_router(episodes.router)
    app.include_router(videos.router)

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(level=settings.log_level)
        app.state.http_client = create_http_client(settings)
        if not settings.is_configured:
            logging.getLogger(__name__).warning("TubeArchivist URL or API key missing; resolution disabled")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.http_client.aclose()

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
