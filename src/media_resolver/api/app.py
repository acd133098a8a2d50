from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from media_resolver import __version__
from media_resolver.api.routes import router
from media_resolver.config import Settings, load_settings
from media_resolver.services.resolver import MediaDetailService, build_media_service


def create_app(
    service: MediaDetailService | None = None,
    *,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the HTTP app.

    A caller-supplied ``service`` is used as-is and left open; otherwise one is
    built from ``settings`` (or the loaded configuration) on startup and closed
    on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if service is not None:
            yield
            return

        resolved = settings or load_settings().settings
        owned = build_media_service(resolved)
        app.state.media_service = owned
        try:
            yield
        finally:
            await owned.close()

    app = FastAPI(title="Media Resolver API", version=__version__, lifespan=lifespan)
    if service is not None:
        app.state.media_service = service
    app.include_router(router)
    return app


__all__ = ["create_app"]
