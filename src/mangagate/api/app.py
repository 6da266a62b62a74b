"""FastAPI application serving the aggregated MangaDex feeds."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from mangagate import __version__
from mangagate.api.errors import register_error_handlers
from mangagate.api.routes import router
from mangagate.client.session import create_http_client
from mangagate.logging import configure_logging
from mangagate.models.config import Settings
from mangagate.services.catalog import CatalogService
from mangagate.services.mangadex import MangaDexService

__all__ = ["create_app"]


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Runtime settings. Read from the environment when omitted.
        transport: Transport for the upstream HTTP client, replaced in tests.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with create_http_client(transport) as client:
            mangadex = MangaDexService(client, settings)
            app.state.mangadex = mangadex
            app.state.catalog = CatalogService(mangadex, settings)
            logger.info(f"Serving MangaDex data from {settings.api_base_url}")
            yield

    app = FastAPI(title="mangagate", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app
