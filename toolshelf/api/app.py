"""FastAPI application factory.

Lifespan
--------
On startup the app opens one shared ``httpx.AsyncClient`` and builds the
default extraction pipeline and search suggester on top of it (available to
handlers via ``request.app.state``).  On shutdown the client is closed.

Routers
-------
    /extract  URL → tool record, logo discovery
    /catalog  filtering and AI search suggestions
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolshelf import __version__
from toolshelf.api.routers import catalog as catalog_router
from toolshelf.api.routers import extract as extract_router
from toolshelf.catalog.suggestions import SearchSuggester
from toolshelf.config import settings
from toolshelf.log import configure_logging
from toolshelf.scraper.pipeline import build_default_pipeline


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared HTTP client on startup and close it on shutdown."""
    client = httpx.AsyncClient(timeout=settings.request_timeout, follow_redirects=True)
    app.state.http = client
    app.state.pipeline = build_default_pipeline(client=client)
    app.state.suggester = SearchSuggester(client=client)
    try:
        yield
    finally:
        await client.aclose()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging()
    app = FastAPI(
        title="toolshelf API",
        description=(
            "Backend for the AI tool directory: multi-strategy website "
            "extraction into structured tool records, and catalog "
            "filtering / search suggestions."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(extract_router.router, prefix="/extract", tags=["extract"])
    app.include_router(catalog_router.router, prefix="/catalog", tags=["catalog"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn toolshelf.api.app:app --reload
app = create_app()
