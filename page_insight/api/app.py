"""FastAPI application factory.

Lifespan
--------
On startup the app builds one :class:`PageFetcher` (page downloads, 10 s
timeout, 10 MiB cap) and one :class:`HttpLinkProber` (link checks, 5 s
timeout, 10 redirects), each with its own ``httpx.AsyncClient``.  They are
shared across all requests via ``request.app.state.fetcher`` and
``request.app.state.prober`` and closed on shutdown.

Routers
-------
    /api/analyze  — fetch and analyse one page
    /health       — liveness probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from page_insight.analyzer import HttpLinkProber
from page_insight.api.errors import install_error_handlers
from page_insight.api.routers import analyze as analyze_router
from page_insight.api.routers import health as health_router
from page_insight.config import settings
from page_insight.scraper import PageFetcher


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared HTTP clients on startup and close them on shutdown."""
    fetcher = PageFetcher(
        timeout=settings.fetch_timeout,
        max_bytes=settings.fetch_max_bytes,
    )
    prober = HttpLinkProber(
        timeout=settings.link_check_timeout,
        max_redirects=settings.link_check_max_redirects,
    )
    app.state.fetcher = fetcher
    app.state.prober = prober
    try:
        yield
    finally:
        await prober.aclose()
        await fetcher.aclose()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Page Insight API",
        description=(
            "Fetches a web page and reports its HTML version, title, heading "
            "histogram, internal/external/inaccessible link counts and whether "
            "it contains a login form."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(analyze_router.router, prefix="/api", tags=["analyze"])
    app.include_router(health_router.router, tags=["health"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn page_insight.api.app:app --reload
app = create_app()
