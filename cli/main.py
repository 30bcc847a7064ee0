"""Page Insight CLI — entry-point for serving and one-off analysis.

Usage:
    python cli/main.py --help

Commands:
    serve    → run the HTTP API with uvicorn
    analyze  → fetch and analyse a single page, print the JSON result
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from page_insight.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from typing import Optional

import typer

from page_insight.analyzer import AnalysisResult, HttpLinkProber, analyze
from page_insight.config import settings
from page_insight.errors import AnalysisError, FetchError
from page_insight.scraper import PageFetcher, is_http_url

app = typer.Typer(
    name="page-insight",
    help="Page Insight CLI.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Interface to bind (default from settings)."),
    port: Optional[int] = typer.Option(None, help="HTTP listen port (default from settings)."),
) -> None:
    """Start the HTTP API.  SIGINT/SIGTERM trigger a graceful shutdown."""
    import uvicorn

    bind_host = host or settings.host
    bind_port = port or settings.port
    typer.echo(f"[serve] listening on {bind_host}:{bind_port}")
    uvicorn.run(
        "page_insight.api.app:app",
        host=bind_host,
        port=bind_port,
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
    typer.echo("[serve] server stopped")


# ---------------------------------------------------------------------------
# One-shot analysis
# ---------------------------------------------------------------------------
async def _fetch_and_analyze(url: str, workers: int) -> AnalysisResult:
    async with PageFetcher() as fetcher, HttpLinkProber() as prober:
        raw = await fetcher.fetch(url)
        if raw.status_code >= 400:
            raise FetchError(url, f"upstream returned status {raw.status_code}")
        return await analyze(raw.body, raw.final_url, prober, workers=workers)


@app.command("analyze")
def analyze_cmd(
    url: str = typer.Option(..., help="Absolute http(s) URL of the page to analyse."),
    workers: int = typer.Option(
        settings.link_check_workers, min=1, help="Maximum concurrent link checks."
    ),
) -> None:
    """Fetch a page, analyse it and print the result as JSON."""
    if not is_http_url(url):
        typer.echo("[analyze] url must be an absolute URL with http or https scheme")
        raise typer.Exit(1)

    typer.echo(f"[analyze] Analysing {url!r} …")
    try:
        result = asyncio.run(_fetch_and_analyze(url, workers))
    except FetchError as exc:
        typer.echo(f"[analyze] failed to fetch URL: {exc}")
        raise typer.Exit(1)
    except AnalysisError as exc:
        typer.echo(f"[analyze] analysis failed: {exc}")
        raise typer.Exit(1)

    typer.echo(json.dumps(result.to_dict(), indent=2))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
