"""Page analysis endpoint.

Routes
------
POST /api/analyze    Body: {"url": "https://..."}    → AnalyzeResponse

The page is fetched with the app's shared :class:`PageFetcher`, then analysed
against the URL it was finally served from (after redirects).  Link probes go
through the app's shared :class:`LinkProber`.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field

from page_insight.analyzer import analyze
from page_insight.config import settings
from page_insight.errors import AnalysisError, FetchError
from page_insight.scraper import is_http_url

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class AnalyzeRequest(BaseModel):
    url: str = ""


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    html_version: str = Field(alias="htmlVersion")
    title: str
    headings: dict[str, int]
    internal_links: int = Field(alias="internalLinks")
    external_links: int = Field(alias="externalLinks")
    inaccessible_links: int = Field(alias="inaccessibleLinks")
    has_login_form: bool = Field(alias="hasLoginForm")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_endpoint(body: AnalyzeRequest, request: Request) -> dict[str, Any]:
    """Fetch the page at ``url`` and return its structural summary."""
    if not is_http_url(body.url):
        raise HTTPException(
            status_code=400,
            detail="url must be an absolute URL with http or https scheme",
        )

    fetcher = request.app.state.fetcher
    prober = request.app.state.prober

    try:
        raw = await fetcher.fetch(body.url)
    except FetchError as exc:
        raise HTTPException(
            status_code=502, detail=f"failed to fetch URL: {exc}"
        ) from exc

    if raw.status_code >= 400:
        raise HTTPException(
            status_code=raw.status_code,
            detail=f"upstream returned status {raw.status_code}",
        )

    try:
        result = await analyze(
            raw.body, raw.final_url, prober, workers=settings.link_check_workers
        )
    except AnalysisError as exc:
        raise HTTPException(
            status_code=500, detail=f"analysis failed: {exc}"
        ) from exc

    return result.to_dict()
