"""Analysis pipeline for a single page.

``analyze`` composes the pieces of the analyzer package:

    parse → version / title / headings / login form → classify links
          → reachability check → AnalysisResult
"""

from __future__ import annotations

from urllib.parse import urlsplit

from page_insight.analyzer.document import parse_document
from page_insight.analyzer.features import (
    count_headings,
    detect_html_version,
    extract_title,
    has_login_form,
)
from page_insight.analyzer.links import classify_links
from page_insight.analyzer.models import AnalysisResult
from page_insight.analyzer.reachability import (
    DEFAULT_WORKERS,
    LinkProber,
    count_inaccessible_links,
)
from page_insight.errors import AnalysisError


def _check_base_url(page_url: str) -> None:
    try:
        parts = urlsplit(page_url)
        parts.port  # validates the port component
    except ValueError as exc:
        raise AnalysisError(f"parsing page URL {page_url}: {exc}") from exc
    if not parts.scheme or not parts.netloc:
        raise AnalysisError(f"parsing page URL {page_url}: not an absolute URL")


async def analyze(
    raw_html: bytes | str,
    page_url: str,
    prober: LinkProber,
    workers: int = DEFAULT_WORKERS,
) -> AnalysisResult:
    """Analyse *raw_html* served from *page_url*.

    Args:
        raw_html: The page markup as fetched.
        page_url: Absolute URL the markup was served from; relative links
            are resolved against it.
        prober: Existence check used for every classified link.
        workers: Maximum number of link probes in flight at once.

    Returns:
        The assembled :class:`AnalysisResult`.

    Raises:
        AnalysisError: If the markup or *page_url* cannot be parsed.  No
            partial result is produced.
    """
    document = parse_document(raw_html)
    _check_base_url(page_url)

    links = classify_links(document, page_url)
    internal = sum(1 for link in links if link.is_internal)
    external = len(links) - internal
    print(
        f"[ANALYZE] {page_url}: {len(links)} link(s) "
        f"({internal} internal, {external} external)"
    )

    inaccessible = await count_inaccessible_links(links, prober, workers)

    return AnalysisResult(
        html_version=detect_html_version(document),
        title=extract_title(document),
        headings=count_headings(document),
        internal_links=internal,
        external_links=external,
        inaccessible_links=inaccessible,
        has_login_form=has_login_form(document),
    )
