"""Hyperlink extraction and internal/external classification."""

from __future__ import annotations

from urllib.parse import SplitResult, urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from page_insight.analyzer.document import get_attr, iter_elements
from page_insight.analyzer.models import Link

# Schemes that can never be fetched, so they are not links for our purposes.
SKIP_SCHEMES = frozenset({"mailto", "javascript", "tel"})


def _host(parts: SplitResult) -> str:
    """Return ``host[:port]`` of *parts*, without userinfo, lower-cased."""
    return parts.netloc.rpartition("@")[2].lower()


def _parse_reference(href: str) -> SplitResult | None:
    try:
        parts = urlsplit(href)
        parts.port  # validates the port component
    except ValueError:
        return None
    return parts


def extract_link(anchor: Tag, base_url: str, base_host: str) -> Link | None:
    """Resolve a single ``<a>`` element, or return ``None`` if it is skipped.

    Skipped anchors: no/empty ``href``, fragment-only ``#...``, references
    the URL parser rejects, and the :data:`SKIP_SCHEMES`.
    """
    href = (get_attr(anchor, "href") or "").strip()
    if not href or href.startswith("#"):
        return None

    parts = _parse_reference(href)
    if parts is None or parts.scheme in SKIP_SCHEMES:
        return None

    try:
        resolved = urljoin(base_url, href)
        resolved_parts = urlsplit(resolved)
    except ValueError:
        return None

    return Link(url=resolved, is_internal=_host(resolved_parts) == base_host)


def classify_links(document: BeautifulSoup, base_url: str) -> list[Link]:
    """Return every fetchable anchor in document order.

    Links are not deduplicated: an href that appears three times yields three
    entries, each of which is checked and counted.
    """
    base_host = _host(urlsplit(base_url))
    links: list[Link] = []
    for anchor in iter_elements(document, "a"):
        link = extract_link(anchor, base_url, base_host)
        if link is not None:
            links.append(link)
    return links
