"""Analyzer package — markup feature extraction and link reachability."""

from page_insight.analyzer.engine import analyze
from page_insight.analyzer.links import classify_links
from page_insight.analyzer.models import AnalysisResult, HtmlVersion, Link
from page_insight.analyzer.reachability import (
    HttpLinkProber,
    LinkProber,
    count_inaccessible_links,
)

__all__ = [
    "analyze",
    "classify_links",
    "count_inaccessible_links",
    "AnalysisResult",
    "HtmlVersion",
    "Link",
    "LinkProber",
    "HttpLinkProber",
]
