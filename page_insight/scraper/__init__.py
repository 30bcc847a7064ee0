"""Scraper package — retrieval of the page to analyse."""

from page_insight.scraper.fetcher import PageFetcher, is_http_url
from page_insight.scraper.models import RawPage

__all__ = ["PageFetcher", "RawPage", "is_http_url"]
