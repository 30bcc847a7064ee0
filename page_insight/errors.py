"""Exceptions raised by the analysis engine and the page fetcher."""

from __future__ import annotations


class AnalysisError(ValueError):
    """The page could not be analysed at all (unparseable markup or base URL)."""


class FetchError(Exception):
    """The page to analyse could not be retrieved.

    Raised for transport-level failures only (DNS, connect, timeout, invalid
    URL).  An HTTP error status is *not* a ``FetchError``; callers inspect
    :attr:`RawPage.status_code` instead.
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(reason)
        self.url = url
        self.reason = reason
