"""Data models for the page fetcher."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RawPage:
    """The raw HTTP response for a single page fetch."""

    url: str
    body: bytes
    status_code: int
    # URL after redirects; relative links on the page resolve against it.
    final_url: str
    truncated: bool = False
