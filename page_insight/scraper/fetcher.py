"""Async HTTP fetcher for the page under analysis."""

from __future__ import annotations

from urllib.parse import urlsplit

import httpx

from page_insight.config import settings
from page_insight.errors import FetchError
from page_insight.scraper.models import RawPage


class PageFetcher:
    """Download pages with a shared ``httpx.AsyncClient``.

    Redirects are followed.  The body is streamed and silently cut off after
    *max_bytes*, so a huge response cannot exhaust memory.

    Use as an async context manager when the fetcher should own its client;
    passing *client* leaves its lifecycle to the caller.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
        max_bytes: int | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.max_bytes = max_bytes if max_bytes is not None else settings.fetch_max_bytes
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=timeout if timeout is not None else settings.fetch_timeout,
                follow_redirects=True,
                headers={"User-Agent": user_agent or settings.user_agent},
            )
        self._client = client

    async def __aenter__(self) -> PageFetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str) -> RawPage:
        """Fetch *url* and return a :class:`RawPage`.

        HTTP error statuses are returned as-is in ``status_code``; only
        transport failures raise.

        Raises:
            FetchError: On invalid URLs, connection errors, timeouts or
                too many redirects.
        """
        print(f"[FETCH] {url}")
        chunks: list[bytes] = []
        size = 0
        truncated = False
        try:
            async with self._client.stream("GET", url) as response:
                async for chunk in response.aiter_bytes():
                    chunks.append(chunk)
                    size += len(chunk)
                    if size > self.max_bytes:
                        truncated = True
                        break
                status_code = response.status_code
                final_url = str(response.url)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers host names idna refuses to encode.
            print(f"[FETCH] ✗ {url}: {exc}")
            raise FetchError(url, str(exc) or type(exc).__name__) from exc

        body = b"".join(chunks)[: self.max_bytes]
        if truncated:
            print(f"[FETCH] body truncated at {self.max_bytes} bytes")
        print(f"[FETCH] HTTP {status_code}  {len(body)} bytes  final={final_url}")
        return RawPage(
            url=url,
            body=body,
            status_code=status_code,
            final_url=final_url,
            truncated=truncated,
        )


def is_http_url(url: str) -> bool:
    """Return ``True`` if *url* is an absolute ``http``/``https`` URL with a host."""
    try:
        parts = urlsplit(url)
        parts.port  # validates the port component
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.hostname)
