"""Bounded-concurrency reachability checks for classified links.

``count_inaccessible_links`` starts one asyncio task per link and lets at most
*workers* of them hold an ``asyncio.Semaphore`` (i.e. have a request in
flight) at a time.  ``asyncio.gather`` is the join barrier: the call returns
only when every probe has finished, and each task's boolean outcome is summed
afterwards, so no counter is shared between tasks.  A prober that raises
instead of answering counts its link as inaccessible; the other probes still
run to completion before the call returns.

The network side is a :class:`LinkProber`.  :class:`HttpLinkProber` is the
real implementation; tests substitute fakes.

Cancellation
------------
Probes run inside the caller's task.  Cancelling the caller (request
deadline, client disconnect, shutdown) cancels ``gather``, which cancels every
outstanding probe and aborts its in-flight ``httpx`` request.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Sequence

import httpx

from page_insight.analyzer.models import Link
from page_insight.config import settings

DEFAULT_WORKERS = 10


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class LinkProber(ABC):
    """Cheap existence check for a single URL."""

    @abstractmethod
    async def is_accessible(self, url: str) -> bool:
        """Return ``False`` on any failure.  Must not raise for network errors."""


# ---------------------------------------------------------------------------
# httpx implementation
# ---------------------------------------------------------------------------

class HttpLinkProber(LinkProber):
    """Probe links with ``HEAD`` requests over a shared ``httpx.AsyncClient``.

    A link is inaccessible when the request cannot be built or sent (invalid
    URL, DNS/connect failure, timeout, more than *max_redirects* redirects) or
    when the final response status is 400 or above.

    Use as an async context manager when the prober should own its client::

        async with HttpLinkProber() as prober:
            await count_inaccessible_links(links, prober)

    Passing *client* instead leaves its lifecycle to the caller.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
        max_redirects: int | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                timeout=timeout if timeout is not None else settings.link_check_timeout,
                follow_redirects=True,
                max_redirects=(
                    max_redirects
                    if max_redirects is not None
                    else settings.link_check_max_redirects
                ),
                headers={"User-Agent": user_agent or settings.user_agent},
            )
        self._client = client

    async def __aenter__(self) -> HttpLinkProber:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def is_accessible(self, url: str) -> bool:
        try:
            request = self._client.build_request("HEAD", url)
            response = await self._client.send(request)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers host names idna refuses to encode.
            print(f"[LINKS] ✗ {url}: {type(exc).__name__}: {exc}")
            return False

        if response.status_code >= 400:
            print(f"[LINKS] ✗ {url}: HTTP {response.status_code}")
            return False
        return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def count_inaccessible_links(
    links: Sequence[Link],
    prober: LinkProber,
    workers: int = DEFAULT_WORKERS,
) -> int:
    """Probe every link and return how many are inaccessible.

    Args:
        links: Classified links; duplicates are probed once per occurrence.
        prober: The existence check to run for each link.
        workers: Maximum number of probes in flight at once.

    Returns:
        The number of links for which *prober* reported a failure or raised.  ``0``
        for an empty list, in which case no task is created.

    Raises:
        ValueError: If *workers* is less than 1.
    """
    if not links:
        return 0
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    semaphore = asyncio.Semaphore(workers)

    async def _probe(url: str) -> bool:
        async with semaphore:
            try:
                return not await prober.is_accessible(url)
            except Exception as exc:
                print(f"[LINKS] ✗ {url}: prober raised {type(exc).__name__}: {exc}")
                return True

    outcomes = await asyncio.gather(*(_probe(link.url) for link in links))
    inaccessible = sum(outcomes)
    print(f"[LINKS] {inaccessible}/{len(links)} link(s) inaccessible.")
    return inaccessible
