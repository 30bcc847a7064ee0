"""Tests for the bounded-concurrency reachability checker.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so ``HttpLinkProber``
  runs its real request / redirect logic without network access.
- Fake :class:`LinkProber` subclasses record concurrency and cancellation so
  the scheduling behaviour can be asserted without HTTP at all.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from page_insight.analyzer.models import Link
from page_insight.analyzer.reachability import (
    HttpLinkProber,
    LinkProber,
    count_inaccessible_links,
)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class _TrackingProber(LinkProber):
    """Sleeps briefly per probe and records how many ran at once."""

    def __init__(self, failing: set[str] | None = None, delay: float = 0.01) -> None:
        self.failing = failing or set()
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def is_accessible(self, url: str) -> bool:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        return url not in self.failing


class _HangingProber(LinkProber):
    """Never completes; counts how many probes were cancelled."""

    def __init__(self) -> None:
        self.started = 0
        self.cancelled = 0

    async def is_accessible(self, url: str) -> bool:
        self.started += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return True


class _RaisingProber(_TrackingProber):
    """Raises for one URL and records which of the other probes finished."""

    def __init__(self, raising: str) -> None:
        super().__init__()
        self.raising = raising
        self.finished: list[str] = []

    async def is_accessible(self, url: str) -> bool:
        if url == self.raising:
            raise RuntimeError("prober broke")
        accessible = await super().is_accessible(url)
        self.finished.append(url)
        return accessible


def _links(*urls: str) -> list[Link]:
    return [Link(url=u, is_internal=True) for u in urls]


# ---------------------------------------------------------------------------
# count_inaccessible_links
# ---------------------------------------------------------------------------

class TestCountInaccessibleLinks:
    async def test_empty_list_makes_no_calls(self) -> None:
        prober = _TrackingProber()
        assert await count_inaccessible_links([], prober, workers=2) == 0
        assert prober.calls == []

    async def test_counts_failures(self) -> None:
        prober = _TrackingProber(failing={"http://t/b", "http://t/d"})
        links = _links("http://t/a", "http://t/b", "http://t/c", "http://t/d")
        assert await count_inaccessible_links(links, prober, workers=2) == 2

    async def test_worker_budget_bounds_in_flight_probes(self) -> None:
        prober = _TrackingProber()
        links = _links(*(f"http://t/{i}" for i in range(10)))
        await count_inaccessible_links(links, prober, workers=3)
        assert prober.max_in_flight == 3
        assert len(prober.calls) == 10

    async def test_duplicate_links_probed_per_occurrence(self) -> None:
        prober = _TrackingProber(failing={"http://t/dead"})
        links = _links("http://t/dead", "http://t/dead", "http://t/live")
        assert await count_inaccessible_links(links, prober) == 2
        assert prober.calls.count("http://t/dead") == 2

    async def test_count_never_exceeds_link_total(self) -> None:
        urls = [f"http://t/{i}" for i in range(7)]
        prober = _TrackingProber(failing=set(urls))
        assert await count_inaccessible_links(_links(*urls), prober, workers=4) == 7

    async def test_raising_prober_counts_as_inaccessible(self) -> None:
        prober = _RaisingProber(raising="http://t/b")
        links = _links("http://t/a", "http://t/b", "http://t/c", "http://t/d")

        assert await count_inaccessible_links(links, prober, workers=4) == 1
        # every other probe completed before the call returned
        assert sorted(prober.finished) == ["http://t/a", "http://t/c", "http://t/d"]
        assert prober.in_flight == 0

    async def test_rejects_non_positive_workers(self) -> None:
        with pytest.raises(ValueError):
            await count_inaccessible_links(_links("http://t/a"), _TrackingProber(), workers=0)

    async def test_caller_deadline_cancels_in_flight_probes(self) -> None:
        prober = _HangingProber()
        links = _links("http://t/a", "http://t/b", "http://t/c")
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(
                count_inaccessible_links(links, prober, workers=2), timeout=0.05
            )
        assert prober.started == 2
        assert prober.cancelled == 2

    async def test_task_cancellation_propagates(self) -> None:
        prober = _HangingProber()
        task = asyncio.create_task(
            count_inaccessible_links(_links("http://t/a", "http://t/b"), prober, workers=5)
        )
        while prober.started < 2:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert prober.cancelled == 2


# ---------------------------------------------------------------------------
# HttpLinkProber
# ---------------------------------------------------------------------------

class TestHttpLinkProber:
    async def test_200_404_500_with_two_workers(self) -> None:
        with respx.mock:
            ok = respx.head("http://links.test/ok").mock(return_value=httpx.Response(200))
            missing = respx.head("http://links.test/notfound").mock(
                return_value=httpx.Response(404)
            )
            error = respx.head("http://links.test/error").mock(
                return_value=httpx.Response(500)
            )
            links = [
                Link(url="http://links.test/ok", is_internal=True),
                Link(url="http://links.test/notfound", is_internal=True),
                Link(url="http://links.test/error", is_internal=False),
            ]
            async with HttpLinkProber() as prober:
                count = await count_inaccessible_links(links, prober, workers=2)

        assert count == 2
        assert ok.call_count == missing.call_count == error.call_count == 1

    async def test_uses_head_requests(self) -> None:
        with respx.mock:
            route = respx.head("http://links.test/page").mock(return_value=httpx.Response(204))
            async with HttpLinkProber() as prober:
                assert await prober.is_accessible("http://links.test/page") is True

        assert route.calls.last.request.method == "HEAD"

    async def test_redirect_to_live_page_is_accessible(self) -> None:
        with respx.mock:
            respx.head("http://links.test/moved").mock(
                return_value=httpx.Response(302, headers={"Location": "http://links.test/here"})
            )
            respx.head("http://links.test/here").mock(return_value=httpx.Response(200))
            async with HttpLinkProber() as prober:
                assert await prober.is_accessible("http://links.test/moved") is True

    async def test_redirect_loop_is_inaccessible(self) -> None:
        with respx.mock:
            route = respx.head("http://links.test/loop").mock(
                return_value=httpx.Response(301, headers={"Location": "http://links.test/loop"})
            )
            async with HttpLinkProber(max_redirects=10) as prober:
                assert await prober.is_accessible("http://links.test/loop") is False

        # the original request plus ten followed redirects
        assert route.call_count == 11

    async def test_timeout_is_inaccessible(self) -> None:
        with respx.mock:
            respx.head("http://links.test/slow").mock(side_effect=httpx.ConnectTimeout)
            async with HttpLinkProber() as prober:
                assert await prober.is_accessible("http://links.test/slow") is False

    async def test_connection_error_is_inaccessible(self) -> None:
        with respx.mock:
            respx.head("http://links.test/down").mock(side_effect=httpx.ConnectError)
            async with HttpLinkProber() as prober:
                assert await prober.is_accessible("http://links.test/down") is False

    async def test_3xx_terminal_status_is_accessible(self) -> None:
        with respx.mock:
            respx.head("http://links.test/cached").mock(return_value=httpx.Response(304))
            async with HttpLinkProber() as prober:
                assert await prober.is_accessible("http://links.test/cached") is True

    async def test_unbuildable_request_is_inaccessible(self) -> None:
        async with HttpLinkProber() as prober:
            assert await prober.is_accessible("http://[::1") is False

    async def test_unencodable_host_is_inaccessible(self) -> None:
        async with HttpLinkProber() as prober:
            assert await prober.is_accessible("https://xn--/") is False

    async def test_unsupported_scheme_is_inaccessible(self) -> None:
        async with HttpLinkProber() as prober:
            assert await prober.is_accessible("ftp://files.example.com/f.zip") is False

    async def test_injected_client_is_not_closed(self) -> None:
        client = httpx.AsyncClient()
        async with HttpLinkProber(client) as _prober:
            pass
        assert client.is_closed is False
        await client.aclose()
