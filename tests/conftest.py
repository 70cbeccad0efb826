# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlsplit
from xml.sax.saxutils import escape

import pytest

from link_scout.config import CrawlerConfig
from link_scout.crawler.fetcher import HttpResponse
from link_scout.errors import FetchError, FetchTimeoutError
from link_scout.events import CollectingObserver

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def urlset_xml(urls: Iterable[str]) -> str:
    entries = "".join(f"<url><loc>{escape(u)}</loc></url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'


def index_xml(locs: Iterable[str]) -> str:
    entries = "".join(f"<sitemap><loc>{escape(u)}</loc></sitemap>" for u in locs)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="{SITEMAP_NS}">{entries}</sitemapindex>'


@dataclass
class Route:
    status: int = 200
    body: bytes = b""
    delay: float = 0.0
    error: Optional[str] = None
    head_status: Optional[int] = None
    content_type: str = ""


class FakeHttpClient:
    """In-memory HttpClient: unknown URLs answer 404."""

    def __init__(self) -> None:
        self.routes: Dict[str, Route] = {}
        self.calls: List[Tuple[str, str]] = []
        self.in_flight: Dict[str, int] = defaultdict(int)
        self.max_in_flight: Dict[str, int] = defaultdict(int)
        self.started_at: Dict[str, float] = {}

    def add(
        self,
        url: str,
        status: int = 200,
        body: str | bytes = b"",
        *,
        delay: float = 0.0,
        error: Optional[str] = None,
        head_status: Optional[int] = None,
        content_type: str = "",
    ) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.routes[url] = Route(status, body, delay, error, head_status, content_type)

    def urls_requested(self, method: str = "GET") -> List[str]:
        return [u for m, u in self.calls if m == method]

    async def request(self, method: str, url: str, *, timeout: float, read_body: bool = False) -> HttpResponse:
        self.calls.append((method, url))
        self.started_at.setdefault(url, asyncio.get_running_loop().time())
        host = urlsplit(url).hostname or ""
        route = self.routes.get(url, Route(status=404))
        self.in_flight[host] += 1
        self.max_in_flight[host] = max(self.max_in_flight[host], self.in_flight[host])
        try:
            if route.delay:
                if route.delay >= timeout:
                    await asyncio.sleep(timeout)
                    raise FetchTimeoutError(url, timeout)
                await asyncio.sleep(route.delay)
            if route.error:
                raise FetchError(url, route.error)
            status = route.head_status if method == "HEAD" and route.head_status is not None else route.status
            return HttpResponse(
                url=url,
                status=status,
                body=route.body if read_body else b"",
                content_type=route.content_type,
            )
        finally:
            self.in_flight[host] -= 1


@pytest.fixture()
def fake_client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture()
def observer() -> CollectingObserver:
    return CollectingObserver()


@pytest.fixture()
def fast_config() -> CrawlerConfig:
    """Config without pacing delay and with short timeouts."""
    return CrawlerConfig(timeout=2.0, inter_request_delay=0.0)


@pytest.fixture()
def make_config(fast_config) -> Callable[..., CrawlerConfig]:
    def _make(**overrides) -> CrawlerConfig:
        return CrawlerConfig(**{**fast_config.model_dump(), **overrides})

    return _make


@pytest.fixture()
def sitemap_xml() -> Callable[[Iterable[str]], str]:
    return urlset_xml


@pytest.fixture()
def sitemap_index_xml() -> Callable[[Iterable[str]], str]:
    return index_xml
