"""
Liveness check of a single candidate URL.
"""
from __future__ import annotations

from typing import Optional

from link_scout.config import CrawlerConfig
from link_scout.crawler.fetcher import HttpClient, HttpResponse
from link_scout.crawler.models import PageOutcome
from link_scout.crawler.throttle import HostThrottle
from link_scout.errors import FetchError
from link_scout.events import CrawlEvent, CrawlObserver, LoggingObserver
from link_scout.utils import hostname_of

__all__ = ("PageChecker", "classify")


def classify(url: str, resp: HttpResponse) -> PageOutcome:
    """4xx/5xx are broken; everything below 400 (redirects included) is healthy."""
    if resp.status >= 400:
        return PageOutcome.broken_status(url, resp.status)
    return PageOutcome.healthy(url, resp.status)


class PageChecker:
    """Fetch candidate URLs and classify them as healthy or broken.

    All requests go through a :class:`HostThrottle`, so one checker shared by
    several workers still sends a single paced request stream per host.
    """

    def __init__(
        self,
        client: HttpClient,
        config: Optional[CrawlerConfig] = None,
        throttle: Optional[HostThrottle] = None,
        observer: Optional[CrawlObserver] = None,
    ) -> None:
        self.client = client
        self.config = config or CrawlerConfig()
        self.throttle = throttle or HostThrottle(self.config.inter_request_delay)
        self.observer = observer or LoggingObserver()

    async def check(self, url: str) -> PageOutcome:
        async with self.throttle.slot(hostname_of(url) or url):
            outcome = await self._check(url)
        if outcome.broken:
            self.observer.emit(CrawlEvent("page_broken", url, outcome.as_dict()))
        else:
            self.observer.emit(CrawlEvent("page_ok", url, {"status": outcome.status}))
        return outcome

    async def _check(self, url: str) -> PageOutcome:
        if self.config.head_precheck:
            try:
                head = await self.client.request("HEAD", url, timeout=self.config.timeout)
            except FetchError as exc:
                self.observer.emit(CrawlEvent("head_rejected", url, {"error": exc.message}))
            else:
                if head.status < 400:
                    return classify(url, head)
                # some servers only implement GET correctly
                self.observer.emit(CrawlEvent("head_rejected", url, {"status": head.status}))

        try:
            resp = await self.client.request("GET", url, timeout=self.config.timeout)
        except FetchError as exc:
            return PageOutcome.broken_error(url, exc.message)
        return classify(url, resp)
