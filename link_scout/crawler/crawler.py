from __future__ import annotations

import asyncio
import time
from contextlib import AsyncExitStack
from typing import List, Optional, Tuple

from link_scout.config import CrawlerConfig
from link_scout.crawler.checker import PageChecker
from link_scout.crawler.fetcher import AiohttpClient, HttpClient
from link_scout.crawler.link_extractor import LinkExtractor
from link_scout.crawler.models import CrawlReport, CrawlState, PageOutcome
from link_scout.crawler.sitemap import SitemapResolver
from link_scout.crawler.throttle import HostThrottle
from link_scout.crawler.url_set import build_url_set, duplicate_groups
from link_scout.errors import ExtractionError, InvalidUrlError
from link_scout.events import CrawlEvent, CrawlObserver, LoggingObserver
from link_scout.utils import is_http_url

__all__ = ("LinkCrawler", "crawl")


class LinkCrawler:
    """Broken-page crawler for one base URL.

    Sitemaps are preferred as the candidate source; the base page's own links
    are used only when no sitemap yields anything.  Each candidate is then
    checked through a paced :class:`PageChecker`.

    Without an injected client the crawler owns an :class:`AiohttpClient`
    and must be used as an async context manager.
    """

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        client: Optional[HttpClient] = None,
        observer: Optional[CrawlObserver] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self.client = client
        self.observer = observer or LoggingObserver()
        self.state = CrawlState.START
        self._stack: Optional[AsyncExitStack] = None

    async def __aenter__(self) -> LinkCrawler:
        if self.client is None:
            self._stack = AsyncExitStack()
            self.client = await self._stack.enter_async_context(AiohttpClient(self.config))
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._stack is not None:
            await self._stack.aclose()
            self._stack = None
            self.client = None

    def _transition(self, state: CrawlState, url: str) -> None:
        self.observer.emit(CrawlEvent("state", url, {"from": self.state.value, "to": state.value}))
        self.state = state

    async def crawl(self, base_url: str) -> CrawlReport:
        if self.client is None:
            raise RuntimeError("HTTP client not initialized; use 'async with LinkCrawler(...)'")
        self.state = CrawlState.START
        base_url = base_url.strip()
        self.observer.emit(CrawlEvent("crawl_started", base_url))
        try:
            if not is_http_url(base_url):
                raise InvalidUrlError(base_url)
            self._transition(CrawlState.RESOLVING_URLS, base_url)
            candidates = await self.resolve_candidates(base_url)
        except (InvalidUrlError, ExtractionError) as exc:
            self._transition(CrawlState.FAILED, base_url)
            self.observer.emit(CrawlEvent("crawl_failed", base_url, {"error": str(exc)}))
            return CrawlReport.failed(base_url, str(exc))

        self._transition(CrawlState.CHECKING, base_url)
        outcomes, partial = await self.check_all(candidates)
        broken = [o for o in outcomes if o is not None and o.broken]
        self._transition(CrawlState.DONE, base_url)

        report = CrawlReport.completed(base_url, broken, total_pages=len(candidates), partial=partial)
        self.observer.emit(
            CrawlEvent(
                "crawl_finished",
                base_url,
                {"checked": sum(o is not None for o in outcomes), "broken": len(broken), "partial": partial},
            )
        )
        return report

    async def resolve_candidates(self, base_url: str) -> List[str]:
        """Sitemap URLs, or the base page's links when there are none."""
        assert self.client is not None
        resolver = SitemapResolver(self.client, self.config, self.observer)
        urls = await resolver.resolve(base_url)
        if not urls:
            self.observer.emit(CrawlEvent("fallback_extraction", base_url))
            extractor = LinkExtractor(self.client, self.config, self.observer)
            urls = await extractor.extract(base_url)

        mode = self.config.path_normalization
        for key, members in duplicate_groups(urls, mode).items():
            self.observer.emit(CrawlEvent("duplicates", key, {"count": len(members), "urls": members}))
        candidates = build_url_set(urls, mode=mode)
        self.observer.emit(CrawlEvent("candidates_ready", base_url, {"found": len(urls), "unique": len(candidates)}))
        return candidates

    async def check_all(self, candidates: List[str]) -> Tuple[List[Optional[PageOutcome]], bool]:
        """Check *candidates*; slot ``i`` of the result belongs to ``candidates[i]``.

        Slots stay ``None`` for URLs skipped because the crawl budget ran out;
        the returned flag is True in that case.
        """
        assert self.client is not None
        checker = PageChecker(
            self.client,
            self.config,
            throttle=HostThrottle(self.config.inter_request_delay),
            observer=self.observer,
        )
        outcomes: List[Optional[PageOutcome]] = [None] * len(candidates)
        budget = self.config.crawl_budget
        deadline = time.monotonic() + budget if budget is not None else None
        skipped = False

        def out_of_time() -> bool:
            return deadline is not None and time.monotonic() >= deadline

        if self.config.check_concurrency == 1:
            for i, url in enumerate(candidates):
                if out_of_time():
                    skipped = True
                    break
                outcomes[i] = await checker.check(url)
        else:
            queue: asyncio.Queue[Tuple[int, str]] = asyncio.Queue()
            for item in enumerate(candidates):
                queue.put_nowait(item)

            async def worker() -> None:
                nonlocal skipped
                while True:
                    try:
                        i, url = queue.get_nowait()
                    except asyncio.QueueEmpty:
                        return
                    if out_of_time():
                        skipped = True
                        continue
                    outcomes[i] = await checker.check(url)

            workers = [asyncio.create_task(worker()) for _ in range(self.config.check_concurrency)]
            try:
                await asyncio.gather(*workers)
            finally:
                for w in workers:
                    w.cancel()

        if skipped:
            left = sum(o is None for o in outcomes)
            self.observer.emit(CrawlEvent("crawl_budget_exceeded", "", {"budget": budget, "skipped": left}))
        return outcomes, skipped


async def crawl(
    base_url: str,
    config: Optional[CrawlerConfig] = None,
    *,
    client: Optional[HttpClient] = None,
    observer: Optional[CrawlObserver] = None,
) -> CrawlReport:
    """Crawl *base_url* and return its broken-page report."""
    async with LinkCrawler(config, client=client, observer=observer) as crawler:
        return await crawler.crawl(base_url)
