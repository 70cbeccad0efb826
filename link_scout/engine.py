# File: link_scout/engine.py
"""link_scout.engine: запуск проверок для одного сайта и для всех зарегистрированных."""

from __future__ import annotations

import asyncio
from typing import Dict, Iterable, List, Optional, Protocol

from link_scout.config import CrawlerConfig, SiteRecord
from link_scout.crawler.crawler import crawl
from link_scout.crawler.fetcher import HttpClient
from link_scout.crawler.models import CrawlReport, ScanResult
from link_scout.events import CrawlEvent, CrawlObserver, LoggingObserver

__all__ = ["SiteStore", "InMemorySiteStore", "crawl_site", "scan_site", "scan_all"]


class SiteStore(Protocol):
    """Registered-site storage owned by the host application."""

    def list_sites(self) -> List[SiteRecord]: ...

    def save_result(self, result: ScanResult) -> None: ...


class InMemorySiteStore:
    """Store kept in process memory; backs the CLI's ``scan-all`` and tests."""

    def __init__(self, sites: Iterable[SiteRecord] = ()) -> None:
        self._sites: Dict[str, SiteRecord] = {s.id: s for s in sites}
        self.results: List[ScanResult] = []

    def list_sites(self) -> List[SiteRecord]:
        return list(self._sites.values())

    def save_result(self, result: ScanResult) -> None:
        self.results.append(result)

    def latest(self, url_id: str) -> Optional[ScanResult]:
        for result in reversed(self.results):
            if result.url_id == url_id:
                return result
        return None


async def crawl_site(
    url: str,
    config: CrawlerConfig,
    *,
    client: Optional[HttpClient] = None,
    observer: Optional[CrawlObserver] = None,
) -> CrawlReport:
    """Проверяет один сайт и возвращает CrawlReport."""
    return await crawl(url, config, client=client, observer=observer)


async def scan_site(
    site: SiteRecord,
    config: CrawlerConfig,
    *,
    client: Optional[HttpClient] = None,
    observer: Optional[CrawlObserver] = None,
) -> ScanResult:
    """Проверяет зарегистрированный сайт и превращает отчёт в запись ScanResult."""
    observer = observer or LoggingObserver()
    try:
        report = await crawl_site(site.url, config, client=client, observer=observer)
    except Exception as exc:
        observer.emit(CrawlEvent("site_scan_failed", site.url, {"site": site.id, "error": str(exc)}))
        report = CrawlReport.failed(site.url, str(exc) or type(exc).__name__)
    return ScanResult.from_report(site.id, report)


async def scan_all(
    sites: Iterable[SiteRecord],
    config: CrawlerConfig,
    *,
    client: Optional[HttpClient] = None,
    observer: Optional[CrawlObserver] = None,
    store: Optional[SiteStore] = None,
) -> List[ScanResult]:
    """Проверяет все сайты, не более ``config.max_concurrent_sites`` одновременно.

    Результаты возвращаются в порядке *sites* и, если передан *store*,
    сохраняются в нём по мере готовности.
    """
    observer = observer or LoggingObserver()
    semaphore = asyncio.Semaphore(config.max_concurrent_sites)

    async def _one(site: SiteRecord) -> ScanResult:
        async with semaphore:
            observer.emit(CrawlEvent("site_scan_started", site.url, {"site": site.id}))
            result = await scan_site(site, config, client=client, observer=observer)
        if store is not None:
            store.save_result(result)
        return result

    return list(await asyncio.gather(*(_one(site) for site in sites)))
