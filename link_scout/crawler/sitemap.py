"""
Sitemap discovery: probe the conventional locations, follow sitemap indexes
and collect page URLs, optionally restricted to the base URL's locale.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional, Set

from link_scout.config import CrawlerConfig
from link_scout.crawler.fetcher import HttpClient
from link_scout.crawler.url_set import build_url_set
from link_scout.errors import FetchError
from link_scout.events import CrawlEvent, CrawlObserver, LoggingObserver
from link_scout.parser.sitemap_parser import parse_sitemap
from link_scout.utils import first_path_segment, is_sitemap_url, origin_of, remove_duplicates, site_root

__all__ = ("SitemapResolver", "sitemap_locations")


def sitemap_locations(base_url: str) -> List[str]:
    """Ordered sitemap URLs to probe for *base_url*.

    A base URL that already names a sitemap is its own single location.
    """
    if is_sitemap_url(base_url):
        return [base_url]
    root = site_root(base_url)
    return remove_duplicates(
        [
            f"{root}sitemap.xml",
            f"{root}sitemap_index.xml",
            f"{origin_of(base_url)}/sitemap.xml",
        ]
    )


class SitemapResolver:
    """Turns a base URL into the page URLs its sitemaps list.

    Every fetch is best effort: an unreachable location, a non-2xx answer or
    a document that is not a sitemap contributes nothing, and resolution
    moves on.  Nested sitemap indexes are followed up to
    ``config.max_sitemap_depth`` levels.
    """

    def __init__(
        self,
        client: HttpClient,
        config: Optional[CrawlerConfig] = None,
        observer: Optional[CrawlObserver] = None,
    ) -> None:
        self.client = client
        self.config = config or CrawlerConfig()
        self.observer = observer or LoggingObserver()

    async def resolve(self, base_url: str) -> List[str]:
        locale = self.locale_of(base_url)
        visited: Set[str] = set()
        found: List[str] = []
        for location in sitemap_locations(base_url):
            self.observer.emit(CrawlEvent("sitemap_probe", location))
            urls = await self._collect(location, depth=0, visited=visited)
            if not urls:
                continue
            self.observer.emit(CrawlEvent("sitemap_found", location, {"urls": len(urls)}))
            if locale:
                kept = [u for u in urls if first_path_segment(u) == locale]
                self.observer.emit(
                    CrawlEvent("locale_filtered", location, {"locale": locale, "kept": len(kept), "total": len(urls)})
                )
                urls = kept
            found.extend(urls)

        unique = build_url_set(found, mode=self.config.path_normalization)
        self.observer.emit(CrawlEvent("sitemap_resolved", base_url, {"found": len(found), "unique": len(unique)}))
        return unique

    def locale_of(self, base_url: str) -> Optional[str]:
        """Locale segment used to filter sitemap URLs, if filtering applies."""
        if not self.config.locale_filter:
            return None
        return first_path_segment(site_root(base_url))

    async def _collect(self, sitemap_url: str, *, depth: int, visited: Set[str]) -> List[str]:
        if sitemap_url in visited:
            return []
        visited.add(sitemap_url)

        try:
            resp = await self.client.request(
                "GET", sitemap_url, timeout=self.config.timeout, read_body=True
            )
        except FetchError as exc:
            self.observer.emit(CrawlEvent("sitemap_error", sitemap_url, {"error": exc.message}))
            return []
        if not resp.ok:
            self.observer.emit(CrawlEvent("sitemap_missing", sitemap_url, {"status": resp.status}))
            return []

        doc = parse_sitemap(resp.body)
        if not doc.is_index:
            return doc.locs

        if depth >= self.config.max_sitemap_depth:
            self.observer.emit(
                CrawlEvent("sitemap_depth_exceeded", sitemap_url, {"depth": depth, "nested": len(doc.locs)})
            )
            return []
        self.observer.emit(CrawlEvent("sitemap_index", sitemap_url, {"nested": len(doc.locs)}))
        nested = await asyncio.gather(
            *(self._collect(loc, depth=depth + 1, visited=visited) for loc in doc.locs)
        )
        return [url for chunk in nested for url in chunk]
