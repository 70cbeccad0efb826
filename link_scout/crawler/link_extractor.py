# link_scout/crawler/link_extractor.py
"""
Fallback discovery: same-domain links found on the base page itself.
"""
from __future__ import annotations

from typing import List, Optional

from link_scout.config import CrawlerConfig
from link_scout.crawler.fetcher import HttpClient
from link_scout.errors import ExtractionError, FetchError
from link_scout.events import CrawlEvent, CrawlObserver, LoggingObserver
from link_scout.parser.html_parser import extract_links
from link_scout.utils import hostname_of, is_http_url, remove_duplicates

__all__ = ("LinkExtractor",)


class LinkExtractor:
    """Fetch one page and return the in-domain URLs it references.

    Cross-domain targets are never returned.  Duplicates are removed by exact
    string match, keeping document order.  A base page served with a
    non-HTML content type yields no links.
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

    async def extract(self, base_url: str) -> List[str]:
        try:
            resp = await self.client.request(
                "GET", base_url, timeout=self.config.timeout, read_body=True
            )
        except FetchError as exc:
            raise ExtractionError(base_url, exc.message) from exc
        if resp.status >= 400:
            raise ExtractionError(base_url, f"HTTP {resp.status}")
        if resp.content_type and "html" not in resp.content_type:
            self.observer.emit(
                CrawlEvent("links_skipped", base_url, {"content_type": resp.content_type})
            )
            return []

        host = hostname_of(base_url)
        links = [
            url
            for url in extract_links(resp.text(), base_url, self.config.link_scope)
            if is_http_url(url) and hostname_of(url) == host
        ]
        unique = remove_duplicates(links)
        self.observer.emit(
            CrawlEvent("links_extracted", base_url, {"links": len(unique), "scope": self.config.link_scope})
        )
        return unique
