"""link_scout.events: structured crawl events and the observers that receive them.

Every component reports progress through :meth:`CrawlObserver.emit` instead
of writing to a global logger.  The default :class:`LoggingObserver` turns
events into log records; tests inject their own observer to assert on the
event stream.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from link_scout.logger import get_logger

__all__ = ["CrawlEvent", "CrawlObserver", "LoggingObserver", "CollectingObserver"]


@dataclass(slots=True, frozen=True)
class CrawlEvent:
    """One step of a crawl: ``kind`` names it, ``data`` carries the details."""

    kind: str
    url: str = ""
    data: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class CrawlObserver(Protocol):
    def emit(self, event: CrawlEvent) -> None: ...


# kind -> level; anything missing is logged at DEBUG
_LEVELS: Dict[str, int] = {
    "crawl_started": logging.INFO,
    "crawl_finished": logging.INFO,
    "crawl_failed": logging.ERROR,
    "crawl_budget_exceeded": logging.WARNING,
    "sitemap_found": logging.INFO,
    "sitemap_error": logging.WARNING,
    "candidates_ready": logging.INFO,
    "fallback_extraction": logging.INFO,
    "links_skipped": logging.WARNING,
    "page_broken": logging.WARNING,
    "site_scan_failed": logging.ERROR,
}


class LoggingObserver:
    """Forward events to a :class:`logging.Logger` (``LinkScout.events`` by default)."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or get_logger("events")

    def emit(self, event: CrawlEvent) -> None:
        level = _LEVELS.get(event.kind, logging.DEBUG)
        if not self.log.isEnabledFor(level):
            return
        details = " ".join(f"{k}={v}" for k, v in event.data.items())
        self.log.log(level, "%s %s %s", event.kind, event.url, details)


class CollectingObserver:
    """Keep every event in memory; handy for reports and tests."""

    def __init__(self) -> None:
        self.events: List[CrawlEvent] = []

    def emit(self, event: CrawlEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]

    def of_kind(self, kind: str) -> List[CrawlEvent]:
        return [e for e in self.events if e.kind == kind]
