"""
Data models for the LinkScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class CrawlState(str, Enum):
    START = "start"
    RESOLVING_URLS = "resolving_urls"
    CHECKING = "checking"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class PageOutcome:
    """Result of checking one candidate URL.

    A broken outcome carries exactly one of ``status`` (HTTP >= 400) or
    ``error`` (transport failure or timeout).  A healthy outcome may keep
    the observed status for information.
    """

    url: str
    broken: bool = False
    status: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def healthy(cls, url: str, status: Optional[int] = None) -> PageOutcome:
        return cls(url=url, broken=False, status=status)

    @classmethod
    def broken_status(cls, url: str, status: int) -> PageOutcome:
        return cls(url=url, broken=True, status=status)

    @classmethod
    def broken_error(cls, url: str, error: str) -> PageOutcome:
        return cls(url=url, broken=True, error=error or "Unknown fetch error")

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"url": self.url}
        if self.error is not None:
            data["error"] = self.error
        elif self.status is not None:
            data["status"] = self.status
        return data


@dataclass(slots=True)
class CrawlReport:
    """Aggregate result of one crawl.

    ``success`` tells whether the crawl mechanism completed; it says nothing
    about page health.  ``broken_pages`` keeps candidate order.
    """

    base_url: str
    success: bool
    message: str
    broken_pages: List[PageOutcome] = field(default_factory=list)
    total_pages: int = 0
    state: CrawlState = CrawlState.DONE
    partial: bool = False

    @classmethod
    def completed(
        cls, base_url: str, broken: List[PageOutcome], total_pages: int, *, partial: bool = False
    ) -> CrawlReport:
        if broken:
            message = f"There are {len(broken)} broken pages"
        else:
            message = "No broken pages found"
        return cls(
            base_url=base_url,
            success=True,
            message=message,
            broken_pages=list(broken),
            total_pages=total_pages,
            state=CrawlState.DONE,
            partial=partial,
        )

    @classmethod
    def failed(cls, base_url: str, message: str) -> CrawlReport:
        return cls(base_url=base_url, success=False, message=message, state=CrawlState.FAILED)

    @property
    def error(self) -> bool:
        return not self.success or bool(self.broken_pages)

    def to_response(self) -> Dict[str, Any]:
        """Shape consumed by the endpoint/UI layer."""
        response: Dict[str, Any] = {"error": self.error, "message": self.message}
        if self.broken_pages:
            response["pages"] = [{"url": page.url} for page in self.broken_pages]
        return response


@dataclass(slots=True)
class ScanResult:
    """Record handed to the site store after a scan."""

    url_id: str
    success: bool
    message: str
    broken_pages: List[PageOutcome] = field(default_factory=list)
    total_pages: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @classmethod
    def from_report(cls, url_id: str, report: CrawlReport) -> ScanResult:
        if not report.success:
            message = f"Error: {report.message}"
        elif report.broken_pages:
            message = f"Found {len(report.broken_pages)} broken pages"
        else:
            message = "No broken pages found"
        return cls(
            url_id=url_id,
            success=report.success,
            message=message,
            broken_pages=list(report.broken_pages),
            total_pages=report.total_pages,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "urlId": self.url_id,
            "timestamp": self.timestamp,
            "brokenPages": [page.as_dict() for page in self.broken_pages],
            "success": self.success,
            "message": self.message,
            "totalPages": self.total_pages,
        }
