"""link_scout.errors: exception hierarchy shared by the crawler components."""

from __future__ import annotations

__all__ = [
    "LinkScoutError",
    "InvalidUrlError",
    "FetchError",
    "FetchTimeoutError",
    "ExtractionError",
]


class LinkScoutError(Exception):
    """Base class for every error raised by LinkScout."""


class InvalidUrlError(LinkScoutError, ValueError):
    """The base URL cannot be crawled (no http(s) scheme or no host)."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid URL: {url!r}")
        self.url = url


class FetchError(LinkScoutError):
    """Transport level failure: DNS, TLS, connection reset, bad redirect chain..."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url
        self.message = message


class FetchTimeoutError(FetchError):
    """The request did not complete within its timeout and was aborted."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(url, f"Request timed out after {timeout:g} seconds")
        self.timeout = timeout


class ExtractionError(LinkScoutError):
    """The base page could not be fetched, so no candidate set exists."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch base page {url}: {reason}")
        self.url = url
        self.reason = reason
