# link_scout/crawler/fetcher.py
"""
Fetcher module: the HTTP capability used by every crawler component.

Components depend on the :class:`HttpClient` protocol only, so tests can
substitute an in-memory fake.  :class:`AiohttpClient` is the production
implementation: one shared :class:`aiohttp.ClientSession`, browser-like
headers and an explicit timeout on every call.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Optional, Protocol, runtime_checkable

from aiohttp import ClientError, ClientSession, ClientTimeout

from link_scout.config import CrawlerConfig
from link_scout.errors import FetchError, FetchTimeoutError

__all__ = ("HttpResponse", "HttpClient", "AiohttpClient")


@dataclass(slots=True, frozen=True)
class HttpResponse:
    """Final status (after redirects) and, when requested, the raw body."""

    url: str
    status: int
    body: bytes = b""
    content_type: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


@runtime_checkable
class HttpClient(Protocol):
    async def request(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        read_body: bool = False,
    ) -> HttpResponse:
        """Perform one request.

        Raises :class:`FetchTimeoutError` when *timeout* expires and
        :class:`FetchError` for any other transport failure.
        """
        ...


class AiohttpClient:
    """aiohttp-backed :class:`HttpClient`; use as an async context manager."""

    def __init__(
        self,
        config: Optional[CrawlerConfig] = None,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.config = config or CrawlerConfig()
        self._headers = headers if headers is not None else self.config.request_headers()
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> AiohttpClient:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers=self._headers,
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def request(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        read_body: bool = False,
    ) -> HttpResponse:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.request(
                method,
                url,
                timeout=ClientTimeout(total=timeout),
                allow_redirects=True,
            ) as resp:
                body = await resp.read() if read_body else b""
                return HttpResponse(
                    url=str(resp.url),
                    status=resp.status,
                    body=body,
                    content_type=resp.headers.get("Content-Type", "").split(";", 1)[0].lower(),
                )
        except asyncio.TimeoutError as exc:
            raise FetchTimeoutError(url, timeout) from exc
        except ClientError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            # yarl rejects some malformed URLs before any I/O happens
            raise FetchError(url, f"Invalid URL: {exc}") from exc
