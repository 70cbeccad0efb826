"""
Per-host pacing for page checks.

At most one request per host is in flight, and consecutive requests to the
same host are separated by a fixed delay measured from the end of the
previous one.  Different hosts are paced independently, which is what lets
a worker pool make progress without hammering a single origin.
"""
from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

__all__ = ("HostThrottle",)


class HostThrottle:
    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._locks: Dict[str, asyncio.Lock] = {}
        self._ready_at: Dict[str, float] = {}

    @asynccontextmanager
    async def slot(self, host: str) -> AsyncIterator[None]:
        """Hold the request slot for *host* while the body runs."""
        lock = self._locks.setdefault(host, asyncio.Lock())
        async with lock:
            wait = self._ready_at.get(host, 0.0) - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            try:
                yield
            finally:
                self._ready_at[host] = time.monotonic() + self.delay
