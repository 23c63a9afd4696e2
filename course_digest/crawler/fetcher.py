# course_digest/crawler/fetcher.py
"""
Fetcher module: HTTP GET with a shared rate limit, retry/backoff and timeout.
"""
from __future__ import annotations

import asyncio
import random
import time
from typing import Optional, Sequence

from aiohttp import ClientError, ClientResponseError, ClientSession, ClientTimeout

from course_digest.config import ScraperConfig
from course_digest.crawler.models import PageData
from course_digest.logger import logger


class FetchError(Exception):
    """A page could not be retrieved.

    ``kind`` is one of ``"network"``, ``"server"`` or ``"decoding"``.
    """

    def __init__(self, url: str, kind: str, reason: object) -> None:
        super().__init__(f"{kind.capitalize()} error on {url}: {reason}")
        self.url = url
        self.kind = kind
        self.reason = reason


class Fetcher:
    """Async page fetcher shared by every scraping step of a run."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: ScraperConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._rate_lock = asyncio.Lock()
        self._last_request_ts = 0.0

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> PageData:
        """Return the page at *url* or raise :class:`FetchError`."""
        if not self.session:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            await self._wait_for_rate_limit()
            try:
                async with self.session.get(url) as resp:
                    if resp.status in self._RETRY_STATUS:
                        raise ClientResponseError(
                            resp.request_info, resp.history, status=resp.status, message=resp.reason or ""
                        )
                    if resp.status >= 400:
                        raise FetchError(url, "server", f"HTTP {resp.status}")
                    try:
                        text = await resp.text()
                    except (UnicodeDecodeError, LookupError) as exc:
                        raise FetchError(url, "decoding", exc) from exc
                    return PageData(str(resp.url), text)
            except (ClientError, asyncio.TimeoutError) as exc:
                attempts += 1
                if attempts > self.config.retry_times:
                    kind = "server" if isinstance(exc, ClientResponseError) else "network"
                    reason = f"HTTP {exc.status}" if isinstance(exc, ClientResponseError) else exc
                    raise FetchError(url, kind, str(reason) or type(exc).__name__) from exc
                backoff = min(60, self.config.backoff * (2**attempts + random.random()))
                logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff)
                await asyncio.sleep(backoff)

    async def get_text(self, url: str) -> str:
        """Shortcut returning only the body of :meth:`fetch`."""
        page = await self.fetch(url)
        return page.content

    async def _wait_for_rate_limit(self) -> None:
        interval = 1 / self.config.rate_limit
        async with self._rate_lock:
            now = time.monotonic()
            wait = interval - (now - self._last_request_ts)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_request_ts = time.monotonic()


__all__ = ["FetchError", "Fetcher"]
