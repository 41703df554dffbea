# url_scan/crawler/fetcher.py
"""
Fetcher module: HTTP GET with a single scheme-flip retry.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession

from url_scan.crawler.models import FetchResult
from url_scan.logger import get_logger
from url_scan.utils import flip_scheme

__all__ = ["Fetcher", "DEFAULT_USER_AGENT"]

#: Chrome on Windows, accepted by most servers.
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/58.0.3029.110 Safari/537.3"
)

log = get_logger("fetcher")


class Fetcher:
    """Retrieves raw bytes for a URL through a shared aiohttp session.

    The session is expected to carry the User-Agent header. A failed attempt
    (transport error or any status other than 200) is retried exactly once
    with ``http`` and ``https`` swapped.
    """

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch *url*, falling back to the other scheme once.

        Returns a FetchResult; ``error`` is set when both attempts failed.
        """
        first = await self._get(url)
        if first.ok:
            return first

        try:
            alternate = flip_scheme(url)
        except ValueError:
            return first
        log.debug("Retrying %s as %s after: %s", url, alternate, first.error)
        second = await self._get(alternate)
        if second.ok:
            return second
        second.url = url
        return second

    async def _get(self, url: str) -> FetchResult:
        try:
            async with self.session.get(url, raise_for_status=False) as resp:
                if resp.status != 200:
                    return FetchResult(url, final_url=str(resp.url), status=resp.status, error=f"HTTP {resp.status}")
                body = await resp.read()
                return FetchResult(url, content=body, final_url=str(resp.url), status=resp.status)
        except asyncio.TimeoutError:
            return FetchResult(url, error="timeout")
        except (ClientError, OSError, ValueError) as exc:
            return FetchResult(url, error=f"{type(exc).__name__}: {exc}")
