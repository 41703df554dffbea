# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import pytest
from aiohttp import web

from url_scan.config import CrawlConfig
from url_scan.crawler.models import ClassifiedRecord, FetchResult
from url_scan.crawler.observer import CrawlObserver

#: body, or (body, content_type), or a callable building either from the site base URL
PageSpec = Union[str, Tuple[str, str], Callable[[str], Union[str, Tuple[str, str]]]]


class StaticSite:
    """Serve a fixed set of pages on 127.0.0.1 and count requests per path."""

    def __init__(self, pages: Dict[str, PageSpec], port: int) -> None:
        self.pages = pages
        self.port = port
        self.hits: Counter[str] = Counter()
        self.user_agents: List[str] = []
        self._runner: Optional[web.AppRunner] = None

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    async def _handle(self, request: web.Request) -> web.Response:
        self.hits[request.path] += 1
        self.user_agents.append(request.headers.get("User-Agent", ""))
        spec = self.pages.get(request.path)
        if spec is None:
            return web.Response(status=404, text="not found")
        if callable(spec):
            spec = spec(self.url)
        body, ctype = spec if isinstance(spec, tuple) else (spec, "text/html")
        return web.Response(text=body, content_type=ctype)

    async def __aenter__(self) -> StaticSite:
        app = web.Application()
        app.router.add_get("/{tail:.*}", self._handle)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, "127.0.0.1", self.port)
        await site.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._runner is not None:
            await self._runner.cleanup()


class RecordingObserver(CrawlObserver):
    """Keeps every event for assertions."""

    def __init__(self) -> None:
        self.crawled: List[str] = []
        self.records: List[ClassifiedRecord] = []
        self.invalid: List[str] = []
        self.embedded: Dict[str, List[str]] = {}
        self.fetch_errors: List[str] = []
        self.parse_errors: List[str] = []
        self.asset_errors: List[str] = []
        self.finished = False

    def page_crawling(self, url: str) -> None:
        self.crawled.append(url)

    def url_classified(self, record: ClassifiedRecord) -> None:
        self.records.append(record)

    def invalid_url(self, url: str, page_url: str) -> None:
        self.invalid.append(url)

    def embedded_urls_found(self, asset_url: str, urls: Sequence[str]) -> None:
        self.embedded.setdefault(asset_url, []).extend(urls)

    def fetch_failed(self, url: str, error: str) -> None:
        self.fetch_errors.append(url)

    def parse_failed(self, url: str, error: str) -> None:
        self.parse_errors.append(url)

    def asset_failed(self, url: str, error: str) -> None:
        self.asset_errors.append(url)

    def crawl_finished(self, start_url: str) -> None:
        self.finished = True


class FakeFetcher:
    """In-memory stand-in for Fetcher: url -> body; missing URLs fail."""

    def __init__(self, pages: Dict[str, Union[str, bytes]]) -> None:
        self.pages = pages
        self.calls: Counter[str] = Counter()

    async def fetch(self, url: str) -> FetchResult:
        self.calls[url] += 1
        body = self.pages.get(url)
        if body is None:
            return FetchResult(url, status=404, error="HTTP 404")
        if isinstance(body, str):
            body = body.encode("utf-8")
        return FetchResult(url, content=body, final_url=url, status=200)


@pytest.fixture()
def site_factory(unused_tcp_port: int) -> Callable[[Dict[str, PageSpec]], StaticSite]:
    """Build a StaticSite bound to a free port."""
    return lambda pages: StaticSite(pages, unused_tcp_port)


@pytest.fixture()
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture()
def make_config(tmp_path: Path) -> Callable[..., CrawlConfig]:
    """CrawlConfig factory writing output under tmp_path."""

    def factory(start_url: str, **overrides) -> CrawlConfig:
        overrides.setdefault("output", tmp_path / "out.txt")
        overrides.setdefault("timeout", 5.0)
        return CrawlConfig(start_url=start_url, **overrides)

    return factory
