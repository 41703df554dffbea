# === FILE: url_scan/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from aiohttp import ClientSession, ClientTimeout

from url_scan.aggregator import CrawlSummary, SummaryCollector
from url_scan.crawler.fetcher import Fetcher
from url_scan.crawler.frontier import Frontier
from url_scan.crawler.link_extractor import LinkExtractor
from url_scan.crawler.models import Classification, ClassifiedRecord
from url_scan.crawler.observer import CrawlObserver, LoggingObserver, ObserverGroup
from url_scan.crawler.scope import classify
from url_scan.output.sink import OutputSink

__all__ = ("CrawlState", "ScopeCrawler")


class CrawlState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    FINISHED = "finished"


class ScopeCrawler:
    """Scope-aware crawler: fetch, extract, classify, record, follow.

    Usage::

        async with ScopeCrawler(config, sink) as crawler:
            summary = await crawler.crawl()
    """

    def __init__(
        self,
        config,
        sink: OutputSink,
        observer: Optional[CrawlObserver] = None,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.config = config
        self.policy = config.policy
        self.sink = sink
        self.frontier = Frontier()
        self.state = CrawlState.IDLE
        self.session: Optional[ClientSession] = None
        self.fetcher = fetcher
        self.collector = SummaryCollector()
        self.observer = ObserverGroup([self.collector, observer or LoggingObserver()])
        self.extractor: Optional[LinkExtractor] = None
        self.logger = logging.getLogger("UrlScan")

    async def __aenter__(self) -> ScopeCrawler:
        if self.fetcher is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            self.fetcher = Fetcher(self.session)
        self.extractor = LinkExtractor(self.fetcher, self.observer)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlSummary:
        if self.state is not CrawlState.IDLE:
            raise RuntimeError(f"crawl() called in state {self.state.value}")
        if self.extractor is None:
            raise RuntimeError("ScopeCrawler must be used as an async context manager")

        start_url = self.config.start_url
        self.state = CrawlState.RUNNING
        self.observer.crawl_started(start_url)
        await self.frontier.enqueue_if_new(start_url)
        self.sink.start()
        workers: List[asyncio.Task[None]] = [
            asyncio.create_task(self._worker(), name=f"crawl-worker-{i}")
            for i in range(self.config.workers)
        ]
        try:
            await self.frontier.wait_drained()
        finally:
            self.state = CrawlState.DRAINING
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            await self.sink.close()

        self.observer.crawl_finished(start_url)
        self.state = CrawlState.FINISHED
        summary = self.collector.summary
        summary.output_files = [str(p) for p in self.sink.paths if p is not None]
        return summary

    async def _worker(self) -> None:
        while True:
            url = await self.frontier.dequeue()
            try:
                await self.process_url(url)
            except Exception:
                self.logger.exception("Unexpected error while processing %s", url)
            finally:
                self.frontier.mark_done()

    async def process_url(self, url: str) -> None:
        """Fetch one page and route every URL found on it."""
        if self.fetcher is None or self.extractor is None:
            raise RuntimeError("Fetcher not initialized")
        self.observer.page_crawling(url)
        result = await self.fetcher.fetch(url)
        if not result.ok:
            self.observer.fetch_failed(url, result.error or "empty body")
            return

        try:
            candidates = await self.extractor.extract(result.base_url, result.content or b"")
        except Exception as exc:
            self.observer.parse_failed(url, f"{type(exc).__name__}: {exc}")
            return

        for candidate in candidates:
            await self.route(candidate, page_url=url)

    async def route(self, url: str, *, page_url: str = "") -> Classification:
        """Classify *url*, record it and queue it when in scope."""
        classification = classify(url, self.policy)
        if classification is Classification.INVALID:
            self.observer.invalid_url(url, page_url)
            return classification

        record = ClassifiedRecord(classification, url)
        self.observer.url_classified(record)
        self.sink.emit(record)
        if classification is Classification.IN_SCOPE:
            await self.frontier.enqueue_if_new(url)
        return classification
