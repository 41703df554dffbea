# url_scan/crawler/observer.py
"""
Crawl event observers.

The crawler reports every discovery and failure through a
:class:`CrawlObserver` instead of writing to the console, so callers can log,
count or capture events.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from url_scan.crawler.models import ClassifiedRecord
from url_scan.logger import get_logger

__all__ = ["CrawlObserver", "LoggingObserver", "ObserverGroup"]


class CrawlObserver:
    """Base observer; every hook is a no-op."""

    def crawl_started(self, start_url: str) -> None:
        pass

    def page_crawling(self, url: str) -> None:
        pass

    def url_classified(self, record: ClassifiedRecord) -> None:
        pass

    def invalid_url(self, url: str, page_url: str) -> None:
        pass

    def embedded_urls_found(self, asset_url: str, urls: Sequence[str]) -> None:
        pass

    def fetch_failed(self, url: str, error: str) -> None:
        pass

    def parse_failed(self, url: str, error: str) -> None:
        pass

    def asset_failed(self, url: str, error: str) -> None:
        pass

    def crawl_finished(self, start_url: str) -> None:
        pass


class LoggingObserver(CrawlObserver):
    """Writes crawl events to the ``UrlScan.crawl`` logger."""

    def __init__(self) -> None:
        self.log = get_logger("crawl")

    def crawl_started(self, start_url: str) -> None:
        self.log.info("Starting crawl: %s", start_url)

    def page_crawling(self, url: str) -> None:
        self.log.info("Crawling: %s", url)

    def url_classified(self, record: ClassifiedRecord) -> None:
        if record.in_scope:
            self.log.info("In-scope URL found: %s", record.url)
        else:
            self.log.info("Out-of-scope URL found: %s", record.url)

    def invalid_url(self, url: str, page_url: str) -> None:
        self.log.debug("Invalid URL found: %s (on %s)", url, page_url)

    def embedded_urls_found(self, asset_url: str, urls: Sequence[str]) -> None:
        for url in urls:
            self.log.debug("URL found in script %s: %s", asset_url, url)

    def fetch_failed(self, url: str, error: str) -> None:
        self.log.warning("Error fetching URL %s: %s", url, error)

    def parse_failed(self, url: str, error: str) -> None:
        self.log.warning("Error parsing HTML for URL %s: %s", url, error)

    def asset_failed(self, url: str, error: str) -> None:
        self.log.warning("Error fetching script URL %s: %s", url, error)

    def crawl_finished(self, start_url: str) -> None:
        self.log.info("SCAN FINISHED: %s", start_url)


class ObserverGroup(CrawlObserver):
    """Fans every event out to several observers, in order."""

    def __init__(self, observers: Iterable[CrawlObserver]) -> None:
        self.observers: List[CrawlObserver] = list(observers)

    def crawl_started(self, start_url: str) -> None:
        for obs in self.observers:
            obs.crawl_started(start_url)

    def page_crawling(self, url: str) -> None:
        for obs in self.observers:
            obs.page_crawling(url)

    def url_classified(self, record: ClassifiedRecord) -> None:
        for obs in self.observers:
            obs.url_classified(record)

    def invalid_url(self, url: str, page_url: str) -> None:
        for obs in self.observers:
            obs.invalid_url(url, page_url)

    def embedded_urls_found(self, asset_url: str, urls: Sequence[str]) -> None:
        for obs in self.observers:
            obs.embedded_urls_found(asset_url, urls)

    def fetch_failed(self, url: str, error: str) -> None:
        for obs in self.observers:
            obs.fetch_failed(url, error)

    def parse_failed(self, url: str, error: str) -> None:
        for obs in self.observers:
            obs.parse_failed(url, error)

    def asset_failed(self, url: str, error: str) -> None:
        for obs in self.observers:
            obs.asset_failed(url, error)

    def crawl_finished(self, start_url: str) -> None:
        for obs in self.observers:
            obs.crawl_finished(start_url)
