# File: url_scan/aggregator.py
"""url_scan.aggregator: crawl summary built from observer events."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence

from url_scan.crawler.models import ClassifiedRecord
from url_scan.crawler.observer import CrawlObserver
from url_scan.utils import remove_duplicates

__all__ = ["CrawlSummary", "SummaryCollector"]


@dataclass(slots=True)
class CrawlSummary:
    """Totals and discovered URLs of one crawl."""

    start_url: str = ""
    pages_crawled: int = 0
    fetch_failures: int = 0
    parse_failures: int = 0
    asset_failures: int = 0
    invalid_urls: int = 0
    embedded_urls: int = 0
    records: int = 0
    in_scope: List[str] = field(default_factory=list)
    out_of_scope: List[str] = field(default_factory=list)
    duration: float = 0.0
    output_files: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)

    def headline(self) -> str:
        """One-line human summary used by the CLI."""
        return (
            f"{self.pages_crawled} pages crawled, {len(self.in_scope)} in-scope and "
            f"{len(self.out_of_scope)} out-of-scope URLs in {self.duration:.2f}s"
        )


class SummaryCollector(CrawlObserver):
    """Observer that accumulates a :class:`CrawlSummary`."""

    def __init__(self) -> None:
        self.summary = CrawlSummary()
        self._in_scope: List[str] = []
        self._out_of_scope: List[str] = []
        self._started: Optional[float] = None

    def crawl_started(self, start_url: str) -> None:
        self.summary.start_url = start_url
        self._started = time.monotonic()

    def page_crawling(self, url: str) -> None:
        self.summary.pages_crawled += 1

    def url_classified(self, record: ClassifiedRecord) -> None:
        self.summary.records += 1
        (self._in_scope if record.in_scope else self._out_of_scope).append(record.url)

    def invalid_url(self, url: str, page_url: str) -> None:
        self.summary.invalid_urls += 1

    def embedded_urls_found(self, asset_url: str, urls: Sequence[str]) -> None:
        self.summary.embedded_urls += len(urls)

    def fetch_failed(self, url: str, error: str) -> None:
        self.summary.fetch_failures += 1

    def parse_failed(self, url: str, error: str) -> None:
        self.summary.parse_failures += 1

    def asset_failed(self, url: str, error: str) -> None:
        self.summary.asset_failures += 1

    def crawl_finished(self, start_url: str) -> None:
        self.summary.in_scope = remove_duplicates(self._in_scope)
        self.summary.out_of_scope = remove_duplicates(self._out_of_scope)
        if self._started is not None:
            self.summary.duration = time.monotonic() - self._started
