# File: url_scan/engine.py
"""url_scan.engine: opens the output files and runs one crawl."""

from __future__ import annotations

from typing import Optional

from url_scan.aggregator import CrawlSummary
from url_scan.config import CrawlConfig
from url_scan.crawler.crawler import ScopeCrawler
from url_scan.crawler.observer import CrawlObserver
from url_scan.logger import logger
from url_scan.output.sink import OutputSink

__all__ = ["start_crawl"]


async def start_crawl(cfg: CrawlConfig, observer: Optional[CrawlObserver] = None) -> CrawlSummary:
    """
    Run a complete crawl for *cfg* and return its summary.

    Output files are created before any request is made; an OSError there
    propagates and nothing is crawled. The files are closed whatever the
    outcome of the crawl.
    """
    sink = OutputSink.open(cfg.output, unique=cfg.unique_records)
    logger.info("Writing results to %s", ", ".join(str(p) for p in sink.paths))
    try:
        async with ScopeCrawler(cfg, sink, observer=observer) as crawler:
            return await crawler.crawl()
    except BaseException:
        await sink.close()
        raise
