"""url_scan.crawler: frontier, fetcher, link extraction, scope and the crawl coordinator."""

from .crawler import CrawlState, ScopeCrawler
from .frontier import Frontier
from .models import Classification, ClassifiedRecord, FetchResult, ScopePolicy
from .scope import classify

__all__ = [
    "Classification",
    "ClassifiedRecord",
    "CrawlState",
    "FetchResult",
    "Frontier",
    "ScopeCrawler",
    "ScopePolicy",
    "classify",
]
