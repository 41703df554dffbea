# url_scan/crawler/link_extractor.py
"""
Link extraction for UrlScan.

Two sources feed the candidate list of a page:

* URL-bearing attributes of the parsed HTML document;
* absolute ``http(s)://`` strings found in the raw text of any candidate
  that looks like a code or document asset (``.js``, ``.json``, ``.pdf`` …).
  Those assets are fetched separately; a failure there only skips the asset.
"""
from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Optional, Sequence, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from url_scan.crawler.fetcher import Fetcher
from url_scan.crawler.observer import CrawlObserver
from url_scan.utils import is_valid_url, resolve_url

__all__: Sequence[str] = (
    "LINK_ATTRIBUTES",
    "CODE_EXTENSIONS",
    "LinkExtractor",
    "extract_links",
    "find_urls_in_text",
    "is_code_asset",
    "parse_document",
)

_SOURCE_ATTRS = frozenset({"href", "src", "data", "action"})

#: tag name -> attributes holding a URL
LINK_ATTRIBUTES: Dict[str, FrozenSet[str]] = {
    **dict.fromkeys(
        (
            "a", "link", "img", "iframe", "frame", "embed", "script", "source", "track",
            "video", "audio", "applet", "object", "area", "base", "input", "form",
        ),
        _SOURCE_ATTRS,
    ),
    "meta": frozenset({"content"}),
    "button": frozenset({"formaction"}),
    **dict.fromkeys(("blockquote", "del", "ins", "q"), frozenset({"cite"})),
    "command": frozenset({"icon"}),
    "data": frozenset({"value"}),
}

CODE_EXTENSIONS: tuple[str, ...] = (
    ".js", ".jsp", ".xml", ".html", ".htm", ".php", ".asp", ".aspx", ".css", ".json",
    ".txt", ".md", ".yaml", ".csv", ".doc", ".docx", ".pdf", ".ppt", ".pptx", ".xls",
    ".xlsx", ".ts", ".py", ".rb", ".java", ".c", ".h", ".cs", ".swift", ".kt",
    ".pl", ".sh", ".bat", ".go",
)

_TEXT_URL_RE = re.compile(r"https?://[^\s\"']+")


def parse_document(content: Union[str, bytes]) -> BeautifulSoup:
    """Parse HTML markup (text or raw bytes) with the stdlib-backed parser."""
    return BeautifulSoup(content, "html.parser")


def _meta_target(value: str) -> Optional[str]:
    # <meta http-equiv="refresh" content="0; url=/next">
    if "url=" not in value and "URL=" not in value:
        return None
    return value.split("=", 1)[1].strip()


def extract_links(base_url: str, soup: BeautifulSoup) -> List[str]:
    """
    Return every URL referenced by link-bearing attributes of *soup*.

    Tags are visited in document order, attributes in source order. Values
    are resolved against *base_url*; nothing is validated or deduplicated.
    """
    links: List[str] = []
    for tag in soup.find_all(list(LINK_ATTRIBUTES)):
        if not isinstance(tag, Tag):
            continue
        wanted = LINK_ATTRIBUTES[tag.name]
        for key, value in tag.attrs.items():
            if key not in wanted or not isinstance(value, str):
                continue
            if tag.name == "meta":
                target = _meta_target(value)
                if target is None:
                    continue
                value = target
            links.append(resolve_url(base_url, value))
    return links


def is_code_asset(url: str) -> bool:
    """True when the URL path ends with a script/document extension."""
    try:
        path = urlparse(url).path
    except ValueError:
        return False
    return path.lower().endswith(CODE_EXTENSIONS)


def find_urls_in_text(text: str) -> List[str]:
    """All literal absolute http(s) URLs in *text*, in order of appearance."""
    return _TEXT_URL_RE.findall(text)


class LinkExtractor:
    """Builds the candidate list for one fetched page."""

    def __init__(self, fetcher: Fetcher, observer: Optional[CrawlObserver] = None) -> None:
        self.fetcher = fetcher
        self.observer = observer or CrawlObserver()

    async def extract(self, base_url: str, content: Union[str, bytes]) -> List[str]:
        """
        Parse *content* and return page links plus URLs embedded in assets.

        Parsing errors propagate to the caller; asset fetch errors do not.
        """
        soup = parse_document(content)
        candidates = extract_links(base_url, soup)
        candidates.extend(await self.discover_embedded(candidates))
        return candidates

    async def discover_embedded(self, candidates: Sequence[str]) -> List[str]:
        """
        Fetch every code-asset candidate and collect the URLs in its body.

        An asset listed several times is fetched once per occurrence.
        """
        found: List[str] = []
        for candidate in list(candidates):
            if not is_valid_url(candidate) or not is_code_asset(candidate):
                continue
            result = await self.fetcher.fetch(candidate)
            if not result.ok:
                self.observer.asset_failed(candidate, result.error or "empty body")
                continue
            urls = find_urls_in_text(result.text())
            if urls:
                self.observer.embedded_urls_found(candidate, urls)
            found.extend(urls)
        return found
