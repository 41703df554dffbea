# File: url_scan/utils.py
"""url_scan.utils: URL helpers shared by the classifier, extractor and fetcher."""

from __future__ import annotations

from typing import Collection, List, Sequence
from urllib.parse import urljoin, urlparse, urlsplit, urlunparse

from url_scan.logger import logger

__all__: Sequence[str] = (
    "is_valid_url",
    "extract_host",
    "resolve_url",
    "flip_scheme",
    "remove_duplicates",
)

_WEB_SCHEMES = ("http", "https")


def is_valid_url(url: str) -> bool:
    """Return True for absolute http(s) URLs that carry a host."""
    try:
        parsed = urlparse(url)
        return parsed.scheme in _WEB_SCHEMES and bool(parsed.hostname)
    except ValueError as exc:
        logger.debug("URL does not parse %s: %s", url, exc)
        return False


def extract_host(url: str) -> str:
    """Host part of *url* as written, without credentials or port; ``""`` if absent.

    Unlike ``urlparse().hostname`` the case of the host is preserved.
    """
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        return ""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        return hostport[1:].partition("]")[0]
    return hostport.partition(":")[0]


def resolve_url(base: str, href: str) -> str:
    """Resolve *href* against *base* (RFC 3986).

    Absolute references are returned unchanged. Anything that fails to parse,
    the reference or the base, is passed through as-is.
    """
    candidate = href.strip()
    try:
        if urlparse(candidate).scheme:
            return candidate
        urlparse(base)
        return urljoin(base, candidate)
    except ValueError:
        return href


def flip_scheme(url: str) -> str:
    """Swap ``http`` for ``https`` and vice versa."""
    parsed = urlparse(url)
    scheme = "https" if parsed.scheme == "http" else "http"
    return urlunparse(parsed._replace(scheme=scheme))


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Drop duplicate URLs keeping first-seen order."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
