# url_scan/crawler/scope.py
"""
Scope decision: in-scope, out-of-scope or invalid for a single URL.
"""
from __future__ import annotations

from typing import Iterable

from url_scan.crawler.models import Classification, ScopePolicy
from url_scan.utils import extract_host, is_valid_url

__all__ = ["classify", "host_matches"]


def host_matches(host: str, suffixes: Iterable[str]) -> bool:
    """True if *host* ends with any of *suffixes*."""
    return any(host.endswith(suffix) for suffix in suffixes)


def classify(url: str, policy: ScopePolicy) -> Classification:
    """
    Classify *url* against *policy*.

    With a non-empty allow list a host must match it and must not match the
    deny list. With an empty allow list only the deny list is consulted.
    """
    if not is_valid_url(url):
        return Classification.INVALID

    host = extract_host(url)
    if policy.in_scope:
        if host_matches(host, policy.in_scope) and not host_matches(host, policy.out_scope):
            return Classification.IN_SCOPE
        return Classification.OUT_OF_SCOPE

    if host_matches(host, policy.out_scope):
        return Classification.OUT_OF_SCOPE
    return Classification.IN_SCOPE
