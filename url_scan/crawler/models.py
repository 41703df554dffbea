# url_scan/crawler/models.py
"""
Data models for the UrlScan crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class Classification(str, Enum):
    """Outcome of the scope decision for one URL."""

    IN_SCOPE = "in_scope"
    OUT_OF_SCOPE = "out_of_scope"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class ScopePolicy:
    """Host-suffix allow/deny lists.

    Empty entries are dropped by :meth:`from_lists`; an empty ``in_scope``
    means every host not denied by ``out_scope`` is followed.
    """

    in_scope: Tuple[str, ...] = ()
    out_scope: Tuple[str, ...] = ()

    @classmethod
    def from_lists(cls, in_scope: Iterable[str] = (), out_scope: Iterable[str] = ()) -> ScopePolicy:
        return cls(
            in_scope=tuple(s.strip() for s in in_scope if s and s.strip()),
            out_scope=tuple(s.strip() for s in out_scope if s and s.strip()),
        )


@dataclass(frozen=True, slots=True)
class ClassifiedRecord:
    """A resolved URL and the stream it belongs to."""

    classification: Classification
    url: str

    @property
    def in_scope(self) -> bool:
        return self.classification is Classification.IN_SCOPE

    def line(self) -> str:
        """Text line as persisted by the output sink."""
        prefix = "In-scope" if self.in_scope else "Out-Of-Scope"
        return f"{prefix}: {self.url}"


@dataclass(slots=True)
class FetchResult:
    """Result of one fetch: raw body on success, an error message otherwise."""

    url: str
    content: Optional[bytes] = None
    final_url: Optional[str] = None
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None

    @property
    def base_url(self) -> str:
        return self.final_url or self.url

    def text(self) -> str:
        return (self.content or b"").decode("utf-8", errors="replace")
