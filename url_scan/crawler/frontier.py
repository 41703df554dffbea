# url_scan/crawler/frontier.py
"""
Crawl frontier: pending-work queue, visited set and in-flight accounting.
"""
from __future__ import annotations

import asyncio
from typing import Set


class Frontier:
    """FIFO of URLs still to crawl plus the record of every URL ever queued.

    - :meth:`enqueue_if_new` is the only way in; the membership test and the
      insertion happen under one lock, so a URL is queued at most once.
    - Every accepted URL counts as in flight until a worker calls
      :meth:`mark_done`. The frontier is drained when that count is zero,
      which also implies the queue is empty.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._visited: Set[str] = set()
        self._lock = asyncio.Lock()
        self._in_flight = 0
        self._drained = asyncio.Event()
        self._drained.set()

    async def enqueue_if_new(self, url: str) -> bool:
        """Queue *url* unless it was queued before. Returns True if queued."""
        async with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            self._in_flight += 1
            self._drained.clear()
            self._queue.put_nowait(url)
        return True

    async def dequeue(self) -> str:
        """Wait for the next pending URL."""
        return await self._queue.get()

    def mark_done(self) -> None:
        """Record that processing of one dequeued URL has finished."""
        if self._in_flight <= 0:
            raise ValueError("mark_done() called more times than URLs were queued")
        self._in_flight -= 1
        self._queue.task_done()
        if self._in_flight == 0:
            self._drained.set()

    def is_drained(self) -> bool:
        return self._in_flight == 0 and self._queue.empty()

    async def wait_drained(self) -> None:
        """Block until every queued URL, including ones added meanwhile, is done."""
        await self._drained.wait()

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def pending(self) -> int:
        """Approximate number of URLs waiting in the queue."""
        return self._queue.qsize()

    def seen(self) -> Set[str]:
        """Snapshot of every URL ever queued."""
        return set(self._visited)
