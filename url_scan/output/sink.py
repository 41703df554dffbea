# url_scan/output/sink.py
"""
Output sink: two append-only text streams, one for in-scope and one for
out-of-scope records, each drained by its own writer task.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Optional, Set, TextIO, Tuple, Union

from url_scan.crawler.models import Classification, ClassifiedRecord
from url_scan.logger import get_logger

__all__ = ["HEADERS", "RecordStream", "OutputSink", "output_paths"]

HEADERS: Dict[Classification, str] = {
    Classification.IN_SCOPE: "--IN SCOPE URLS:---",
    Classification.OUT_OF_SCOPE: "--OUT OF SCOPE URLS:---",
}

log = get_logger("output")


def output_paths(base: Union[str, Path]) -> Tuple[Path, Path]:
    """``out.txt`` -> (``out_inscope.txt``, ``out_outscope.txt``)."""
    base = Path(base)
    suffix = base.suffix or ".txt"
    return (
        base.with_name(f"{base.stem}_inscope{suffix}"),
        base.with_name(f"{base.stem}_outscope{suffix}"),
    )


class RecordStream:
    """One destination fed through an unbounded queue.

    ``None`` on the queue marks the end of the stream; the writer then
    flushes and closes the handle. Lines are buffered until then.
    """

    def __init__(self, classification: Classification, handle: TextIO, *, unique: bool = False) -> None:
        if classification not in HEADERS:
            raise ValueError(f"no stream for {classification!r}")
        self.classification = classification
        self.handle = handle
        self.unique = unique
        self.written = 0
        self._seen: Set[str] = set()
        self._queue: asyncio.Queue[Optional[ClassifiedRecord]] = asyncio.Queue()
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def name(self) -> str:
        return getattr(self.handle, "name", self.classification.value)

    def start(self) -> None:
        """Write the header line and spawn the writer task."""
        if self._task is not None:
            raise RuntimeError(f"stream {self.name} already started")
        self._write_line(HEADERS[self.classification])
        self._task = asyncio.create_task(self._writer(), name=f"writer-{self.classification.value}")

    def put(self, record: ClassifiedRecord) -> None:
        if record.classification is not self.classification:
            raise ValueError(f"{record.classification.value} record sent to {self.classification.value} stream")
        self._queue.put_nowait(record)

    async def close(self) -> None:
        """Signal end of stream and wait for the writer to finalize."""
        if self._task is None:
            self._finalize()
            return
        self._queue.put_nowait(None)
        await self._task

    async def _writer(self) -> None:
        try:
            while True:
                record = await self._queue.get()
                if record is None:
                    break
                if self.unique:
                    if record.url in self._seen:
                        continue
                    self._seen.add(record.url)
                if self._write_line(record.line()):
                    self.written += 1
        finally:
            self._finalize()

    def _write_line(self, line: str) -> bool:
        try:
            self.handle.write(line + "\n")
        except (OSError, ValueError) as exc:
            log.error("Could not write %r to %s: %s", line, self.name, exc)
            return False
        return True

    def _finalize(self) -> None:
        if self.handle.closed:
            return
        try:
            self.handle.flush()
            self.handle.close()
        except (OSError, ValueError) as exc:
            log.error("Could not close %s: %s", self.name, exc)


class OutputSink:
    """Routes classified records to the matching stream."""

    def __init__(self, in_scope: RecordStream, out_of_scope: RecordStream) -> None:
        self.streams: Dict[Classification, RecordStream] = {
            Classification.IN_SCOPE: in_scope,
            Classification.OUT_OF_SCOPE: out_of_scope,
        }
        self.paths: Tuple[Optional[Path], Optional[Path]] = (None, None)

    @classmethod
    def open(cls, base_path: Union[str, Path], *, unique: bool = False) -> OutputSink:
        """Create both output files next to *base_path*.

        Raises OSError if either file cannot be created; nothing is left open
        in that case.
        """
        in_path, out_path = output_paths(base_path)
        in_path.parent.mkdir(parents=True, exist_ok=True)
        in_handle = in_path.open("w", encoding="utf-8")
        try:
            out_handle = out_path.open("w", encoding="utf-8")
        except OSError:
            in_handle.close()
            raise
        sink = cls(
            RecordStream(Classification.IN_SCOPE, in_handle, unique=unique),
            RecordStream(Classification.OUT_OF_SCOPE, out_handle, unique=unique),
        )
        sink.paths = (in_path, out_path)
        return sink

    def start(self) -> None:
        for stream in self.streams.values():
            stream.start()

    def emit(self, record: ClassifiedRecord) -> None:
        stream = self.streams.get(record.classification)
        if stream is None:
            raise ValueError(f"cannot persist {record.classification.value} record {record.url}")
        stream.put(record)

    async def close(self) -> None:
        await asyncio.gather(*(stream.close() for stream in self.streams.values()))
