"""url_scan.output: persistence of classified URL records."""

from .sink import HEADERS, OutputSink, RecordStream, output_paths

__all__ = ["HEADERS", "OutputSink", "RecordStream", "output_paths"]
