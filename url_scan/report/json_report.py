# url_scan/report/json_report.py

"""
JSON report for UrlScan.

Serializes a CrawlSummary to a file.
"""
import json
from pathlib import Path

from url_scan.aggregator import CrawlSummary


def render_json(summary: CrawlSummary, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *summary* as JSON at *output_path*.

    :param summary: CrawlSummary of a finished crawl
    :param output_path: target JSON file
    :param pretty: indent with two spaces
    :return: Path of the written file

    Example:
    ```python
    from url_scan.report.json_report import render_json
    report_path = render_json(summary, 'reports/crawl.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(summary.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
