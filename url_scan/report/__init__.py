# File: url_scan/report/__init__.py
"""url_scan.report: JSON and HTML reports for a finished crawl."""

from .html_report import DEFAULT_TEMPLATE_DIR, render_html
from .json_report import render_json

__all__ = ["DEFAULT_TEMPLATE_DIR", "render_json", "render_html"]
