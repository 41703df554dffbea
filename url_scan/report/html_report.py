# File: url_scan/report/html_report.py
"""url_scan.report.html_report: HTML crawl report rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from url_scan.aggregator import CrawlSummary

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    summary: CrawlSummary,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Render the HTML report from a template and save it.

    Args:
        summary: CrawlSummary of a finished crawl.
        template_dir: directory holding ``report.html.j2``; ``None`` uses the
            template bundled with the package.
        output_path: target HTML file.

    Returns:
        Path of the written file.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {"summary": summary}

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
