# === FILE: url_scan/cli.py ===
#!/usr/bin/env python3
"""
Command line entry point for the UrlScan crawler.

Commands:
  scan      Crawl from a start URL and write the in-scope/out-of-scope files
  config    Show the effective configuration

Common options:
  --config PATH       YAML/JSON config file (optional)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Also write logs to this file
  --log-format FORMAT Logging format string

scan options (override the config file):
  --url, -url URL             Start URL
  --output, -output PATH      Base output path (default: output.txt)
  --inscope, -inscope LIST    Comma-separated in-scope host suffixes
  --outscope, -outscope LIST  Comma-separated out-of-scope host suffixes
  --workers N                 Concurrent workers (default: 1)
  --json PATH / --html PATH   Save a crawl summary report

Example:
  url-scan scan -url https://example.com -inscope example.com -output scan.txt
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from url_scan import __version__
from url_scan.config import load_config
from url_scan.engine import start_crawl
from url_scan.logger import init_logging
from url_scan.report.html_report import render_html
from url_scan.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _load(ctx, **overrides):
    try:
        return load_config(ctx.obj.get('config_path'), **overrides)
    except ValidationError as e:
        print_error(f'Invalid configuration: {e}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Error loading configuration: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='UrlScan, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to a YAML or JSON config file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stdout only if omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Logging format string'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """UrlScan command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-url', 'start_url', default=None, help='URL to start crawling from')
@click.option(
    '--output', '-output', 'output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Base output path; two files are derived from it'
)
@click.option('--inscope', '-inscope', 'in_scope', default=None, help='Comma-separated in-scope host suffixes')
@click.option('--outscope', '-outscope', 'out_scope', default=None, help='Comma-separated out-of-scope host suffixes')
@click.option('--workers', '-w', 'workers', type=click.IntRange(min=1), default=None, help='Concurrent crawl workers')
@click.option('--timeout', 'timeout', type=float, default=None, help='Per-request timeout (seconds)')
@click.option('--user-agent', 'user_agent', default=None, help='Override the User-Agent header')
@click.option('--unique', 'unique', is_flag=True, help='Write each URL once per output file')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save a JSON summary to this file'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save an HTML summary to this file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Directory with a report.html.j2 template'
)
@click.option('--pretty', is_flag=True, help='Indent the JSON summary')
@click.pass_context
def scan(ctx, start_url, output, in_scope, out_scope, workers, timeout, user_agent, unique,
         json_output, html_output, template_dir, pretty):
    """Crawl and write in-scope / out-of-scope URL files."""
    cfg = _load(
        ctx,
        start_url=start_url,
        output=output,
        in_scope=in_scope,
        out_scope=out_scope,
        workers=workers,
        timeout=timeout,
        user_agent=user_agent,
        unique_records=True if unique else None,
    )
    click.echo(f'Starting crawl: {cfg.start_url}')
    try:
        summary = asyncio.run(start_crawl(cfg))
    except OSError as e:
        print_error(f'Could not create output files: {e}')

    for path in summary.output_files:
        click.echo(f'Output: {path}')
    click.echo(summary.headline())

    if json_output:
        try:
            saved_json = render_json(summary, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Error saving JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(summary, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Error saving HTML report: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.option('--url', '-url', 'start_url', default=None, help='Start URL override')
@click.pass_context
def show_config(ctx, start_url):
    """Print the effective configuration as JSON."""
    cfg = _load(ctx, start_url=start_url)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
