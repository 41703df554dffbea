"""Allow ``python -m url_scan``."""
from url_scan.cli import cli

if __name__ == "__main__":  # pragma: no cover
    cli()
