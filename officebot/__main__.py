"""Command-line entry for officebot."""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn

from . import run_server


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the officebot CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="officebot",
        description="OfficeBot - Slack office attendance schedule",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m officebot                              # Serve on default port (3000)
  python -m officebot --port 8080                  # Serve on port 8080
  python -m officebot --data-file /tmp/office.json # Use a custom workspace store
        """,
    )

    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help="Port number for the web server (default: 3000, or from OFFICEBOT_WEB_PORT env var)",
    )
    parser.add_argument(
        "--data-file",
        metavar="PATH",
        help="JSON file holding workspace schedules and settings",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging for officebot modules",
    )

    return parser


def main() -> NoReturn:
    """Run the officebot CLI."""
    parser = _create_parser()
    args = parser.parse_args()

    run_server(args)
    sys.exit(0)


if __name__ == "__main__":
    main()
