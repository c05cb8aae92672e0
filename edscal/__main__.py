"""Command-line entry for edscal.

Reads a D-Bus dump (or any text holding VEVENT blocks) from stdin or a
file and prints the matching events as a JSON array on stdout.
"""

from __future__ import annotations

import argparse
import sys
from typing import NoReturn, Optional

from . import __version__, run_extractor


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the edscal CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="edscal",
        description="edscal - extract calendar events from Evolution Data Server D-Bus output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gdbus call ... | python -m edscal 2024-06-01 2024-06-30
  START_DATE=2024-06-01 END_DATE=2024-06-30 python -m edscal --input dump.txt
  gdbus call ... GetManagedObjects | python -m edscal --sources

START_DATE and END_DATE environment variables take precedence over arguments.
        """,
    )

    parser.add_argument(
        "start_date",
        nargs="?",
        metavar="START",
        help="First day of the range, YYYY-MM-DD",
    )
    parser.add_argument(
        "end_date",
        nargs="?",
        metavar="END",
        help="Last day of the range (inclusive), YYYY-MM-DD",
    )
    parser.add_argument("--start", dest="start_opt", metavar="DATE", help="Same as START")
    parser.add_argument("--end", dest="end_opt", metavar="DATE", help="Same as END")
    parser.add_argument(
        "--input",
        "-i",
        metavar="FILE",
        help="Read input from FILE instead of stdin ('-' for stdin)",
    )
    parser.add_argument(
        "--env-file",
        metavar="PATH",
        help="Load defaults from this .env file (default: ./.env)",
    )
    parser.add_argument(
        "--sources",
        action="store_true",
        help="Print calendar sources found in a SourceManager reply instead of events",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def _normalize_args(args: argparse.Namespace) -> argparse.Namespace:
    """Fold --start/--end into the positional range bounds."""
    args.start = args.start_opt or args.start_date
    args.end = args.end_opt or args.end_date
    return args


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the edscal CLI."""
    parser = _create_parser()
    args = _normalize_args(parser.parse_args(argv))

    try:
        code = run_extractor(args)
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    main()
