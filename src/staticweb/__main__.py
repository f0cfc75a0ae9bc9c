"""
=============================================================================
STATICWEB CLI ENTRY POINT
=============================================================================

Serve a directory (or several) from the command line:

    python -m staticweb --root ./public
    python -m staticweb --root /=./public --root /assets=./build --index index.html
    python -m staticweb --root ./public --list --not-found ./public/404.html

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .bridge import serve
from .config import ConfigError
from .core.buffer import ScanError
from .handlers.static import StaticWeb
from .log import AccessLogger, setup_logging


def parse_roots(values: Sequence[str]):
    """
    Turn --root arguments into a rootDir option.

    A single bare DIR stays a string; PREFIX=DIR pairs build a mapping.
    """
    if len(values) == 1 and "=" not in values[0]:
        return values[0]
    roots = {}
    for value in values:
        prefix, sep, directory = value.partition("=")
        if not sep:
            prefix, directory = "/", value
        roots[prefix] = directory
    return roots


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticweb",
        description="Static content server with in-memory buffering",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staticweb --root ./public                  # Serve ./public on :8080
  python -m staticweb --root /=./site --root /a=./assets
  python -m staticweb --root ./public --index index.html --list
  python -m staticweb --root ./public --no-buffering   # Always read from disk
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", default="127.0.0.1",
                        help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=8080,
                        help="Port to listen on (default: 8080)")

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--root", "-r", action="append", default=None,
                        help="Root directory, or PREFIX=DIR mount (repeatable, default: htdocs)")
    parser.add_argument("--url", default="/",
                        help="Subdirectory URL the site is published under (default: /)")
    parser.add_argument("--index", "-i", action="append", default=[],
                        help="Directory index file name (repeatable, tried in order)")
    parser.add_argument("--no-buffering", action="store_true",
                        help="Read every request from disk instead of the buffer")
    parser.add_argument("--max-size", type=int, default=None,
                        help="Largest file to buffer, in bytes (default: 300000)")
    parser.add_argument("--direct-reading", action="store_true",
                        help="Probe the disk for index files missing from the buffer")
    parser.add_argument("--not-found", default=None,
                        help="404 page to serve for missing content")
    parser.add_argument("--list", action="store_true",
                        help="List directories that have no index file")

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--log-access", default=None, metavar="MODE",
                        help="Write access log entries under this mode name")
    parser.add_argument("--log-level", "-l", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: INFO)")

    parser.add_argument("--version", "-v", action="version",
                        version=f"staticweb {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> dict:
    """Translate parsed arguments into a StaticWeb option dict."""
    return {
        "url": args.url,
        "rootDir": parse_roots(args.root) if args.root else None,
        "buffering": not args.no_buffering,
        "bufferingMaxSize": args.max_size,
        "directReading": args.direct_reading,
        "notFound": args.not_found,
        "directoryIndexs": args.index,
        "listNavigator": args.list,
        "logAccess": args.log_access,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    access_logger = AccessLogger() if args.log_access else None
    try:
        web = StaticWeb(options_from_args(args), access_logger=access_logger)
    except (ConfigError, ScanError) as e:
        print(f"staticweb: {e}", file=sys.stderr)
        return 1

    serve(web, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
