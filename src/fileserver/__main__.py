"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m fileserver

    # Serve ./public on all interfaces
    python -m fileserver --root ./public --host 0.0.0.0

    # Handle connections one at a time, on the accept thread
    python -m fileserver --workers 0

=============================================================================
WHERE SETTINGS COME FROM
=============================================================================

    command-line option  >  FILESERVER_* environment variable  >  default

Options left off the command line fall back to ServerConfig.from_env().

Exit status is 0 after a clean shutdown (Ctrl+C / SIGTERM) and 1 when the
server cannot start: bad configuration, missing document root, or a port
that cannot be bound.

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal HTTP/1.1 static file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                          # Serve . on 127.0.0.1:8080
  python -m fileserver --root ./public          # Serve another directory
  python -m fileserver --host 0.0.0.0 -p 3000   # All interfaces, port 3000
  python -m fileserver --workers 0              # Sequential handling
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on, 0 for any free port (default: 8080)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Seconds to wait for a request before closing (default: 5)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Directory to serve files from (default: current directory)"
    )

    parser.add_argument(
        "--serve-empty-files",
        action="store_true",
        help="Serve zero-length files as 200 instead of 404"
    )

    # ─────────────────────────────────────────────────────────────────────
    # PERFORMANCE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Worker threads, 0 handles connections one at a time (default: 4)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"PyFileServer {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Overlay the options that were given on top of the environment."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.timeout is not None:
        config.timeout = args.timeout
    if args.root is not None:
        config.root_dir = args.root
    if args.workers is not None:
        config.workers = args.workers
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.serve_empty_files:
        config.serve_empty_files = True
    config.log_format = args.log_format

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        server = HTTPServer(config_from_args(args))
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
