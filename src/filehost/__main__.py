"""
=============================================================================
FILE HOST CLI ENTRY POINT
=============================================================================

    # Host one file on one address
    filehost -f ./notes.txt /notes.txt -a 127.0.0.1:8080

    # Several files, several addresses
    filehost -f a.txt /a.txt /srv/b.bin /b.bin -a 0.0.0.0:8080 [::1]:8080

    # Space-joined tokens are split, so this is the same as the first form
    filehost -f "./notes.txt /notes.txt" -a 127.0.0.1:8080

    # Also runnable as a module
    python -m filehost -f ./notes.txt /notes.txt -a 127.0.0.1:8080

Then fetch with:

    curl http://127.0.0.1:8080/notes.txt

Press ENTER in the terminal to stop.

=============================================================================
"""

import argparse
import sys
from typing import Iterable, List, Optional, Sequence

from . import __version__
from .config import HostConfig, ListenEndpoint
from .errors import ConfigError
from .http.routes import build_route_table
from .server import FileHost


def split_tokens(values: Iterable[str]) -> List[str]:
    """Split every argument on whitespace, so "a b" counts as two tokens."""
    return [token for value in values for token in value.split()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filehost",
        description="Simple program to host files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  filehost -f ./notes.txt /notes.txt -a 127.0.0.1:8080
  filehost -f a.txt /a.txt b.txt /b.txt -a 0.0.0.0:8080 [::1]:8080
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # WHAT AND WHERE
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--files", "-f",
        nargs="+",
        required=True,
        metavar="PATH",
        help=(
            'The files to host (in the form "/path/to/file /download/path") '
            'i.e. "-f /path/to/myfile.txt /myfile.txt"'
        ),
    )

    parser.add_argument(
        "--addresses", "-a",
        nargs="+",
        required=True,
        metavar="HOST:PORT",
        help="The addresses to host the files on (ip:port)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # TUNING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--read-timeout",
        type=float,
        default=None,
        help="Seconds to wait for the request (default: 0.1)",
    )

    parser.add_argument(
        "--error-responses",
        action="store_true",
        default=None,
        help="Answer bad requests with 400/404/500 instead of just closing",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"filehost {__version__}",
    )

    return parser


def build_config(args: argparse.Namespace) -> HostConfig:
    """Environment defaults, overridden by whatever flags were given."""
    config = HostConfig.from_env()
    if args.read_timeout is not None:
        config.read_timeout = args.read_timeout
    if args.error_responses is not None:
        config.error_responses = args.error_responses
    if args.log_level is not None:
        config.log_level = args.log_level
    config.validate()
    return config


def build_host(argv: Optional[Sequence[str]] = None) -> FileHost:
    """
    Parse arguments into a ready-to-run FileHost.

    Raises:
        ConfigError: On odd file tokens, bad display names, bad addresses
            or bad tuning values. Nothing is bound in that case.
    """
    args = build_parser().parse_args(argv)

    config = build_config(args)
    routes = build_route_table(split_tokens(args.files))
    endpoints = [ListenEndpoint.parse(text) for text in split_tokens(args.addresses)]

    return FileHost(routes, endpoints, config)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        host = build_host(argv)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    host.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
