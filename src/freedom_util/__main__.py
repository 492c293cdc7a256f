"""CLI entrypoint for freedom-util."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from .config import load_config
from .exceptions import MalformedBaseUrlError
from .logging_utils import configure_logging
from .urls import Location, make_absolute, resolve_path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="freedom-util",
        description="Resolve relative URLs against a base URL or the configured location",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file",
    )
    parser.add_argument(
        "--base",
        default=None,
        help="Base URL to resolve against (defaults to the configured location)",
    )
    parser.add_argument("urls", nargs="*", metavar="URL", help="URLs to resolve")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, then print one resolved URL per argument."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("freedom-util")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"freedom-util {version}")
        return

    config = load_config(config_path=args.config)
    configure_logging(config["logging"])
    schemes = config["resolver"]["absolute_schemes"]
    location = Location(**config["location"])

    for url in args.urls:
        try:
            if args.base is not None:
                resolved = resolve_path(url, args.base, schemes)
            else:
                resolved = make_absolute(url, location, schemes)
        except MalformedBaseUrlError as exc:
            parser.error(str(exc))
        print(resolved)


if __name__ == "__main__":
    main()
