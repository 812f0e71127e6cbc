"""Entrypoint printing the logger self-check: ``python -m logbus``."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from .config import load_config
from .logging_utils import configure_logging
from .logs import Logger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logbus",
        description="Print one line per severity to check console colors",
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
        help="TOML file with [logger] and [logging] tables",
    )
    parser.add_argument("--name", default="logbus", help="Root logger name")
    parser.add_argument("message", nargs="?", default="This is a test log message.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("logbus")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"logbus {version}")
        return

    config = load_config(args.config)
    configure_logging(config.logging)
    Logger(args.name, config.logger).test(args.message)


if __name__ == "__main__":
    main()
