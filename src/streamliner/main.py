"""Command-line entry point: ``streamliner {github|gitlab|rss|http|get} <url>``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import httpx

from streamliner import __version__
from streamliner.config import load_config
from streamliner.dispatch import InvocationError, commands, dispatch

logger = logging.getLogger("streamliner")


def _setup_logging(log_level: str, log_format: str) -> None:
    """Configure root logger based on config."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps(
                {
                    "time": "%(asctime)s",
                    "level": "%(levelname)s",
                    "logger": "%(name)s",
                    "message": "%(message)s",
                }
            )
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamliner",
        description="Fetch a source and print its items as normalized JSON.",
    )
    parser.add_argument("command", help=f"one of: {', '.join(commands())}")
    parser.add_argument("url", nargs="?", default="", help="source URL")
    parser.add_argument("--env-file", default=None, help="path to a .env file")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, dispatch, and print the response envelope to stdout."""
    args = _build_parser().parse_args(argv)
    try:
        config = load_config(args.env_file)
    except ValueError as exc:
        print(f"streamliner: invalid configuration: {exc}", file=sys.stderr)
        return 2

    _setup_logging(config.log_level, config.log_format)

    try:
        response = dispatch(args.command, args.url, config=config)
    except InvocationError as exc:
        print(f"streamliner: {exc}", file=sys.stderr)
        return 2
    except httpx.HTTPError as exc:
        logger.error("Fetch failed for %s: %s", args.url, exc)
        return 1

    json.dump(response.to_dict(), sys.stdout, indent=args.indent, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
