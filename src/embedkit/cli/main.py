from __future__ import annotations

import argparse
import logging

from rich.console import Console

from embedkit.cli.commands import extract_cmd, generate_cmd, inspect_cmd, scan_cmd
from embedkit.cli.context import CLIContext
from embedkit.core.config import load_settings
from embedkit.core.errors import EmbedError
from embedkit.core.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embedkit",
        description="Embed static asset directories as generated Python modules",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)
    generate_cmd.register(subparsers)
    scan_cmd.register(subparsers)
    inspect_cmd.register(subparsers)
    extract_cmd.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    ctx = CLIContext(settings=load_settings(), console=console)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, ctx)
    except EmbedError as exc:
        logger.error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
