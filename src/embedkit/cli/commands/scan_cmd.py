from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table

from embedkit.cli.context import CLIContext
from embedkit.infrastructure.scanning.scanner import exclude_patterns, scan


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("scan", help="List the files a generate run would embed")
    parser.add_argument("roots", nargs="+", type=Path)
    parser.add_argument("--exclude", action="append", default=[], metavar="GLOB")
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    files = scan(args.roots, exclude_patterns(args.exclude))

    table = Table(title=f"Resources ({len(files)})")
    table.add_column("Path", overflow="fold")
    table.add_column("Key", overflow="fold")
    table.add_column("Size", justify="right")
    for item in files:
        table.add_row(item.relative_path, item.key, str(item.absolute_path.stat().st_size))

    ctx.console.print(table)
    return 0
