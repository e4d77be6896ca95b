from __future__ import annotations

import argparse
from pathlib import Path

from rich.table import Table

from embedkit.application.loader import load_resource_directory
from embedkit.cli.context import CLIContext


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("inspect", help="Show the contents of a generated resource package")
    parser.add_argument("package_dir", type=Path)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    directory = load_resource_directory(args.package_dir)
    paths = directory.all_paths()

    table = Table(title=f"{directory.key} ({len(paths)})")
    table.add_column("Path", overflow="fold")
    table.add_column("Key", overflow="fold")
    table.add_column("Chunks", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Digest (sha256)", overflow="fold")

    for path in paths:
        resource = directory.lookup(path)
        if resource is None:
            continue
        table.add_row(path, resource.key, str(len(resource.chunks)), str(resource.size), resource.digest)

    ctx.console.print(table)
    return 0
