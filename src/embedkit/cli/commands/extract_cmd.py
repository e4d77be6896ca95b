from __future__ import annotations

import argparse
import sys
from pathlib import Path

from embedkit.application.loader import load_resource_directory
from embedkit.application.resources import Resources
from embedkit.cli.context import CLIContext
from embedkit.core.files import ensure_directory
from embedkit.domain.models.resource import OptimizationStrategy


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("extract", help="Write one embedded resource to a file or stdout")
    parser.add_argument("package_dir", type=Path)
    parser.add_argument("resource", help="Relative path of the resource inside the package")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Destination file (default: stdout)")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in OptimizationStrategy],
        default=None,
        help="Force the speed or memory strategy instead of choosing by size",
    )
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    resources = Resources(load_resource_directory(args.package_dir), ctx.settings)
    strategy = OptimizationStrategy(args.strategy) if args.strategy else None
    resources.resource(args.resource)

    if args.output is None:
        resources.write(args.resource, sys.stdout.buffer, strategy)
        sys.stdout.buffer.flush()
        return 0

    ensure_directory(args.output.parent)
    with args.output.open("wb") as f:
        resources.write(args.resource, f, strategy)
    ctx.console.print(f"[green]Wrote[/green] {args.resource} -> {args.output}")
    return 0
