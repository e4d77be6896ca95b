from __future__ import annotations

import argparse
from pathlib import Path

from rich.panel import Panel

from embedkit.application.services.generation_service import (
    DEFAULT_MAX_CHUNKS_PER_ARTIFACT,
    GenerationOptions,
    ResourceGenerator,
)
from embedkit.cli.commands._format import format_bytes
from embedkit.cli.context import CLIContext
from embedkit.core.chunks import RESOURCE_CHUNK_SIZE
from embedkit.infrastructure.scanning.scanner import exclude_patterns


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("generate", help="Generate a resource package from asset directories")
    parser.add_argument("roots", nargs="*", type=Path, help="Resource directories to embed")
    parser.add_argument("--namespace", "-n", default="", help="Dotted package name of the generated code")
    parser.add_argument("--output", "-o", type=Path, required=True, help="Directory receiving the generated package")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="GLOB",
        help="Glob pattern of files or directories to skip (repeatable)",
    )
    parser.add_argument("--chunk-size", type=int, default=RESOURCE_CHUNK_SIZE)
    parser.add_argument("--max-chunks", type=int, default=DEFAULT_MAX_CHUNKS_PER_ARTIFACT)
    parser.set_defaults(handler=run)


def run(args: argparse.Namespace, ctx: CLIContext) -> int:
    generator = ResourceGenerator(
        GenerationOptions(chunk_size=args.chunk_size, max_chunks_per_artifact=args.max_chunks)
    )
    result = generator.generate(
        roots=args.roots,
        namespace=args.namespace,
        output_dir=args.output,
        exclude=exclude_patterns(args.exclude),
    )

    summary = Panel.fit(
        f"Package: {result.package_dir}\n"
        f"Resources: {result.resource_count} ({format_bytes(result.total_bytes)})\n"
        f"Data modules: {len(result.chunk_modules)}",
        title="Generated Resources",
    )
    ctx.console.print(summary)
    return 0
