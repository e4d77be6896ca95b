from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from embedkit.core.chunks import RESOURCE_CHUNK_SIZE

GENERATED_HEADER = "# Generated by embedkit. Do not edit.\n"
DIRECTORY_MODULE = "resource_directory"
CHUNKS_MODULE_PREFIX = "resource_chunks_"


@dataclass(slots=True)
class ChunkVariable:
    name: str
    chunks: list[str]


@dataclass(slots=True)
class DirectoryEntry:
    path: str
    key: str
    module: str
    variable: str


def chunks_module_name(index: int) -> str:
    return f"{CHUNKS_MODULE_PREFIX}{index}"


def render_chunks_module(variables: Sequence[ChunkVariable]) -> str:
    lines = [GENERATED_HEADER]
    for variable in variables:
        lines.append("")
        lines.append(f"{variable.name} = (")
        for chunk in variable.chunks:
            lines.append(f"    {chunk!r},")
        lines.append(")")
    return "\n".join(lines) + "\n"


def render_directory_module(
    directory_key: str,
    entries: Sequence[DirectoryEntry],
    chunk_size: int = RESOURCE_CHUNK_SIZE,
) -> str:
    lines = [
        GENERATED_HEADER,
        "from embedkit.domain.models.resource import Resource, StaticResourceDirectory",
    ]

    imports: dict[str, list[str]] = {}
    for entry in entries:
        imports.setdefault(entry.module, []).append(entry.variable)
    for module, names in imports.items():
        lines.append(f"from .{module} import (")
        for name in names:
            lines.append(f"    {name},")
        lines.append(")")

    chunk_size_arg = "" if chunk_size == RESOURCE_CHUNK_SIZE else f", chunk_size={chunk_size}"

    lines.append("")
    lines.append("")
    lines.append("class ResourceDirectory(StaticResourceDirectory):")
    lines.append(f"    key = {directory_key!r}")
    if not entries:
        lines.append("    resources = {}")
    else:
        lines.append("    resources = {")
        for entry in entries:
            lines.append(
                f"        {entry.path!r}: Resource(key={entry.key!r}, chunks={entry.variable}{chunk_size_arg}),"
            )
        lines.append("    }")

    lines.append("")
    lines.append("")
    lines.append("resource_directory = ResourceDirectory()")
    return "\n".join(lines) + "\n"


def render_package_init() -> str:
    return (
        GENERATED_HEADER
        + "\n"
        + f"from .{DIRECTORY_MODULE} import ResourceDirectory, resource_directory\n"
        + "\n"
        + '__all__ = ["ResourceDirectory", "resource_directory"]\n'
    )
