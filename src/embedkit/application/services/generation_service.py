from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from embedkit.core.chunks import RESOURCE_CHUNK_SIZE, iter_split_encode
from embedkit.core.errors import ConfigurationError
from embedkit.core.files import (
    ensure_directory,
    replace_directory,
    staging_sibling,
    write_text_atomic,
)
from embedkit.infrastructure.codegen.templates import (
    DIRECTORY_MODULE,
    ChunkVariable,
    DirectoryEntry,
    chunks_module_name,
    render_chunks_module,
    render_directory_module,
    render_package_init,
)
from embedkit.infrastructure.scanning.scanner import ExcludePredicate, ResourceScanner, ScannedFile

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHUNKS_PER_ARTIFACT = 100


@dataclass(frozen=True)
class GenerationOptions:
    chunk_size: int = RESOURCE_CHUNK_SIZE
    max_chunks_per_artifact: int = DEFAULT_MAX_CHUNKS_PER_ARTIFACT


@dataclass(slots=True)
class GenerationResult:
    package_dir: Path
    directory_module: Path
    chunk_modules: list[Path] = field(default_factory=list)
    resource_count: int = 0
    total_bytes: int = 0


def directory_key_for(namespace: str) -> str:
    return namespace.replace(".", "_")


def package_dir_for(output_dir: Path, namespace: str) -> Path:
    return output_dir.joinpath(*namespace.split("."))


class ResourceGenerator:
    def __init__(self, options: GenerationOptions | None = None) -> None:
        self.options = options or GenerationOptions()
        if self.options.chunk_size < 1:
            raise ConfigurationError(f"Chunk size must be at least 1, got {self.options.chunk_size}")
        if self.options.max_chunks_per_artifact < 1:
            raise ConfigurationError(
                f"Chunks per artifact must be at least 1, got {self.options.max_chunks_per_artifact}"
            )

    def generate(
        self,
        roots: Sequence[Path],
        namespace: str,
        output_dir: Path,
        exclude: ExcludePredicate | None = None,
    ) -> GenerationResult:
        self._validate(roots, namespace)

        logger.info("Scanning resource directories: %s", ", ".join(str(r) for r in roots))
        scanned = ResourceScanner(exclude).scan(roots)
        self._check_collisions(scanned)
        logger.info("Found %d resources", len(scanned))
        if not scanned:
            logger.warning("No resources found to embed for %s", namespace)

        package_dir = package_dir_for(output_dir, namespace)
        ensure_directory(package_dir.parent)
        # The package is built in a staging folder and swapped in whole, so a failed
        # run leaves the previous package importable.
        staging = staging_sibling(package_dir)
        ensure_directory(staging)
        try:
            result = self._write_package(scanned, namespace, package_dir, staging)
            replace_directory(staging, package_dir)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        logger.info(
            "Generated %s with %d resources in %d data modules",
            result.directory_module,
            result.resource_count,
            len(result.chunk_modules),
        )
        return result

    def _write_package(
        self,
        scanned: Sequence[ScannedFile],
        namespace: str,
        package_dir: Path,
        staging: Path,
    ) -> GenerationResult:
        result = GenerationResult(
            package_dir=package_dir,
            directory_module=package_dir / f"{DIRECTORY_MODULE}.py",
        )
        entries: list[DirectoryEntry] = []
        pending: list[ChunkVariable] = []
        pending_chunks = 0

        for index, item in enumerate(scanned, start=1):
            with item.absolute_path.open("rb") as f:
                chunks = list(iter_split_encode(f, self.options.chunk_size))
            result.total_bytes += item.absolute_path.stat().st_size

            if pending and pending_chunks + len(chunks) > self.options.max_chunks_per_artifact:
                result.chunk_modules.append(
                    self._flush(staging, package_dir, len(result.chunk_modules) + 1, pending)
                )
                pending = []
                pending_chunks = 0

            variable = ChunkVariable(name=f"RESOURCE_{index}", chunks=chunks)
            pending.append(variable)
            pending_chunks += len(chunks)
            entries.append(
                DirectoryEntry(
                    path=item.relative_path,
                    key=item.key,
                    module=chunks_module_name(len(result.chunk_modules) + 1),
                    variable=variable.name,
                )
            )

        if pending:
            result.chunk_modules.append(
                self._flush(staging, package_dir, len(result.chunk_modules) + 1, pending)
            )

        write_text_atomic(
            staging / result.directory_module.name,
            render_directory_module(directory_key_for(namespace), entries, self.options.chunk_size),
        )
        write_text_atomic(staging / "__init__.py", render_package_init())

        result.resource_count = len(entries)
        return result

    @staticmethod
    def _validate(roots: Sequence[Path], namespace: str) -> None:
        if not namespace:
            raise ConfigurationError("Namespace must not be empty, set it with --namespace")
        if not all(segment.isidentifier() for segment in namespace.split(".")):
            raise ConfigurationError(f"Namespace is not a valid dotted Python package name: {namespace!r}")
        if not roots:
            raise ConfigurationError("At least one resource directory must be specified")

    @staticmethod
    def _check_collisions(scanned: Sequence[ScannedFile]) -> None:
        seen_paths: dict[str, Path] = {}
        seen_keys: dict[str, str] = {}
        for item in scanned:
            previous = seen_paths.get(item.relative_path)
            if previous is not None:
                raise ConfigurationError(
                    f"Resource path {item.relative_path!r} is provided by both {previous} and {item.absolute_path}"
                )
            seen_paths[item.relative_path] = item.absolute_path

            clashing = seen_keys.get(item.key)
            if clashing is not None:
                raise ConfigurationError(
                    f"Resources {clashing!r} and {item.relative_path!r} map to the same key {item.key!r}"
                )
            seen_keys[item.key] = item.relative_path

    @staticmethod
    def _flush(staging: Path, package_dir: Path, index: int, variables: list[ChunkVariable]) -> Path:
        name = f"{chunks_module_name(index)}.py"
        write_text_atomic(staging / name, render_chunks_module(variables))
        logger.info(
            "Wrote %s (%d resources, %d chunks)",
            name,
            len(variables),
            sum(len(v.chunks) for v in variables),
        )
        return package_dir / name


def generate(
    roots: Sequence[Path],
    namespace: str,
    output_dir: Path,
    exclude: ExcludePredicate | None = None,
    options: GenerationOptions | None = None,
) -> GenerationResult:
    return ResourceGenerator(options).generate(roots, namespace, output_dir, exclude)
