"""Runtime access to embedded resources.

``Resources`` wraps a generated ``ResourceDirectory`` and serves its contents either
straight from the decoded chunks (speed) or from a hash-verified file in the cache
directory (memory). Cache files live at ``<cache_dir>/<directory key>/<resource key>``
and are checked against the embedded content once per process, rewritten on mismatch.
"""

from __future__ import annotations

import logging
import shutil
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Protocol

from embedkit.core.chunks import iter_decode
from embedkit.core.config import EmbedSettings, load_settings
from embedkit.core.errors import CacheIOError, ResourceNotFoundError
from embedkit.core.hashing import compute_stream_digest
from embedkit.domain.models.resource import (
    AccessMode,
    OptimizationStrategy,
    Resource,
    ResourceDirectory,
)
from embedkit.infrastructure.storage.file_store import FileStore, LocalFileStore

logger = logging.getLogger(__name__)

COPY_BLOCK_SIZE = 64 * 1024


class Sink(Protocol):
    def write(self, data: bytes, /) -> object: ...


class Resources:
    def __init__(
        self,
        directory: ResourceDirectory,
        settings: EmbedSettings | None = None,
        *,
        file_store: FileStore | None = None,
    ) -> None:
        self.directory = directory
        self.settings = settings or load_settings()
        self.file_store: FileStore = file_store or LocalFileStore()
        self._validated_paths: set[Path] = set()
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def in_memory_cutoff(self) -> int:
        return self.settings.in_memory_cutoff

    def exists(self, path: str) -> bool:
        return self.directory.lookup(path) is not None

    def all_paths(self) -> list[str]:
        return self.directory.all_paths()

    def resource(self, path: str) -> Resource:
        resource = self.directory.lookup(path)
        if resource is None:
            raise ResourceNotFoundError(path)
        return resource

    def as_string(self, path: str) -> str:
        return self.resource(path).as_string

    def as_bytes(self, path: str) -> bytes:
        return self.resource(path).as_bytes

    def as_path(self, path: str) -> Path | None:
        """Verified on-disk copy of the resource, or ``None`` when none is available.

        Stores that are not backed by the real filesystem never yield a path.
        """
        resource = self.resource(path)
        if not self.file_store.on_disk:
            return None
        return self._ensure_file(resource)

    def write(self, path: str, sink: Sink, strategy: OptimizationStrategy | None = None) -> None:
        resource = self.resource(path)
        if strategy is None:
            strategy = (
                OptimizationStrategy.MEMORY
                if resource.size > self.in_memory_cutoff
                else OptimizationStrategy.SPEED
            )

        if strategy is OptimizationStrategy.SPEED:
            sink.write(resource.as_bytes)
            return

        source = self._open_cached(resource)
        if source is None:
            for data in iter_decode(resource.chunks):
                sink.write(data)
            return
        with source:
            shutil.copyfileobj(source, sink, COPY_BLOCK_SIZE)

    def open(self, path: str, mode: AccessMode = AccessMode.IN_MEMORY) -> EmbeddedResource:
        resource = self.resource(path)
        if mode is AccessMode.DISK_CACHED:
            return DiskCachedResource(path=path, resource=resource, owner=self)
        return InMemoryResource(path=path, resource=resource)

    def cache_path_for(self, resource: Resource) -> Path | None:
        if self.settings.cache_dir is None:
            return None
        return self.settings.cache_dir / self.directory.key / resource.key

    def _open_cached(self, resource: Resource) -> BinaryIO | None:
        target = self._ensure_file(resource)
        if target is None:
            return None
        try:
            return self.file_store.open_read(target)
        except OSError as exc:
            logger.warning("Unable to read cached resource %s: %s", target, exc)
            self._validated_paths.discard(target)
            return None

    def _ensure_file(self, resource: Resource) -> Path | None:
        target = self.cache_path_for(resource)
        if target is None:
            return None
        if target in self._validated_paths:
            return target

        with self._lock_for(target):
            if target in self._validated_paths:
                return target
            try:
                self._materialize(target, resource)
            except (OSError, CacheIOError) as exc:
                logger.warning("Disk cache unavailable for %s: %s", target, exc)
                return None
            self._validated_paths.add(target)
        return target

    def _materialize(self, target: Path, resource: Resource) -> None:
        try:
            self.file_store.make_dirs(target.parent)
        except OSError as exc:
            raise CacheIOError(f"Cannot create cache directory {target.parent}: {exc}") from exc

        if self.file_store.exists(target):
            with self.file_store.open_read(target) as f:
                on_disk = compute_stream_digest(f)
            if on_disk == resource.digest:
                logger.debug("Validated cached resource %s", target)
                return
            logger.info("Cached resource %s is stale, rewriting", target)

        self.file_store.write_chunks(target, iter_decode(resource.chunks))

    def _lock_for(self, target: Path) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(target)
            if lock is None:
                lock = self._locks[target] = threading.Lock()
            return lock


class EmbeddedResource(Protocol):
    path: str

    @property
    def digest(self) -> str: ...

    @property
    def access_mode(self) -> AccessMode: ...

    def as_bytes(self) -> bytes: ...

    def as_string(self) -> str: ...

    def iter_bytes(self, block_size: int = COPY_BLOCK_SIZE) -> Iterator[bytes]: ...


@dataclass(slots=True)
class InMemoryResource:
    path: str
    resource: Resource

    @property
    def digest(self) -> str:
        return self.resource.digest

    @property
    def access_mode(self) -> AccessMode:
        return AccessMode.IN_MEMORY

    def as_bytes(self) -> bytes:
        return self.resource.as_bytes

    def as_string(self) -> str:
        return self.resource.as_string

    def iter_bytes(self, block_size: int = COPY_BLOCK_SIZE) -> Iterator[bytes]:
        data = self.resource.as_bytes
        for offset in range(0, len(data), block_size):
            yield data[offset : offset + block_size]


@dataclass(slots=True)
class DiskCachedResource:
    """Reads go through the verified cache file; decoded bytes are not retained."""

    path: str
    resource: Resource
    owner: Resources

    @property
    def digest(self) -> str:
        return self.resource.digest

    @property
    def access_mode(self) -> AccessMode:
        return AccessMode.DISK_CACHED

    def as_bytes(self) -> bytes:
        return b"".join(self.iter_bytes())

    def as_string(self) -> str:
        return self.as_bytes().decode("utf-8")

    def iter_bytes(self, block_size: int = COPY_BLOCK_SIZE) -> Iterator[bytes]:
        source = self.owner._open_cached(self.resource)
        if source is None:
            yield from iter_decode(self.resource.chunks)
            return
        with source:
            for block in iter(lambda: source.read(block_size), b""):
                yield block
