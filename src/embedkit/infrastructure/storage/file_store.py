from __future__ import annotations

import io
import threading
from pathlib import Path
from typing import BinaryIO, Iterable, Protocol

from embedkit.core.files import ensure_directory, write_chunks_atomic


class FileStore(Protocol):
    on_disk: bool

    def exists(self, path: Path) -> bool: ...

    def make_dirs(self, path: Path) -> None: ...

    def open_read(self, path: Path) -> BinaryIO: ...

    def write_chunks(self, path: Path, chunks: Iterable[bytes]) -> None: ...


class LocalFileStore:
    on_disk = True

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def make_dirs(self, path: Path) -> None:
        ensure_directory(path)

    def open_read(self, path: Path) -> BinaryIO:
        return path.open("rb")

    def write_chunks(self, path: Path, chunks: Iterable[bytes]) -> None:
        write_chunks_atomic(path, chunks)


class InMemoryFileStore:
    """Key-value stand-in for hosts without a usable disk."""

    on_disk = False

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def exists(self, path: Path) -> bool:
        with self._lock:
            return str(path) in self._files

    def make_dirs(self, path: Path) -> None:
        return None

    def open_read(self, path: Path) -> BinaryIO:
        with self._lock:
            data = self._files.get(str(path))
        if data is None:
            raise FileNotFoundError(str(path))
        return io.BytesIO(data)

    def write_chunks(self, path: Path, chunks: Iterable[bytes]) -> None:
        data = b"".join(chunks)
        with self._lock:
            self._files[str(path)] = data

    def read_bytes(self, path: Path) -> bytes:
        with self.open_read(path) as f:
            return f.read()

    def paths(self) -> list[Path]:
        with self._lock:
            return [Path(p) for p in sorted(self._files)]
