from __future__ import annotations

import hashlib
from pathlib import Path
from typing import BinaryIO, Iterable

from embedkit.core.chunks import iter_decode


def compute_bytes_digest(data: bytes, alg: str = "sha256") -> str:
    h = hashlib.new(alg)
    h.update(data)
    return h.hexdigest()


def compute_stream_digest(stream: BinaryIO, alg: str = "sha256", chunk_size: int = 1024 * 1024) -> str:
    h = hashlib.new(alg)
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        h.update(chunk)
    return h.hexdigest()


def compute_file_digest(path: Path, alg: str = "sha256", chunk_size: int = 1024 * 1024) -> str:
    with path.open("rb") as f:
        return compute_stream_digest(f, alg, chunk_size)


def compute_chunks_digest(chunks: Iterable[str], alg: str = "sha256") -> str:
    """Digest of the decoded bytes of ``chunks``, fed one chunk at a time."""
    h = hashlib.new(alg)
    for data in iter_decode(chunks):
        h.update(data)
    return h.hexdigest()
