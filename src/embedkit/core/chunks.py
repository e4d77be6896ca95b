"""Chunk codec for embedded resource data.

Every chunk is a complete zlib stream over one slice of the source bytes, rendered as
Base64 text. Chunks are therefore decoded one at a time and the results concatenated;
concatenating the encoded text of several chunks does not yield a decodable value.
"""

from __future__ import annotations

import base64
import binascii
import io
import zlib
from typing import BinaryIO, Iterable, Iterator, Sequence

from embedkit.core.errors import ChunkDecodeError

RESOURCE_CHUNK_SIZE = 100_000
IN_MEMORY_CUTOFF = RESOURCE_CHUNK_SIZE * 50
COMPRESSION_LEVEL = 9


def encode_chunk(data: bytes) -> str:
    return base64.b64encode(zlib.compress(data, COMPRESSION_LEVEL)).decode("ascii")


def decode_chunk(chunk: str) -> bytes:
    try:
        compressed = base64.b64decode(chunk, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ChunkDecodeError(f"Malformed chunk text: {exc}") from exc
    try:
        return zlib.decompress(compressed)
    except zlib.error as exc:
        raise ChunkDecodeError(f"Corrupt or truncated chunk data: {exc}") from exc


def iter_split_encode(stream: BinaryIO, chunk_size: int = RESOURCE_CHUNK_SIZE) -> Iterator[str]:
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")

    emitted = False
    while True:
        data = _read_up_to(stream, chunk_size)
        if not data:
            break
        emitted = True
        yield encode_chunk(data)
        if len(data) < chunk_size:
            break

    if not emitted:
        yield encode_chunk(b"")


def split_encode(data: bytes, chunk_size: int = RESOURCE_CHUNK_SIZE) -> list[str]:
    return list(iter_split_encode(io.BytesIO(data), chunk_size))


def iter_decode(chunks: Iterable[str]) -> Iterator[bytes]:
    for chunk in chunks:
        yield decode_chunk(chunk)


def join_decode(chunks: Iterable[str]) -> bytes:
    return b"".join(iter_decode(chunks))


def approximate_size(chunks: Sequence[str], chunk_size: int = RESOURCE_CHUNK_SIZE) -> int:
    """Size estimate used for strategy selection; assumes all but the last chunk are full."""
    if not chunks:
        return 0
    return (len(chunks) - 1) * chunk_size + len(decode_chunk(chunks[-1]))


def _read_up_to(stream: BinaryIO, size: int) -> bytes:
    # Raw and pipe streams may return short reads before EOF.
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        part = stream.read(remaining)
        if not part:
            break
        parts.append(part)
        remaining -= len(part)
    return b"".join(parts)
