from __future__ import annotations

import io
import os
from pathlib import Path

from embedkit.core.chunks import split_encode
from embedkit.core.hashing import (
    compute_bytes_digest,
    compute_chunks_digest,
    compute_file_digest,
    compute_stream_digest,
)

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_compute_bytes_digest_sha256() -> None:
    assert (
        compute_bytes_digest(b"abc")
        == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_chunk_digest_matches_file_digest_for_any_chunk_size(tmp_path: Path) -> None:
    path = tmp_path / "asset.bin"
    path.write_bytes(os.urandom(4096) + b"tail")
    expected = compute_file_digest(path)

    for chunk_size in (1, 100, 4096, 10_000):
        assert compute_chunks_digest(split_encode(path.read_bytes(), chunk_size)) == expected


def test_empty_inputs_hash_to_empty_digest(tmp_path: Path) -> None:
    empty = tmp_path / "empty.txt"
    empty.write_bytes(b"")

    assert compute_chunks_digest([]) == EMPTY_SHA256
    assert compute_chunks_digest(split_encode(b"")) == EMPTY_SHA256
    assert compute_file_digest(empty) == EMPTY_SHA256


def test_stream_digest_reads_in_small_blocks() -> None:
    data = b"embedded" * 1000
    assert compute_stream_digest(io.BytesIO(data), chunk_size=7) == compute_bytes_digest(data)
