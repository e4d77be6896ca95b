from __future__ import annotations

import os
import shutil
import threading
from pathlib import Path
from typing import Iterable


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def temp_sibling(dst: Path) -> Path:
    # Unique per process and thread so concurrent writers never share a temp file.
    return dst.parent / f".{dst.name}.{os.getpid()}.{threading.get_ident()}.tmp"


def write_chunks_atomic(dst: Path, chunks: Iterable[bytes]) -> None:
    ensure_directory(dst.parent)
    temp_path = temp_sibling(dst)
    try:
        with temp_path.open("wb") as f:
            for chunk in chunks:
                f.write(chunk)
        os.replace(temp_path, dst)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def write_text_atomic(dst: Path, content: str) -> None:
    write_chunks_atomic(dst, [content.encode("utf-8")])


def staging_sibling(dst: Path) -> Path:
    return dst.parent / f".{dst.name}.{os.getpid()}.{threading.get_ident()}.staging"


def replace_directory(src: Path, dst: Path) -> None:
    """Move the fully written ``src`` into place at ``dst``, discarding the old tree."""
    backup = dst.parent / f".{dst.name}.{os.getpid()}.{threading.get_ident()}.old"
    if dst.exists():
        os.replace(dst, backup)
    try:
        os.replace(src, dst)
    except OSError:
        if backup.exists():
            os.replace(backup, dst)
        raise
    if backup.exists():
        shutil.rmtree(backup)
