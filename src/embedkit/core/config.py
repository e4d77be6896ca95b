from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from embedkit.core.chunks import IN_MEMORY_CUTOFF

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIRNAME = "embedkit"


@dataclass(frozen=True)
class EmbedSettings:
    cache_dir: Path | None
    in_memory_cutoff: int = IN_MEMORY_CUTOFF


def default_cache_root() -> Path:
    return Path(tempfile.gettempdir()) / DEFAULT_CACHE_DIRNAME


def load_settings() -> EmbedSettings:
    cache_dir: Path | None
    if _env_flag("EMBEDKIT_DISABLE_DISK_CACHE"):
        cache_dir = None
    else:
        cache_dir_raw = os.getenv("EMBEDKIT_CACHE_DIR")
        if cache_dir_raw:
            cache_dir = Path(cache_dir_raw).expanduser().resolve()
        else:
            cache_dir = default_cache_root()

    return EmbedSettings(
        cache_dir=cache_dir,
        in_memory_cutoff=_env_non_negative_int("EMBEDKIT_IN_MEMORY_CUTOFF", default=IN_MEMORY_CUTOFF),
    )


def _env_flag(name: str) -> bool:
    raw = os.getenv(name, "").strip().lower()
    return raw in {"1", "true", "yes", "on"}


def _env_non_negative_int(name: str, *, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%r, using %d", name, raw, default)
        return default
    return value
