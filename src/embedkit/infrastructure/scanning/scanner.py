from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

logger = logging.getLogger(__name__)

ExcludePredicate = Callable[[Path], bool]


@dataclass(frozen=True, slots=True)
class ScannedFile:
    absolute_path: Path
    relative_path: str
    key: str


def resource_key(relative_path: str) -> str:
    return relative_path.replace("/", "_").replace("\\", "_").replace(".", "_")


def _exclude_nothing(_path: Path) -> bool:
    return False


def exclude_patterns(patterns: Iterable[str]) -> ExcludePredicate:
    """Build an exclusion predicate from glob patterns.

    The predicate receives root-relative paths. A path is excluded when any pattern
    matches its name or a trailing part of its relative POSIX form, so both ``.git``
    and ``docs/drafts/*`` style patterns work. Folders above the root never match.
    """
    compiled = [p for p in patterns if p]
    if not compiled:
        return _exclude_nothing

    def _predicate(path: Path) -> bool:
        name = path.name
        posix = path.as_posix()
        return any(
            fnmatch.fnmatch(name, p) or fnmatch.fnmatch(posix, p) or fnmatch.fnmatch(posix, f"*/{p}")
            for p in compiled
        )

    return _predicate


class ResourceScanner:
    def __init__(self, exclude: ExcludePredicate | None = None) -> None:
        self.exclude = exclude or _exclude_nothing

    def scan(self, roots: Iterable[Path]) -> list[ScannedFile]:
        out: list[ScannedFile] = []
        for root in roots:
            root_path = Path(root).expanduser()
            if not root_path.is_dir():
                logger.warning("Skipping non-existent resource directory: %s", root_path)
                continue
            resolved = root_path.resolve()
            self._scan_directory(resolved, resolved, out, {resolved})
        return out

    def _scan_directory(self, root: Path, current: Path, out: list[ScannedFile], active: set[Path]) -> None:
        # active holds the resolved folders on the current descent path.
        for entry in sorted(current.iterdir(), key=lambda p: p.name):
            relative = entry.relative_to(root)
            if self.exclude(relative):
                logger.debug("Excluded %s", entry)
                continue
            if entry.is_dir():
                target = entry.resolve()
                if target in active:
                    logger.warning("Skipping symlink cycle: %s -> %s", entry, target)
                    continue
                active.add(target)
                try:
                    self._scan_directory(root, entry, out, active)
                finally:
                    active.discard(target)
            elif entry.is_file():
                relative_path = relative.as_posix()
                out.append(
                    ScannedFile(
                        absolute_path=entry,
                        relative_path=relative_path,
                        key=resource_key(relative_path),
                    )
                )


def scan(roots: Iterable[Path], exclude: ExcludePredicate | None = None) -> list[ScannedFile]:
    return ResourceScanner(exclude).scan(roots)
