from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping, Sequence

from embedkit.core.chunks import RESOURCE_CHUNK_SIZE, approximate_size, join_decode
from embedkit.core.hashing import compute_chunks_digest


class OptimizationStrategy(Enum):
    MEMORY = "memory"
    SPEED = "speed"


class AccessMode(Enum):
    IN_MEMORY = "in_memory"
    DISK_CACHED = "disk_cached"


_UNSET: Any = object()


@dataclass(slots=True, eq=False)
class Resource:
    """One embedded file: a directory-unique key and its ordered encoded chunks.

    Decoded values are computed on first access and kept for the lifetime of the
    instance; concurrent first callers share a single decode.
    """

    key: str
    chunks: Sequence[str]
    chunk_size: int = RESOURCE_CHUNK_SIZE
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _bytes: bytes = field(default=_UNSET, init=False, repr=False)
    _string: str = field(default=_UNSET, init=False, repr=False)
    _size: int = field(default=_UNSET, init=False, repr=False)
    _digest: str = field(default=_UNSET, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.chunks:
            raise ValueError(f"Resource {self.key!r} must have at least one chunk")

    @property
    def as_bytes(self) -> bytes:
        return self._memoized("_bytes", lambda: join_decode(self.chunks))

    @property
    def as_string(self) -> str:
        return self._memoized("_string", lambda: self.as_bytes.decode("utf-8"))

    @property
    def size(self) -> int:
        return self._memoized("_size", lambda: approximate_size(self.chunks, self.chunk_size))

    @property
    def digest(self) -> str:
        return self._memoized("_digest", lambda: compute_chunks_digest(self.chunks))

    def _memoized(self, name: str, compute: Callable[[], Any]) -> Any:
        value = getattr(self, name)
        if value is not _UNSET:
            return value
        with self._lock:
            value = getattr(self, name)
            if value is _UNSET:
                value = compute()
                setattr(self, name, value)
        return value


class ResourceDirectory(ABC):
    @property
    @abstractmethod
    def key(self) -> str:
        """Identifier of this directory, used as the cache sub-directory name."""

    @abstractmethod
    def lookup(self, path: str) -> Resource | None:
        """Return the resource stored under ``path`` or ``None``."""

    def all_paths(self) -> list[str]:
        raise NotImplementedError(f"{type(self).__name__} does not enumerate its paths")


class StaticResourceDirectory(ResourceDirectory):
    """Base for generated lookup tables, configured through class attributes."""

    key: ClassVar[str] = ""
    resources: ClassVar[Mapping[str, Resource]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.resources = MappingProxyType(dict(cls.resources))

    def lookup(self, path: str) -> Resource | None:
        return self.resources.get(path)

    def all_paths(self) -> list[str]:
        return list(self.resources)
