class EmbedError(Exception):
    """Base error for all user-facing embedkit exceptions."""


class ConfigurationError(EmbedError):
    """Raised when generation configuration is invalid or incomplete."""


class ResourceNotFoundError(EmbedError):
    """Raised when a path is not present in a resource directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Resource not found: {path}")
        self.path = path


class ChunkDecodeError(EmbedError):
    """Raised when an embedded chunk is malformed or truncated."""


class CacheIOError(EmbedError):
    """Raised when the on-disk cache cannot be used."""
