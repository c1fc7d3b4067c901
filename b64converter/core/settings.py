"""
Compression settings shared by the encoder and the session store.
"""
from dataclasses import dataclass, replace

from b64converter.config import DEFAULT_QUALITY, DEFAULT_MAX_SIZE, DEFAULT_CHUNK_SIZE
from b64converter.core.exceptions import InvalidArgumentError


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class CompressionSettings:
    """
    Immutable encoder configuration.

    Fields:
        compress: Resize and recompress images before encoding
        quality: JPEG quality factor in (0, 1]
        max_size: Maximum length of the longest image edge, px
        chunk_size: Maximum fragment length, characters
    """
    compress: bool = True
    quality: float = DEFAULT_QUALITY
    max_size: int = DEFAULT_MAX_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self):
        if isinstance(self.quality, bool) or not isinstance(self.quality, (int, float)) \
                or not 0 < self.quality <= 1:
            raise InvalidArgumentError(f"Quality must be in (0, 1], got {self.quality!r}", action="settings")
        if not _is_int(self.max_size) or self.max_size <= 0:
            raise InvalidArgumentError(f"Max size must be a positive integer, got {self.max_size!r}", action="settings")
        if not _is_int(self.chunk_size) or self.chunk_size <= 0:
            raise InvalidArgumentError(
                f"Chunk size must be a positive integer, got {self.chunk_size!r}", action="settings"
            )

    def update(self, **changes) -> "CompressionSettings":
        """Return a copy with some fields changed (validated again)."""
        changes = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **changes)
