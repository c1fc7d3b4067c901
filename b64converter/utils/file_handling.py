"""
Utilities for output paths and temporary file management.
"""
import os
import time
import logging
import contextlib
import uuid
from typing import Iterator, Optional

from b64converter.config import TEMP_DIR

# Set up logging
logger = logging.getLogger(__name__)


def ensure_directory(path: str) -> str:
    """Create a directory (and parents) if it does not exist yet."""
    os.makedirs(path, exist_ok=True)
    return path


def get_temp_filepath(file_id: Optional[str] = None, suffix: str = "") -> str:
    """
    Generate a path for a temporary file.

    Args:
        file_id: Optional file ID to use (generates a new UUID if not provided)
        suffix: Optional file suffix/extension

    Returns:
        Absolute path to a temporary file
    """
    if file_id is None:
        file_id = str(uuid.uuid4())

    return os.path.join(ensure_directory(TEMP_DIR), f"{file_id}{suffix}")


def timestamped_filename(prefix: str, extension: str = "", timestamp_ms: Optional[int] = None) -> str:
    """
    Build a filename from the current time in milliseconds.

    Example:
        timestamped_filename("file", ".pdf") -> "file_1760803200000.pdf"
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{prefix}_{timestamp_ms}{extension}"


def available_filename(directory: str, prefix: str, extension: str = "") -> str:
    """
    Timestamped filename that does not exist yet in a directory.

    Saves landing in the same millisecond get the next free timestamp.
    """
    timestamp_ms = int(time.time() * 1000)
    filename = timestamped_filename(prefix, extension, timestamp_ms)
    while os.path.exists(os.path.join(directory, filename)):
        timestamp_ms += 1
        filename = timestamped_filename(prefix, extension, timestamp_ms)
    return filename


def safe_join(directory: str, filename: str) -> str:
    """
    Join a bare filename onto a directory.

    Raises:
        ValueError: If the filename contains path components
    """
    if not filename or os.path.basename(filename) != filename or filename in (".", ".."):
        raise ValueError(f"Invalid filename: {filename!r}")
    return os.path.join(directory, filename)


@contextlib.contextmanager
def temp_file_context(suffix: str = "", cleanup: bool = True) -> Iterator[str]:
    """
    Context manager that creates a temporary file and optionally cleans it up.

    Args:
        suffix: File extension to use
        cleanup: Whether to delete the file after the context exits

    Yields:
        Path to the temporary file
    """
    temp_path = get_temp_filepath(suffix=suffix)
    try:
        yield temp_path
    finally:
        if cleanup and os.path.exists(temp_path):
            os.remove(temp_path)
            logger.debug(f"Cleaned up temporary file: {temp_path}")
