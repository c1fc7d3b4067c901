"""
Size accounting for encoded data.

These figures are for display only. The decoded size estimate is the plain
4:3 Base64 ratio applied to the whole data URI string; it does not subtract
the header or account for "=" padding.
"""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, not 2)."""
    return int(math.floor(value + 0.5))


def estimate_decoded_size(data_uri: str) -> int:
    """Approximate decoded byte count: floor(len(data_uri) * 0.75)."""
    return len(data_uri) * 3 // 4


def reduction_percent(original_size: int, compressed_size: int) -> int:
    """Percentage saved relative to the original, rounded to an integer."""
    if original_size <= 0:
        return 0
    return round_half_up((1 - compressed_size / original_size) * 100)


def format_bytes(size: int) -> str:
    """
    Format a byte count for humans.

    Examples:
        0 -> "0 B", 1536 -> "1.5 KB", 3 * 1024 * 1024 -> "3.0 MB"
    """
    if size <= 0:
        return "0 B"
    k = 1024
    units = ["B", "KB", "MB"]
    i = min(int(math.floor(math.log(size) / math.log(k))), len(units) - 1)
    return f"{size / math.pow(k, i):.1f} {units[i]}"
