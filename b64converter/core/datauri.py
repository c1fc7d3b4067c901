"""
Data URI encoding, fragmenting and validation.

Data URI layout:
- "data:" literal
- MIME type (one or more characters, no ";" or ",")
- ";base64," separator
- Standard Base64 payload (A-Z a-z 0-9 + /, "=" padding), possibly empty

Fragments are fixed-stride slices of the full data URI string. Joining the
fragments in their original order gives back the data URI exactly; no
ordering marker or checksum is embedded in the fragments themselves.
"""
import re
import base64
import binascii
import hashlib
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from b64converter.core.exceptions import InvalidArgumentError, DataUriValidationError

# Set up logging
logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:([^;,]+);base64,(.*)$", re.DOTALL)
IMAGE_PREFIX = "data:image"

# Known MIME types and the extension used when saving them as files
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/heic": ".heic",
    "image/heif": ".heif",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
    "image/svg+xml": ".svg",
    "application/pdf": ".pdf",
    "application/zip": ".zip",
    "application/x-zip-compressed": ".zip",
    "application/gzip": ".gz",
    "application/x-7z-compressed": ".7z",
    "application/vnd.rar": ".rar",
    "application/json": ".json",
    "application/xml": ".xml",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.ms-powerpoint": ".ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ".pptx",
    "application/vnd.android.package-archive": ".apk",
    "text/plain": ".txt",
    "text/csv": ".csv",
    "text/html": ".html",
    "text/markdown": ".md",
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/ogg": ".ogg",
    "audio/mp4": ".m4a",
    "video/mp4": ".mp4",
    "video/quicktime": ".mov",
    "video/webm": ".webm",
}


@dataclass(frozen=True)
class DataUri:
    """A parsed data URI: MIME type plus raw Base64 payload."""
    mime_type: str
    payload: str

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.payload}"

    @property
    def is_image(self) -> bool:
        return is_image(self.to_data_uri())

    def __repr__(self) -> str:
        return f"DataUri(mime_type={self.mime_type!r}, payload_length={len(self.payload)})"


def _check_mime_type(mime_type: str) -> str:
    if not isinstance(mime_type, str) or not mime_type or ";" in mime_type or "," in mime_type:
        raise InvalidArgumentError(f"Invalid MIME type: {mime_type!r}", action="encode")
    return mime_type


def encode(raw: bytes, mime_type: str) -> str:
    """
    Encode raw bytes as a data URI.

    Args:
        raw: Bytes to encode (may be empty)
        mime_type: MIME type written into the data URI header

    Returns:
        String of the form "data:<mime_type>;base64,<payload>"

    Raises:
        InvalidArgumentError: If the MIME type would break the data URI grammar
    """
    _check_mime_type(mime_type)
    payload = base64.b64encode(raw).decode("ascii")
    return DataUri(mime_type=mime_type, payload=payload).to_data_uri()


def chunk(s: str, size: int) -> List[str]:
    """
    Split a string into fixed-size fragments.

    Args:
        s: String to split
        size: Maximum fragment length in characters (must be >= 1)

    Returns:
        Ordered list of fragments; all have length ``size`` except possibly
        the last one. An empty string gives an empty list.

    Raises:
        InvalidArgumentError: If size is not a positive integer
    """
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise InvalidArgumentError(f"Chunk size must be a positive integer, got {size!r}", action="chunk")
    return [s[i:i + size] for i in range(0, len(s), size)]


def reassemble(fragments: Iterable[str]) -> str:
    """Concatenate fragments in the order supplied."""
    return "".join(fragments)


def digest(data_uri: str) -> str:
    """SHA-256 hex digest of a data URI, used to check manual reassembly."""
    return hashlib.sha256(data_uri.encode("utf-8")).hexdigest()


def verify_digest(data_uri: str, expected: Optional[str]) -> None:
    """
    Check a reassembled data URI against the digest published by the encoder.

    Nothing is checked when no digest is supplied.

    Raises:
        DataUriValidationError: If the digest does not match
    """
    if not expected:
        return
    actual = digest(data_uri)
    if actual != expected.strip().lower():
        logger.warning(f"Digest mismatch after reassembly: expected {expected}, got {actual}")
        raise DataUriValidationError(
            "Reassembled data does not match the expected SHA-256 digest "
            "(fragments missing or out of order)",
            action="reassemble"
        )


def validate(s: str) -> DataUri:
    """
    Check that a string is a data URI and split it into its parts.

    The payload is not checked against the Base64 alphabet here.

    Raises:
        DataUriValidationError: If the string does not match the grammar
    """
    match = DATA_URI_PATTERN.match(s) if isinstance(s, str) else None
    if match is None:
        raise DataUriValidationError("Invalid Base64 format", action="validate")
    return DataUri(mime_type=match.group(1), payload=match.group(2))


def is_image(s: str) -> bool:
    """Coarse routing check: does the string start with "data:image"?"""
    return s.startswith(IMAGE_PREFIX)


def decode_payload(data_uri: DataUri) -> bytes:
    """
    Decode the Base64 payload of a validated data URI.

    Raises:
        InvalidArgumentError: If the payload is not valid Base64
    """
    try:
        return base64.b64decode(data_uri.payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidArgumentError(f"Malformed Base64 payload: {str(e)}", action="decode") from e


def select_extension(mime_type: str) -> str:
    """Map a MIME type to a filename extension; unknown types give ""."""
    if not isinstance(mime_type, str):
        return ""
    return MIME_EXTENSIONS.get(mime_type.strip().lower(), "")
