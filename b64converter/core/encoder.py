"""
Encoding pipeline: source bytes -> (optional image processing) -> data URI
-> fragments, together with the size accounting shown to the user.
"""
import logging
import mimetypes
from dataclasses import dataclass
from typing import Optional, Tuple

from b64converter.core.datauri import encode, chunk, digest
from b64converter.core.imaging import ImageProcessor, compute_target_size, OUTPUT_MIME_TYPE
from b64converter.core.settings import CompressionSettings
from b64converter.core.sizing import estimate_decoded_size, reduction_percent
from b64converter.utils.metrics import calculate_image_metrics

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ImageDescriptor:
    """Dimensions and estimated size of one encoded image."""
    width: int
    height: int
    size: int


@dataclass(frozen=True)
class EncodeResult:
    """
    Everything produced by one encoding run.

    Fields:
        data_uri: Complete data URI
        mime_type: MIME type written into the header
        fragments: Fixed-size slices of data_uri
        chunk_size: Fragment length used
        estimated_size: Decoded size estimate of data_uri
        sha256: Digest of data_uri for checking reassembly
        image: Processed image descriptor (images only)
        original_image: Descriptor of the source re-encoded at full quality (images only)
        reduction_percent: Size saved relative to original_image (only when compressing)
        psnr: Peak signal-to-noise ratio against the source (only when compressing)
        ssim: Structural similarity against the source (only when compressing)
        filename: Name of the source file, if known
    """
    data_uri: str
    mime_type: str
    fragments: Tuple[str, ...]
    chunk_size: int
    estimated_size: int
    sha256: str
    image: Optional[ImageDescriptor] = None
    original_image: Optional[ImageDescriptor] = None
    reduction_percent: Optional[int] = None
    psnr: Optional[float] = None
    ssim: Optional[float] = None
    filename: Optional[str] = None

    @property
    def length(self) -> int:
        return len(self.data_uri)

    @property
    def fragment_count(self) -> int:
        return len(self.fragments)


def guess_mime_type(filename: Optional[str], declared: Optional[str] = None) -> str:
    """
    Pick the MIME type for a generic file.

    The declared type wins when present; otherwise it is guessed from the
    filename extension, falling back to application/octet-stream. Parameters
    such as "; charset=utf-8" are dropped since the data URI header cannot
    carry them, and a bare application/octet-stream counts as undeclared.
    """
    if declared:
        declared = declared.split(";", 1)[0].strip().lower()
        if declared and declared != DEFAULT_MIME_TYPE:
            return declared
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return DEFAULT_MIME_TYPE


def _build_result(data_uri: str, mime_type: str, settings: CompressionSettings, **extra) -> EncodeResult:
    return EncodeResult(
        data_uri=data_uri,
        mime_type=mime_type,
        fragments=tuple(chunk(data_uri, settings.chunk_size)),
        chunk_size=settings.chunk_size,
        estimated_size=estimate_decoded_size(data_uri),
        sha256=digest(data_uri),
        **extra
    )


def process_image(
    source: bytes,
    settings: CompressionSettings,
    processor: Optional[ImageProcessor] = None,
    filename: Optional[str] = None
) -> EncodeResult:
    """
    Encode an image, downscaling and recompressing it when compression is on.

    The source is first re-encoded as a full-quality JPEG to measure the
    original. With compression off that re-encoding is the result; with
    compression on the source is scaled to fit settings.max_size and
    encoded at settings.quality.

    Args:
        source: Encoded image bytes
        settings: Compression settings
        processor: Image processor (a default Pillow processor if omitted)
        filename: Optional source filename, carried into the result

    Returns:
        EncodeResult with an image/jpeg data URI

    Raises:
        IOFailureError: If the source cannot be decoded or re-encoded
    """
    processor = processor or ImageProcessor()
    image = processor.open(source)

    original_bytes, original_image = processor.render(image, quality=1.0)
    original_uri = encode(original_bytes, OUTPUT_MIME_TYPE)
    original = ImageDescriptor(
        width=original_image.width,
        height=original_image.height,
        size=estimate_decoded_size(original_uri)
    )

    if not settings.compress:
        logger.info(f"Encoded image {original.width}x{original.height} without compression "
                    f"({len(original_uri)} characters)")
        return _build_result(
            original_uri, OUTPUT_MIME_TYPE, settings,
            image=original, original_image=original, filename=filename
        )

    target_width, target_height = compute_target_size(original.width, original.height, settings.max_size)
    compressed_bytes, compressed_image = processor.render(image, target_width, target_height, settings.quality)
    compressed_uri = encode(compressed_bytes, OUTPUT_MIME_TYPE)
    compressed = ImageDescriptor(
        width=compressed_image.width,
        height=compressed_image.height,
        size=estimate_decoded_size(compressed_uri)
    )
    psnr, ssim = calculate_image_metrics(image, compressed_image)

    result = _build_result(
        compressed_uri, OUTPUT_MIME_TYPE, settings,
        image=compressed,
        original_image=original,
        reduction_percent=reduction_percent(original.size, compressed.size),
        psnr=psnr,
        ssim=ssim,
        filename=filename
    )
    logger.info(f"Encoded image {original.width}x{original.height} -> {compressed.width}x{compressed.height} "
                f"at quality {settings.quality} ({result.length} characters, {result.fragment_count} fragments)")
    return result


def encode_file(
    raw: bytes,
    mime_type: str,
    settings: CompressionSettings,
    filename: Optional[str] = None
) -> EncodeResult:
    """Encode arbitrary file bytes as-is, without any image processing."""
    data_uri = encode(raw, mime_type)
    result = _build_result(data_uri, mime_type, settings, filename=filename)
    logger.info(f"Encoded file {filename or '<unnamed>'} ({mime_type}, {len(raw)} bytes) "
                f"into {result.fragment_count} fragments")
    return result
