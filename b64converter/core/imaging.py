"""
Image scaling policy and the Pillow-backed image processor.

The processor always produces JPEG output. Images whose longest edge exceeds
the configured maximum are scaled down proportionally; smaller images keep
their dimensions and are only recompressed.
"""
import base64
import logging
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from b64converter.core.exceptions import InvalidArgumentError, IOFailureError
from b64converter.core.sizing import round_half_up

# Set up logging
logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "JPEG"
OUTPUT_MIME_TYPE = "image/jpeg"


def compute_target_size(width: int, height: int, max_size: int) -> Tuple[int, int]:
    """
    Compute output dimensions for a maximum long-edge size.

    Each dimension is rounded on its own, so the aspect ratio may drift by a
    fraction of a pixel.

    Args:
        width: Source width, px
        height: Source height, px
        max_size: Maximum length of the longest edge, px

    Returns:
        Tuple of (width, height); unchanged when the image already fits

    Raises:
        InvalidArgumentError: If any argument is not positive
    """
    if width <= 0 or height <= 0:
        raise InvalidArgumentError(f"Invalid image dimensions {width}x{height}", action="resize")
    if max_size <= 0:
        raise InvalidArgumentError(f"Max size must be positive, got {max_size}", action="resize")

    longest = max(width, height)
    if longest <= max_size:
        return width, height

    scale = max_size / longest
    return round_half_up(width * scale), round_half_up(height * scale)


def to_jpeg_quality(quality: float) -> int:
    """Map a (0, 1] quality factor onto Pillow's 1..100 JPEG scale."""
    return min(100, max(1, round_half_up(quality * 100)))


class ImageProcessor:
    """Decode, resize and re-encode images with Pillow."""

    def open(self, source: bytes) -> Image.Image:
        """
        Decode image bytes, applying any EXIF orientation.

        Raises:
            IOFailureError: If the bytes are not a readable image
        """
        try:
            image = Image.open(BytesIO(source))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise IOFailureError(f"Could not read image: {str(e)}", action="process image") from e
        return ImageOps.exif_transpose(image)

    def render(
        self,
        image: Image.Image,
        target_width: Optional[int] = None,
        target_height: Optional[int] = None,
        quality: float = 1.0
    ) -> Tuple[bytes, Image.Image]:
        """
        Resize (if the target differs) and encode a decoded image as JPEG.

        Returns:
            Tuple of (encoded bytes, decoded result image)
        """
        if image.mode != "RGB":
            image = image.convert("RGB")

        target = (target_width or image.width, target_height or image.height)
        if target != image.size:
            logger.debug(f"Resizing image from {image.width}x{image.height} to {target[0]}x{target[1]}")
            image = image.resize(target, Image.Resampling.LANCZOS)

        buffer = BytesIO()
        try:
            image.save(buffer, format=OUTPUT_FORMAT, quality=to_jpeg_quality(quality))
        except (OSError, ValueError) as e:
            raise IOFailureError(f"Could not encode image: {str(e)}", action="process image") from e

        encoded = buffer.getvalue()
        return encoded, Image.open(BytesIO(encoded))

    def resize(
        self,
        source: bytes,
        target_width: Optional[int] = None,
        target_height: Optional[int] = None,
        quality: float = 1.0
    ) -> Tuple[str, int, int]:
        """
        Resize and recompress an image.

        Args:
            source: Encoded source image
            target_width: Output width (None keeps the source width)
            target_height: Output height (None keeps the source height)
            quality: JPEG quality factor in (0, 1]

        Returns:
            Tuple of (Base64 payload without header, width, height)
        """
        image = self.open(source)
        encoded, result = self.render(image, target_width, target_height, quality)
        return base64.b64encode(encoded).decode("ascii"), result.width, result.height

    def to_jpeg_file(self, source: bytes, path: str) -> Tuple[int, int]:
        """
        Decode an image and store it as a full-quality JPEG file.

        Returns:
            Tuple of (width, height) of the stored image
        """
        image = self.open(source)
        encoded, result = self.render(image, quality=1.0)
        try:
            with open(path, "wb") as f:
                f.write(encoded)
        except OSError as e:
            raise IOFailureError(f"Could not write image file: {str(e)}", action="save image") from e
        return result.width, result.height
