"""
Base models for the Base64 converter API.
These models define common fields reused by the stateless and the
session endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from b64converter.core.encoder import EncodeResult, ImageDescriptor
from b64converter.core.settings import CompressionSettings
from b64converter.core.sizing import format_bytes


class BaseMetrics(BaseModel):
    """Base class for performance and resource metrics"""
    cpu_usage: float = Field(..., description="CPU usage during operation (%)")
    memory_usage: float = Field(..., description="Memory usage during operation (%)")


class ImageStats(BaseModel):
    """Dimensions and estimated size of an encoded image"""
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    size: int = Field(..., description="Estimated decoded size in bytes")
    formatted_size: str = Field(..., description="Estimated size for display, e.g. '12.3 KB'")

    @classmethod
    def from_descriptor(cls, descriptor: Optional[ImageDescriptor]) -> Optional["ImageStats"]:
        if descriptor is None:
            return None
        return cls(
            width=descriptor.width,
            height=descriptor.height,
            size=descriptor.size,
            formatted_size=format_bytes(descriptor.size)
        )


class SettingsModel(BaseModel):
    """Compression settings as exchanged over the API"""
    compress: bool = Field(..., description="Resize and recompress images before encoding")
    quality: float = Field(..., gt=0, le=1, description="JPEG quality factor in (0, 1]")
    max_size: int = Field(..., gt=0, description="Maximum length of the longest image edge in pixels")
    chunk_size: int = Field(..., gt=0, description="Maximum fragment length in characters")

    @classmethod
    def from_settings(cls, settings: CompressionSettings) -> "SettingsModel":
        return cls(
            compress=settings.compress,
            quality=settings.quality,
            max_size=settings.max_size,
            chunk_size=settings.chunk_size
        )


class BaseEncodeResponse(BaseModel):
    """Result of encoding a picked image or file"""
    mime_type: str = Field(..., description="MIME type written into the data URI header")
    filename: Optional[str] = Field(None, description="Name of the source file")
    length: int = Field(..., description="Length of the complete data URI in characters")
    estimated_size: int = Field(..., description="Estimated decoded size in bytes")
    formatted_size: str = Field(..., description="Estimated size for display")
    sha256: str = Field(..., description="SHA-256 digest of the complete data URI")
    chunk_size: int = Field(..., description="Fragment length used")
    fragment_count: int = Field(..., description="Number of fragments")
    fragments: List[str] = Field(..., description="Fragments in order; joined they give the data URI")
    stats: Optional[ImageStats] = Field(None, description="Processed image statistics (images only)")
    original_stats: Optional[ImageStats] = Field(
        None, description="Statistics of the source re-encoded at full quality (images only)"
    )
    reduced_percent: Optional[int] = Field(
        None, description="Size saved relative to the original (only when compressing)"
    )
    psnr: Optional[float] = Field(None, description="Peak Signal-to-Noise Ratio against the source")
    ssim: Optional[float] = Field(None, description="Structural Similarity Index against the source")

    @classmethod
    def result_fields(cls, result: EncodeResult) -> dict:
        return {
            "mime_type": result.mime_type,
            "filename": result.filename,
            "length": result.length,
            "estimated_size": result.estimated_size,
            "formatted_size": format_bytes(result.estimated_size),
            "sha256": result.sha256,
            "chunk_size": result.chunk_size,
            "fragment_count": result.fragment_count,
            "fragments": list(result.fragments),
            "stats": ImageStats.from_descriptor(result.image),
            "original_stats": ImageStats.from_descriptor(result.original_image),
            "reduced_percent": result.reduction_percent,
            "psnr": result.psnr,
            "ssim": result.ssim
        }
