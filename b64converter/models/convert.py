"""
Models for the stateless conversion endpoints (encode, chunk, validate,
reassemble, save).
"""
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from b64converter.core.encoder import EncodeResult
from b64converter.models.base import BaseMetrics, BaseEncodeResponse


class EncodeResponse(BaseEncodeResponse, BaseMetrics):
    """Response model for image and file encoding"""
    processing_time: float = Field(..., description="Time taken to process and encode in seconds")

    @classmethod
    def from_result(
        cls,
        result: EncodeResult,
        processing_time: float,
        cpu_usage: float,
        memory_usage: float
    ) -> "EncodeResponse":
        return cls(
            processing_time=round(processing_time, 4),
            cpu_usage=cpu_usage,
            memory_usage=memory_usage,
            **cls.result_fields(result)
        )


class ChunkRequest(BaseModel):
    """Request model for splitting a string into fragments"""
    text: str = Field(..., description="String to split")
    chunk_size: int = Field(..., description="Maximum fragment length in characters (must be >= 1)")


class ChunkResponse(BaseModel):
    """Response model for fragmenting"""
    chunk_size: int = Field(..., description="Fragment length used")
    length: int = Field(..., description="Length of the input string")
    fragment_count: int = Field(..., description="Number of fragments")
    fragment_lengths: List[int] = Field(..., description="Length of each fragment")
    fragments: List[str] = Field(..., description="Fragments in order")


class ValidateRequest(BaseModel):
    """Request model for data URI validation"""
    data_uri: str = Field(..., description="Data URI to check")


class ReassembleRequest(BaseModel):
    """Request model for joining fragments"""
    fragments: List[str] = Field(..., description="Fragments in their original order")
    sha256: Optional[str] = Field(
        None, description="Digest published by the encoder; checked when supplied"
    )


class ValidateResponse(BaseModel):
    """Shape of a valid data URI"""
    mime_type: str = Field(..., description="MIME type from the data URI header")
    payload_length: int = Field(..., description="Length of the Base64 payload in characters")
    length: int = Field(..., description="Length of the complete data URI in characters")
    is_image: bool = Field(..., description="Whether the data URI would be saved to the gallery")
    extension: str = Field(..., description="Filename extension for the MIME type ('' if unknown)")
    estimated_size: int = Field(..., description="Estimated decoded size in bytes")
    formatted_size: str = Field(..., description="Estimated size for display")
    sha256: str = Field(..., description="SHA-256 digest of the complete data URI")


class SaveRequest(BaseModel):
    """Request model for persisting a data URI, given whole or as fragments"""
    data_uri: Optional[str] = Field(None, description="Complete data URI")
    fragments: Optional[List[str]] = Field(None, description="Fragments in their original order")
    sha256: Optional[str] = Field(
        None, description="Digest published by the encoder; checked when supplied"
    )

    @model_validator(mode="after")
    def check_source(self) -> "SaveRequest":
        if (self.data_uri is None) == (self.fragments is None):
            raise ValueError("Provide exactly one of 'data_uri' or 'fragments'")
        return self

    @property
    def text(self) -> str:
        if self.data_uri is not None:
            return self.data_uri
        return "".join(self.fragments)


class SaveResponse(BaseModel):
    """Response model for a persisted data URI"""
    destination: str = Field(..., description="'gallery' for images, 'file' for everything else")
    filename: str = Field(..., description="Name of the stored file")
    size: int = Field(..., description="Size of the stored file in bytes")
    mime_type: str = Field(..., description="MIME type from the data URI header")
    download_url: Optional[str] = Field(None, description="URL to download a stored generic file")
