"""
Models for converter sessions.

A session keeps the picked source and the settings between requests, and
re-encodes whenever either changes.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from b64converter.core.session import ConverterState
from b64converter.models.base import SettingsModel, BaseEncodeResponse


class SettingsUpdate(BaseModel):
    """Partial settings change; omitted fields keep their current value"""
    compress: Optional[bool] = Field(None, description="Resize and recompress images before encoding")
    quality: Optional[float] = Field(None, gt=0, le=1, description="JPEG quality factor in (0, 1]")
    max_size: Optional[int] = Field(None, gt=0, description="Maximum length of the longest image edge")
    chunk_size: Optional[int] = Field(None, gt=0, description="Maximum fragment length in characters")


class SettingsPresets(BaseModel):
    """Default settings plus the values a client offers for each setting"""
    defaults: SettingsModel = Field(..., description="Settings a new session starts with")
    qualities: List[float] = Field(..., description="Quality presets")
    max_sizes: List[int] = Field(..., description="Maximum edge length presets")
    chunk_sizes: List[int] = Field(..., description="Fragment length presets")


class SessionResult(BaseEncodeResponse):
    """Current encoding of the session source"""
    pass


class SessionResponse(BaseModel):
    """Response model describing a session"""
    session_id: str = Field(..., description="Unique identifier of the session")
    settings: SettingsModel = Field(..., description="Current compression settings")
    source_kind: Optional[str] = Field(None, description="'image' or 'file' once something was picked")
    source_filename: Optional[str] = Field(None, description="Name of the picked file")
    source_size: Optional[int] = Field(None, description="Size of the picked file in bytes")
    generation: int = Field(..., description="Incremented on every source or settings change")
    result: Optional[SessionResult] = Field(None, description="Current encoding, if any")

    @classmethod
    def from_state(cls, state: ConverterState) -> "SessionResponse":
        source = state.source
        return cls(
            session_id=state.session_id,
            settings=SettingsModel.from_settings(state.settings),
            source_kind=source.kind if source else None,
            source_filename=source.filename if source else None,
            source_size=source.size if source else None,
            generation=state.generation,
            result=SessionResult(**SessionResult.result_fields(state.result)) if state.result else None
        )
