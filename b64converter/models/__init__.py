"""
Data models for the Base64 converter API.

This module provides Pydantic models for request/response validation and
documentation of the conversion and session endpoints.
"""
from b64converter.models.base import (
    BaseMetrics,
    ImageStats,
    SettingsModel,
    BaseEncodeResponse
)

from b64converter.models.convert import (
    EncodeResponse,
    ChunkRequest,
    ChunkResponse,
    ValidateRequest,
    ReassembleRequest,
    ValidateResponse,
    SaveRequest,
    SaveResponse
)

from b64converter.models.session import (
    SettingsUpdate,
    SettingsPresets,
    SessionResult,
    SessionResponse
)

__all__ = [
    # Base models
    'BaseMetrics',
    'ImageStats',
    'SettingsModel',
    'BaseEncodeResponse',

    # Conversion models
    'EncodeResponse',
    'ChunkRequest',
    'ChunkResponse',
    'ValidateRequest',
    'ReassembleRequest',
    'ValidateResponse',
    'SaveRequest',
    'SaveResponse',

    # Session models
    'SettingsUpdate',
    'SettingsPresets',
    'SessionResult',
    'SessionResponse'
]
