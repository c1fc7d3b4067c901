"""
Converter sessions: explicit state plus a recompute entry point.

A session holds the current settings, the current source and the last
encoding result. Any change to the source or the settings bumps the
generation number; a recompute started for an older generation is
discarded when it finishes, so the newest settings always win.
"""
import uuid
import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional

from b64converter.core.encoder import EncodeResult, process_image, encode_file
from b64converter.core.imaging import ImageProcessor
from b64converter.core.settings import CompressionSettings

# Set up logging
logger = logging.getLogger(__name__)

SOURCE_IMAGE = "image"
SOURCE_FILE = "file"


@dataclass(frozen=True)
class Source:
    """Picked content waiting to be encoded."""
    kind: str
    data: bytes
    mime_type: str
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ConverterState:
    session_id: str
    settings: CompressionSettings
    source: Optional[Source] = None
    result: Optional[EncodeResult] = None
    generation: int = 0


def recompute(state: ConverterState, processor: Optional[ImageProcessor] = None) -> Optional[EncodeResult]:
    """
    Encode the current source with the current settings.

    Returns None when no source has been picked yet.
    """
    source = state.source
    if source is None:
        return None
    if source.kind == SOURCE_IMAGE:
        return process_image(source.data, state.settings, processor, filename=source.filename)
    return encode_file(source.data, source.mime_type, state.settings, filename=source.filename)


class SessionStore:
    """In-memory session registry. Nothing is persisted across restarts."""

    def __init__(self, default_settings: Optional[CompressionSettings] = None):
        self.default_settings = default_settings or CompressionSettings()
        self._states: Dict[str, ConverterState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._states

    def create(self, settings: Optional[CompressionSettings] = None) -> ConverterState:
        state = ConverterState(session_id=str(uuid.uuid4()), settings=settings or self.default_settings)
        self._states[state.session_id] = state
        logger.info(f"Created session {state.session_id}")
        return state

    def get(self, session_id: str) -> ConverterState:
        """
        Raises:
            KeyError: If the session does not exist
        """
        try:
            return self._states[session_id]
        except KeyError:
            raise KeyError(f"Session not found: {session_id}")

    def delete(self, session_id: str) -> None:
        self.get(session_id)
        del self._states[session_id]
        logger.info(f"Deleted session {session_id}")

    def _advance(self, state: ConverterState, **changes) -> ConverterState:
        updated = replace(state, generation=state.generation + 1, result=None, **changes)
        self._states[state.session_id] = updated
        return updated

    def set_source(self, session_id: str, source: Source) -> ConverterState:
        """Replace the source; the previous result becomes stale."""
        return self._advance(self.get(session_id), source=source)

    def update_settings(self, session_id: str, settings: CompressionSettings) -> ConverterState:
        """Replace the settings; the previous result becomes stale."""
        return self._advance(self.get(session_id), settings=settings)

    def commit(self, session_id: str, generation: int, result: Optional[EncodeResult]) -> bool:
        """
        Store a recompute result if it belongs to the current generation.

        Returns:
            True if the result was stored, False if it was superseded
        """
        state = self._states.get(session_id)
        if state is None or state.generation != generation:
            logger.debug(f"Discarding stale result for session {session_id} (generation {generation})")
            return False
        self._states[session_id] = replace(state, result=result)
        return True

    def rollback(self, session_id: str, generation: int, previous: ConverterState) -> bool:
        """
        Undo a change whose recompute failed, restoring the source, settings
        and result of `previous`.

        Nothing happens if a newer change has arrived meanwhile. The restored
        state gets a fresh generation so results computed before it are
        still discarded.

        Returns:
            True if the previous state was restored
        """
        state = self._states.get(session_id)
        if state is None or state.generation != generation:
            return False
        self._states[session_id] = replace(previous, generation=generation + 1)
        logger.info(f"Session {session_id}: restored state after failed recompute")
        return True
