"""
API v2 - converter sessions.

A session remembers the picked source and the compression settings. Picking
a new source or changing a setting re-encodes the source; when two changes
overlap, only the result for the newest one is kept.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Response, UploadFile
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from b64converter.config import QUALITY_PRESETS, MAX_SIZE_PRESETS, CHUNK_SIZE_PRESETS
from b64converter.api.deps import get_processor, get_session_store
from b64converter.api.v1.convert import picked
from b64converter.core.encoder import guess_mime_type
from b64converter.core.exceptions import ConverterError
from b64converter.core.imaging import ImageProcessor
from b64converter.core.session import (
    SessionStore,
    ConverterState,
    Source,
    SOURCE_IMAGE,
    SOURCE_FILE,
    recompute
)
from b64converter.models.base import SettingsModel
from b64converter.models.session import SettingsUpdate, SettingsPresets, SessionResponse

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/v2", tags=["Sessions v2"])


def load_state(store: SessionStore, session_id: str) -> ConverterState:
    try:
        return store.get(session_id)
    except KeyError:
        logger.error(f"No session found for ID: {session_id}")
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


async def refresh(
    store: SessionStore,
    previous: ConverterState,
    state: ConverterState,
    processor: ImageProcessor
) -> ConverterState:
    """
    Recompute the session result and keep it unless a newer change arrived meanwhile.

    If the recompute fails the session goes back to `previous`.
    """
    try:
        result = await run_in_threadpool(recompute, state, processor)
    except ConverterError:
        store.rollback(state.session_id, state.generation, previous)
        raise
    store.commit(state.session_id, state.generation, result)
    return load_state(store, state.session_id)


@router.get("/settings/presets", response_model=SettingsPresets)
async def get_presets(store: SessionStore = Depends(get_session_store)):
    """Default settings and the preset values offered for each setting."""
    return SettingsPresets(
        defaults=SettingsModel.from_settings(store.default_settings),
        qualities=list(QUALITY_PRESETS),
        max_sizes=list(MAX_SIZE_PRESETS),
        chunk_sizes=list(CHUNK_SIZE_PRESETS)
    )


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    settings: Optional[SettingsUpdate] = Body(None),
    store: SessionStore = Depends(get_session_store)
):
    """
    Start a new session.

    - **settings**: Optional initial settings; omitted fields use the defaults
    """
    initial = store.default_settings
    if settings is not None:
        initial = initial.update(**settings.model_dump())
    return SessionResponse.from_state(store.create(initial))


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Current settings, source and encoding of a session."""
    return SessionResponse.from_state(load_state(store, session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """Forget a session and its source."""
    load_state(store, session_id)
    store.delete(session_id)
    return Response(status_code=204)


@router.post(
    "/sessions/{session_id}/image",
    response_model=SessionResponse,
    responses={204: {"description": "No file picked; session unchanged"}}
)
async def pick_image(
    session_id: str,
    file: Optional[UploadFile] = File(None),
    store: SessionStore = Depends(get_session_store),
    processor: ImageProcessor = Depends(get_processor)
):
    """
    Set an image as the session source and encode it with the session settings.

    Sending no file leaves the session unchanged.
    """
    load_state(store, session_id)
    if not picked(file):
        logger.info(f"Image pick cancelled for session {session_id}")
        return Response(status_code=204)

    content = await file.read()
    source = Source(
        kind=SOURCE_IMAGE,
        data=content,
        mime_type=file.content_type or "image/jpeg",
        filename=file.filename
    )
    previous = load_state(store, session_id)
    state = store.set_source(session_id, source)
    logger.info(f"Session {session_id}: picked image {file.filename} ({len(content)} bytes)")
    return SessionResponse.from_state(await refresh(store, previous, state, processor))


@router.post(
    "/sessions/{session_id}/file",
    response_model=SessionResponse,
    responses={204: {"description": "No file picked; session unchanged"}}
)
async def pick_file(
    session_id: str,
    file: Optional[UploadFile] = File(None),
    mime_type: Optional[str] = Form(None),
    store: SessionStore = Depends(get_session_store),
    processor: ImageProcessor = Depends(get_processor)
):
    """
    Set a generic file as the session source and encode it unchanged.

    Sending no file leaves the session unchanged.
    """
    load_state(store, session_id)
    if not picked(file):
        logger.info(f"File pick cancelled for session {session_id}")
        return Response(status_code=204)

    content = await file.read()
    source = Source(
        kind=SOURCE_FILE,
        data=content,
        mime_type=guess_mime_type(file.filename, mime_type or file.content_type),
        filename=file.filename
    )
    previous = load_state(store, session_id)
    state = store.set_source(session_id, source)
    logger.info(f"Session {session_id}: picked file {file.filename} ({source.mime_type}, {len(content)} bytes)")
    return SessionResponse.from_state(await refresh(store, previous, state, processor))


@router.put("/sessions/{session_id}/settings", response_model=SessionResponse)
async def update_settings(
    session_id: str,
    changes: SettingsUpdate,
    store: SessionStore = Depends(get_session_store),
    processor: ImageProcessor = Depends(get_processor)
):
    """
    Change compression settings and re-encode the current source.

    Omitted fields keep their current value.
    """
    previous = load_state(store, session_id)
    settings = previous.settings.update(**changes.model_dump())
    state = store.update_settings(session_id, settings)
    logger.info(f"Session {session_id}: settings changed to {settings}")
    return SessionResponse.from_state(await refresh(store, previous, state, processor))


@router.get("/sessions/{session_id}/data-uri", response_class=PlainTextResponse)
async def get_data_uri(session_id: str, store: SessionStore = Depends(get_session_store)):
    """The complete data URI of the current encoding."""
    state = load_state(store, session_id)
    if state.result is None:
        raise HTTPException(status_code=404, detail="Nothing has been encoded in this session")
    return PlainTextResponse(state.result.data_uri)


@router.get("/sessions/{session_id}/fragments/{index}", response_class=PlainTextResponse)
async def get_fragment(session_id: str, index: int, store: SessionStore = Depends(get_session_store)):
    """
    One fragment of the current encoding.

    - **index**: 0-based fragment index
    """
    state = load_state(store, session_id)
    if state.result is None:
        raise HTTPException(status_code=404, detail="Nothing has been encoded in this session")

    fragments = state.result.fragments
    if index < 0 or index >= len(fragments):
        raise HTTPException(
            status_code=404,
            detail=f"Fragment {index} not found (session has {len(fragments)} fragments)"
        )
    logger.info(f"Session {session_id}: fragment {index + 1} of {len(fragments)} copied")
    return PlainTextResponse(fragments[index])
