"""
API v1 - stateless conversion endpoints.

Encode a picked image or file into data URI fragments, check or join pasted
fragments, and save a pasted data URI to the gallery or as a file.
"""
import os
import logging
import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from b64converter.config import DEFAULT_QUALITY, DEFAULT_MAX_SIZE, DEFAULT_CHUNK_SIZE
from b64converter.api.deps import get_processor, get_dispatcher
from b64converter.core.datauri import (
    chunk,
    reassemble,
    digest,
    verify_digest,
    validate,
    select_extension
)
from b64converter.core.encoder import process_image, encode_file, guess_mime_type
from b64converter.core.imaging import ImageProcessor
from b64converter.core.settings import CompressionSettings
from b64converter.core.sizing import estimate_decoded_size, format_bytes
from b64converter.core.storage import PersistenceDispatcher, DESTINATION_FILE
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
from b64converter.utils.file_handling import safe_join
from b64converter.utils.metrics import get_cpu_mem, PerformanceTimer

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/v1", tags=["Conversion v1"])


def picked(file: Optional[UploadFile]) -> bool:
    """A cancelled picker sends no file (or one without a name)."""
    return file is not None and bool(file.filename)


def describe(data_uri: str) -> ValidateResponse:
    parsed = validate(data_uri)
    estimated_size = estimate_decoded_size(data_uri)
    return ValidateResponse(
        mime_type=parsed.mime_type,
        payload_length=len(parsed.payload),
        length=len(data_uri),
        is_image=parsed.is_image,
        extension=select_extension(parsed.mime_type),
        estimated_size=estimated_size,
        formatted_size=format_bytes(estimated_size),
        sha256=digest(data_uri)
    )


@router.post(
    "/encode/image",
    response_model=EncodeResponse,
    responses={204: {"description": "No file picked; nothing was encoded"}}
)
async def encode_image(
    file: Optional[UploadFile] = File(None),
    compress: bool = Form(True),
    quality: float = Form(DEFAULT_QUALITY),
    max_size: int = Form(DEFAULT_MAX_SIZE),
    chunk_size: int = Form(DEFAULT_CHUNK_SIZE),
    processor: ImageProcessor = Depends(get_processor)
):
    """
    Encode an image as a JPEG data URI split into fragments.

    - **file**: The image to encode
    - **compress**: Resize and recompress before encoding
    - **quality**: JPEG quality factor in (0, 1]
    - **max_size**: Maximum length of the longest edge in pixels
    - **chunk_size**: Maximum fragment length in characters

    Returns:
        Fragments, image statistics and size reduction
    """
    if not picked(file):
        logger.info("Image pick cancelled; nothing to encode")
        return Response(status_code=204)

    settings = CompressionSettings(compress=compress, quality=quality, max_size=max_size, chunk_size=chunk_size)
    content = await file.read()
    logger.info(f"Encoding image {file.filename} ({len(content)} bytes) with {settings}")

    with PerformanceTimer() as timer:
        result = await run_in_threadpool(process_image, content, settings, processor, file.filename)

    cpu_mem = get_cpu_mem()
    return EncodeResponse.from_result(
        result,
        processing_time=timer.execution_time,
        cpu_usage=cpu_mem["cpu_usage"],
        memory_usage=cpu_mem["memory_usage"]
    )


@router.post(
    "/encode/file",
    response_model=EncodeResponse,
    responses={204: {"description": "No file picked; nothing was encoded"}}
)
async def encode_generic_file(
    file: Optional[UploadFile] = File(None),
    chunk_size: int = Form(DEFAULT_CHUNK_SIZE),
    mime_type: Optional[str] = Form(None)
):
    """
    Encode any file unchanged as a data URI split into fragments.

    - **file**: The file to encode
    - **chunk_size**: Maximum fragment length in characters
    - **mime_type**: Override the MIME type (defaults to the upload's type,
      then a guess from the filename)
    """
    if not picked(file):
        logger.info("File pick cancelled; nothing to encode")
        return Response(status_code=204)

    settings = CompressionSettings(compress=False, chunk_size=chunk_size)
    resolved_type = guess_mime_type(file.filename, mime_type or file.content_type)

    with PerformanceTimer() as timer:
        content = await file.read()
        result = encode_file(content, resolved_type, settings, filename=file.filename)

    cpu_mem = get_cpu_mem()
    return EncodeResponse.from_result(
        result,
        processing_time=timer.execution_time,
        cpu_usage=cpu_mem["cpu_usage"],
        memory_usage=cpu_mem["memory_usage"]
    )


@router.post("/chunk", response_model=ChunkResponse)
async def chunk_text(request: ChunkRequest):
    """
    Split any string into fixed-size fragments.

    A chunk size below 1 is rejected with 400.
    """
    fragments = chunk(request.text, request.chunk_size)
    return ChunkResponse(
        chunk_size=request.chunk_size,
        length=len(request.text),
        fragment_count=len(fragments),
        fragment_lengths=[len(fragment) for fragment in fragments],
        fragments=fragments
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_data_uri(request: ValidateRequest):
    """
    Check that a string is a data URI and describe it.

    Strings that are not data URIs are rejected with 422.
    """
    return describe(request.data_uri)


@router.post("/reassemble", response_model=ValidateResponse)
async def reassemble_fragments(request: ReassembleRequest):
    """
    Join fragments in the order given and describe the resulting data URI.

    - **fragments**: Fragments in their original order
    - **sha256**: Optional digest from the encoder; a mismatch means a
      fragment is missing or out of order and is rejected with 422
    """
    data_uri = reassemble(request.fragments)
    verify_digest(data_uri, request.sha256)
    return describe(data_uri)


@router.post("/save", response_model=SaveResponse)
async def save_data_uri(
    request: SaveRequest,
    dispatcher: PersistenceDispatcher = Depends(get_dispatcher)
):
    """
    Decode a pasted data URI and store it.

    Images ("data:image..." prefix) go to the gallery, everything else is
    written as a file named after the current time.
    """
    text = request.text
    verify_digest(text, request.sha256)
    outcome = await run_in_threadpool(dispatcher.save, text)

    download_url = None
    if outcome.destination == DESTINATION_FILE:
        download_url = f"/api/v1/files/{outcome.filename}"

    return SaveResponse(
        destination=outcome.destination,
        filename=outcome.filename,
        size=outcome.size,
        mime_type=outcome.mime_type,
        download_url=download_url
    )


@router.get("/files/{filename}", response_class=FileResponse)
async def download_file(
    filename: str,
    dispatcher: PersistenceDispatcher = Depends(get_dispatcher)
):
    """
    Download a file stored by the save endpoint.

    - **filename**: Name returned by the save endpoint
    """
    try:
        path = safe_join(dispatcher.files.directory, filename)
    except ValueError:
        raise HTTPException(status_code=404, detail="File not found")

    if not os.path.isfile(path):
        logger.error(f"No saved file found for name: {filename}")
        raise HTTPException(status_code=404, detail="File not found")

    content_type, _ = mimetypes.guess_type(filename)
    return FileResponse(
        path,
        media_type=content_type or "application/octet-stream",
        filename=filename
    )
