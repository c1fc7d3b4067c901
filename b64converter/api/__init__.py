"""
API module for the Base64 converter application.
"""
import io
import os
import time
import shutil
import logging
import platform

import psutil
from PIL import Image
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from b64converter.config import TEMP_DIR, OUTPUT_DIR, GALLERY_DIR
from b64converter.core.exceptions import (
    ConverterError,
    InvalidArgumentError,
    DataUriValidationError,
    IOFailureError
)
from b64converter.core.session import SessionStore
from b64converter.api.deps import get_session_store
from b64converter.api.v1 import router as v1_router
from b64converter.api.v2 import router as v2_router

# Set up logging
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# HTTP status for each error kind
ERROR_STATUS_CODES = {
    InvalidArgumentError: 400,
    DataUriValidationError: 422,
    IOFailureError: 500,
}

# Create FastAPI app
app = FastAPI(
    title="Base64 Converter API",
    description="""
    API for moving images and files through copy/paste as Base64 data URIs:
    - Encode images (with optional resize/recompression) or any file
    - Split data URIs into fixed-size fragments
    - Validate and reassemble pasted fragments
    - Save decoded images to the gallery or files to disk

    Sessions keep the picked source and re-encode it whenever settings change.
    """,
    version=VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(v1_router, prefix="/api")
app.include_router(v2_router, prefix="/api")


def error_status(exc: ConverterError) -> int:
    for kind, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, kind):
            return status_code
    return 500


@app.exception_handler(ConverterError)
async def converter_exception_handler(request: Request, exc: ConverterError):
    """Report a failed user action; the service stays ready for the next request."""
    status_code = error_status(exc)
    if status_code >= 500:
        logger.error(f"{exc.kind} during {exc.action or request.url.path}: {exc.message}")
    else:
        logger.warning(f"{exc.kind} during {exc.action or request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind, "action": exc.action}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred", "error": str(exc)}
    )


# Health check endpoints
@app.get("/health")
async def health_check():
    """Check if the API is running."""
    return {"status": "healthy", "version": VERSION}


def directory_status(path: str) -> dict:
    status = {"path": path, "exists": os.path.isdir(path)}
    try:
        os.makedirs(path, exist_ok=True)
        test_file = os.path.join(path, "test_write.tmp")
        with open(test_file, "w") as f:
            f.write("test")
        os.remove(test_file)
        status["writable"] = True
        status["free_space_mb"] = round(shutil.disk_usage(path).free / (1024 * 1024), 1)
    except OSError as e:
        status["writable"] = False
        status["error"] = str(e)
    return status


@app.get("/health/detailed")
async def detailed_health_check(store: SessionStore = Depends(get_session_store)):
    """
    Provides detailed health information including system metrics and component status.
    """
    system_info = {
        "cpu_usage": psutil.cpu_percent(interval=0.1),
        "memory_usage": psutil.virtual_memory().percent,
        "disk_usage": psutil.disk_usage('/').percent,
        "python_version": platform.python_version(),
        "platform": platform.platform()
    }

    # Check the image codec with a JPEG round trip
    try:
        buffer = io.BytesIO()
        Image.new("RGB", (8, 8), (200, 30, 30)).save(buffer, format="JPEG")
        decoded = Image.open(io.BytesIO(buffer.getvalue()))
        codec_status = {
            "status": "ok" if decoded.size == (8, 8) else "error",
            "pillow_version": Image.__version__
        }
    except Exception as e:
        codec_status = {"status": "error", "message": str(e)}

    return {
        "status": "healthy",
        "version": VERSION,
        "system": system_info,
        "image_codec": codec_status,
        "directories": {
            "files": directory_status(OUTPUT_DIR),
            "gallery": directory_status(GALLERY_DIR)
        },
        "sessions": {"active": len(store)},
        "timestamp": time.time()
    }


# Cleanup event handler
@app.on_event("shutdown")
async def cleanup():
    """Clean up temporary files when the application shuts down."""
    logger.info(f"Cleaning up temporary directory: {TEMP_DIR}")
    shutil.rmtree(TEMP_DIR, ignore_errors=True)
