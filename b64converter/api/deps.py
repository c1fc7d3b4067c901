"""
Shared collaborators for the API routers.

Routers receive these through FastAPI dependencies so tests can swap them
with `app.dependency_overrides`.
"""
from b64converter.config import OUTPUT_DIR, GALLERY_DIR
from b64converter.core.imaging import ImageProcessor
from b64converter.core.session import SessionStore
from b64converter.core.storage import GalleryWriter, FileWriter, PersistenceDispatcher

_processor = ImageProcessor()
_dispatcher = PersistenceDispatcher(
    gallery=GalleryWriter(GALLERY_DIR),
    files=FileWriter(OUTPUT_DIR),
    processor=_processor
)
_sessions = SessionStore()


def get_processor() -> ImageProcessor:
    return _processor


def get_dispatcher() -> PersistenceDispatcher:
    return _dispatcher


def get_session_store() -> SessionStore:
    return _sessions
