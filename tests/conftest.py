import io

import pytest
from PIL import Image
from fastapi.testclient import TestClient

from b64converter import app
from b64converter.api.deps import get_dispatcher, get_session_store
from b64converter.core.imaging import ImageProcessor
from b64converter.core.session import SessionStore
from b64converter.core.storage import GalleryWriter, FileWriter, PersistenceDispatcher


def make_image(width=64, height=32, fmt="PNG", mode="RGB"):
    """Gradient test image encoded in the given format."""
    gradient = Image.linear_gradient("L").resize((width, height))
    image = Image.merge("RGB", (gradient, gradient.transpose(Image.Transpose.FLIP_LEFT_RIGHT), gradient))
    if mode != "RGB":
        image = image.convert(mode)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_image(64, 32)


@pytest.fixture
def large_png_bytes():
    return make_image(1200, 600)


@pytest.fixture
def dispatcher(tmp_path):
    return PersistenceDispatcher(
        gallery=GalleryWriter(str(tmp_path / "gallery")),
        files=FileWriter(str(tmp_path / "files")),
        processor=ImageProcessor()
    )


@pytest.fixture
def session_store():
    return SessionStore()


@pytest.fixture
def client(dispatcher, session_store):
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_session_store] = lambda: session_store
    yield TestClient(app)
    app.dependency_overrides.clear()
