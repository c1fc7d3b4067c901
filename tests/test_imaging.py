import base64
import io

import pytest
from PIL import Image

from b64converter.core.exceptions import InvalidArgumentError, IOFailureError
from b64converter.core.imaging import ImageProcessor, compute_target_size, to_jpeg_quality
from tests.conftest import make_image


@pytest.mark.parametrize("width, height, max_size, expected", [
    (2000, 1000, 512, (512, 256)),
    (1000, 2000, 512, (256, 512)),
    (1000, 333, 512, (512, 170)),
    (100, 50, 512, (100, 50)),
    (512, 512, 512, (512, 512)),
    (513, 1, 512, (512, 1)),
])
def test_compute_target_size(width, height, max_size, expected):
    assert compute_target_size(width, height, max_size) == expected


@pytest.mark.parametrize("width, height, max_size", [(0, 10, 512), (10, -1, 512), (10, 10, 0)])
def test_compute_target_size_rejects_invalid_input(width, height, max_size):
    with pytest.raises(InvalidArgumentError):
        compute_target_size(width, height, max_size)


def test_to_jpeg_quality():
    assert to_jpeg_quality(0.7) == 70
    assert to_jpeg_quality(1.0) == 100
    assert to_jpeg_quality(0.001) == 1


def test_resize_returns_jpeg_payload_and_dimensions():
    processor = ImageProcessor()
    payload, width, height = processor.resize(make_image(40, 20), 20, 10, quality=0.5)
    assert (width, height) == (20, 10)
    decoded = Image.open(io.BytesIO(base64.b64decode(payload)))
    assert decoded.format == "JPEG"
    assert decoded.size == (20, 10)


def test_resize_without_target_keeps_dimensions():
    payload, width, height = ImageProcessor().resize(make_image(40, 20, mode="RGBA"))
    assert (width, height) == (40, 20)
    assert payload


def test_resize_is_deterministic():
    source = make_image(40, 20)
    processor = ImageProcessor()
    assert processor.resize(source, 10, 5, 0.7) == processor.resize(source, 10, 5, 0.7)


def test_open_rejects_non_image_bytes():
    with pytest.raises(IOFailureError):
        ImageProcessor().open(b"definitely not an image")


def test_to_jpeg_file(tmp_path):
    path = tmp_path / "out.jpg"
    size = ImageProcessor().to_jpeg_file(make_image(30, 15, fmt="PNG"), str(path))
    assert size == (30, 15)
    assert Image.open(path).format == "JPEG"
