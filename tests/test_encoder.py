import base64
import io

import pytest
from PIL import Image

from b64converter.core.datauri import validate, digest, reassemble
from b64converter.core.encoder import process_image, encode_file, guess_mime_type
from b64converter.core.exceptions import IOFailureError, InvalidArgumentError
from b64converter.core.settings import CompressionSettings
from b64converter.core.sizing import estimate_decoded_size


def decode_image(data_uri):
    return Image.open(io.BytesIO(base64.b64decode(validate(data_uri).payload)))


def test_process_image_without_compression(png_bytes):
    result = process_image(png_bytes, CompressionSettings(compress=False, chunk_size=100))

    assert result.mime_type == "image/jpeg"
    assert result.data_uri.startswith("data:image/jpeg;base64,")
    assert result.image == result.original_image
    assert (result.image.width, result.image.height) == (64, 32)
    assert result.reduction_percent is None
    assert result.psnr is None and result.ssim is None
    assert decode_image(result.data_uri).size == (64, 32)


def test_process_image_scales_to_max_size(large_png_bytes):
    settings = CompressionSettings(compress=True, quality=0.5, max_size=512, chunk_size=1000)
    result = process_image(large_png_bytes, settings, filename="photo.png")

    assert (result.original_image.width, result.original_image.height) == (1200, 600)
    assert (result.image.width, result.image.height) == (512, 256)
    assert decode_image(result.data_uri).size == (512, 256)
    assert result.image.size < result.original_image.size
    assert result.reduction_percent > 0
    assert result.filename == "photo.png"
    assert result.psnr is not None
    assert 0 < result.ssim <= 1


def test_process_image_keeps_small_images(png_bytes):
    result = process_image(png_bytes, CompressionSettings(compress=True, quality=0.3, max_size=1024))
    assert (result.image.width, result.image.height) == (64, 32)


def test_process_image_size_accounting(large_png_bytes):
    result = process_image(large_png_bytes, CompressionSettings(chunk_size=500))

    assert reassemble(result.fragments) == result.data_uri
    assert all(len(fragment) == 500 for fragment in result.fragments[:-1])
    assert result.fragment_count == -(-result.length // 500)
    assert result.estimated_size == estimate_decoded_size(result.data_uri)
    assert result.image.size == result.estimated_size
    assert result.sha256 == digest(result.data_uri)


def test_process_image_rejects_non_images():
    with pytest.raises(IOFailureError):
        process_image(b"%PDF-1.4 not an image", CompressionSettings())


def test_encode_file_round_trip():
    raw = b"%PDF-1.4\n" + bytes(range(256)) * 4
    result = encode_file(raw, "application/pdf", CompressionSettings(chunk_size=64), filename="doc.pdf")

    parsed = validate(reassemble(result.fragments))
    assert parsed.mime_type == "application/pdf"
    assert base64.b64decode(parsed.payload) == raw
    assert result.image is None
    assert result.original_image is None


def test_encode_empty_file():
    result = encode_file(b"", "text/plain", CompressionSettings(chunk_size=10))
    assert result.data_uri == "data:text/plain;base64,"
    assert result.fragments == ("data:text/", "plain;base", "64,")
    assert result.estimated_size == 17


def test_guess_mime_type():
    assert guess_mime_type("report.pdf") == "application/pdf"
    assert guess_mime_type("report.pdf", "application/x-custom") == "application/x-custom"
    assert guess_mime_type("no_extension") == "application/octet-stream"
    assert guess_mime_type(None) == "application/octet-stream"


def test_guess_mime_type_drops_parameters():
    assert guess_mime_type("notes.txt", "text/plain; charset=utf-8") == "text/plain"
    assert guess_mime_type("report.pdf", " ; charset=utf-8") == "application/pdf"
    assert guess_mime_type("report.pdf", "application/octet-stream") == "application/pdf"


@pytest.mark.parametrize("changes", [
    {"quality": 0},
    {"quality": 1.5},
    {"max_size": 0},
    {"chunk_size": 0},
    {"chunk_size": -5},
])
def test_settings_validation(changes):
    with pytest.raises(InvalidArgumentError):
        CompressionSettings(**changes)


def test_settings_update():
    settings = CompressionSettings(quality=0.5, max_size=256, chunk_size=10000)
    updated = settings.update(quality=0.9, max_size=None)
    assert updated.quality == 0.9
    assert updated.max_size == 256
    assert settings.quality == 0.5
    with pytest.raises(InvalidArgumentError):
        settings.update(chunk_size=0)
