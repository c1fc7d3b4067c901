import os

import pytest
from PIL import Image

from b64converter.core.datauri import encode
from b64converter.core.exceptions import DataUriValidationError, InvalidArgumentError, IOFailureError
from b64converter.core.storage import (
    GalleryWriter,
    FileWriter,
    PersistenceDispatcher,
    DESTINATION_GALLERY,
    DESTINATION_FILE
)
from b64converter.utils.file_handling import timestamped_filename, available_filename, safe_join
from tests.conftest import make_image


def test_image_goes_to_gallery(dispatcher, png_bytes):
    outcome = dispatcher.save(encode(png_bytes, "image/png"))

    assert outcome.destination == DESTINATION_GALLERY
    # pasted as PNG, stored as JPEG
    assert outcome.mime_type == "image/jpeg"
    assert os.path.dirname(outcome.path) == dispatcher.gallery.directory
    assert outcome.filename.startswith("image_") and outcome.filename.endswith(".jpg")
    assert outcome.size == os.path.getsize(outcome.path)
    with Image.open(outcome.path) as stored:
        assert stored.format == "JPEG"
        assert stored.size == (64, 32)


def test_generic_file_is_written_with_extension(dispatcher):
    raw = b"%PDF-1.4 fake document"
    outcome = dispatcher.save(encode(raw, "application/pdf"))

    assert outcome.destination == DESTINATION_FILE
    assert outcome.filename.startswith("file_") and outcome.filename.endswith(".pdf")
    with open(outcome.path, "rb") as f:
        assert f.read() == raw
    assert outcome.size == len(raw)


def test_unknown_mime_type_gets_no_extension(dispatcher):
    outcome = dispatcher.save(encode(b"blob", "application/x-unknown"))
    assert "." not in outcome.filename


def test_consecutive_saves_do_not_overwrite(dispatcher):
    first = dispatcher.save(encode(b"one", "text/plain"))
    second = dispatcher.save(encode(b"two", "text/plain"))
    assert first.path != second.path


def test_invalid_text_is_not_saved(dispatcher):
    with pytest.raises(DataUriValidationError):
        dispatcher.save("not-a-data-uri")
    assert not os.path.exists(dispatcher.files.directory)
    assert not os.path.exists(dispatcher.gallery.directory)


def test_malformed_payload_is_rejected(dispatcher):
    with pytest.raises(InvalidArgumentError):
        dispatcher.save("data:application/pdf;base64,@@@")


def test_image_prefix_with_non_image_bytes_fails(dispatcher):
    with pytest.raises(IOFailureError):
        dispatcher.save("data:image/png;base64,Zm9v")


def test_file_writer_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be")
    writer = FileWriter(str(blocker))
    with pytest.raises(IOFailureError):
        writer.write(writer.path_for("out.bin"), "Zm9v")


def test_gallery_writer_failure(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be")
    source = tmp_path / "source.jpg"
    source.write_bytes(make_image(fmt="JPEG"))
    with pytest.raises(IOFailureError):
        GalleryWriter(str(blocker)).save_asset(str(source))


def test_dispatch_reports_writer_failure(tmp_path, png_bytes):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    dispatcher = PersistenceDispatcher(GalleryWriter(str(blocker)), FileWriter(str(blocker)))
    with pytest.raises(IOFailureError):
        dispatcher.save(encode(png_bytes, "image/png"))
    with pytest.raises(IOFailureError):
        dispatcher.save(encode(b"data", "text/plain"))


def test_timestamped_filename():
    assert timestamped_filename("file", ".pdf", 1760803200000) == "file_1760803200000.pdf"


def test_available_filename_skips_taken_names(tmp_path):
    first = available_filename(str(tmp_path), "file", ".txt")
    (tmp_path / first).write_text("taken")
    second = available_filename(str(tmp_path), "file", ".txt")
    assert second != first


@pytest.mark.parametrize("filename", ["../etc/passwd", "a/b.txt", "", ".."])
def test_safe_join_rejects_paths(tmp_path, filename):
    with pytest.raises(ValueError):
        safe_join(str(tmp_path), filename)
