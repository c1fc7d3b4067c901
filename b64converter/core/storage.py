"""
Persisting decoded data URIs.

Routing is decided by the coarse "data:image" prefix check:
- images are re-encoded as JPEG into a temporary file which is then handed
  to the gallery writer;
- everything else is written as a generic file named after the current
  time plus the extension of its MIME type.

Failures are reported to the caller; nothing is retried.
"""
import os
import shutil
import logging
from dataclasses import dataclass
from typing import Optional

from b64converter.core.datauri import DataUri, validate, decode_payload, select_extension
from b64converter.core.exceptions import IOFailureError
from b64converter.core.imaging import ImageProcessor, OUTPUT_MIME_TYPE
from b64converter.utils.file_handling import ensure_directory, temp_file_context, available_filename

# Set up logging
logger = logging.getLogger(__name__)

DESTINATION_GALLERY = "gallery"
DESTINATION_FILE = "file"


@dataclass(frozen=True)
class SaveOutcome:
    """Where and how a decoded data URI was stored."""
    destination: str
    path: str
    filename: str
    size: int
    mime_type: str


class GalleryWriter:
    """Stores image files in the gallery directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def save_asset(self, local_path: str) -> str:
        """
        Copy a local image file into the gallery.

        Args:
            local_path: Path to an existing image file

        Returns:
            Path of the stored asset

        Raises:
            IOFailureError: If the file cannot be copied
        """
        try:
            ensure_directory(self.directory)
            filename = available_filename(self.directory, "image", os.path.splitext(local_path)[1])
            destination = os.path.join(self.directory, filename)
            shutil.copyfile(local_path, destination)
        except OSError as e:
            logger.error(f"Failed to save gallery asset from {local_path}: {str(e)}")
            raise IOFailureError("Could not save image", action="save image") from e
        logger.info(f"Saved gallery asset {destination}")
        return destination


class FileWriter:
    """Writes decoded Base64 payloads to files."""

    def __init__(self, directory: str):
        self.directory = directory

    def write(self, path: str, base64_payload: str) -> int:
        """
        Decode a Base64 payload and write it to a file.

        Returns:
            Number of bytes written

        Raises:
            InvalidArgumentError: If the payload is not valid Base64
            IOFailureError: If the file cannot be written
        """
        data = decode_payload(DataUri(mime_type="application/octet-stream", payload=base64_payload))
        try:
            ensure_directory(os.path.dirname(path) or ".")
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Failed to write file {path}: {str(e)}")
            raise IOFailureError("Could not save file", action="save file") from e
        logger.info(f"Saved {len(data)} bytes to {path}")
        return len(data)

    def path_for(self, filename: str) -> str:
        return os.path.join(self.directory, filename)


class PersistenceDispatcher:
    """Validate a data URI and route it to the gallery or the file writer."""

    def __init__(
        self,
        gallery: GalleryWriter,
        files: FileWriter,
        processor: Optional[ImageProcessor] = None
    ):
        self.gallery = gallery
        self.files = files
        self.processor = processor or ImageProcessor()

    def save(self, text: str) -> SaveOutcome:
        """
        Persist a pasted data URI.

        Raises:
            DataUriValidationError: If the text is not a data URI
            InvalidArgumentError: If the payload is not valid Base64
            IOFailureError: If the destination could not be written
        """
        data_uri = validate(text)
        if data_uri.is_image:
            return self.save_as_gallery_asset(data_uri)
        return self.save_as_generic_file(data_uri)

    def save_as_gallery_asset(self, data_uri: DataUri) -> SaveOutcome:
        raw = decode_payload(data_uri)
        with temp_file_context(suffix=".jpg") as temp_path:
            try:
                self.processor.to_jpeg_file(raw, temp_path)
            except IOFailureError as e:
                raise IOFailureError(f"Could not save image: {e.message}", action="save image") from e
            path = self.gallery.save_asset(temp_path)

        return SaveOutcome(
            destination=DESTINATION_GALLERY,
            path=path,
            filename=os.path.basename(path),
            size=os.path.getsize(path),
            mime_type=OUTPUT_MIME_TYPE
        )

    def save_as_generic_file(self, data_uri: DataUri) -> SaveOutcome:
        filename = available_filename(self.files.directory, "file", select_extension(data_uri.mime_type))
        path = self.files.path_for(filename)
        size = self.files.write(path, data_uri.payload)
        return SaveOutcome(
            destination=DESTINATION_FILE,
            path=path,
            filename=filename,
            size=size,
            mime_type=data_uri.mime_type
        )
