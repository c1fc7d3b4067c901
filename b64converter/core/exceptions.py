"""
Error kinds raised by the converter core.

Every error carries the user action that failed so the API layer can
report it without guessing.
"""
from typing import Optional


class ConverterError(Exception):
    """Base class for converter failures"""

    kind = "converter_error"

    def __init__(self, message: str, action: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.action = action


class InvalidArgumentError(ConverterError, ValueError):
    """Malformed input such as a non-positive chunk size or undecodable Base64"""

    kind = "invalid_argument"


class DataUriValidationError(ConverterError, ValueError):
    """String does not match the data URI grammar"""

    kind = "validation_error"


class IOFailureError(ConverterError, OSError):
    """A reader, writer or image codec collaborator failed"""

    kind = "io_failure"
