"""
Core logic of the Base64 converter.

This package contains:
- datauri: data URI encoding, fragmenting, validation and extension lookup
- sizing: size estimates and display formatting
- imaging: scaling policy and the Pillow image processor
- encoder: the encode pipeline for images and generic files
- storage: gallery/file writers and persistence dispatch
- session: explicit converter state with recompute and stale-result discard
"""
from b64converter.core.exceptions import (
    ConverterError,
    InvalidArgumentError,
    DataUriValidationError,
    IOFailureError
)

from b64converter.core.datauri import (
    DataUri,
    encode,
    chunk,
    reassemble,
    digest,
    verify_digest,
    validate,
    is_image,
    decode_payload,
    select_extension
)

from b64converter.core.sizing import (
    estimate_decoded_size,
    reduction_percent,
    format_bytes
)

from b64converter.core.settings import CompressionSettings

from b64converter.core.imaging import (
    ImageProcessor,
    compute_target_size
)

from b64converter.core.encoder import (
    ImageDescriptor,
    EncodeResult,
    process_image,
    encode_file,
    guess_mime_type
)

__all__ = [
    # Errors
    'ConverterError',
    'InvalidArgumentError',
    'DataUriValidationError',
    'IOFailureError',

    # Data URI
    'DataUri',
    'encode',
    'chunk',
    'reassemble',
    'digest',
    'verify_digest',
    'validate',
    'is_image',
    'decode_payload',
    'select_extension',

    # Sizing
    'estimate_decoded_size',
    'reduction_percent',
    'format_bytes',

    # Encoding
    'CompressionSettings',
    'ImageProcessor',
    'compute_target_size',
    'ImageDescriptor',
    'EncodeResult',
    'process_image',
    'encode_file',
    'guess_mime_type'
]
