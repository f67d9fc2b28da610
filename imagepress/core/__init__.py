"""
Core compression pipeline.

This package contains the pieces every transport goes through:
- Validator: declared type/size gate
- Resize planning: fill and fit-inside target dimensions
- Transcoder: Pillow decode/resize/encode
- Batch archiving: sequential all-or-nothing ZIP packaging
- Result formatting: compression ratio and data URIs
"""
from imagepress.core.validator import Validator

from imagepress.core.resize import plan_resize

from imagepress.core.transcoder import (
    SUPPORTED_DECODE_FORMATS,
    Transcoder,
    TranscodeOutput,
    decode_image,
    encode_image,
    png_compression_level,
    resolve_quality
)

from imagepress.core.archive import ImageArchive

from imagepress.core.batch import (
    BatchArchiver,
    BatchPolicy,
    archive_entry_name
)

from imagepress.core.formatter import (
    build_batch_response,
    build_compression_response,
    compression_ratio_percent,
    format_ratio,
    to_data_uri
)

from imagepress.core.service import ImageCompressionService

__all__ = [
    'Validator',
    'plan_resize',

    # Transcoding
    'SUPPORTED_DECODE_FORMATS',
    'Transcoder',
    'TranscodeOutput',
    'decode_image',
    'encode_image',
    'png_compression_level',
    'resolve_quality',

    # Batch
    'ImageArchive',
    'BatchArchiver',
    'BatchPolicy',
    'archive_entry_name',

    # Formatting
    'build_batch_response',
    'build_compression_response',
    'compression_ratio_percent',
    'format_ratio',
    'to_data_uri',

    'ImageCompressionService'
]
