"""
Data models for the image compression application.

Dataclasses for the compression core and Pydantic models for
request/response documentation.
"""
from imagepress.models.domain import (
    OutputFormat,
    Dimensions,
    CompressionSettings,
    CompressionRequest,
    BatchItem,
    CompressionResult,
    BatchItemSummary,
    BatchResult
)

from imagepress.models.responses import (
    DimensionsModel,
    CompressionResponse,
    BatchItemResponse,
    BatchCompressionResponse,
    ErrorResponse
)

__all__ = [
    # Domain models
    'OutputFormat',
    'Dimensions',
    'CompressionSettings',
    'CompressionRequest',
    'BatchItem',
    'CompressionResult',
    'BatchItemSummary',
    'BatchResult',

    # Wire models
    'DimensionsModel',
    'CompressionResponse',
    'BatchItemResponse',
    'BatchCompressionResponse',
    'ErrorResponse'
]
