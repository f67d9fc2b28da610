"""
Result formatting: compression ratio, data URIs and response payloads.

Both the HTTP routes and the desktop handler build their success bodies
here so the two transports cannot drift apart.
"""
import base64

from imagepress.models.domain import BatchResult, CompressionResult, Dimensions
from imagepress.models.responses import (
    BatchCompressionResponse,
    BatchItemResponse,
    CompressionResponse,
    DimensionsModel
)

ZIP_MIME_TYPE = "application/zip"


def compression_ratio_percent(original_size: int, compressed_size: int) -> float:
    """
    Percentage of bytes saved, rounded to one decimal place.

    Returns 0.0 when the original size is zero.
    """
    if original_size <= 0:
        return 0.0
    return round((original_size - compressed_size) / original_size * 100, 1)


def format_ratio(original_size: int, compressed_size: int) -> str:
    """Format the compression ratio as shown to users, e.g. '60.0%'."""
    if original_size <= 0:
        return "0%"
    ratio = (original_size - compressed_size) / original_size * 100
    return f"{ratio:.1f}%"


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode bytes as a 'data:<mime>;base64,...' string."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def _dimensions(dimensions: Dimensions) -> DimensionsModel:
    return DimensionsModel(width=dimensions.width, height=dimensions.height)


def build_compression_response(result: CompressionResult) -> CompressionResponse:
    return CompressionResponse(
        original_size=result.original_size,
        compressed_size=result.compressed_size,
        compression_ratio=format_ratio(result.original_size, result.compressed_size),
        original_dimensions=_dimensions(result.original_dimensions),
        compressed_dimensions=_dimensions(result.compressed_dimensions),
        compressed_image=to_data_uri(result.encoded_output, result.output_format.mime_type)
    )


def build_batch_response(batch: BatchResult) -> BatchCompressionResponse:
    return BatchCompressionResponse(
        results=[
            BatchItemResponse(
                original_name=item.original_name,
                compressed_name=item.compressed_name,
                original_size=item.original_size,
                compressed_size=item.compressed_size,
                compression_ratio=item.compression_ratio,
                original_dimensions=_dimensions(item.original_dimensions),
                compressed_dimensions=_dimensions(item.compressed_dimensions)
            )
            for item in batch.results
        ],
        zip_file=to_data_uri(batch.archive, ZIP_MIME_TYPE),
        zip_size=batch.archive_size,
        total_original_size=batch.total_original_size,
        total_compressed_size=batch.total_compressed_size
    )
