"""
Image compression API endpoints.

Provides single-image compression returning a data URI and batch
compression returning a ZIP archive, both from multipart form uploads.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from imagepress.api.deps import get_compression_service
from imagepress.core.formatter import build_batch_response, build_compression_response
from imagepress.core.service import ImageCompressionService
from imagepress.errors import EmptyBatchError, ImagePressError
from imagepress.models.domain import BatchItem, CompressionRequest
from imagepress.models.responses import (
    BatchCompressionResponse,
    CompressionResponse,
    ErrorResponse
)
from imagepress.utils.parsing import parse_settings

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["Image Compression"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid or missing files"},
    500: {"model": ErrorResponse, "description": "Compression failed"}
}


@router.post("/compress", response_model=CompressionResponse, responses=ERROR_RESPONSES)
async def compress_image(
    file: Optional[UploadFile] = File(None),
    quality: Optional[str] = Form(None),
    width: Optional[str] = Form(None),
    height: Optional[str] = Form(None),
    output_format: Optional[str] = Form(None, alias="format"),
    maintain_aspect_ratio: Optional[str] = Form(None, alias="maintainAspectRatio"),
    service: ImageCompressionService = Depends(get_compression_service)
):
    """
    Compress an uploaded image.

    - **file**: The image to compress (JPEG, PNG or WebP)
    - **quality**: 1-100, default 80
    - **width** / **height**: Optional target size; never upscales
    - **format**: jpeg, png or webp (anything else encodes as jpeg)
    - **maintainAspectRatio**: "true" to fit inside the target size

    Returns:
        Sizes, dimensions, compression ratio and the compressed image as a data URI
    """
    if file is None:
        raise EmptyBatchError()

    settings = parse_settings(
        quality, width, height, output_format, maintain_aspect_ratio,
        default_quality=service.config.default_quality
    )
    content = await file.read()
    logger.info(
        f"Compressing image {file.filename} ({len(content)} bytes) as "
        f"{settings.output_format.value} at quality {settings.quality}"
    )

    request = CompressionRequest(
        source_bytes=content,
        declared_mime_type=file.content_type,
        declared_size=file.size,
        settings=settings
    )

    try:
        result = await run_in_threadpool(service.compress, request)
    except ImagePressError:
        raise
    except Exception as e:
        logger.exception(f"Compression failed for {file.filename}: {e}")
        raise ImagePressError("Image compression failed") from e

    logger.info(
        f"Successfully compressed {file.filename} to {result.compressed_size} bytes "
        f"(ratio: {result.compression_ratio_percent}%)"
    )
    return build_compression_response(result)


@router.post("/compress-batch", response_model=BatchCompressionResponse, responses=ERROR_RESPONSES)
async def compress_batch(
    files: Optional[List[UploadFile]] = File(None),
    quality: Optional[str] = Form(None),
    width: Optional[str] = Form(None),
    height: Optional[str] = Form(None),
    output_format: Optional[str] = Form(None, alias="format"),
    maintain_aspect_ratio: Optional[str] = Form(None, alias="maintainAspectRatio"),
    service: ImageCompressionService = Depends(get_compression_service)
):
    """
    Compress multiple images into one ZIP archive.

    - **files**: Images to compress; all must pass validation
    - Remaining fields as for `/compress`, applied to every file

    The batch is all-or-nothing: if any file fails, no archive is returned.

    Returns:
        Per-file results, the ZIP archive as a data URI and size totals
    """
    if not files:
        raise EmptyBatchError()

    settings = parse_settings(
        quality, width, height, output_format, maintain_aspect_ratio,
        default_quality=service.config.default_quality
    )

    items = []
    for file in files:
        content = await file.read()
        items.append(BatchItem(
            name=file.filename or "",
            source_bytes=content,
            declared_mime_type=file.content_type,
            declared_size=file.size
        ))
    logger.info(f"Batch compressing {len(items)} files as {settings.output_format.value}")

    try:
        batch = await run_in_threadpool(service.compress_batch, items, settings)
    except ImagePressError:
        raise
    except Exception as e:
        logger.exception(f"Batch compression failed: {e}")
        raise ImagePressError("Batch image compression failed") from e

    return build_batch_response(batch)
