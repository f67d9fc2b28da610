"""
The single compression pipeline shared by the web API and the desktop process.
"""
import logging
from typing import Optional, Sequence

from imagepress.config import CONFIG, CompressionConfig
from imagepress.core.batch import BatchArchiver, BatchPolicy
from imagepress.core.formatter import compression_ratio_percent
from imagepress.core.transcoder import Transcoder
from imagepress.core.validator import Validator
from imagepress.errors import ValidationError
from imagepress.models.domain import (
    BatchItem,
    BatchResult,
    CompressionRequest,
    CompressionResult,
    CompressionSettings
)

# Set up logging
logger = logging.getLogger(__name__)


class ImageCompressionService:
    """Validate, transcode and package images for any transport."""

    def __init__(
        self,
        config: Optional[CompressionConfig] = None,
        validator: Optional[Validator] = None,
        transcoder: Optional[Transcoder] = None,
        policy: BatchPolicy = BatchPolicy.ABORT_ON_FIRST_FAILURE
    ):
        self.config = config or CONFIG.compression
        self.validator = validator or Validator.from_config(self.config)
        self.transcoder = transcoder or Transcoder(default_quality=self.config.default_quality)
        self.archiver = BatchArchiver(
            self.validator,
            self.transcoder,
            policy=policy,
            archive_prefix=self.config.archive_prefix
        )

    def compress(self, request: CompressionRequest) -> CompressionResult:
        """
        Compress a single image.

        Raises:
            ValidationError: If the declared type or size is not accepted
            DecodeError: If the bytes are not a readable image
            TranscodeError: If encoding fails
        """
        original_size = self.validator.effective_size(request.declared_size, request.source_bytes)
        if not self.validator.validate(request.declared_mime_type, original_size):
            raise ValidationError()

        output = self.transcoder.transcode(request.source_bytes, request.settings)
        compressed_size = len(output.encoded)

        return CompressionResult(
            original_size=original_size,
            compressed_size=compressed_size,
            compression_ratio_percent=compression_ratio_percent(original_size, compressed_size),
            original_dimensions=output.original_dimensions,
            compressed_dimensions=output.compressed_dimensions,
            encoded_output=output.encoded,
            output_format=output.output_format
        )

    def compress_batch(
        self,
        items: Sequence[BatchItem],
        settings: CompressionSettings
    ) -> BatchResult:
        """Compress many images into one ZIP archive, all-or-nothing."""
        return self.archiver.compress_batch(items, settings)
