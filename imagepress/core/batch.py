"""
Batch compression into a single ZIP archive.

A batch is all-or-nothing: every item is validated before any work starts,
items are transcoded one at a time in upload order, and the first failing
item aborts the batch without producing an archive.
"""
import logging
import os
from enum import Enum
from typing import List, Sequence

from imagepress.core.archive import ImageArchive
from imagepress.core.formatter import format_ratio
from imagepress.core.transcoder import Transcoder
from imagepress.core.validator import Validator
from imagepress.errors import (
    BatchItemError,
    DecodeError,
    EmptyBatchError,
    TranscodeError,
    ValidationError
)
from imagepress.models.domain import (
    BatchItem,
    BatchItemSummary,
    BatchResult,
    CompressionSettings,
    OutputFormat
)
from imagepress.utils.metrics import PerformanceTimer

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_PREFIX = "compressed_"


class BatchPolicy(str, Enum):
    """
    How a batch reacts to a failing item.

    Batches are all-or-nothing, so ABORT_ON_FIRST_FAILURE is the only
    variant. The value is declarative: it names the behaviour BatchArchiver
    implements and is validated on construction.
    """

    ABORT_ON_FIRST_FAILURE = "abort_on_first_failure"


def archive_entry_name(
    original_name: str,
    output_format: OutputFormat,
    prefix: str = DEFAULT_ARCHIVE_PREFIX
) -> str:
    """
    Build the ZIP entry name for a compressed file.

    'photo.final.png' compressed to JPEG becomes 'compressed_photo.final.jpg'.
    Directory components are dropped, so '../../x.png' becomes 'compressed_x.jpg'.
    """
    base_name = os.path.basename(original_name.replace("\\", "/"))
    stem, _ = os.path.splitext(base_name)
    return f"{prefix}{stem}.{OutputFormat.resolve(output_format).extension}"


class BatchArchiver:
    """Runs a list of uploads through the transcoder and zips the results."""

    def __init__(
        self,
        validator: Validator,
        transcoder: Transcoder,
        policy: BatchPolicy = BatchPolicy.ABORT_ON_FIRST_FAILURE,
        archive_prefix: str = DEFAULT_ARCHIVE_PREFIX
    ):
        self.validator = validator
        self.transcoder = transcoder
        self.policy = BatchPolicy(policy)
        self.archive_prefix = archive_prefix

    def _validate_all(self, items: Sequence[BatchItem]) -> List[int]:
        sizes = []
        for item in items:
            size = self.validator.effective_size(item.declared_size, item.source_bytes)
            if not self.validator.validate(item.declared_mime_type, size):
                logger.warning(f"Batch rejected, invalid file: {item.name}")
                raise ValidationError(item_name=item.name)
            sizes.append(size)
        return sizes

    def compress_batch(
        self,
        items: Sequence[BatchItem],
        settings: CompressionSettings
    ) -> BatchResult:
        """
        Compress every item with the shared settings and package the outputs.

        Args:
            items: Uploaded files in the order the archive should follow
            settings: Quality, size and format applied to every item

        Returns:
            BatchResult with per-item summaries, the ZIP bytes and size totals

        Raises:
            EmptyBatchError: If no items were supplied
            ValidationError: If any item fails validation (nothing is transcoded)
            BatchItemError: If an item fails to decode or encode
        """
        if not items:
            raise EmptyBatchError()

        sizes = self._validate_all(items)
        output_format = OutputFormat.resolve(settings.output_format)

        archive = ImageArchive()
        results: List[BatchItemSummary] = []

        with PerformanceTimer() as timer:
            for item, original_size in zip(items, sizes):
                logger.info(f"Compressing batch item {item.name} ({original_size} bytes)")
                try:
                    output = self.transcoder.transcode(item.source_bytes, settings)
                except (DecodeError, TranscodeError) as e:
                    logger.error(f"Batch aborted at {item.name} ({self.policy.value}): {e.message}")
                    raise BatchItemError(item.name, e) from e

                compressed_name = archive_entry_name(item.name, output_format, self.archive_prefix)
                archive.add_entry(compressed_name, output.encoded)

                compressed_size = len(output.encoded)
                results.append(BatchItemSummary(
                    original_name=item.name,
                    compressed_name=compressed_name,
                    original_size=original_size,
                    compressed_size=compressed_size,
                    compression_ratio=format_ratio(original_size, compressed_size),
                    original_dimensions=output.original_dimensions,
                    compressed_dimensions=output.compressed_dimensions
                ))

            archive_bytes = archive.serialize()

        total_original_size = sum(result.original_size for result in results)
        total_compressed_size = sum(result.compressed_size for result in results)
        logger.info(
            f"Compressed {len(results)} files in {timer.execution_time:.4f}s: "
            f"{total_original_size} -> {total_compressed_size} bytes, "
            f"archive {len(archive_bytes)} bytes"
        )

        return BatchResult(
            results=results,
            archive=archive_bytes,
            total_original_size=total_original_size,
            total_compressed_size=total_compressed_size
        )
