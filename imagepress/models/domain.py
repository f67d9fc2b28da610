"""
Domain objects passed between the transports and the compression core.

These are plain dataclasses; the pydantic models in
``imagepress.models.responses`` only describe what goes over the wire.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from imagepress.config import DEFAULT_QUALITY


class OutputFormat(str, Enum):
    """Formats the transcoder can encode to."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @classmethod
    def resolve(cls, value) -> "OutputFormat":
        """Map any requested format to a supported one, falling back to JPEG."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.JPEG

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else self.value

    @property
    def pillow_format(self) -> str:
        return self.value.upper()


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def as_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


@dataclass
class CompressionSettings:
    """User-chosen settings shared by every image of a request."""

    quality: int = DEFAULT_QUALITY
    width: Optional[int] = None
    height: Optional[int] = None
    output_format: OutputFormat = OutputFormat.JPEG
    maintain_aspect_ratio: bool = False


@dataclass
class CompressionRequest:
    source_bytes: bytes
    declared_mime_type: str
    declared_size: int
    settings: CompressionSettings = field(default_factory=CompressionSettings)


@dataclass
class BatchItem:
    """One named file of a batch request. Names are not deduplicated."""

    name: str
    source_bytes: bytes
    declared_mime_type: str
    declared_size: int


@dataclass(frozen=True)
class CompressionResult:
    original_size: int
    compressed_size: int
    compression_ratio_percent: float
    original_dimensions: Dimensions
    compressed_dimensions: Dimensions
    encoded_output: bytes
    output_format: OutputFormat


@dataclass(frozen=True)
class BatchItemSummary:
    original_name: str
    compressed_name: str
    original_size: int
    compressed_size: int
    compression_ratio: str
    original_dimensions: Dimensions
    compressed_dimensions: Dimensions


@dataclass(frozen=True)
class BatchResult:
    results: List[BatchItemSummary]
    archive: bytes
    total_original_size: int
    total_compressed_size: int

    @property
    def archive_size(self) -> int:
        return len(self.archive)
