"""
Upload validation based on caller-declared metadata.

Only the declared MIME type and byte size are checked; the content itself
is not sniffed, so a mislabeled file passes here and fails at decode time.
"""
import logging
from typing import Iterable, Optional

from imagepress.config import DEFAULT_ALLOWED_TYPES, DEFAULT_MAX_FILE_SIZE, CompressionConfig

# Set up logging
logger = logging.getLogger(__name__)


class Validator:
    """Checks declared MIME type and size against an allow-list and limit."""

    def __init__(
        self,
        allowed_mime_types: Iterable[str] = DEFAULT_ALLOWED_TYPES,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        trust_declared_size: bool = False
    ):
        self.allowed_mime_types = frozenset(allowed_mime_types)
        self.max_file_size = max_file_size
        self.trust_declared_size = trust_declared_size

    @classmethod
    def from_config(cls, config: CompressionConfig) -> "Validator":
        return cls(
            allowed_mime_types=config.allowed_mime_types,
            max_file_size=config.max_file_size,
            trust_declared_size=config.trust_declared_size
        )

    def validate(self, declared_mime_type: Optional[str], declared_size) -> bool:
        """
        Check a file's declared type and size.

        Args:
            declared_mime_type: MIME type claimed by the caller (exact match)
            declared_size: Size in bytes; the limit is inclusive

        Returns:
            True if the file may be processed. Never raises.
        """
        if (
            not isinstance(declared_mime_type, str)
            or declared_mime_type not in self.allowed_mime_types
        ):
            logger.info(f"Rejected file with declared type {declared_mime_type!r}")
            return False
        if isinstance(declared_size, bool) or not isinstance(declared_size, int):
            logger.info(f"Rejected file with non-integer size {declared_size!r}")
            return False
        if declared_size < 0 or declared_size > self.max_file_size:
            logger.info(f"Rejected file of {declared_size} bytes (limit {self.max_file_size})")
            return False
        return True

    def effective_size(self, declared_size: Optional[int], source_bytes: bytes) -> int:
        """Size used for validation and reporting, per the trust_declared_size flag."""
        if self.trust_declared_size and declared_size is not None:
            return declared_size
        return len(source_bytes)
