"""
In-memory ZIP archive of compressed images.
"""
import logging
import zipfile
from io import BytesIO
from typing import Dict, List

# Set up logging
logger = logging.getLogger(__name__)


class ImageArchive:
    """
    Collects named entries and serializes them into a deflated ZIP.

    Adding a name twice replaces the earlier data; the entry keeps the
    position of its first insertion.
    """

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression
        self._entries: Dict[str, bytes] = {}

    def add_entry(self, name: str, data: bytes) -> None:
        if name in self._entries:
            logger.warning(f"Archive entry {name} already exists, overwriting")
        self._entries[name] = data

    @property
    def names(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def serialize(self) -> bytes:
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, 'w', self.compression) as zip_file:
            for name, data in self._entries.items():
                zip_file.writestr(name, data)
        return buffer.getvalue()
