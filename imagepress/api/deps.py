"""
Dependency helpers for the compression API.
"""
from functools import lru_cache

from imagepress.config import CONFIG
from imagepress.core.service import ImageCompressionService


@lru_cache
def get_compression_service() -> ImageCompressionService:
    return ImageCompressionService(CONFIG.compression)


def reset_dependencies() -> None:
    """Clear cached dependency singletons (primarily for tests)."""
    get_compression_service.cache_clear()


__all__ = ["get_compression_service", "reset_dependencies"]
