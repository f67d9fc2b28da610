"""
Configuration for the image compression application.

Values are read from environment variables once at import time and can be
overridden by constructing the dataclasses directly (tests do this).
"""
import os
from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_ALLOWED_TYPES = ("image/jpeg", "image/png", "image/webp")
DEFAULT_MAX_FILE_SIZE = 1024 * 1024 * 1024  # 1 GiB
DEFAULT_QUALITY = 80


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: Tuple[str, ...] = ()) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class CompressionConfig:
    """Policy knobs for validation, transcoding and archiving."""

    allowed_mime_types: List[str] = field(
        default_factory=lambda: _env_list("IMAGEPRESS_ALLOWED_TYPES", DEFAULT_ALLOWED_TYPES)
    )
    max_file_size: int = int(os.environ.get("IMAGEPRESS_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE))
    # False: validate and report the measured buffer length instead of the
    # size the caller claims
    trust_declared_size: bool = _env_bool("IMAGEPRESS_TRUST_DECLARED_SIZE")
    default_quality: int = int(os.environ.get("IMAGEPRESS_DEFAULT_QUALITY", DEFAULT_QUALITY))
    archive_prefix: str = os.environ.get("IMAGEPRESS_ARCHIVE_PREFIX", "compressed_")


@dataclass
class ServerConfig:
    """Settings for the uvicorn server started from main.py."""

    host: str = os.environ.get("HOST", "0.0.0.0")
    port: int = int(os.environ.get("PORT", 8000))
    workers: int = int(os.environ.get("WORKERS", 1))
    debug: bool = _env_bool("DEBUG")
    log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()
    cors_origins: List[str] = field(
        default_factory=lambda: _env_list("IMAGEPRESS_CORS_ORIGINS", ("*",))
    )


@dataclass
class AppConfig:
    compression: CompressionConfig = field(default_factory=CompressionConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


CONFIG = AppConfig()
