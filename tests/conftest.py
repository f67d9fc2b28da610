from __future__ import annotations

import io

import pytest
from PIL import Image

from imagepress.config import CompressionConfig
from imagepress.core.service import ImageCompressionService


def _make_image_bytes(fmt: str = "PNG", size=(64, 32), mode: str = "RGB", color=None) -> bytes:
    if color is None:
        color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture()
def make_image():
    return _make_image_bytes


@pytest.fixture()
def png_bytes() -> bytes:
    return _make_image_bytes("PNG")


@pytest.fixture()
def jpeg_bytes() -> bytes:
    return _make_image_bytes("JPEG")


@pytest.fixture()
def webp_bytes() -> bytes:
    return _make_image_bytes("WEBP")


@pytest.fixture()
def compression_config() -> CompressionConfig:
    return CompressionConfig(
        allowed_mime_types=["image/jpeg", "image/png", "image/webp"],
        max_file_size=1024 * 1024 * 1024,
        trust_declared_size=False,
        default_quality=80,
        archive_prefix="compressed_",
    )


@pytest.fixture()
def service(compression_config) -> ImageCompressionService:
    return ImageCompressionService(compression_config)
