"""
Desktop embedded-process transport.
"""
from imagepress.desktop.handler import (
    COMPRESS_BATCH_CHANNEL,
    COMPRESS_IMAGE_CHANNEL,
    DesktopHandler
)
from imagepress.desktop.stdio import handle_line, serve_stdio

__all__ = [
    'COMPRESS_BATCH_CHANNEL',
    'COMPRESS_IMAGE_CHANNEL',
    'DesktopHandler',
    'handle_line',
    'serve_stdio'
]
