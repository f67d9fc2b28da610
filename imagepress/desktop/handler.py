"""
RPC handlers for the desktop application.

The desktop shell sends a channel name and a JSON payload carrying the raw
image buffer plus settings. Each handler returns the same body the web API
would, or {"error": message}; handlers never raise.
"""
import logging
from typing import Any, Callable, Dict, Optional

from imagepress.core.formatter import build_batch_response, build_compression_response
from imagepress.core.service import ImageCompressionService
from imagepress.errors import EmptyBatchError, ImagePressError, ValidationError
from imagepress.models.domain import BatchItem, CompressionRequest, CompressionSettings
from imagepress.utils.parsing import decode_buffer, parse_int_field, parse_settings

# Set up logging
logger = logging.getLogger(__name__)

COMPRESS_IMAGE_CHANNEL = "compress-image"
COMPRESS_BATCH_CHANNEL = "compress-batch"


class DesktopHandler:
    """Dispatches desktop RPC messages to the shared compression service."""

    def __init__(self, service: Optional[ImageCompressionService] = None):
        self.service = service or ImageCompressionService()
        self._channels: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            COMPRESS_IMAGE_CHANNEL: self.compress_image,
            COMPRESS_BATCH_CHANNEL: self.compress_batch,
        }

    @property
    def channels(self):
        return sorted(self._channels)

    def handle(self, channel: str, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not isinstance(channel, str):
            logger.warning(f"Rejected request with non-string channel {channel!r}")
            return {"error": "Malformed request"}
        handler = self._channels.get(channel)
        if handler is None:
            return {"error": f"Unknown channel: {channel}"}
        return handler(payload or {})

    def _settings(self, payload: Dict[str, Any]) -> CompressionSettings:
        return parse_settings(
            payload.get("quality"),
            payload.get("width"),
            payload.get("height"),
            payload.get("format"),
            payload.get("maintainAspectRatio"),
            default_quality=self.service.config.default_quality
        )

    def compress_image(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Handle a 'compress-image' message."""
        try:
            try:
                source = decode_buffer(payload.get("buffer"))
            except ValueError as e:
                logger.warning(f"Rejected compress-image payload: {e}")
                raise ValidationError() from e

            request = CompressionRequest(
                source_bytes=source,
                declared_mime_type=payload.get("type"),
                declared_size=parse_int_field(payload.get("size")),
                settings=self._settings(payload)
            )
            result = self.service.compress(request)
        except ImagePressError as e:
            return {"error": e.message}
        except Exception as e:
            logger.exception(f"Compression failed: {e}")
            return {"error": "Image compression failed"}

        return build_compression_response(result).model_dump(by_alias=True)

    def compress_batch(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Handle a 'compress-batch' message."""
        try:
            files = payload.get("files") or []
            if not files:
                raise EmptyBatchError()

            items = []
            for entry in files:
                name = str(entry.get("name") or "")
                try:
                    source = decode_buffer(entry.get("buffer"))
                except ValueError as e:
                    logger.warning(f"Rejected batch file {name}: {e}")
                    raise ValidationError(item_name=name) from e
                items.append(BatchItem(
                    name=name,
                    source_bytes=source,
                    declared_mime_type=entry.get("type"),
                    declared_size=parse_int_field(entry.get("size"))
                ))

            batch = self.service.compress_batch(items, self._settings(payload))
        except ImagePressError as e:
            return {"error": e.message}
        except Exception as e:
            logger.exception(f"Batch compression failed: {e}")
            return {"error": "Batch image compression failed"}

        return build_batch_response(batch).model_dump(by_alias=True)
