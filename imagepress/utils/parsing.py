"""
Normalization of loosely typed transport fields into compression settings.

Multipart forms deliver every setting as an optional string, the desktop
channel delivers JSON values. Both go through the same helpers here.
"""
import base64
import binascii
from typing import Any, Optional, Union

from imagepress.config import DEFAULT_QUALITY
from imagepress.models.domain import CompressionSettings, OutputFormat


def parse_int_field(value: Any) -> Optional[int]:
    """
    Parse an optional integer setting.

    Missing, empty and non-numeric values count as absent. Strings like
    '640px' parse their leading digits, as browsers' parseInt does.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip()
    sign = ""
    if text[:1] in ("-", "+"):
        sign, text = text[0], text[1:]
    digits = ""
    for char in text:
        if char not in "0123456789":
            break
        digits += char
    if not digits:
        return None
    return int(sign + digits)


def parse_bool_field(value: Any) -> bool:
    """Only a real True or the string 'true' switch a flag on."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value == "true"


def parse_settings(
    quality: Any = None,
    width: Any = None,
    height: Any = None,
    output_format: Any = None,
    maintain_aspect_ratio: Any = None,
    default_quality: int = DEFAULT_QUALITY
) -> CompressionSettings:
    """Build CompressionSettings from raw transport values."""
    return CompressionSettings(
        quality=parse_int_field(quality) or default_quality,
        width=parse_int_field(width) or None,
        height=parse_int_field(height) or None,
        output_format=OutputFormat.resolve(output_format or OutputFormat.JPEG),
        maintain_aspect_ratio=parse_bool_field(maintain_aspect_ratio)
    )


def decode_buffer(buffer: Union[bytes, bytearray, list, str, None]) -> bytes:
    """
    Turn a desktop-channel buffer into bytes.

    Accepts raw bytes, a list of byte values, or a base64 string (with or
    without a 'data:...;base64,' prefix).

    Raises:
        ValueError: If the buffer cannot be decoded
    """
    if buffer is None:
        raise ValueError("Missing buffer")
    if isinstance(buffer, (bytes, bytearray)):
        return bytes(buffer)
    if isinstance(buffer, list):
        return bytes(buffer)
    if isinstance(buffer, str):
        base64_data = buffer.split(",")[-1]  # Remove 'data:image/png;base64,' if present
        try:
            return base64.b64decode(base64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError("Buffer is not valid base64") from e
    raise ValueError(f"Unsupported buffer type: {type(buffer).__name__}")
