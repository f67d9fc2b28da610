"""
Image transcoding with Pillow.

Decodes an uploaded image, optionally resizes it and re-encodes it as JPEG,
PNG or WebP. Quality is passed straight through for JPEG and WebP; PNG has
no quality setting, so quality is mapped to a zlib compression level where
higher quality means less compression effort.
"""
import logging
from io import BytesIO
from typing import NamedTuple, Optional

from PIL import Image

from imagepress.config import DEFAULT_QUALITY
from imagepress.core.resize import plan_resize
from imagepress.errors import DecodeError, TranscodeError
from imagepress.models.domain import CompressionSettings, Dimensions, OutputFormat
from imagepress.utils.metrics import PerformanceTimer

# Set up logging
logger = logging.getLogger(__name__)

# Containers accepted by the decoder, whatever MIME type was declared
SUPPORTED_DECODE_FORMATS = ("JPEG", "PNG", "WEBP")

PNG_MIN_COMPRESS_LEVEL = 0
PNG_MAX_COMPRESS_LEVEL = 9

ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")

# Sample formats wider than 8 bits per channel
WIDE_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N", "F")


class TranscodeOutput(NamedTuple):
    encoded: bytes
    original_dimensions: Dimensions
    compressed_dimensions: Dimensions
    output_format: OutputFormat


def resolve_quality(quality: Optional[int], default: int = DEFAULT_QUALITY) -> int:
    """Apply the default for a missing or zero quality and clamp to 1-100."""
    if not quality:
        quality = default
    return max(1, min(100, int(quality)))


def png_compression_level(quality: Optional[int], default: int = DEFAULT_QUALITY) -> int:
    """
    Map a 1-100 quality onto a PNG compression level.

    Args:
        quality: Requested quality; falsy values use the default

    Returns:
        floor((100 - quality) / 10), clamped to zlib's 0-9 range
    """
    level = (100 - resolve_quality(quality, default)) // 10
    return max(PNG_MIN_COMPRESS_LEVEL, min(PNG_MAX_COMPRESS_LEVEL, level))


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ALPHA_MODES or (
        image.mode == "P" and "transparency" in image.info
    )


def _to_8bit(image: Image.Image) -> Image.Image:
    """Scale 16-bit and 32-bit grayscale samples down to 8-bit 'L'."""
    if image.mode.startswith("I;16"):
        image = image.convert("I")
    return image.point(lambda value: value / 256).convert("L")


def _convert_for_format(image: Image.Image, output_format: OutputFormat) -> Image.Image:
    """Convert pixel modes the target encoder cannot write."""
    if output_format is not OutputFormat.PNG and image.mode in WIDE_MODES:
        image = _to_8bit(image)

    if output_format is OutputFormat.JPEG:
        # JPEG has no alpha channel
        if image.mode not in ("RGB", "L", "CMYK"):
            return image.convert("RGB")
        return image

    if output_format is OutputFormat.WEBP:
        if image.mode in ("RGB", "RGBA"):
            return image
        return image.convert("RGBA" if _has_alpha(image) else "RGB")

    # PNG writes I and I;16 natively
    if image.mode == "F":
        return _to_8bit(image)
    if image.mode in ("CMYK", "YCbCr", "LAB", "HSV"):
        return image.convert("RGB")
    return image


def decode_image(source_bytes: bytes) -> Image.Image:
    """
    Decode image bytes into a fully loaded Pillow image.

    Raises:
        DecodeError: If the bytes are not a readable JPEG, PNG or WebP image
    """
    try:
        image = Image.open(BytesIO(source_bytes), formats=SUPPORTED_DECODE_FORMATS)
        image.load()
    except Exception as e:
        logger.warning(f"Failed to decode image ({len(source_bytes)} bytes): {e}")
        raise DecodeError() from e
    return image


def encode_image(
    image: Image.Image,
    output_format: OutputFormat,
    quality: Optional[int] = None,
    default_quality: int = DEFAULT_QUALITY
) -> bytes:
    """
    Encode a Pillow image to the requested format.

    Args:
        image: Decoded (and possibly resized) image
        output_format: Target format
        quality: 1-100; falsy values use the default

    Returns:
        Encoded image bytes

    Raises:
        TranscodeError: If the encoder fails
    """
    output = BytesIO()
    try:
        prepared = _convert_for_format(image, output_format)
        if output_format is OutputFormat.PNG:
            level = png_compression_level(quality, default_quality)
            prepared.save(output, format="PNG", compress_level=level)
        else:
            prepared.save(
                output,
                format=output_format.pillow_format,
                quality=resolve_quality(quality, default_quality)
            )
    except Exception as e:
        logger.error(f"Failed to encode image as {output_format.value}: {e}")
        raise TranscodeError() from e
    return output.getvalue()


def read_dimensions(encoded: bytes) -> Dimensions:
    """Read the real pixel dimensions of an encoded image."""
    try:
        with Image.open(BytesIO(encoded)) as image:
            return Dimensions(*image.size)
    except Exception as e:
        logger.error(f"Encoded output is not readable: {e}")
        raise TranscodeError() from e


class Transcoder:
    """Decode, resize and re-encode one image at a time."""

    def __init__(self, default_quality: int = DEFAULT_QUALITY):
        self.default_quality = default_quality

    def transcode(self, source_bytes: bytes, settings: CompressionSettings) -> TranscodeOutput:
        """
        Run the full decode -> resize -> encode pipeline.

        Args:
            source_bytes: Raw uploaded file content
            settings: Quality, target size and format

        Returns:
            TranscodeOutput with the encoded bytes and before/after dimensions

        Raises:
            DecodeError: If the source cannot be decoded
            TranscodeError: If resizing or encoding fails
        """
        output_format = OutputFormat.resolve(settings.output_format)

        with PerformanceTimer() as timer:
            image = decode_image(source_bytes)
            original_dimensions = Dimensions(*image.size)

            plan = plan_resize(
                original_dimensions.width,
                original_dimensions.height,
                settings.width,
                settings.height,
                settings.maintain_aspect_ratio
            )
            if plan is not None and (plan.width, plan.height) != image.size:
                if image.mode.startswith("I;16"):
                    # LANCZOS needs 32-bit samples
                    image = image.convert("I")
                try:
                    image = image.resize((plan.width, plan.height), Image.Resampling.LANCZOS)
                except Exception as e:
                    logger.error(f"Failed to resize image to {plan.width}x{plan.height}: {e}")
                    raise TranscodeError() from e

            encoded = encode_image(image, output_format, settings.quality, self.default_quality)
            compressed_dimensions = read_dimensions(encoded)

        logger.info(
            f"Transcoded {original_dimensions.width}x{original_dimensions.height} "
            f"({len(source_bytes)} bytes) to {output_format.value} "
            f"{compressed_dimensions.width}x{compressed_dimensions.height} "
            f"({len(encoded)} bytes) in {timer.execution_time:.4f}s"
        )
        return TranscodeOutput(encoded, original_dimensions, compressed_dimensions, output_format)
