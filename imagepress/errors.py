"""
Error types raised by the compression pipeline.

Every error carries a user-facing ``message`` and the HTTP status code the
API layer answers with. Internal exception detail is kept on ``__cause__``
and logged, never sent to the caller.
"""
from typing import Optional


class ImagePressError(Exception):
    """Base class for all pipeline errors."""

    status_code = 500
    default_message = "Image compression failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ImagePressError):
    """Declared MIME type is not allowed or the file is too large."""

    status_code = 400
    default_message = "Invalid file type or file too large"

    def __init__(self, message: Optional[str] = None, item_name: Optional[str] = None):
        if message is None and item_name is not None:
            message = f"{self.default_message}: {item_name}"
        super().__init__(message)
        self.item_name = item_name


class EmptyBatchError(ImagePressError):
    """A request carried no files at all."""

    status_code = 400
    default_message = "No files found"


class DecodeError(ImagePressError):
    """Source bytes are not a readable image of a supported container."""

    default_message = "Could not decode image"


class TranscodeError(ImagePressError):
    """The encoder failed to produce output."""

    default_message = "Could not encode image"


class BatchItemError(ImagePressError):
    """A single batch item failed and the whole batch was aborted."""

    default_message = "Failed to process file"

    def __init__(self, item_name: str, cause: Optional[ImagePressError] = None):
        super().__init__(f"{self.default_message}: {item_name}")
        self.item_name = item_name
        self.cause = cause
