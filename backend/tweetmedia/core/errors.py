"""Error taxonomy for media uploads.

ConfigurationError is batch-fatal. Everything else is item-scoped and may be
recorded as a failed result when the batch tolerates failures.
"""

from __future__ import annotations

from typing import Any


class MediaUploadError(Exception):
    """Base class for all upload errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(MediaUploadError):
    """Raised when credentials are missing or incomplete."""
    pass


class MissingMediaError(MediaUploadError):
    """Raised when an item has no usable binary attachment."""
    pass


class UnsupportedMediaTypeError(MediaUploadError):
    """Raised when the resolved media is not an image."""
    pass


class ValidationError(MediaUploadError):
    """Raised when request fields fail validation (owner count, byte count, media data)."""
    pass


class TransportError(MediaUploadError):
    """Raised on network-level failures (DNS, connection reset, timeout)."""
    pass


class ApiError(MediaUploadError):
    """Raised when the upload endpoint answers with status >= 400."""

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
