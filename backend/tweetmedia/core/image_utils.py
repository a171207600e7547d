from __future__ import annotations

import base64
import binascii

from tweetmedia.core.errors import ValidationError

# (leading bytes, mime type, extension)
_SIGNATURES = [
    (b"\x89PNG\r\n\x1a\n", "image/png", "png"),
    (b"\xff\xd8\xff", "image/jpeg", "jpg"),
    (b"GIF87a", "image/gif", "gif"),
    (b"GIF89a", "image/gif", "gif"),
    (b"BM", "image/bmp", "bmp"),
    (b"II*\x00", "image/tiff", "tiff"),
    (b"MM\x00*", "image/tiff", "tiff"),
]

UNKNOWN_MIME_TYPE = "application/octet-stream"


def sniff_image_type(data: bytes) -> tuple[str, str]:
    """Detect image mime type and extension from magic bytes.

    Args:
        data: Raw file bytes

    Returns:
        (mime_type, extension); ("application/octet-stream", "bin") if unknown
    """
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp", "webp"
    for magic, mime_type, ext in _SIGNATURES:
        if data.startswith(magic):
            return mime_type, ext
    return UNKNOWN_MIME_TYPE, "bin"


def decode_media_data(media_data: str) -> bytes:
    """Decode base64 media data supplied as a literal parameter.

    Whitespace (line-wrapped base64) and a `data:<type>;base64,` prefix are tolerated.

    Raises:
        ValidationError: If the value is not valid base64 or decodes to nothing
    """
    value = media_data.strip()
    if value.startswith("data:") and "," in value:
        value = value.split(",", 1)[1]
    value = "".join(value.split())

    try:
        data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"mediaData is not valid base64: {e}") from e

    if not data:
        raise ValidationError("mediaData decoded to an empty payload")
    return data
