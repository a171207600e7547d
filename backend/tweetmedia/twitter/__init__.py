"""Twitter media upload package.

Exports:
    OAuth1Signer: OAuth 1.0a HMAC-SHA1 request signer
    build_upload_request: Signed multipart INIT request for one media item
    UploadTransport: Single round-trip HTTP transport with status classification
"""

from .models import Credentials, MediaItem, UploadFailure, UploadResult, UploadSuccess
from .oauth import OAuth1Signer, sign
from .request_builder import build_upload_request
from .transport import TransportResponse, UploadTransport

__all__ = [
    "Credentials",
    "MediaItem",
    "OAuth1Signer",
    "TransportResponse",
    "UploadFailure",
    "UploadResult",
    "UploadSuccess",
    "UploadTransport",
    "build_upload_request",
    "sign",
]
