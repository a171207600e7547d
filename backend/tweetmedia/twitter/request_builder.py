"""Builds the signed multipart INIT request for one media item."""

from __future__ import annotations

import httpx

from tweetmedia.core.config import settings
from tweetmedia.core.errors import ValidationError
from tweetmedia.twitter.models import Credentials, MediaItem, ensure_image_type
from tweetmedia.twitter.oauth import OAuth1Signer

UPLOAD_COMMAND = "INIT"


def signing_parameters(media: MediaItem) -> dict[str, str]:
    """Form fields covered by the OAuth signature.

    additional_owners and the binary payload are sent but not signed.
    """
    params = {
        "command": UPLOAD_COMMAND,
        "totalBytes": media.total_bytes,
        "mediaType": media.mime_type,
    }
    if media.category:
        params["media_category"] = media.category
    return params


def form_fields(media: MediaItem, max_owners: int | None = None) -> dict[str, str]:
    """All non-file form fields, in send order.

    Raises:
        ValidationError: If totalBytes is not numeric or too many owners are given
    """
    max_owners = settings.max_additional_owners if max_owners is None else max_owners

    fields = signing_parameters(media)
    if not fields["totalBytes"].isdigit():
        raise ValidationError("totalBytes must be a number")

    if len(media.additional_owners) > max_owners:
        raise ValidationError(f"Maximum of {max_owners} additional owners allowed")
    if media.additional_owners:
        fields["additional_owners"] = ",".join(media.additional_owners)

    return fields


def build_upload_request(
    auth: Credentials | OAuth1Signer,
    media: MediaItem,
    url: str | None = None,
) -> httpx.Request:
    """Build a ready-to-send POST with Authorization and multipart body.

    The payload is appended last as the `media` file field. httpx generates the
    boundary and Content-Type header and streams the body when sent.

    Args:
        auth: Credentials or a prepared signer
        media: Image to upload
        url: Upload endpoint (defaults to settings.twitter_upload_url)

    Returns:
        httpx.Request (method POST)

    Raises:
        ConfigurationError: If credentials are incomplete
        UnsupportedMediaTypeError: If media is not an image
        ValidationError: If form fields are invalid
    """
    url = url or settings.twitter_upload_url
    signer = auth if isinstance(auth, OAuth1Signer) else OAuth1Signer(auth)

    ensure_image_type(media.mime_type)
    fields = form_fields(media)

    authorization = signer.sign("POST", url, signing_parameters(media))

    return httpx.Request(
        "POST",
        url,
        headers={"Authorization": authorization},
        data=fields,
        files={"media": (media.file_name, media.payload, media.mime_type)},
    )
