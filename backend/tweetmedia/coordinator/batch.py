from __future__ import annotations

import logging
from typing import Any, Callable

from tweetmedia.core.config import settings
from tweetmedia.core.errors import ApiError, MediaUploadError, MissingMediaError
from tweetmedia.core.image_utils import decode_media_data, sniff_image_type
from tweetmedia.core.logging import log
from tweetmedia.host import (
    ADDITIONAL_OWNERS,
    BINARY_PROPERTY_NAME,
    MEDIA_CATEGORY,
    MEDIA_DATA,
    Attachment,
    AttachmentStore,
    WorkflowHost,
)
from tweetmedia.twitter.models import (
    Credentials,
    MediaItem,
    UploadFailure,
    UploadResult,
    UploadSuccess,
    ensure_image_type,
    normalize_owners,
)
from tweetmedia.twitter.oauth import OAuth1Signer
from tweetmedia.twitter.request_builder import build_upload_request
from tweetmedia.twitter.transport import UploadTransport

DEFAULT_FILE_NAME = "image.jpg"


def failure_from_exception(error: Exception) -> UploadFailure:
    """Map an item-level exception to a failed result."""
    if isinstance(error, ApiError):
        return UploadFailure(
            message=error.message,
            http_status=error.status_code,
            response_body=error.body,
        )
    if isinstance(error, MediaUploadError):
        return UploadFailure(message=error.message)
    return UploadFailure(message=str(error) or type(error).__name__)


class MediaUploadProcessor:
    """Uploads each host item in order and collects one result per item.

    Per item: resolve payload -> validate type -> sign & build -> send -> record.
    With continue-on-failure, item errors become UploadFailure results;
    otherwise the first item error aborts the batch.
    """

    def __init__(
        self,
        host: WorkflowHost,
        transport: UploadTransport | None = None,
        upload_url: str | None = None,
        signer_factory: Callable[[Credentials], OAuth1Signer] = OAuth1Signer,
        logger: logging.Logger = log,
    ):
        self.host = host
        self.transport = transport
        self.upload_url = upload_url or settings.twitter_upload_url
        self.signer_factory = signer_factory
        self.log = logger

    def run(self) -> list[UploadResult]:
        """Process the whole batch.

        Returns:
            One UploadResult per input item, in input order

        Raises:
            ConfigurationError: If credentials are missing or incomplete (always fatal)
            MediaUploadError: First item error when the host does not continue on failure
        """
        credentials = Credentials.from_mapping(self.host.get_credentials())
        signer = self.signer_factory(credentials)
        self.log.info("UPLOAD_CREDENTIALS_VALIDATED")

        items = self.host.get_input_items()
        tolerate_failures = self.host.continue_on_failure()
        self.log.info(f"UPLOAD_BATCH_START items={len(items)} continue_on_failure={tolerate_failures}")

        transport = self.transport or UploadTransport(logger=self.log)
        results: list[UploadResult] = []
        try:
            for index, item in enumerate(items):
                try:
                    result = self.process_item(index, item, signer, transport)
                except Exception as e:
                    self.log.error(
                        f"UPLOAD_ITEM_FAILED index={index} error={type(e).__name__}: {e}",
                        exc_info=not isinstance(e, MediaUploadError),
                    )
                    if not tolerate_failures:
                        raise
                    result = failure_from_exception(e)
                results.append(result)
        finally:
            if self.transport is None:
                transport.close()

        failed = sum(1 for r in results if not r.success)
        self.log.info(f"UPLOAD_BATCH_DONE items={len(results)} failed={failed}")
        return results

    def process_item(
        self,
        index: int,
        item: AttachmentStore,
        signer: OAuth1Signer,
        transport: UploadTransport,
    ) -> UploadSuccess:
        """Upload one item. Raises on any failure."""
        media = self.resolve_media(index, item)
        self.log.info(
            f"UPLOAD_ITEM_START index={index} file={media.file_name} "
            f"type={media.mime_type} size={media.total_bytes} category={media.category}"
        )

        request = build_upload_request(signer, media, url=self.upload_url)
        response = transport.send(request)

        self.log.info(f"UPLOAD_ITEM_SUCCESS index={index} status={response.status_code}")
        return UploadSuccess(response_body=response.body)

    def resolve_media(self, index: int, item: AttachmentStore) -> MediaItem:
        """Resolve payload and parameters for one item into a validated MediaItem.

        Raises:
            MissingMediaError: No usable attachment
            UnsupportedMediaTypeError: Resolved media is not an image
            ValidationError: Literal media data is not valid base64
        """
        media_data = self._param(MEDIA_DATA, index)
        if media_data:
            payload = decode_media_data(str(media_data))
            mime_type, ext = sniff_image_type(payload)
            file_name = f"image.{ext}"
            self.log.info(f"UPLOAD_MEDIA_SOURCE index={index} source=mediaData")
        else:
            name, attachment = self.resolve_attachment(index, item)
            payload = attachment.payload
            mime_type = attachment.mime_type
            file_name = attachment.file_name or DEFAULT_FILE_NAME
            self.log.info(f"UPLOAD_MEDIA_SOURCE index={index} source=binary property={name}")

        ensure_image_type(mime_type)

        category = self._param(MEDIA_CATEGORY, index)
        if category is None:
            category = settings.default_media_category

        return MediaItem(
            payload=payload,
            mime_type=mime_type,
            file_name=file_name,
            category=category,
            additional_owners=normalize_owners(self._param(ADDITIONAL_OWNERS, index)),
        )

    def resolve_attachment(self, index: int, item: AttachmentStore) -> tuple[str, Attachment]:
        """Named attachment, else the first image attachment on the item."""
        requested = self._param(BINARY_PROPERTY_NAME, index) or settings.default_binary_property

        attachment = item.get_attachment(requested)
        if attachment is not None:
            return requested, attachment

        available = item.list_attachments()
        self.log.info(
            f"UPLOAD_BINARY_FALLBACK index={index} requested={requested} available={available}"
        )
        for name in available:
            candidate = item.get_attachment(name)
            if candidate is not None and (candidate.mime_type or "").startswith("image/"):
                return name, candidate

        raise MissingMediaError(
            f'No binary data found in property "{requested}" and no image alternatives found'
        )

    def _param(self, name: str, index: int) -> Any | None:
        """Optional parameter lookup; None when the host has no value."""
        return self.host.get_parameter(name, index)


def run_batch(host: WorkflowHost, transport: UploadTransport | None = None) -> list[UploadResult]:
    """Convenience wrapper: MediaUploadProcessor(host, transport).run()."""
    return MediaUploadProcessor(host, transport=transport).run()
