"""Media upload API routes (upload + observability)."""

from typing import Iterator

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from slowapi import Limiter
from slowapi.util import get_remote_address

from tweetmedia.coordinator.batch import MediaUploadProcessor
from tweetmedia.core.config import configured_credentials, settings
from tweetmedia.core.errors import ConfigurationError, MediaUploadError
from tweetmedia.core.logging import log, tail_log
from tweetmedia.host import (
    ADDITIONAL_OWNERS,
    MEDIA_CATEGORY,
    Attachment,
    InputItem,
    StaticHost,
)
from tweetmedia.twitter.transport import UploadTransport

router = APIRouter()

# Rate limiter instance
limiter = Limiter(key_func=get_remote_address)


def get_upload_transport() -> Iterator[UploadTransport]:
    """Per-request transport (overridable in tests)."""
    with UploadTransport() as transport:
        yield transport


@router.get("/healthz")
def healthz() -> dict:
    """Health check. Reports which credentials are configured, never their values."""
    return {
        "ok": True,
        "credentials": {
            key: "configured" if value else "missing"
            for key, value in configured_credentials().items()
        },
    }


@router.post("/media/upload")
@limiter.limit("10/minute")
def upload_media(
    request: Request,
    files: list[UploadFile] = File(...),
    media_category: str | None = Form(default=None),
    additional_owners: str | None = Form(default=None),
    continue_on_failure: bool | None = Form(default=None),
    transport: UploadTransport = Depends(get_upload_transport),
) -> dict:
    """Upload one or more images to Twitter, one item per file.

    Rate limited to 10 requests per minute per client.

    Args:
        request: FastAPI request object (for rate limiting)
        files: Image files (each becomes one item, attachment "data")
        media_category: Optional category (default from settings)
        additional_owners: Optional comma-separated user IDs
        continue_on_failure: Record item failures instead of aborting

    Returns:
        {"ok": True, "results": [{"success": ..., ...}, ...]}

    Raises:
        HTTPException: 413 oversized file, 503 credentials missing, 502 item failure
    """
    items = []
    for upload in files:
        payload = upload.file.read()
        if len(payload) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large: {upload.filename} ({len(payload)} bytes, max {settings.max_upload_bytes})",
            )
        items.append(
            InputItem(
                {
                    settings.default_binary_property: Attachment(
                        mime_type=upload.content_type,
                        payload=payload,
                        file_name=upload.filename,
                    )
                }
            )
        )

    parameters = {ADDITIONAL_OWNERS: additional_owners}
    if media_category is not None:
        parameters[MEDIA_CATEGORY] = media_category

    tolerate = settings.continue_on_failure if continue_on_failure is None else continue_on_failure
    host = StaticHost(
        credentials=configured_credentials(),
        items=items,
        parameters=parameters,
        continue_on_failure=tolerate,
    )

    log.info(f"API_UPLOAD_REQUEST files={len(items)} continue_on_failure={tolerate}")
    try:
        results = MediaUploadProcessor(host, transport=transport).run()
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=e.message)
    except MediaUploadError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return {"ok": True, "results": [r.to_json() for r in results]}


@router.get("/logs/tail")
@limiter.limit("30/minute")
def logs_tail(request: Request, lines: int = 100) -> dict:
    """Return the last `lines` log lines (max 1000)."""
    lines = max(0, min(lines, 1000))
    return {"ok": True, "lines": tail_log(lines)}
