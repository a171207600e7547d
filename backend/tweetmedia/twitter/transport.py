"""HTTP transport for the media upload endpoint.

Handles:
- Session management with httpx.Client
- Per-call connect/read/write timeouts
- JSON body parsing with raw-text fallback
- Status classification (>= 400 raises ApiError)

Exactly one round trip per call. No retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from tweetmedia.core.config import settings
from tweetmedia.core.errors import ApiError, TransportError
from tweetmedia.core.logging import log


@dataclass(frozen=True)
class TransportResponse:
    """Status, headers and parsed (or raw text) body of one response."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


def parse_body(response: httpx.Response) -> Any:
    """JSON body if it parses, otherwise the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


class UploadTransport:
    """Sends prepared upload requests and classifies the response."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout_connect_s: float | None = None,
        timeout_read_s: float | None = None,
        timeout_write_s: float | None = None,
        logger: logging.Logger = log,
    ):
        """Initialize transport.

        Args:
            client: Existing httpx.Client (owned by caller); a new one is created if None
            timeout_connect_s: Connection timeout in seconds
            timeout_read_s: Read timeout in seconds
            timeout_write_s: Write timeout in seconds (body streaming)
            logger: Logger for transport events
        """
        if timeout_connect_s is None:
            timeout_connect_s = settings.upload_timeout_connect_s
        if timeout_read_s is None:
            timeout_read_s = settings.upload_timeout_read_s
        if timeout_write_s is None:
            timeout_write_s = settings.upload_timeout_write_s
        self.timeout = httpx.Timeout(
            connect=timeout_connect_s,
            read=timeout_read_s,
            write=timeout_write_s,
            pool=timeout_connect_s,
        )
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=self.timeout,
            headers={"User-Agent": "tweetmedia/0.1"},
        )
        self.log = logger

    def send(self, request: httpx.Request) -> TransportResponse:
        """Send one request and classify the result.

        Args:
            request: Prepared request (see build_upload_request)

        Returns:
            TransportResponse for status < 400

        Raises:
            TransportError: On network-level failures or timeout
            ApiError: On status >= 400 (carries status and body)
        """
        # Requests built outside a client carry no timeout of their own
        request.extensions.setdefault("timeout", self.timeout.as_dict())

        self.log.debug(f"TRANSPORT: {request.method} {request.url}")
        try:
            response = self.client.send(request)
        except httpx.TransportError as e:
            self.log.warning(f"TRANSPORT: Network error on {request.url}: {type(e).__name__}: {e}")
            raise TransportError(f"Network error during upload: {e}") from e

        body = parse_body(response)
        result = TransportResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
        )
        self.log.info(f"TRANSPORT: Response status={result.status_code}")

        if result.status_code >= 400:
            body_preview = response.text[:500] if response.text else "(no body)"
            self.log.error(f"TRANSPORT: HTTP {result.status_code} on {request.url}: {body_preview}")
            raise ApiError(
                f"Twitter API error {result.status_code}: {body_preview}",
                status_code=result.status_code,
                body=body,
            )

        return result

    def close(self) -> None:
        """Close the HTTP client session if this transport created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> UploadTransport:
        return self

    def __exit__(self, *args) -> None:
        self.close()
