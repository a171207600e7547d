"""OAuth 1.0a (one-legged, HMAC-SHA1) request signing.

Builds the Authorization header for user-context Twitter requests:
- RFC 3986 percent-encoding of every key and value
- Parameters sorted by encoded key, then encoded value
- Base string: METHOD&encoded(base url)&encoded(parameter string)
- Signing key: encoded(consumer secret)&encoded(token secret)

Request parameters take part in the signature but never appear in the header.
No network access happens here.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import string
import time
from typing import Callable, Mapping
from urllib.parse import quote, urlsplit, urlunsplit

from tweetmedia.twitter.models import Credentials

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"
NONCE_ALPHABET = string.ascii_letters + string.digits
NONCE_LENGTH = 32

_DEFAULT_PORTS = {"http": 80, "https": 443}


def percent_encode(value: object) -> str:
    """RFC 3986 encoding: only A-Za-z0-9-._~ stay literal."""
    return quote(str(value).encode("utf-8"), safe="~")


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    """Random alphanumeric nonce from the OS CSPRNG."""
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))


def generate_timestamp(clock: Callable[[], float] = time.time) -> str:
    return str(int(clock()))


def normalize_url(url: str) -> str:
    """Lowercase scheme and host, drop default port, query and fragment."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"  # IPv6 literal
    if parts.port and parts.port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"
    path = parts.path or "/"
    return urlunsplit((scheme, host, path, "", ""))


def normalize_parameters(params: Mapping[str, object]) -> str:
    """Encode, sort by (key, value) and join as key=value&key=value."""
    pairs = sorted((percent_encode(k), percent_encode(v)) for k, v in params.items())
    return "&".join(f"{k}={v}" for k, v in pairs)


def signature_base_string(method: str, url: str, params: Mapping[str, object]) -> str:
    return "&".join(
        [
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(params)),
        ]
    )


def signing_key(consumer_secret: str, token_secret: str) -> str:
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"


def compute_signature(base_string: str, key: str) -> str:
    """base64(HMAC-SHA1(key, base_string))."""
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def authorization_header(oauth_params: Mapping[str, str]) -> str:
    """Format oauth_* fields as `OAuth k="v", ...` in sorted order."""
    fields = sorted(
        (percent_encode(k), percent_encode(v))
        for k, v in oauth_params.items()
        if k.startswith("oauth_")
    )
    return "OAuth " + ", ".join(f'{k}="{v}"' for k, v in fields)


class OAuth1Signer:
    """Signs requests for one credential set.

    Nonce and clock are injectable so signatures can be reproduced in tests.
    """

    def __init__(
        self,
        credentials: Credentials,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize signer.

        Args:
            credentials: Consumer and access token pairs
            nonce_factory: Returns a fresh nonce per request
            clock: Returns current Unix time in seconds

        Raises:
            ConfigurationError: If any credential is empty
        """
        self.credentials = credentials.require_complete()
        self.nonce_factory = nonce_factory
        self.clock = clock

    def oauth_parameters(self, nonce: str | None = None, timestamp: str | None = None) -> dict[str, str]:
        return {
            "oauth_consumer_key": self.credentials.consumer_key,
            "oauth_nonce": nonce or self.nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": timestamp or generate_timestamp(self.clock),
            "oauth_token": self.credentials.access_token,
            "oauth_version": OAUTH_VERSION,
        }

    def signature(
        self,
        method: str,
        url: str,
        params: Mapping[str, str] | None = None,
        *,
        nonce: str | None = None,
        timestamp: str | None = None,
    ) -> tuple[dict[str, str], str]:
        """Compute the signature and return it with the oauth_* fields it covers."""
        oauth_params = self.oauth_parameters(nonce=nonce, timestamp=timestamp)
        all_params = {**(params or {}), **oauth_params}
        base_string = signature_base_string(method, url, all_params)
        key = signing_key(self.credentials.consumer_secret, self.credentials.access_secret)
        return oauth_params, compute_signature(base_string, key)

    def sign(
        self,
        method: str,
        url: str,
        params: Mapping[str, str] | None = None,
        *,
        nonce: str | None = None,
        timestamp: str | None = None,
    ) -> str:
        """Return the Authorization header value for one request."""
        oauth_params, signature = self.signature(
            method, url, params, nonce=nonce, timestamp=timestamp
        )
        oauth_params["oauth_signature"] = signature
        return authorization_header(oauth_params)


def sign(
    credentials: Credentials,
    method: str,
    url: str,
    params: Mapping[str, str] | None = None,
    *,
    nonce: str | None = None,
    timestamp: str | None = None,
) -> str:
    """One-shot signing helper. See OAuth1Signer.sign."""
    return OAuth1Signer(credentials).sign(method, url, params, nonce=nonce, timestamp=timestamp)
