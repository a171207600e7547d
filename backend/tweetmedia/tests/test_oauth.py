"""Tests for OAuth 1.0a signing (encoding, canonical ordering, header format)."""

from __future__ import annotations

import re

import pytest

from tweetmedia.core.errors import ConfigurationError
from tweetmedia.twitter.models import Credentials
from tweetmedia.twitter.oauth import (
    OAuth1Signer,
    authorization_header,
    compute_signature,
    generate_nonce,
    normalize_parameters,
    normalize_url,
    percent_encode,
    sign,
    signature_base_string,
    signing_key,
)

# Published Twitter example ("Creating a signature")
DOC_CREDENTIALS = Credentials(
    consumer_key="xvz1evFS4wEEPTGEFPHBog",
    consumer_secret="kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
    access_token="370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
    access_secret="LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2YPi5kE",
)
DOC_URL = "https://api.twitter.com/1.1/statuses/update.json"
DOC_PARAMS = {
    "status": "Hello Ladies + Gentlemen, a signed OAuth request!",
    "include_entities": "true",
}
DOC_NONCE = "kYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg"
DOC_TIMESTAMP = "1318622958"

UPLOAD_URL = "https://upload.twitter.com/1.1/media/upload.json"


def parse_header(header: str) -> dict[str, str]:
    assert header.startswith("OAuth ")
    return dict(re.findall(r'(\w+)="([^"]*)"', header))


@pytest.fixture
def signer():
    return OAuth1Signer(
        Credentials(
            consumer_key="ck",
            consumer_secret="cs",
            access_token="at",
            access_secret="as",
        ),
        nonce_factory=lambda: "fixednonce",
        clock=lambda: 1700000000.7,
    )


class TestPercentEncoding:
    """Tests for RFC 3986 encoding."""

    def test_space_and_ampersand(self):
        """Verify spaces and ampersands are percent-encoded."""
        assert percent_encode("a b&c") == "a%20b%26c"

    def test_double_encoding_is_distinct(self):
        """Verify encoding an encoded value encodes the percent signs again."""
        once = percent_encode("a b&c")
        assert percent_encode(once) == "a%2520b%2526c"
        assert percent_encode(once) != once

    def test_unreserved_characters_kept(self):
        """Verify RFC 3986 unreserved characters pass through."""
        assert percent_encode("AZaz09-._~") == "AZaz09-._~"

    def test_reserved_characters_encoded(self):
        """Verify reserved characters that quote() keeps by default are encoded."""
        assert percent_encode("!*'()") == "%21%2A%27%28%29"
        assert percent_encode("/") == "%2F"
        assert percent_encode("+,=") == "%2B%2C%3D"

    def test_utf8(self):
        """Verify non-ASCII text is encoded as UTF-8 octets."""
        assert percent_encode("☃") == "%E2%98%83"


class TestCanonicalization:
    """Tests for parameter ordering and URL normalization."""

    def test_byte_order_key_sort(self):
        """Verify parameters sort by encoded key."""
        assert normalize_parameters({"b": "2", "a": "1", "a2": "3"}) == "a=1&a2=3&b=2"

    def test_uppercase_keys_sort_first(self):
        """Verify uppercase keys sort before lowercase ones."""
        # Uppercase sorts before lowercase in byte order
        assert normalize_parameters({"a": "x", "B": "y"}) == "B=y&a=x"

    def test_url_drops_query_fragment_and_default_port(self):
        """Verify the base URL loses query, fragment, default port and case."""
        assert normalize_url("HTTPS://Upload.Twitter.com:443/1.1/media/upload.json?x=1#f") == UPLOAD_URL

    def test_url_keeps_non_default_port(self):
        """Verify a non-default port stays in the base URL."""
        assert normalize_url("http://example.com:8080/path") == "http://example.com:8080/path"

    def test_url_keeps_ipv6_brackets(self):
        """Verify IPv6 hosts keep their brackets in the base URL."""
        assert normalize_url("https://[::1]:8443/x") == "https://[::1]:8443/x"
        assert normalize_url("HTTPS://[2001:DB8::1]:443/upload") == "https://[2001:db8::1]/upload"

    def test_base_string_matches_published_example(self):
        """Verify the base string for Twitter's published example."""
        params = {
            **DOC_PARAMS,
            "oauth_consumer_key": DOC_CREDENTIALS.consumer_key,
            "oauth_nonce": DOC_NONCE,
            "oauth_signature_method": "HMAC-SHA1",
            "oauth_timestamp": DOC_TIMESTAMP,
            "oauth_token": DOC_CREDENTIALS.access_token,
            "oauth_version": "1.0",
        }
        expected = (
            "POST&https%3A%2F%2Fapi.twitter.com%2F1.1%2Fstatuses%2Fupdate.json&"
            "include_entities%3Dtrue%26oauth_consumer_key%3Dxvz1evFS4wEEPTGEFPHBog%26"
            "oauth_nonce%3DkYjzVBB8Y0ZFabxSWbWovY3uYSQ2pTgmZeNu2VS4cg%26"
            "oauth_signature_method%3DHMAC-SHA1%26oauth_timestamp%3D1318622958%26"
            "oauth_token%3D370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb%26"
            "oauth_version%3D1.0%26status%3DHello%2520Ladies%2520%252B%2520Gentlemen"
            "%252C%2520a%2520signed%2520OAuth%2520request%2521"
        )
        assert signature_base_string("post", DOC_URL, params) == expected


class TestSignature:
    """Tests for HMAC-SHA1 signature and header assembly."""

    def test_signing_key(self):
        """Verify both secrets are encoded and joined with an ampersand."""
        assert signing_key("c s", "t&s") == "c%20s&t%26s"

    def test_published_example_signature(self):
        """Verify the signature for Twitter's published example."""
        oauth_params, signature = OAuth1Signer(DOC_CREDENTIALS).signature(
            "POST", DOC_URL, DOC_PARAMS, nonce=DOC_NONCE, timestamp=DOC_TIMESTAMP
        )
        assert signature == "hCtSmYh+iHYCEqBWrE7C7hYmtUk="
        assert oauth_params["oauth_nonce"] == DOC_NONCE

    def test_compute_signature_is_base64_sha1(self):
        """Verify the signature is a base64 SHA-1 digest."""
        signature = compute_signature("base", "key")
        # 20-byte digest -> 28 base64 chars
        assert len(signature) == 28
        assert signature.endswith("=")

    def test_deterministic_for_fixed_inputs(self, signer):
        """Verify fixed nonce and clock give the same header."""
        params = {"command": "INIT", "totalBytes": "10", "mediaType": "image/png"}
        assert signer.sign("POST", UPLOAD_URL, params) == signer.sign("POST", UPLOAD_URL, params)

    def test_any_param_change_changes_signature(self, signer):
        """Verify changing any signed parameter changes the signature."""
        params = {"command": "INIT", "totalBytes": "10", "mediaType": "image/png"}
        _, base = signer.signature("POST", UPLOAD_URL, params)
        for key in params:
            changed = {**params, key: params[key] + "x"}
            _, other = signer.signature("POST", UPLOAD_URL, changed)
            assert other != base, key

    def test_nonce_and_timestamp_change_signature(self, signer):
        """Verify nonce and timestamp are part of the signature."""
        _, base = signer.signature("POST", UPLOAD_URL, {})
        _, other_nonce = signer.signature("POST", UPLOAD_URL, {}, nonce="othernonce")
        _, other_ts = signer.signature("POST", UPLOAD_URL, {}, timestamp="1700000001")
        assert base != other_nonce
        assert base != other_ts

    def test_header_has_only_oauth_fields(self, signer):
        """Verify the header carries only sorted oauth_* fields."""
        header = signer.sign("POST", UPLOAD_URL, {"command": "INIT", "totalBytes": "10"})
        fields = parse_header(header)
        assert sorted(fields) == [
            "oauth_consumer_key",
            "oauth_nonce",
            "oauth_signature",
            "oauth_signature_method",
            "oauth_timestamp",
            "oauth_token",
            "oauth_version",
        ]
        assert "command" not in header
        assert fields["oauth_timestamp"] == "1700000000"
        assert fields["oauth_nonce"] == "fixednonce"
        assert fields["oauth_signature_method"] == "HMAC-SHA1"
        assert fields["oauth_version"] == "1.0"

    def test_header_values_are_percent_encoded(self):
        """Verify header values are percent-encoded and quoted."""
        header = authorization_header({"oauth_signature": "a+b/c=", "oauth_token": "t"})
        assert header == 'OAuth oauth_signature="a%2Bb%2Fc%3D", oauth_token="t"'

    def test_fresh_nonce_per_request(self):
        """Verify every signed request gets a new nonce."""
        header1 = sign(DOC_CREDENTIALS, "POST", UPLOAD_URL, {})
        header2 = sign(DOC_CREDENTIALS, "POST", UPLOAD_URL, {})
        assert parse_header(header1)["oauth_nonce"] != parse_header(header2)["oauth_nonce"]

    def test_nonce_is_alphanumeric(self):
        """Verify the generated nonce is 32 alphanumeric characters."""
        nonce = generate_nonce()
        assert len(nonce) == 32
        assert nonce.isalnum()


class TestCredentials:
    """Tests for credential validation."""

    @pytest.mark.parametrize(
        "field,label",
        [
            ("consumer_key", "Consumer Key"),
            ("consumer_secret", "Consumer Secret"),
            ("access_token", "Access Token"),
            ("access_secret", "Access Token Secret"),
        ],
    )
    def test_empty_credential_fails(self, field, label):
        """Verify an empty credential names the missing field."""
        values = {
            "consumer_key": "ck",
            "consumer_secret": "cs",
            "access_token": "at",
            "access_secret": "as",
        }
        values[field] = ""
        with pytest.raises(ConfigurationError, match=f"credential: {label}$"):
            OAuth1Signer(Credentials(**values))

    def test_from_host_mapping(self):
        """Verify credentials load from the host's camelCase keys."""
        creds = Credentials.from_mapping(
            {"consumerKey": "ck", "consumerSecret": "cs", "accessToken": "at", "accessSecret": "as"}
        )
        assert creds.consumer_secret == "cs"
        assert creds.require_complete() is creds

    def test_from_empty_mapping_fails(self):
        """Verify an empty mapping is a configuration error."""
        with pytest.raises(ConfigurationError, match="No credentials provided"):
            Credentials.from_mapping({})
