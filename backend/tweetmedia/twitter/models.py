"""Pydantic models for upload inputs and per-item results."""

from __future__ import annotations

from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tweetmedia.core.errors import ConfigurationError, UnsupportedMediaTypeError

# (field, host key, human label) in validation order
CREDENTIAL_FIELDS = [
    ("consumer_key", "consumerKey", "Consumer Key"),
    ("consumer_secret", "consumerSecret", "Consumer Secret"),
    ("access_token", "accessToken", "Access Token"),
    ("access_secret", "accessSecret", "Access Token Secret"),
]


def ensure_image_type(mime_type: str | None) -> str:
    """Return the mime type if it is `image/*`.

    Raises:
        UnsupportedMediaTypeError: If the type is missing or not an image
    """
    if not mime_type or not mime_type.startswith("image/"):
        raise UnsupportedMediaTypeError(
            f"Invalid media type: {mime_type}. Only images are supported."
        )
    return mime_type


def normalize_owners(owners: list[str] | str | None) -> list[str]:
    """Trim owner IDs and drop empty entries. Accepts a comma-separated string."""
    if owners is None:
        return []
    if isinstance(owners, str):
        owners = owners.split(",")
    return [owner.strip() for owner in owners if owner and owner.strip()]


class Credentials(BaseModel):
    """OAuth 1.0a user-context credentials. Read-only for the batch."""

    model_config = ConfigDict(frozen=True)

    consumer_key: str = ""
    consumer_secret: str = ""
    access_token: str = ""
    access_secret: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Credentials:
        """Build credentials from host-style camelCase keys (snake_case also accepted).

        Raises:
            ConfigurationError: If no credentials were provided
        """
        if not data:
            raise ConfigurationError("No credentials provided")
        values = {}
        for field, host_key, _ in CREDENTIAL_FIELDS:
            value = data.get(host_key, data.get(field))
            values[field] = "" if value is None else str(value)
        return cls(**values)

    def require_complete(self) -> Credentials:
        """Raise ConfigurationError naming the first empty credential."""
        for field, _, label in CREDENTIAL_FIELDS:
            if not getattr(self, field):
                raise ConfigurationError(f"Missing required Twitter OAuth credential: {label}")
        return self


class MediaItem(BaseModel):
    """One image to upload."""

    payload: bytes
    mime_type: str
    file_name: str = "image.jpg"
    category: str | None = None
    additional_owners: list[str] = Field(default_factory=list)

    @field_validator("additional_owners", mode="before")
    @classmethod
    def clean_owners(cls, v: Any) -> list[str]:
        return normalize_owners(v)

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def total_bytes(self) -> str:
        return str(len(self.payload))


class UploadSuccess(BaseModel):
    """Item uploaded; carries the parsed response body."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    response_body: Any = None

    def to_json(self) -> dict[str, Any]:
        if isinstance(self.response_body, dict):
            return {"success": True, **self.response_body}
        return {"success": True, "response": self.response_body}


class UploadFailure(BaseModel):
    """Item failed; message plus remote status/body when known."""

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    message: str
    http_status: int | None = None
    response_body: Any = None

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "details": self.response_body,
        }
        if self.http_status is not None:
            data["http_status"] = self.http_status
        return data


UploadResult = Union[UploadSuccess, UploadFailure]
