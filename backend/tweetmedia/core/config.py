"""Media upload configuration (credentials, endpoint, timeouts, defaults)."""

from __future__ import annotations

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from tweetmedia.core.paths import get_data_path, get_project_root

# Load .env file into environment variables
env_path = get_project_root() / ".env"
load_dotenv(env_path)

UPLOAD_URL = "https://upload.twitter.com/1.1/media/upload.json"


class Settings(BaseSettings):
    """Upload configuration. Credentials are optional here; hosts check them per batch."""

    # Twitter OAuth 1.0a (user context) credentials
    twitter_consumer_key: str | None = Field(default=None)
    twitter_consumer_secret: str | None = Field(default=None)
    twitter_access_token: str | None = Field(default=None)
    twitter_access_secret: str | None = Field(default=None)

    # Endpoint
    twitter_upload_url: str = Field(default=UPLOAD_URL)

    # Per-item network timeouts (seconds)
    upload_timeout_connect_s: float = Field(default=10.0)
    upload_timeout_read_s: float = Field(default=60.0)
    upload_timeout_write_s: float = Field(default=60.0)

    # Item parameter defaults
    default_binary_property: str = Field(default="data")
    default_media_category: str = Field(default="tweet_image")
    max_additional_owners: int = Field(default=100)
    continue_on_failure: bool = Field(default=False)

    # HTTP surface
    max_upload_bytes: int = Field(default=5 * 1024 * 1024)  # Twitter image limit, per file
    max_request_bytes: int = Field(default=20 * 1024 * 1024)

    # Logging
    log_file: str = Field(default_factory=lambda: str(get_data_path("logs.txt")))
    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def configured_credentials() -> dict[str, str | None]:
    """Credentials from settings, keyed the way hosts provide them."""
    return {
        "consumerKey": settings.twitter_consumer_key,
        "consumerSecret": settings.twitter_consumer_secret,
        "accessToken": settings.twitter_access_token,
        "accessSecret": settings.twitter_access_secret,
    }
