"""Twitter media upload with OAuth 1.0a signing for workflow hosts."""

__version__ = "0.1.0"
