"""Cloudinary credentials and API errors."""

from __future__ import annotations

from dataclasses import dataclass

from ...security import SecretNotFoundError, SecretProvider
from ...settings import CloudinarySettings
from ..base import MediaUploadError

API_KEY_SECRET = "cloudinary.api_key"
API_SECRET_SECRET = "cloudinary.api_secret"


class CloudinaryApiError(MediaUploadError):
    """Raised when the Cloudinary API rejects or cannot serve a request."""


@dataclass(slots=True, frozen=True)
class CloudinaryCredentials:
    cloud_name: str
    api_key: str
    api_secret: str

    def __repr__(self) -> str:
        return f"CloudinaryCredentials(cloud_name={self.cloud_name!r}, api_key={self.api_key!r})"

    def as_options(self) -> dict[str, str]:
        """Per-call account options for the SDK, leaving global config untouched."""
        return {
            "cloud_name": self.cloud_name,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }


def load_cloudinary_credentials(
    settings: CloudinarySettings, secrets: SecretProvider
) -> CloudinaryCredentials:
    """Resolve the API key pair for the configured cloud."""
    try:
        api_key = secrets.get_secret(API_KEY_SECRET)
        api_secret = secrets.get_secret(API_SECRET_SECRET)
    except SecretNotFoundError as exc:
        raise RuntimeError(
            f"Missing Cloudinary credential {exc.args[0]!r}; "
            "set CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET"
        ) from exc
    return CloudinaryCredentials(
        cloud_name=settings.cloud_name, api_key=api_key, api_secret=api_secret
    )
