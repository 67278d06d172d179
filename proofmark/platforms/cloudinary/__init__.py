"""Cloudinary platform adapters."""

from __future__ import annotations

from .api import CloudinaryApiError, CloudinaryCredentials, load_cloudinary_credentials
from .media import CloudinaryMediaUploader, is_video

__all__ = [
    "CloudinaryApiError",
    "CloudinaryCredentials",
    "CloudinaryMediaUploader",
    "is_video",
    "load_cloudinary_credentials",
]
