"""Platform integration package."""

from __future__ import annotations

from .base import (
    CommitOutcome,
    CommitStatus,
    MediaNotFoundError,
    MediaUploadError,
    MediaUploadResult,
    MediaUploader,
    PlatformError,
    PushOutcome,
    RepoStatus,
    VersionControl,
)

__all__ = [
    "CommitOutcome",
    "CommitStatus",
    "MediaNotFoundError",
    "MediaUploadError",
    "MediaUploadResult",
    "MediaUploader",
    "PlatformError",
    "PushOutcome",
    "RepoStatus",
    "VersionControl",
]
