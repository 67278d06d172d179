"""Contracts for the external collaborators of the publish pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Protocol


class PlatformError(RuntimeError):
    """Base error for collaborator failures, carrying structured details."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class MediaUploadError(PlatformError):
    """A single media file could not be uploaded."""


class MediaNotFoundError(MediaUploadError):
    """The local media file does not exist."""


@dataclass(slots=True)
class MediaUploadResult:
    """Represents the outcome of a single media upload."""

    local_path: str
    remote_url: str
    remote_id: str
    bytes: int


class MediaUploader(Protocol):
    """Uploads one media-library file to a remote asset store."""

    def upload(self, local_path: str) -> MediaUploadResult:
        """Upload ``local_path`` (relative to the media library) or raise MediaUploadError."""


class CommitStatus(str, Enum):
    COMMITTED = "committed"
    NOTHING_TO_COMMIT = "nothing-to-commit"
    FAILED = "failed"


@dataclass(slots=True)
class CommitOutcome:
    status: CommitStatus
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not CommitStatus.FAILED


@dataclass(slots=True)
class PushOutcome:
    pushed: bool
    reason: str | None = None


@dataclass(slots=True)
class RepoStatus:
    branch: str
    changes_list: list[str] = field(default_factory=list)
    ahead: int = 0
    behind: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.changes_list)

    @property
    def changes(self) -> int:
        return len(self.changes_list)

    def to_dict(self) -> dict[str, object]:
        return {
            "hasChanges": self.has_changes,
            "changes": self.changes,
            "changesList": self.changes_list[:20],
            "branch": self.branch,
            "ahead": self.ahead,
            "behind": self.behind,
        }


class VersionControl(Protocol):
    """Narrow view of the content repository used by the publish coordinator."""

    def stage_all(self) -> None:
        """Stage every change in the working tree; raise on failure."""

    def commit(self, message: str) -> CommitOutcome:
        """Create a commit with ``message``."""

    def ahead_behind(self) -> tuple[int, int] | None:
        """Return commits ahead/behind upstream, ``None`` without an upstream."""

    def push(self) -> PushOutcome:
        """Push the current branch."""


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
