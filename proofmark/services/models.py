"""Result models for the sync, rewrite and publish operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(slots=True)
class UploadRecord:
    """A file that was uploaded during a sync run."""

    local: str
    remote: str
    size: int

    def to_dict(self) -> dict[str, object]:
        return {"local": self.local, "remote": self.remote, "size": self.size}


@dataclass(slots=True)
class SyncResult:
    scanned: int = 0
    uploaded: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    uploads: list[UploadRecord] = field(default_factory=list)

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    def to_dict(self) -> dict[str, object]:
        return {
            "scanned": self.scanned,
            "uploaded": self.uploaded,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": list(self.errors),
            "uploads": [upload.to_dict() for upload in self.uploads],
        }


@dataclass(slots=True)
class FileChange:
    file: str
    replacements: int

    def to_dict(self) -> dict[str, object]:
        return {"file": self.file, "replacements": self.replacements}


@dataclass(slots=True)
class RewriteResult:
    files_scanned: int = 0
    files_modified: int = 0
    urls_replaced: int = 0
    changes: list[FileChange] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "filesScanned": self.files_scanned,
            "filesModified": self.files_modified,
            "urlsReplaced": self.urls_replaced,
            "changes": [change.to_dict() for change in self.changes],
            "errors": list(self.errors),
        }


class GitResult(str, Enum):
    SUCCESS = "success"
    NO_CHANGES = "no-changes"
    ERROR = "error"


@dataclass(slots=True)
class PublishOutcome:
    """Combined outcome of sync, rewrite and the version control stage.

    ``git_result`` stays ``None`` for dry runs.
    """

    sync_results: SyncResult
    rewrite_results: RewriteResult
    git_result: GitResult | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "syncResults": self.sync_results.to_dict(),
            "rewriteResults": self.rewrite_results.to_dict(),
            "gitResult": self.git_result.value if self.git_result else None,
        }
        if self.error:
            data["error"] = self.error
        return data
