from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from proofmark.platforms import MediaNotFoundError, MediaUploadError, MediaUploadResult
from proofmark.services import ContentLibrary, UploadCache

CATEGORIES = ("posts", "projects", "pieces", "notes")


@dataclass
class SiteLayout:
    root: Path
    media: Path

    @property
    def content(self) -> Path:
        return self.root / "src" / "content"

    @property
    def cache_path(self) -> Path:
        return self.root / ".upload-cache.json"

    def library(self) -> ContentLibrary:
        return ContentLibrary(self.content, CATEGORIES)

    def cache(self) -> UploadCache:
        return UploadCache(self.cache_path)

    def write_doc(self, category: str, name: str, text: str) -> Path:
        path = self.content / category / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def write_media(self, relative: str, data: bytes = b"media-bytes") -> Path:
        path = self.media / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path


@pytest.fixture
def site(tmp_path: Path) -> SiteLayout:
    layout = SiteLayout(root=tmp_path / "site", media=tmp_path / "Media")
    layout.content.mkdir(parents=True)
    layout.media.mkdir(parents=True)
    return layout


class StubUploader:
    """Records uploads and returns predictable CDN URLs."""

    def __init__(self, media_root: Path, *, fail_on: set[str] | None = None) -> None:
        self._media_root = media_root
        self._fail_on = fail_on or set()
        self.calls: list[str] = []

    def upload(self, local_path: str) -> MediaUploadResult:
        self.calls.append(local_path)
        full_path = self._media_root / local_path
        if not full_path.exists():
            raise MediaNotFoundError("Media not found", details={"path": local_path})
        if local_path in self._fail_on:
            raise MediaUploadError("Remote store rejected upload", details={"path": local_path})
        version = len(self.calls)
        return MediaUploadResult(
            local_path=local_path,
            remote_url=f"https://cdn.example.com/v{version}/{local_path}",
            remote_id=f"casey-site/{local_path.rsplit('.', 1)[0]}",
            bytes=full_path.stat().st_size,
        )


@pytest.fixture
def uploader(site: SiteLayout) -> StubUploader:
    return StubUploader(site.media)
