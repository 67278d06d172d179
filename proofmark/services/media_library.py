"""Listing of the local media library."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..settings.loader import DEFAULT_MEDIA_URL_PREFIX
from ..utils.file_helper import iter_files

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"})


@dataclass(slots=True)
class MediaLibraryItem:
    path: str
    relative_path: str
    name: str
    category: str
    size: int
    modified: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "relativePath": self.relative_path,
            "name": self.name,
            "category": self.category,
            "size": self.size,
            "modified": self.modified.isoformat(),
        }


class MediaLibrary:
    """Read-only view of the image files under the media root."""

    def __init__(self, root: Path, *, url_prefix: str = DEFAULT_MEDIA_URL_PREFIX) -> None:
        self._root = root
        self._url_prefix = url_prefix.rstrip("/")

    def list_images(self) -> list[MediaLibraryItem]:
        items: list[MediaLibraryItem] = []
        for path in iter_files(self._root, suffixes=IMAGE_EXTENSIONS):
            relative = path.relative_to(self._root).as_posix()
            parts = relative.split("/")
            stat = path.stat()
            items.append(
                MediaLibraryItem(
                    path=f"{self._url_prefix}/{relative}",
                    relative_path=relative,
                    name=path.name,
                    category=parts[0] if len(parts) > 1 else "uncategorized",
                    size=stat.st_size,
                    modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return items
