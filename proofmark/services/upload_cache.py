"""Persistence for the content-addressed upload cache."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from ..utils.file_helper import md5_file, write_text_atomic
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(slots=True)
class CacheEntry:
    """Remote location of a media file as of its last successful upload."""

    hash: str
    url: str
    public_id: str
    uploaded_at: str = field(default_factory=_now)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CacheEntry":
        hash_value = data.get("hash")
        url = data.get("url")
        if not isinstance(hash_value, str) or not isinstance(url, str):
            raise ValueError("Cache entry requires string 'hash' and 'url'")
        return cls(
            hash=hash_value,
            url=url,
            public_id=str(data.get("public_id", "")),
            uploaded_at=str(data.get("uploaded_at", "")),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "hash": self.hash,
            "url": self.url,
            "public_id": self.public_id,
            "uploaded_at": self.uploaded_at,
        }


class UploadCache:
    """Maps media-library paths to :class:`CacheEntry` records in one JSON file.

    A missing or unreadable file counts as an empty cache.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, CacheEntry]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            LOGGER.warning(
                "Failed to load upload cache; starting empty",
                extra={"event": "cache.unreadable", "path": str(self._path), "error": str(exc)},
            )
            return {}
        if not isinstance(payload, dict):
            LOGGER.warning(
                "Upload cache is not a JSON object; starting empty",
                extra={"event": "cache.unreadable", "path": str(self._path)},
            )
            return {}

        entries: dict[str, CacheEntry] = {}
        for local_path, raw in payload.items():
            if not isinstance(raw, dict):
                continue
            try:
                entries[str(local_path)] = CacheEntry.from_dict(raw)
            except ValueError:
                LOGGER.warning(
                    "Dropping malformed cache entry",
                    extra={"event": "cache.entry_dropped", "local_path": local_path},
                )
        return entries

    def save(self, entries: dict[str, CacheEntry]) -> Path:
        data = {local_path: entry.to_dict() for local_path, entry in entries.items()}
        write_text_atomic(self._path, json.dumps(data, ensure_ascii=False, indent=2))
        return self._path

    @staticmethod
    def hash_file(path: Path) -> str:
        return md5_file(path)


__all__ = ["CacheEntry", "UploadCache"]
