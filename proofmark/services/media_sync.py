"""Uploads referenced media that is new or changed since the last sync."""

from __future__ import annotations

from pathlib import Path

from ..platforms import MediaUploadError, MediaUploader
from ..utils.logging import get_logger
from .models import SyncResult, UploadRecord
from .scanner import MediaReferenceScanner
from .upload_cache import CacheEntry, UploadCache

LOGGER = get_logger(__name__)


class MediaSyncService:
    """Drives the scan, hash-check and upload loop against the upload cache."""

    def __init__(
        self,
        scanner: MediaReferenceScanner,
        cache: UploadCache,
        uploader: MediaUploader,
        *,
        media_root: Path,
    ) -> None:
        self._scanner = scanner
        self._cache = cache
        self._uploader = uploader
        self._media_root = media_root

    def sync(self, *, dry_run: bool = False, force: bool = False) -> SyncResult:
        """Upload every referenced file whose content hash is not cached.

        Per-file problems are recorded in the result and never stop the loop.
        The cache is written once at the end unless ``dry_run`` is set.
        """
        entries = self._cache.load()
        result = SyncResult()

        references = self._scanner.scan()
        result.scanned = len(references)
        LOGGER.info(
            "Found media references",
            extra={"event": "sync.scanned", "count": result.scanned, "dry_run": dry_run},
        )

        for local_path in references:
            full_path = self._media_root / local_path
            if not full_path.is_file():
                LOGGER.warning("Media missing: %s", local_path, extra={"event": "media.missing"})
                result.record_failure(f"File not found: {local_path}")
                continue

            try:
                file_hash = UploadCache.hash_file(full_path)
            except OSError as exc:
                LOGGER.error(
                    "Cannot read media: %s",
                    local_path,
                    extra={"event": "media.failed", "error": str(exc)},
                )
                result.record_failure(f"Upload failed: {local_path} ({exc})")
                continue

            cached = entries.get(local_path)
            if not force and cached is not None and cached.hash == file_hash:
                LOGGER.debug("Media cached: %s", local_path, extra={"event": "media.cached"})
                result.skipped += 1
                continue

            if dry_run:
                LOGGER.info("Would upload: %s", local_path, extra={"event": "media.would_upload"})
                result.uploaded += 1
                continue

            LOGGER.info("Uploading: %s", local_path, extra={"event": "media.uploading"})
            try:
                upload = self._uploader.upload(local_path)
            except MediaUploadError as exc:
                LOGGER.error(
                    "Upload failed: %s",
                    local_path,
                    extra={"event": "media.failed", "error": str(exc)},
                )
                result.record_failure(f"Upload failed: {local_path} ({exc})")
                continue

            entries[local_path] = CacheEntry(
                hash=file_hash, url=upload.remote_url, public_id=upload.remote_id
            )
            result.uploaded += 1
            result.uploads.append(
                UploadRecord(local=local_path, remote=upload.remote_url, size=upload.bytes)
            )
            LOGGER.info(
                "Uploaded: %s",
                local_path,
                extra={"event": "media.uploaded", "url": upload.remote_url},
            )

        if not dry_run:
            self._cache.save(entries)

        LOGGER.info(
            "Media sync finished",
            extra={
                "event": "sync.finished",
                "uploaded": result.uploaded,
                "skipped": result.skipped,
                "failed": result.failed,
                "dry_run": dry_run,
            },
        )
        return result
