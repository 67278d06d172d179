"""Cloudinary media upload implementation."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Callable

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinarySdkError

from ...utils.logging import get_logger
from ..base import MediaNotFoundError, MediaUploadError, MediaUploadResult, MediaUploader
from .api import CloudinaryApiError, CloudinaryCredentials

LOGGER = get_logger(__name__)

VIDEO_EXTENSIONS = frozenset({".mp4", ".webm", ".mov"})
IMAGE_TRANSFORMATION = ({"quality": "auto:good"}, {"fetch_format": "auto"})

UploadCall = Callable[..., dict[str, Any]]


def is_video(local_path: str) -> bool:
    return PurePosixPath(local_path).suffix.lower() in VIDEO_EXTENSIONS


class CloudinaryMediaUploader(MediaUploader):
    """Uploads media-library files to Cloudinary, one request per file.

    Remote identifiers are derived from the local path, so uploading the same
    path again overwrites the existing asset instead of creating a new one.
    """

    def __init__(
        self,
        credentials: CloudinaryCredentials,
        *,
        media_root: Path,
        folder: str,
        timeout: float = 120.0,
        upload_call: UploadCall | None = None,
    ) -> None:
        self._credentials = credentials
        self._media_root = media_root
        self._folder = folder.strip("/")
        self._timeout = timeout
        self._upload_call = upload_call or cloudinary.uploader.upload

    def public_id_for(self, local_path: str) -> str:
        stem = str(PurePosixPath(local_path).with_suffix(""))
        return f"{self._folder}/{stem}" if self._folder else stem

    def upload_options(self, local_path: str) -> dict[str, Any]:
        video = is_video(local_path)
        options: dict[str, Any] = {
            "public_id": self.public_id_for(local_path),
            "overwrite": True,
            "resource_type": "video" if video else "image",
        }
        if not video:
            options["transformation"] = [dict(step) for step in IMAGE_TRANSFORMATION]
        return options

    def upload(self, local_path: str) -> MediaUploadResult:
        full_path = self._media_root / local_path
        if not full_path.is_file():
            raise MediaNotFoundError(
                "Media not found", details={"path": local_path, "full_path": str(full_path)}
            )

        options = self.upload_options(local_path)
        LOGGER.debug(
            "Uploading media",
            extra={
                "event": "cloudinary.upload",
                "path": local_path,
                "resource_type": options["resource_type"],
            },
        )

        try:
            stream = full_path.open("rb")
        except OSError as exc:
            raise MediaUploadError(
                "Cannot read media file", details={"path": local_path, "reason": str(exc)}
            ) from exc

        with stream:
            try:
                data = self._upload_call(
                    stream,
                    timeout=self._timeout,
                    **options,
                    **self._credentials.as_options(),
                )
            except CloudinarySdkError as exc:
                raise CloudinaryApiError(
                    "Cloudinary rejected the upload",
                    details={"path": local_path, "reason": str(exc)},
                ) from exc

        if not isinstance(data, dict):
            raise CloudinaryApiError(
                "Unexpected Cloudinary response", details={"path": local_path}
            )

        secure_url = data.get("secure_url")
        public_id = data.get("public_id")
        if not secure_url or not public_id:
            raise CloudinaryApiError(
                "Upload succeeded but response lacks secure_url or public_id",
                details={"path": local_path, "response": data},
            )

        return MediaUploadResult(
            local_path=local_path,
            remote_url=secure_url,
            remote_id=public_id,
            bytes=int(data.get("bytes") or 0),
        )
