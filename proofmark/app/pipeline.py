"""Composition root wiring configuration into the publish pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..platforms import MediaUploadError, MediaUploadResult, MediaUploader, RepoStatus
from ..platforms.cloudinary import CloudinaryMediaUploader, load_cloudinary_credentials
from ..platforms.git import GitRepository
from ..security import SecretProvider, default_secret_provider
from ..services import (
    ContentLibrary,
    MediaLibrary,
    MediaLibraryItem,
    MediaReferenceScanner,
    MediaSyncService,
    PublishOutcome,
    PublishingService,
    ReferenceRewriter,
    RewriteResult,
    SubstringReferenceRewriter,
    SyncResult,
    UploadCache,
    url_mappings,
)
from ..settings import AppConfig, validate_config
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


class DeferredUploader:
    """Builds the real uploader on first use.

    Dry runs and rewrites never upload, so they work without credentials.
    """

    def __init__(self, factory: Callable[[], MediaUploader]) -> None:
        self._factory = factory
        self._uploader: MediaUploader | None = None

    def upload(self, local_path: str) -> MediaUploadResult:
        if self._uploader is None:
            try:
                self._uploader = self._factory()
            except RuntimeError as exc:
                raise MediaUploadError(str(exc), details={"path": local_path}) from exc
        return self._uploader.upload(local_path)


@dataclass(slots=True)
class MediaPipeline:
    """Application-facing surface of the media sync and publish pipeline."""

    config: AppConfig
    cache: UploadCache
    sync_service: MediaSyncService
    rewriter: ReferenceRewriter
    publisher: PublishingService
    repository: GitRepository
    media_library: MediaLibrary

    def sync_media(self, *, dry_run: bool = False, force: bool = False) -> SyncResult:
        return self.sync_service.sync(dry_run=dry_run, force=force)

    def rewrite_urls(self, *, dry_run: bool = False) -> RewriteResult:
        return self.rewriter.rewrite(dry_run=dry_run)

    def get_url_mappings(self) -> dict[str, str]:
        return url_mappings(self.cache.load(), self.config.media.url_prefix)

    def publish(self, *, message: str | None = None, dry_run: bool = False) -> PublishOutcome:
        return self.publisher.publish(message=message, dry_run=dry_run)

    def git_status(self) -> RepoStatus:
        return self.repository.status()

    def pull(self) -> RepoStatus:
        """Fast-forward the content repository from its upstream."""
        self.repository.fetch()
        self.repository.pull_ff_only()
        return self.repository.status()

    def list_media_library(self) -> list[MediaLibraryItem]:
        return self.media_library.list_images()

    def validate(self) -> list[str]:
        return validate_config(self.config)


def build_pipeline(
    config: AppConfig,
    *,
    secrets: SecretProvider | None = None,
    uploader: MediaUploader | None = None,
    repository: GitRepository | None = None,
) -> MediaPipeline:
    """Assemble the pipeline for ``config``; collaborators can be overridden."""

    library = ContentLibrary(config.site.content_root, config.site.categories)
    cache = UploadCache(config.site.cache_path)
    prefix = config.media.url_prefix

    if uploader is None:
        provider = secrets or default_secret_provider()

        def _cloudinary() -> MediaUploader:
            credentials = load_cloudinary_credentials(config.cloudinary, provider)
            LOGGER.debug(
                "Cloudinary uploader ready",
                extra={"event": "cloudinary.configured", "cloud": credentials.cloud_name},
            )
            return CloudinaryMediaUploader(
                credentials,
                media_root=config.media.path,
                folder=config.cloudinary.folder,
                timeout=config.cloudinary.timeout,
            )

        uploader = DeferredUploader(_cloudinary)

    repo = repository or GitRepository(config.site.path, remote=config.git.remote)
    sync_service = MediaSyncService(
        MediaReferenceScanner(library, url_prefix=prefix),
        cache,
        uploader,
        media_root=config.media.path,
    )
    rewriter = SubstringReferenceRewriter(library, cache, url_prefix=prefix)

    return MediaPipeline(
        config=config,
        cache=cache,
        sync_service=sync_service,
        rewriter=rewriter,
        publisher=PublishingService(sync_service, rewriter, repo),
        repository=repo,
        media_library=MediaLibrary(config.media.path, url_prefix=prefix),
    )


__all__ = ["DeferredUploader", "MediaPipeline", "build_pipeline"]
