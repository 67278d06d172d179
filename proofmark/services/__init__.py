"""Media sync and publish services."""

from __future__ import annotations

from .content_library import ContentAccessError, ContentDocument, ContentLibrary, split_frontmatter
from .media_library import MediaLibrary, MediaLibraryItem
from .media_sync import MediaSyncService
from .models import FileChange, GitResult, PublishOutcome, RewriteResult, SyncResult, UploadRecord
from .publishing_service import PublishingService, default_commit_message
from .rewriter import ReferenceRewriter, SubstringReferenceRewriter, url_mappings
from .scanner import MediaReferenceScanner
from .upload_cache import CacheEntry, UploadCache

__all__ = [
    "CacheEntry",
    "ContentAccessError",
    "ContentDocument",
    "ContentLibrary",
    "FileChange",
    "GitResult",
    "MediaLibrary",
    "MediaLibraryItem",
    "MediaReferenceScanner",
    "MediaSyncService",
    "PublishOutcome",
    "PublishingService",
    "ReferenceRewriter",
    "RewriteResult",
    "SubstringReferenceRewriter",
    "SyncResult",
    "UploadCache",
    "UploadRecord",
    "default_commit_message",
    "split_frontmatter",
    "url_mappings",
]
