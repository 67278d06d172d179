"""Replace local media references in content with their uploaded URLs."""

from __future__ import annotations

from typing import Mapping, Protocol

from ..settings.loader import DEFAULT_MEDIA_URL_PREFIX
from ..utils.logging import get_logger
from .content_library import ContentLibrary
from .models import FileChange, RewriteResult
from .upload_cache import CacheEntry, UploadCache

LOGGER = get_logger(__name__)


def local_reference(local_path: str, url_prefix: str = DEFAULT_MEDIA_URL_PREFIX) -> str:
    return f"{url_prefix.rstrip('/')}/{local_path}"


def url_mappings(
    entries: Mapping[str, CacheEntry], url_prefix: str = DEFAULT_MEDIA_URL_PREFIX
) -> dict[str, str]:
    """Map each cached ``/media/<path>`` reference to its remote URL."""
    return {local_reference(path, url_prefix): entry.url for path, entry in entries.items()}


def replace_references(text: str, mappings: Mapping[str, str]) -> tuple[str, int]:
    """Substitute every literal occurrence of each mapping key.

    Returns the new text and the number of occurrences replaced.
    """
    replaced = 0
    for reference, url in mappings.items():
        occurrences = text.count(reference)
        if occurrences:
            text = text.replace(reference, url)
            replaced += occurrences
    return text, replaced


class ReferenceRewriter(Protocol):
    def rewrite(self, *, dry_run: bool = False) -> RewriteResult:
        """Rewrite local references across the corpus."""


class SubstringReferenceRewriter:
    """Rewrites references known to the upload cache by plain substring replacement.

    Only cached paths are rewritten, so references whose upload failed or
    whose file is missing stay local.
    """

    def __init__(
        self,
        library: ContentLibrary,
        cache: UploadCache,
        *,
        url_prefix: str = DEFAULT_MEDIA_URL_PREFIX,
    ) -> None:
        self._library = library
        self._cache = cache
        self._url_prefix = url_prefix

    def rewrite(self, *, dry_run: bool = False) -> RewriteResult:
        mappings = url_mappings(self._cache.load(), self._url_prefix)
        result = RewriteResult()

        for document in self._library.iter_documents():
            result.files_scanned += 1
            if not mappings:
                continue
            updated, replaced = replace_references(document.text, mappings)
            if not replaced:
                continue

            if not dry_run:
                try:
                    self._library.write(document, updated)
                except OSError as exc:
                    LOGGER.error(
                        "Cannot write %s",
                        document.name,
                        extra={"event": "rewrite.failed", "error": str(exc)},
                    )
                    result.errors.append(f"Write failed: {document.name} ({exc})")
                    continue

            result.files_modified += 1
            result.urls_replaced += replaced
            result.changes.append(FileChange(file=document.name, replacements=replaced))
            LOGGER.info(
                "Rewrote %s (%d URLs)",
                document.name,
                replaced,
                extra={"event": "rewrite.file", "dry_run": dry_run},
            )

        return result
