"""Extracts media-library references from the content corpus."""

from __future__ import annotations

import re
from typing import Iterable

from ..settings.loader import DEFAULT_MEDIA_URL_PREFIX
from ..utils.logging import get_logger
from .content_library import ContentLibrary

LOGGER = get_logger(__name__)

_RELATIVE_MEDIA_PREFIX = "../../../Media"


def build_reference_patterns(url_prefix: str = DEFAULT_MEDIA_URL_PREFIX) -> tuple[re.Pattern[str], ...]:
    prefix = re.escape(url_prefix.rstrip("/") + "/")
    relative = re.escape(_RELATIVE_MEDIA_PREFIX + "/")
    return (
        # ![alt](/media/path)
        re.compile(rf"!\[.*?\]\({prefix}([^)]+)\)"),
        # ![alt](../../../Media/path)
        re.compile(rf"!\[.*?\]\({relative}([^)]+)\)"),
        # image: /media/path
        re.compile(rf"image:\s*[\"']?{prefix}([^\"'\s]+)"),
        # <img src="/media/path">, <video src='/media/path'>
        re.compile(rf"src=[\"']{prefix}([^\"']+)"),
    )


def extract_references(text: str, patterns: Iterable[re.Pattern[str]]) -> list[str]:
    found: dict[str, None] = {}
    for pattern in patterns:
        for match in pattern.finditer(text):
            found.setdefault(match.group(1), None)
    return list(found)


class MediaReferenceScanner:
    """Collects the deduplicated set of media paths referenced by any document."""

    def __init__(self, library: ContentLibrary, *, url_prefix: str = DEFAULT_MEDIA_URL_PREFIX) -> None:
        self._library = library
        self._patterns = build_reference_patterns(url_prefix)

    def scan(self) -> list[str]:
        """Return referenced paths in discovery order, each listed once."""
        references: dict[str, None] = {}
        documents = 0
        for document in self._library.iter_documents():
            documents += 1
            for reference in extract_references(document.text, self._patterns):
                references.setdefault(reference, None)
        LOGGER.debug(
            "Scanned content for media references",
            extra={"event": "scan.completed", "documents": documents, "references": len(references)},
        )
        return list(references)
