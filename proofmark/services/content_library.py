"""Read and write access to the markdown content corpus."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

from ..utils.file_helper import iter_files, read_text, write_text

_FRONTMATTER_FENCE = "---"


class ContentAccessError(OSError):
    """Raised when a content category cannot be listed or read."""


@dataclass(slots=True)
class ContentDocument:
    category: str
    path: Path
    text: str

    @property
    def name(self) -> str:
        return f"{self.category}/{self.path.name}"

    @property
    def frontmatter(self) -> str:
        return split_frontmatter(self.text)[0]

    @property
    def body(self) -> str:
        return split_frontmatter(self.text)[1]


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split ``text`` into its ``---`` fenced frontmatter and the body."""
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != _FRONTMATTER_FENCE:
        return "", text
    for index in range(1, len(lines)):
        if lines[index].strip() == _FRONTMATTER_FENCE:
            return "".join(lines[1:index]), "".join(lines[index + 1 :])
    return "", text


class ContentLibrary:
    """Markdown documents grouped into fixed category directories."""

    def __init__(self, content_root: Path, categories: Sequence[str]) -> None:
        self._root = content_root
        self._categories = tuple(categories)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def categories(self) -> tuple[str, ...]:
        return self._categories

    def category_dir(self, category: str) -> Path:
        return self._root / category

    def iter_documents(self) -> Iterator[ContentDocument]:
        """Yield every ``*.md`` document of every category.

        Missing category directories are skipped; unreadable ones raise
        :class:`ContentAccessError`.
        """
        for category in self._categories:
            directory = self.category_dir(category)
            try:
                paths = list(iter_files(directory, suffixes={".md"}, recursive=False))
            except OSError as exc:
                raise ContentAccessError(f"Cannot read content in {directory}: {exc}") from exc
            for path in paths:
                try:
                    text = read_text(path)
                except (OSError, UnicodeDecodeError) as exc:
                    raise ContentAccessError(f"Cannot read document {path}: {exc}") from exc
                yield ContentDocument(category=category, path=path, text=text)

    def write(self, document: ContentDocument, text: str) -> None:
        write_text(document.path, text)
        document.text = text
