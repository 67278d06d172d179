"""Filesystem helpers."""

from __future__ import annotations

import hashlib
import os
import tempfile
from pathlib import Path
from typing import Collection, Iterator

_HASH_CHUNK_SIZE = 1024 * 1024


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def read_text(path: Path, *, encoding: str = "utf-8") -> str:
    with path.open("r", encoding=encoding) as fp:
        return fp.read()


def write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    ensure_parent(path)
    with path.open("w", encoding=encoding) as fp:
        fp.write(data)


def write_text_atomic(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Write ``data`` to a sibling temp file, then swap it into place."""
    ensure_parent(path)
    with tempfile.NamedTemporaryFile(
        "w", encoding=encoding, delete=False, dir=str(path.parent), suffix=".tmp"
    ) as tmp:
        tmp.write(data)
        tmp_path = Path(tmp.name)
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def iter_files(
    root: Path,
    *,
    suffixes: Collection[str] | None = None,
    recursive: bool = True,
) -> Iterator[Path]:
    """Yield files below ``root`` lazily, sorted by name within each directory.

    ``suffixes`` are compared case-insensitively and include the dot. A
    missing ``root`` yields nothing. Each call starts a fresh walk.
    """
    if not root.is_dir():
        return
    wanted = {suffix.lower() for suffix in suffixes} if suffixes is not None else None
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            if recursive:
                yield from iter_files(entry, suffixes=suffixes, recursive=True)
            continue
        if not entry.is_file():
            continue
        if wanted is None or entry.suffix.lower() in wanted:
            yield entry


def md5_file(path: Path) -> str:
    digest = hashlib.md5(usedforsecurity=False)
    with path.open("rb") as stream:
        for chunk in iter(lambda: stream.read(_HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
