"""Utility exports."""

from .file_helper import (
    ensure_parent,
    iter_files,
    md5_file,
    read_text,
    write_text,
    write_text_atomic,
)
from .logging import configure_logging, get_logger

__all__ = [
    "ensure_parent",
    "iter_files",
    "md5_file",
    "read_text",
    "write_text",
    "write_text_atomic",
    "configure_logging",
    "get_logger",
]
