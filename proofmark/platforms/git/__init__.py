"""Version control adapters."""

from __future__ import annotations

from .repo import GitCommandResult, GitError, GitRepository

__all__ = ["GitCommandResult", "GitError", "GitRepository"]
