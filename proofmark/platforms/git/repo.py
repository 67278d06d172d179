"""Git integration for committing and pushing the content repository."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ...utils.logging import get_logger
from ..base import CommitOutcome, CommitStatus, PlatformError, PushOutcome, RepoStatus

LOGGER = get_logger(__name__)

_NOTHING_TO_COMMIT = "nothing to commit"
# Output is matched as text, so keep messages untranslated.
_GIT_ENV = {"LC_ALL": "C", "LANG": "C"}


class GitError(PlatformError):
    """Git operation failed."""


@dataclass(slots=True)
class GitCommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


class GitRepository:
    """Runs git commands inside the site repository.

    ``commit`` and ``push`` report failures through their outcome objects;
    the remaining helpers raise :class:`GitError`.
    """

    def __init__(self, root: Path | str, *, remote: str | None = None) -> None:
        self.root = Path(root).resolve()
        self._remote = remote

    def _execute(self, *args: str) -> GitCommandResult:
        LOGGER.debug("git %s", " ".join(args), extra={"event": "git.command"})
        try:
            completed = subprocess.run(
                ["git", "-C", str(self.root), *args],
                capture_output=True,
                text=True,
                check=False,
                env={**os.environ, **_GIT_ENV},
            )
        except FileNotFoundError as exc:
            raise GitError("Git executable not found") from exc
        return GitCommandResult(completed.returncode, completed.stdout, completed.stderr)

    def _run(self, *args: str) -> str:
        result = self._execute(*args)
        if not result.ok:
            raise GitError(
                f"Git command failed: git {' '.join(args)}",
                details={"output": result.output},
            )
        return result.stdout.strip()

    def current_branch(self) -> str:
        return self._run("branch", "--show-current")

    def porcelain_status(self) -> list[str]:
        output = self._run("status", "--porcelain")
        return [line for line in output.splitlines() if line.strip()]

    def ahead_behind(self) -> tuple[int, int] | None:
        """Return ``(ahead, behind)`` relative to ``@{u}``, ``None`` without upstream."""
        result = self._execute("rev-list", "--left-right", "--count", "HEAD...@{u}")
        if not result.ok:
            return None
        try:
            ahead, behind = (int(part) for part in result.stdout.split())
        except ValueError:
            return None
        return ahead, behind

    def status(self) -> RepoStatus:
        counts = self.ahead_behind() or (0, 0)
        return RepoStatus(
            branch=self.current_branch(),
            changes_list=self.porcelain_status(),
            ahead=counts[0],
            behind=counts[1],
        )

    def stage_all(self) -> None:
        self._run("add", "-A")

    def commit(self, message: str) -> CommitOutcome:
        result = self._execute("commit", "-m", message)
        if result.ok:
            return CommitOutcome(CommitStatus.COMMITTED)
        # git prints this on stdout when the index matches HEAD
        if _NOTHING_TO_COMMIT in result.output:
            return CommitOutcome(CommitStatus.NOTHING_TO_COMMIT)
        return CommitOutcome(CommitStatus.FAILED, reason=result.output or "git commit failed")

    def push(self) -> PushOutcome:
        args = ["push"]
        if self._remote:
            args.extend([self._remote, "HEAD"])
        result = self._execute(*args)
        if result.ok:
            return PushOutcome(pushed=True)
        return PushOutcome(pushed=False, reason=result.output or "git push failed")

    def fetch(self) -> None:
        if self._remote:
            self._run("fetch", self._remote)
        else:
            self._run("fetch")

    def pull_ff_only(self) -> None:
        self._run("pull", "--ff-only")
