"""Tests for the git adapter against real temporary repositories."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from proofmark.platforms import CommitStatus
from proofmark.platforms.git import GitError, GitRepository

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _git(cwd: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", "-C", str(cwd), *args], capture_output=True, text=True, check=True
    )
    return completed.stdout.strip()


def _configure(repo: Path) -> None:
    _git(repo, "config", "user.email", "editor@example.com")
    _git(repo, "config", "user.name", "Editor")
    _git(repo, "config", "commit.gpgsign", "false")


@pytest.fixture
def cloned(tmp_path: Path) -> Path:
    remote = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", str(remote)], capture_output=True, check=True)
    work = tmp_path / "work"
    subprocess.run(
        ["git", "clone", str(remote), str(work)], capture_output=True, check=True
    )
    _configure(work)
    (work / "README.md").write_text("site\n", encoding="utf-8")
    _git(work, "add", "-A")
    _git(work, "commit", "-m", "initial")
    _git(work, "push", "-u", "origin", "HEAD")
    return work


def test_commit_reports_nothing_to_commit(cloned: Path) -> None:
    repo = GitRepository(cloned)
    repo.stage_all()

    outcome = repo.commit("no-op")

    assert outcome.status is CommitStatus.NOTHING_TO_COMMIT
    assert outcome.ok


def test_commit_and_push_round_trip(cloned: Path) -> None:
    repo = GitRepository(cloned)
    (cloned / "post.md").write_text("hello\n", encoding="utf-8")

    assert repo.status().has_changes
    repo.stage_all()
    assert repo.commit("Add post").status is CommitStatus.COMMITTED
    assert repo.ahead_behind() == (1, 0)

    assert repo.push().pushed
    status = repo.status()
    assert status.ahead == 0
    assert not status.has_changes


def test_status_lists_porcelain_changes(cloned: Path) -> None:
    (cloned / "a.md").write_text("a\n", encoding="utf-8")
    (cloned / "b.md").write_text("b\n", encoding="utf-8")

    status = GitRepository(cloned).status()

    assert status.changes == 2
    assert status.to_dict()["hasChanges"] is True
    assert status.branch == _git(cloned, "branch", "--show-current")


def test_no_upstream_returns_none(tmp_path: Path) -> None:
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _configure(tmp_path)
    (tmp_path / "x.md").write_text("x\n", encoding="utf-8")
    _git(tmp_path, "add", "-A")
    _git(tmp_path, "commit", "-m", "x")

    repo = GitRepository(tmp_path)

    assert repo.ahead_behind() is None
    assert repo.status().ahead == 0
    outcome = repo.push()
    assert not outcome.pushed
    assert outcome.reason


def test_commands_outside_repository_raise(tmp_path: Path) -> None:
    with pytest.raises(GitError):
        GitRepository(tmp_path / "missing").current_branch()
