"""High-level orchestration for publishing content with synced media."""

from __future__ import annotations

from datetime import date
from typing import Callable

from ..platforms import CommitStatus, PlatformError, VersionControl
from ..utils.logging import get_logger
from .media_sync import MediaSyncService
from .models import GitResult, PublishOutcome
from .rewriter import ReferenceRewriter

LOGGER = get_logger(__name__)


def default_commit_message(today: date | None = None) -> str:
    return f"Content update {(today or date.today()).isoformat()}"


class PublishingService:
    """Runs sync, rewrite and commit/push in order and reports a combined outcome.

    Sync and rewrite failures live in their result objects and never stop the
    version control stage. A dry run stops before touching version control.
    """

    def __init__(
        self,
        sync_service: MediaSyncService,
        rewriter: ReferenceRewriter,
        vcs: VersionControl,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._sync = sync_service
        self._rewriter = rewriter
        self._vcs = vcs
        self._today = today

    def publish(self, *, message: str | None = None, dry_run: bool = False) -> PublishOutcome:
        LOGGER.info("Syncing media", extra={"event": "publish.stage", "stage": "sync"})
        sync_results = self._sync.sync(dry_run=dry_run)

        LOGGER.info("Rewriting URLs", extra={"event": "publish.stage", "stage": "rewrite"})
        rewrite_results = self._rewriter.rewrite(dry_run=dry_run)

        outcome = PublishOutcome(sync_results=sync_results, rewrite_results=rewrite_results)
        if dry_run:
            LOGGER.info("Dry run complete; no changes made", extra={"event": "publish.dry_run"})
            return outcome

        LOGGER.info("Committing and pushing", extra={"event": "publish.stage", "stage": "git"})
        try:
            git_result, error = self._commit_and_push(
                message or default_commit_message(self._today())
            )
        except PlatformError as exc:
            LOGGER.error("Git stage failed", extra={"event": "publish.git_error", "error": str(exc)})
            git_result, error = GitResult.ERROR, str(exc)
        outcome.git_result = git_result
        outcome.error = error
        return outcome

    def _commit_and_push(self, message: str) -> tuple[GitResult, str | None]:
        self._vcs.stage_all()
        commit = self._vcs.commit(message)
        if not commit.ok:
            LOGGER.error(
                "Commit failed", extra={"event": "publish.git_error", "error": commit.reason}
            )
            return GitResult.ERROR, commit.reason
        committed = commit.status is CommitStatus.COMMITTED
        LOGGER.info(
            "Created new commit" if committed else "No new changes to commit",
            extra={"event": "publish.commit", "status": commit.status.value},
        )

        counts = self._vcs.ahead_behind()
        ahead = counts[0] if counts else 0
        if not committed and ahead == 0:
            LOGGER.info("Nothing to push", extra={"event": "publish.push", "ahead": 0})
            return GitResult.NO_CHANGES, None

        push = self._vcs.push()
        if not push.pushed:
            LOGGER.error("Push failed", extra={"event": "publish.git_error", "error": push.reason})
            return GitResult.ERROR, push.reason

        LOGGER.info(
            "Published successfully",
            extra={"event": "publish.push", "ahead": max(ahead, int(committed))},
        )
        return GitResult.SUCCESS, None
