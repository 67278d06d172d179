"""Command-line interface for media sync and publishing."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Sequence

from ..platforms import PlatformError
from ..services import ContentAccessError, GitResult
from ..settings import ConfigError, load_config
from ..utils.logging import configure_logging, get_logger
from .pipeline import MediaPipeline, build_pipeline

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(structured=not args.log_plain)

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1

    try:
        return handler(args)
    except (ConfigError, ContentAccessError, PlatformError) as exc:
        LOGGER.error(
            "Command failed: %s",
            exc,
            extra={"event": "cli.error", "error_type": type(exc).__name__},
        )
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="proofmark", description="Media sync and publishing")
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command")

    _add_media_commands(subparsers)
    _add_publish_command(subparsers)
    _add_git_commands(subparsers)
    _add_config_commands(subparsers)

    return parser


def _add_media_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    media_parser = subparsers.add_parser("media", help="Media library and CDN sync")
    media_subparsers = media_parser.add_subparsers(dest="media_command", required=True)

    sync_parser = media_subparsers.add_parser("sync", help="Upload new or changed media")
    sync_parser.add_argument("--dry-run", action="store_true", help="Report without uploading")
    sync_parser.add_argument(
        "--force",
        action="store_true",
        help="Upload even when the cached hash matches",
    )
    sync_parser.set_defaults(handler=_handle_media_sync)

    rewrite_parser = media_subparsers.add_parser(
        "rewrite", help="Replace local media references with CDN URLs"
    )
    rewrite_parser.add_argument("--dry-run", action="store_true", help="Count without writing")
    rewrite_parser.set_defaults(handler=_handle_media_rewrite)

    mappings_parser = media_subparsers.add_parser("mappings", help="Show local-to-CDN mappings")
    mappings_parser.set_defaults(handler=_handle_media_mappings)

    library_parser = media_subparsers.add_parser("library", help="List media library images")
    library_parser.set_defaults(handler=_handle_media_library)


def _add_publish_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    publish_parser = subparsers.add_parser(
        "publish", help="Sync media, rewrite URLs, then commit and push"
    )
    publish_parser.add_argument("-m", "--message", default=None, help="Commit message")
    publish_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Sync and rewrite without side effects; skip git",
    )
    publish_parser.set_defaults(handler=_handle_publish)


def _add_git_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    git_parser = subparsers.add_parser("git", help="Content repository status")
    git_subparsers = git_parser.add_subparsers(dest="git_command", required=True)
    status_parser = git_subparsers.add_parser("status", help="Show branch and pending changes")
    status_parser.set_defaults(handler=_handle_git_status)
    pull_parser = git_subparsers.add_parser("pull", help="Fetch and fast-forward from upstream")
    pull_parser.set_defaults(handler=_handle_git_pull)


def _add_config_commands(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    config_parser = subparsers.add_parser("config", help="Configuration helpers")
    config_subparsers = config_parser.add_subparsers(dest="config_command", required=True)
    check_parser = config_subparsers.add_parser("check", help="Validate configured directories")
    check_parser.set_defaults(handler=_handle_config_check)


def _pipeline(args: argparse.Namespace) -> MediaPipeline:
    return build_pipeline(load_config(args.config))


def _emit(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _handle_media_sync(args: argparse.Namespace) -> int:
    result = _pipeline(args).sync_media(dry_run=args.dry_run, force=args.force)
    _emit(result.to_dict())
    return 0


def _handle_media_rewrite(args: argparse.Namespace) -> int:
    result = _pipeline(args).rewrite_urls(dry_run=args.dry_run)
    _emit(result.to_dict())
    return 0


def _handle_media_mappings(args: argparse.Namespace) -> int:
    _emit(_pipeline(args).get_url_mappings())
    return 0


def _handle_media_library(args: argparse.Namespace) -> int:
    _emit([item.to_dict() for item in _pipeline(args).list_media_library()])
    return 0


def _handle_publish(args: argparse.Namespace) -> int:
    outcome = _pipeline(args).publish(message=args.message, dry_run=args.dry_run)
    _emit(outcome.to_dict())
    return 1 if outcome.git_result is GitResult.ERROR else 0


def _handle_git_status(args: argparse.Namespace) -> int:
    _emit(_pipeline(args).git_status().to_dict())
    return 0


def _handle_git_pull(args: argparse.Namespace) -> int:
    _emit(_pipeline(args).pull().to_dict())
    return 0


def _handle_config_check(args: argparse.Namespace) -> int:
    pipeline = _pipeline(args)
    errors = pipeline.validate()
    source = pipeline.config.source
    _emit({"config": str(source) if source else None, "valid": not errors, "errors": errors})
    return 1 if errors else 0


__all__ = ["main"]
