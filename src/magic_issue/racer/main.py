"""CLI entrypoint for the magic-number issue racer."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError

from magic_issue import __version__
from magic_issue.racer.config import RacerSettings
from magic_issue.racer.errors import AppError, EmptyResultError
from magic_issue.racer.github.client import GitHubClient
from magic_issue.racer.logging import configure_logging
from magic_issue.racer.race.attempt import AttemptEvaluator
from magic_issue.racer.race.poll_loop import PollLoop
from magic_issue.racer.race.submitter import IssueSubmitter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="magic-issue",
        description="Post a GitHub issue the moment the next issue number is the magic number",
    )
    parser.add_argument("--version", action="version", version=f"magic-issue {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    race = subparsers.add_parser(
        "race",
        help="Poll the repository and post the issue when the magic number is next",
    )
    _add_common_arguments(race)
    race.add_argument("--title", default=None, help="Issue title (overrides MAGIC_ISSUE_TITLE)")
    race.add_argument(
        "--body-file",
        default=None,
        help="Markdown file with the issue body (overrides MAGIC_ISSUE_BODY_PATH)",
    )
    race.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Polling interval in seconds (overrides POLL_INTERVAL_SECONDS)",
    )
    race.add_argument(
        "--skip-preflight",
        action="store_true",
        help="Don't resolve the repository or read the body file before racing",
    )

    peek = subparsers.add_parser(
        "peek",
        help="Show the latest issue number and how far away the magic number is",
    )
    _add_common_arguments(peek)

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        default=None,
        help="Repository in the form 'owner/repo' (overrides MAGIC_ISSUE_REPOSITORY)",
    )
    parser.add_argument(
        "--magic-number",
        type=int,
        default=None,
        help="Issue number to claim (overrides MAGIC_NUMBER)",
    )


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    candidates = {
        "MAGIC_ISSUE_REPOSITORY": args.repository,
        "MAGIC_NUMBER": args.magic_number,
        "MAGIC_ISSUE_TITLE": getattr(args, "title", None),
        "MAGIC_ISSUE_BODY_PATH": getattr(args, "body_file", None),
        "POLL_INTERVAL_SECONDS": getattr(args, "interval", None),
    }
    return {key: value for key, value in candidates.items() if value is not None}


def _build_client(settings: RacerSettings) -> GitHubClient:
    return GitHubClient(
        token=settings.github_token,
        repository=settings.repository,
        base_url=settings.github_base_url,
        timeout_seconds=settings.request_timeout_seconds,
    )


def _run_race(settings: RacerSettings, *, preflight: bool) -> int:
    github = _build_client(settings)
    try:
        submitter = IssueSubmitter(
            github=github,
            title=settings.issue_title,
            body_path=settings.issue_body_path,
        )

        if preflight:
            submitter.load_body()
            github.verify_repository()

        evaluator = AttemptEvaluator(
            github=github,
            submitter=submitter,
            magic_number=settings.magic_number,
        )
        loop = PollLoop(attempt=evaluator.attempt, interval_seconds=settings.poll_interval_seconds)

        logger.info(
            "Race started",
            extra={
                "repo": settings.repository,
                "magic_number": settings.magic_number,
                "interval_seconds": settings.poll_interval_seconds,
            },
        )
        result = loop.run()

        if result.succeeded:
            print(f"We did it! Issue #{settings.magic_number} is ours.")
            return 0

        print(f"We didn't make it: {result.outcome.error}")
        return 4
    finally:
        github.close()


def _run_peek(settings: RacerSettings) -> int:
    github = _build_client(settings)
    try:
        issues = github.list_latest_issues()
        if not issues:
            raise EmptyResultError(settings.repository)

        latest = issues[0].number
        remaining = settings.magic_number - (latest + 1)
        if remaining > 0:
            status = f"{remaining} issue(s) to go"
        elif remaining == 0:
            status = "it is next"
        else:
            status = "already taken"
        print(
            f"{settings.repository}: latest issue #{latest}; "
            f"magic number #{settings.magic_number}: {status}"
        )
        return 0
    finally:
        github.close()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = RacerSettings(**_settings_overrides(args))
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your environment or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level, settings.log_format)

    try:
        if args.command == "race":
            return _run_race(settings, preflight=not args.skip_preflight)

        if args.command == "peek":
            return _run_peek(settings)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except AppError as e:
        logger.error(str(e), extra={"error_type": type(e).__name__})
        print(str(e), file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
