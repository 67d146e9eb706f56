"""A single race attempt: read the latest issue, compare, maybe post.

The outcome of an attempt is a tagged value rather than an exception, so the
poll loop's dispatch has exactly two arms to cover:

- `Continue`: keep polling. `error` is set when something recoverable went
  wrong while reading.
- `Terminate`: stop polling. `error` is None only when the posted issue got the
  magic number.

Once a write has been sent, every ambiguity ends in `Terminate`: a failed or
unconfirmed post must never be retried, or we could file duplicates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeAlias

from magic_issue.racer.errors import (
    AppError,
    EmptyResultError,
    MissedWindowError,
    RaceLostError,
    SubmissionError,
)
from magic_issue.racer.github.client import GitHubClient
from magic_issue.racer.github.models import Issue
from magic_issue.racer.race.submitter import IssueSubmitter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Continue:
    """Not done yet. `error` carries a soft (read-phase) failure, if any."""

    error: AppError | None = None


@dataclass(frozen=True, slots=True)
class Terminate:
    """Done. Success when `error` is None."""

    issue: Issue | None = None
    error: AppError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


AttemptOutcome: TypeAlias = Continue | Terminate


class AttemptEvaluator:
    """Decide, once per tick, whether to wait, post, or stop."""

    def __init__(self, *, github: GitHubClient, submitter: IssueSubmitter, magic_number: int) -> None:
        if magic_number <= 0:
            raise ValueError("magic_number must be a positive integer")
        self._github = github
        self._submitter = submitter
        self._magic_number = magic_number

    @property
    def magic_number(self) -> int:
        return self._magic_number

    def attempt(self) -> AttemptOutcome:
        try:
            issues = self._github.list_latest_issues()
        except AppError as e:
            return Continue(error=e)

        if not issues:
            return Continue(error=EmptyResultError(self._github.repository))

        latest = issues[0]
        next_number = latest.number + 1

        if self._magic_number < next_number:
            return Terminate(
                error=MissedWindowError(magic_number=self._magic_number, latest_number=latest.number)
            )
        if self._magic_number > next_number:
            logger.debug(
                "Not there yet",
                extra={
                    "latest_number": latest.number,
                    "magic_number": self._magic_number,
                    "remaining": self._magic_number - next_number,
                },
            )
            return Continue()

        logger.info(
            "Magic number is next; posting",
            extra={"latest_number": latest.number, "magic_number": self._magic_number},
        )
        try:
            posted = self._submitter.submit()
        except AppError as e:
            return Terminate(error=SubmissionError(self._magic_number, cause=e))

        if posted.number != self._magic_number:
            return Terminate(
                issue=posted,
                error=RaceLostError(magic_number=self._magic_number, posted_number=posted.number),
            )
        return Terminate(issue=posted)
