"""Issue submission with a body read from disk at post time."""

from __future__ import annotations

import logging
from pathlib import Path

from magic_issue.racer.errors import IssueBodyError
from magic_issue.racer.github.client import GitHubClient
from magic_issue.racer.github.models import Issue

logger = logging.getLogger(__name__)


class IssueSubmitter:
    """Compose and send the "create issue" request. Never retries."""

    def __init__(self, *, github: GitHubClient, title: str, body_path: Path) -> None:
        self._github = github
        self._title = title
        self._body_path = body_path

    @property
    def body_path(self) -> Path:
        return self._body_path

    def load_body(self) -> str:
        try:
            return self._body_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise IssueBodyError(self._body_path) from e

    def submit(self) -> Issue:
        """Post the issue once.

        Raises:
            IssueBodyError: The body file could not be read.
            TransportError | DecodeError | RemoteError: From the client.
        """

        body = self.load_body()
        logger.debug(
            "Submitting issue",
            extra={"title": self._title, "body_path": str(self._body_path), "body_chars": len(body)},
        )
        return self._github.create_issue(title=self._title, body=body)
