"""GitHub REST client for the two calls the race needs.

Plain `requests` keeps the raw responses in reach of the classifier. PyGithub
is only used for the optional preflight that resolves the repository once.
"""

from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException

from magic_issue import __version__
from magic_issue.racer.errors import RemoteError, TransportError
from magic_issue.racer.github.models import (
    ISSUE_ADAPTER,
    ISSUE_LIST_ADAPTER,
    CreateIssueRequest,
    Issue,
)
from magic_issue.racer.github.responses import classify_response

logger = logging.getLogger(__name__)

USER_AGENT = f"magic-issue/{__version__}"


class GitHubClient:
    """Issue listing and creation against a single repository."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

        self._token = token
        self._repository_name = repository
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._github = github_api

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"token {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": USER_AGENT,
            }
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    @property
    def issues_url(self) -> str:
        return f"{self._base_url}/repos/{self._repository_name}/issues"

    def list_latest_issues(self) -> list[Issue]:
        """Fetch the single most recently created issue (open or closed).

        GitHub lists issues newest-first by default, so index 0 is the latest.
        """

        try:
            resp = self._session.get(
                self.issues_url,
                params={"per_page": "1", "state": "all"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError("listing the latest issue") from e

        issues = classify_response(resp, ISSUE_LIST_ADAPTER, expected="list of issues")
        logger.debug(
            "Latest issues fetched",
            extra={"repo": self._repository_name, "issue_numbers": [i.number for i in issues]},
        )
        return issues

    def create_issue(self, *, title: str, body: str) -> Issue:
        payload = CreateIssueRequest(title=title, body=body)

        logger.info("Creating issue", extra={"repo": self._repository_name, "title": title})
        try:
            resp = self._session.post(
                self.issues_url,
                json=payload.model_dump(mode="json"),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise TransportError("creating the issue") from e

        issue = classify_response(resp, ISSUE_ADAPTER, expected="created issue")
        logger.info(
            "Issue created", extra={"repo": self._repository_name, "issue_number": issue.number}
        )
        return issue

    def verify_repository(self) -> str:
        """Resolve the repository with the configured credential.

        Returns:
            The repository's canonical full name.

        Raises:
            RemoteError: GitHub refused the credential or does not know the repository.
        """

        if self._github is None:
            self._github = Github(auth=Auth.Token(self._token), base_url=self._base_url)

        try:
            repo = self._github.get_repo(self._repository_name)
        except GithubException as e:
            message = e.data.get("message") if isinstance(e.data, dict) else None
            raise RemoteError(
                str(message or f"cannot access {self._repository_name}"),
                status_code=e.status,
            ) from e
        except requests.RequestException as e:
            raise TransportError("resolving the repository") from e

        logger.info(
            "Authenticated with GitHub and resolved repository",
            extra={"repo": repo.full_name},
        )
        return repo.full_name

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
