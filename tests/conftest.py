"""Test configuration and fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests

from magic_issue.racer.github.client import GitHubClient

RACER_ENV_VARS = (
    "GITHUB_TOKEN",
    "MAGIC_NUMBER",
    "GITHUB_BASE_URL",
    "MAGIC_ISSUE_REPOSITORY",
    "MAGIC_ISSUE_TITLE",
    "MAGIC_ISSUE_BODY_PATH",
    "POLL_INTERVAL_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with none of the racer's env vars set."""
    for name in RACER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Build a received `requests.Response` with a JSON (or raw text) body."""

    def _make(status_code: int, payload: object = None, *, text: str | None = None) -> requests.Response:
        resp = requests.Response()
        resp.status_code = status_code
        body = text if text is not None else json.dumps(payload)
        resp._content = body.encode("utf-8")
        resp.encoding = "utf-8"
        resp.url = "https://api.github.com/repos/octo-org/octo-repo/issues"
        return resp

    return _make


@pytest.fixture
def mock_github() -> Mock:
    """Provide a GitHubClient stand-in for the octo-org/octo-repo repository."""
    github = Mock(spec=GitHubClient)
    github.repository = "octo-org/octo-repo"
    return github


@pytest.fixture
def body_file(tmp_path: Path) -> Path:
    """Provide an issue body file."""
    path = tmp_path / "issue.md"
    path.write_text("Hello from the test suite\n", encoding="utf-8")
    return path
