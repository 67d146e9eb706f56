"""Unit tests for the CLI (GitHub client mocked)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from magic_issue.racer import main as main_module
from magic_issue.racer.errors import RemoteError
from magic_issue.racer.github.client import GitHubClient
from magic_issue.racer.github.models import Issue


@pytest.fixture
def cli_env(clean_env: Path, monkeypatch: pytest.MonkeyPatch, body_file: Path) -> Path:
    monkeypatch.setenv("GITHUB_TOKEN", "test-token")
    monkeypatch.setenv("MAGIC_NUMBER", "42")
    monkeypatch.setenv("MAGIC_ISSUE_REPOSITORY", "octo-org/octo-repo")
    monkeypatch.setenv("MAGIC_ISSUE_BODY_PATH", str(body_file))
    monkeypatch.setattr(main_module, "configure_logging", lambda *_args: None)
    return clean_env


@pytest.fixture
def github(monkeypatch: pytest.MonkeyPatch) -> Mock:
    client = Mock(spec=GitHubClient)
    client.repository = "octo-org/octo-repo"
    client.verify_repository.return_value = "octo-org/octo-repo"
    factory = Mock(return_value=client)
    monkeypatch.setattr(main_module, "GitHubClient", factory)
    client.factory = factory
    return client


def test_race_win_exits_zero(
    cli_env: Path, github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    github.list_latest_issues.return_value = [Issue(number=41)]
    github.create_issue.return_value = Issue(number=42)

    assert main_module.main(["race"]) == 0

    github.verify_repository.assert_called_once_with()
    github.create_issue.assert_called_once_with(
        title="Rust is Beautiful", body="Hello from the test suite\n"
    )
    github.close.assert_called_once_with()
    assert "We did it!" in capsys.readouterr().out


def test_race_lost_exits_four(
    cli_env: Path, github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    github.list_latest_issues.return_value = [Issue(number=41)]
    github.create_issue.return_value = Issue(number=43)

    assert main_module.main(["race"]) == 4

    out = capsys.readouterr().out
    assert "Race lost" in out
    assert "#43" in out
    github.close.assert_called_once_with()


def test_missed_window_exits_four_without_posting(cli_env: Path, github: Mock) -> None:
    github.list_latest_issues.return_value = [Issue(number=50)]

    assert main_module.main(["race"]) == 4

    github.create_issue.assert_not_called()


def test_cli_flags_override_settings(cli_env: Path, github: Mock, tmp_path: Path) -> None:
    other_body = tmp_path / "other.md"
    other_body.write_text("other body", encoding="utf-8")
    github.list_latest_issues.return_value = [Issue(number=6)]
    github.create_issue.return_value = Issue(number=7)

    code = main_module.main(
        [
            "race",
            "--repo",
            "other-org/other-repo",
            "--magic-number",
            "7",
            "--title",
            "Lucky seven",
            "--body-file",
            str(other_body),
            "--skip-preflight",
        ]
    )

    assert code == 0
    assert github.factory.call_args.kwargs["repository"] == "other-org/other-repo"
    github.verify_repository.assert_not_called()
    github.create_issue.assert_called_once_with(title="Lucky seven", body="other body")


def test_preflight_failure_exits_one_before_polling(
    cli_env: Path, github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    github.verify_repository.side_effect = RemoteError("Bad credentials", status_code=401)

    assert main_module.main(["race"]) == 1

    github.list_latest_issues.assert_not_called()
    github.close.assert_called_once_with()
    assert "Bad credentials" in capsys.readouterr().err


def test_preflight_catches_missing_body_file(
    cli_env: Path, github: Mock, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("MAGIC_ISSUE_BODY_PATH", str(cli_env / "missing.md"))

    assert main_module.main(["race"]) == 1

    github.list_latest_issues.assert_not_called()


def test_configuration_error_exits_two(
    clean_env: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main_module.main(["race"]) == 2

    assert "Configuration error" in capsys.readouterr().err


def test_peek_reports_distance(
    cli_env: Path, github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    github.list_latest_issues.return_value = [Issue(number=39)]

    assert main_module.main(["peek"]) == 0

    out = capsys.readouterr().out
    assert "latest issue #39" in out
    assert "2 issue(s) to go" in out
    github.create_issue.assert_not_called()
    github.close.assert_called_once_with()


def test_peek_with_empty_listing_exits_one(cli_env: Path, github: Mock) -> None:
    github.list_latest_issues.return_value = []

    assert main_module.main(["peek"]) == 1
