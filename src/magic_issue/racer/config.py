"""Configuration for the racer.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The settings object is frozen: the magic number and credential are read once
at startup and passed explicitly to the components that need them.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_REPOSITORY_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class RacerSettings(BaseSettings):
    """Settings for a single race.

    Environment variables:
    - GITHUB_TOKEN
    - MAGIC_NUMBER
    - GITHUB_BASE_URL           (optional)
    - MAGIC_ISSUE_REPOSITORY    (optional)
    - MAGIC_ISSUE_TITLE         (optional)
    - MAGIC_ISSUE_BODY_PATH     (optional)
    - POLL_INTERVAL_SECONDS     (optional)
    - REQUEST_TIMEOUT_SECONDS   (optional)
    - LOG_LEVEL                 (optional)
    - LOG_FORMAT                (optional)

    Notes:
        Values may also be passed by env var name, e.g.
        `RacerSettings(MAGIC_NUMBER=42, _env_file=None)`; init values win over
        the environment.
    """

    # Required values default to "unset" and are enforced by the validator below.
    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    magic_number: int = Field(
        default=0,
        validation_alias="MAGIC_NUMBER",
        description="The issue number to claim",
    )

    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )
    repository: str = Field(
        default="rust-lang/rust",
        validation_alias="MAGIC_ISSUE_REPOSITORY",
        description="Repository to race, in the form 'owner/repo'",
    )
    issue_title: str = Field(
        default="Rust is Beautiful",
        validation_alias="MAGIC_ISSUE_TITLE",
        description="Title of the issue to post",
    )
    issue_body_path: Path = Field(
        default=Path("assets/issue.md"),
        validation_alias="MAGIC_ISSUE_BODY_PATH",
        description="Markdown file holding the issue body",
    )

    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        validation_alias="POLL_INTERVAL_SECONDS",
        description="Seconds between two polls of the latest issue",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="REQUEST_TIMEOUT_SECONDS",
        description="Per-request HTTP timeout",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="Log line format",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        value = value.strip()
        if not _REPOSITORY_RE.match(value):
            raise ValueError("repository must look like 'owner/repo'")
        return value

    @field_validator("issue_title")
    @classmethod
    def _check_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("issue title must not be blank")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return value

    @model_validator(mode="after")
    def _require_race_inputs(self) -> RacerSettings:
        if not self.github_token.strip():
            raise ValueError("GITHUB_TOKEN is required")
        if self.magic_number <= 0:
            raise ValueError("MAGIC_NUMBER is required and must be a positive integer")
        return self
