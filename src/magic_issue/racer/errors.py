"""Error taxonomy for the race.

Every failure the racer knows how to reason about is an `AppError`. Whether a
given error is recoverable is not a property of the error itself: the attempt
evaluator decides that from the phase it happened in (read vs. write).
"""

from __future__ import annotations

from pathlib import Path


class AppError(Exception):
    """Base class for expected, classified failures."""

    def __init__(self, context: str) -> None:
        super().__init__(context)
        self.context = context

    def __str__(self) -> str:
        cause = self.__cause__
        if cause is None:
            return self.context
        return f"{self.context}: {cause}"


class TransportError(AppError):
    """The request never produced an HTTP response (DNS, TLS, timeout, reset...)."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Request failed while {operation}")
        self.operation = operation


class DecodeError(AppError):
    """A response body did not match the payload we expected."""

    def __init__(self, expected: str, *, status_code: int | None = None) -> None:
        context = f"Unexpected error while decoding GitHub response (expected {expected})"
        if status_code is not None:
            context = f"{context} [HTTP {status_code}]"
        super().__init__(context)
        self.expected = expected
        self.status_code = status_code


class RemoteError(AppError):
    """GitHub explicitly rejected the request (rate limit, bad credentials, ...)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        context = f"GitHub error: {message}"
        if status_code is not None:
            context = f"{context} [HTTP {status_code}]"
        super().__init__(context)
        self.message = message
        self.status_code = status_code


class IssueBodyError(AppError):
    """The issue body file could not be read."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Failed to read issue body from {path}")
        self.path = path


class EmptyResultError(AppError):
    """The issue listing came back empty."""

    def __init__(self, repository: str) -> None:
        super().__init__(f"GitHub returned 0 issues for {repository}")
        self.repository = repository


class MissedWindowError(AppError):
    """The magic number was handed out before we could post."""

    def __init__(self, *, magic_number: int, latest_number: int) -> None:
        super().__init__(
            f"Missed the window: latest issue is #{latest_number}, "
            f"magic number #{magic_number} is already taken"
        )
        self.magic_number = magic_number
        self.latest_number = latest_number


class SubmissionError(AppError):
    """Posting the issue failed, or its result could not be confirmed."""

    def __init__(self, magic_number: int, *, cause: AppError) -> None:
        super().__init__(f"Failed to post the issue for magic number #{magic_number}")
        self.magic_number = magic_number
        self.__cause__ = cause


class RaceLostError(AppError):
    """The post went through but somebody else got the magic number first."""

    def __init__(self, *, magic_number: int, posted_number: int) -> None:
        super().__init__(
            f"Race lost: posted issue got #{posted_number} instead of #{magic_number}"
        )
        self.magic_number = magic_number
        self.posted_number = posted_number
