"""Turn raw GitHub HTTP responses into typed payloads or `AppError`s."""

from __future__ import annotations

import logging
from typing import TypeVar

import requests
from pydantic import TypeAdapter, ValidationError

from magic_issue.racer.errors import DecodeError, RemoteError
from magic_issue.racer.github.models import ERROR_ADAPTER

logger = logging.getLogger(__name__)

T = TypeVar("T")


def classify_response(response: requests.Response, adapter: TypeAdapter[T], *, expected: str) -> T:
    """Decode a response as `adapter`'s type, or raise the matching `AppError`.

    Args:
        response: A response that has already been received.
        adapter: Validator for the payload expected on success.
        expected: Human-readable name of that payload, used in error context.

    Raises:
        DecodeError: The body did not match the expected (or error) payload.
        RemoteError: GitHub answered with a non-2xx status and a message.
    """

    if 200 <= response.status_code < 300:
        try:
            return adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise DecodeError(expected, status_code=response.status_code) from e

    try:
        payload = ERROR_ADAPTER.validate_python(response.json())
    except (ValueError, ValidationError) as e:
        raise DecodeError("GitHub error payload", status_code=response.status_code) from e

    logger.debug(
        "GitHub rejected request",
        extra={"status_code": response.status_code, "github_message": payload.message},
    )
    raise RemoteError(payload.message, status_code=response.status_code)
