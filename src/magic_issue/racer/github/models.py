"""Wire payloads exchanged with the GitHub issues endpoint.

Only the fields the racer relies on are modelled; everything else GitHub
sends back is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Issue(BaseModel):
    """An issue as returned by the listing and creation endpoints."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    number: int = Field(gt=0)


class CreateIssueRequest(BaseModel):
    """Body of `POST /repos/{owner}/{repo}/issues`."""

    title: str = Field(min_length=1)
    body: str


class GitHubErrorPayload(BaseModel):
    """The `{"message": ...}` object GitHub returns alongside error statuses."""

    model_config = ConfigDict(extra="ignore")

    message: str


ISSUE_ADAPTER: TypeAdapter[Issue] = TypeAdapter(Issue)
ISSUE_LIST_ADAPTER: TypeAdapter[list[Issue]] = TypeAdapter(list[Issue])
ERROR_ADAPTER: TypeAdapter[GitHubErrorPayload] = TypeAdapter(GitHubErrorPayload)
