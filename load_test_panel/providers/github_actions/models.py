"""Pydantic models for GitHub Actions API responses."""

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel

# Raw statuses are kept as plain strings: GitHub adds new ones over time
# (requested, waiting, pending, ...) and unknown values must still parse.
IN_FLIGHT_STATUSES: frozenset[str] = frozenset(["in_progress", "queued"])


class HeadCommit(BaseModel):
    """The commit a workflow run was started for."""

    id: str | None = None
    message: str | None = None


class WorkflowRun(BaseModel):
    """A workflow run from GitHub Actions API."""

    id: int
    name: str | None = None
    display_title: str = ""
    head_commit: HeadCommit | None = None
    status: str | None = None
    conclusion: str | None = None
    event: str = ""
    html_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkflowRunsResponse(BaseModel):
    """Response from list workflow runs API."""

    total_count: int = 0
    workflow_runs: Sequence[WorkflowRun] = ()


class Workflow(BaseModel):
    """A workflow definition from GitHub Actions API."""

    id: int
    name: str
    path: str
    state: str | None = None


class WorkflowsResponse(BaseModel):
    """Response from list repository workflows API."""

    total_count: int = 0
    workflows: Sequence[Workflow] = ()


class Artifact(BaseModel):
    """A workflow run artifact."""

    id: int
    name: str
    size_in_bytes: int | None = None
    expired: bool = False


class ArtifactsResponse(BaseModel):
    """Response from list workflow run artifacts API."""

    total_count: int = 0
    artifacts: Sequence[Artifact] = ()
