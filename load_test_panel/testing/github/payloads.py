"""Payload helpers for GitHub Actions API responses in tests."""

from collections.abc import Sequence
from typing import Any


def workflow_run(
    *,
    run_id: int = 123456789,
    name: str | None = "XMTP Load Test",
    display_title: str = "XMTP Load Test",
    status: str = "completed",
    conclusion: str | None = "success",
    event: str = "workflow_dispatch",
    head_commit_message: str | None = "Update load test workflow",
    html_url: str = "https://github.com/test-owner/test-repo/actions/runs/123456789",
    created_at: str | None = "2099-01-01T12:00:00Z",
    updated_at: str | None = "2099-01-01T12:01:30Z",
) -> dict[str, Any]:
    """Create a workflow run payload for testing.

    Returns a realistic GitHub workflow run API response structure.
    """
    return {
        "id": run_id,
        "name": name,
        "node_id": "WFR_kwLOTest",
        "head_branch": "main",
        "head_sha": "abc123def456",
        "path": ".github/workflows/load-test.yml",
        "display_title": display_title,
        "run_number": 42,
        "event": event,
        "status": status,
        "conclusion": conclusion,
        "workflow_id": 555,
        "url": (
            "https://api.github.com/repos/test-owner/test-repo"
            f"/actions/runs/{run_id}"
        ),
        "html_url": html_url,
        "created_at": created_at,
        "updated_at": updated_at,
        "run_attempt": 1,
        "run_started_at": created_at,
        "head_commit": {
            "id": "abc123def456",
            "tree_id": "def456abc123",
            "message": head_commit_message,
            "timestamp": "2099-01-01T11:59:00Z",
            "author": {"name": "Test User", "email": "test@example.com"},
        },
    }


def workflow_runs_response(
    workflow_runs: Sequence[dict[str, Any]] = (),
) -> dict[str, Any]:
    """Create a list workflow runs response."""
    return {"total_count": len(workflow_runs), "workflow_runs": list(workflow_runs)}


def workflow(
    *,
    workflow_id: int = 555,
    name: str = "XMTP Load Test",
    path: str = ".github/workflows/load-test.yml",
) -> dict[str, Any]:
    """Create a workflow payload for testing."""
    return {
        "id": workflow_id,
        "node_id": "W_kwDOTest",
        "name": name,
        "path": path,
        "state": "active",
        "created_at": "2098-01-01T00:00:00Z",
        "updated_at": "2098-01-01T00:00:00Z",
        "url": (
            "https://api.github.com/repos/test-owner/test-repo"
            f"/actions/workflows/{workflow_id}"
        ),
        "html_url": f"https://github.com/test-owner/test-repo/blob/main/{path}",
    }


def workflows_response(workflows: Sequence[dict[str, Any]] = ()) -> dict[str, Any]:
    """Create a list repository workflows response."""
    return {"total_count": len(workflows), "workflows": list(workflows)}


def artifact(
    *,
    artifact_id: int = 987,
    name: str = "load-test-results",
    expired: bool = False,
) -> dict[str, Any]:
    """Create a workflow run artifact payload for testing."""
    return {
        "id": artifact_id,
        "node_id": "MDg6QXJ0aWZhY3Q=",
        "name": name,
        "size_in_bytes": 1024,
        "url": (
            "https://api.github.com/repos/test-owner/test-repo"
            f"/actions/artifacts/{artifact_id}"
        ),
        "archive_download_url": (
            "https://api.github.com/repos/test-owner/test-repo"
            f"/actions/artifacts/{artifact_id}/zip"
        ),
        "expired": expired,
        "created_at": "2099-01-01T12:01:00Z",
        "expires_at": "2099-04-01T12:01:00Z",
        "updated_at": "2099-01-01T12:01:00Z",
    }


def artifacts_response(artifacts: Sequence[dict[str, Any]] = ()) -> dict[str, Any]:
    """Create a list workflow run artifacts response."""
    return {"total_count": len(artifacts), "artifacts": list(artifacts)}
