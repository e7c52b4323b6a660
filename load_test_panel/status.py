"""Classify raw workflow run state into canonical test status."""

from dataclasses import dataclass

from load_test_panel.models.result import CanonicalStatus
from load_test_panel.providers.github_actions.models import (
    IN_FLIGHT_STATUSES,
    WorkflowRun,
)

CANCELLED_REASON = "Cancelled by user"


@dataclass(frozen=True, kw_only=True)
class Classification:
    """Canonical status of a run and, for failures, a readable reason."""

    status: CanonicalStatus
    failure_reason: str | None = None


def classify(run: WorkflowRun) -> Classification:
    """Map a run's raw status and conclusion to running, completed or failed.

    Unknown raw statuses are reported as failed rather than assumed to be
    still running or successful.
    """
    if run.status == "completed":
        if run.conclusion == "success":
            return Classification(status="completed")
    elif run.status in IN_FLIGHT_STATUSES:
        return Classification(status="running")

    return Classification(status="failed", failure_reason=failure_reason(run))


def failure_reason(run: WorkflowRun) -> str | None:
    """Describe why a failed run failed, or None when unknown."""
    if run.conclusion == "cancelled":
        return CANCELLED_REASON
    return run.conclusion or None
