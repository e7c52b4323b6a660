"""Abstract base class for the external workflow engine."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from load_test_panel.providers.github_actions.models import (
    Artifact,
    Workflow,
    WorkflowRun,
)


class WorkflowEngine(ABC):
    """Read/dispatch/cancel access to the engine that executes load tests.

    Every method raises UpstreamError when the engine rejects the call or
    cannot be reached.
    """

    @abstractmethod
    async def list_workflows(self) -> Sequence[Workflow]:
        """List the workflows defined in the repository."""

    @abstractmethod
    async def list_runs(
        self,
        *,
        workflow: str | int | None = None,
        status: str | None = None,
        per_page: int = 50,
    ) -> Sequence[WorkflowRun]:
        """List runs, most recent first.

        Args:
            workflow: Workflow ID or file name; None lists runs of every workflow
            status: Only return runs with this raw status
            per_page: Maximum number of runs to return

        Returns:
            Workflow runs ordered by creation time, newest first

        """

    @abstractmethod
    async def dispatch_workflow(
        self, workflow: str | int, ref: str, inputs: Mapping[str, str]
    ) -> None:
        """Request a new run of a workflow with the given inputs."""

    @abstractmethod
    async def cancel_run(self, run_id: int) -> None:
        """Request cancellation of a run."""

    @abstractmethod
    async def list_artifacts(self, run_id: int) -> Sequence[Artifact]:
        """List artifacts produced by a run."""

    @abstractmethod
    async def download_artifact(self, artifact_id: int) -> bytes:
        """Download an artifact as ZIP bytes."""
