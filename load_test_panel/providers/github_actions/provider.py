"""GitHub Actions workflow engine implementation."""

import logging
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pydantic

from load_test_panel.errors import UpstreamError
from load_test_panel.providers.base import WorkflowEngine
from load_test_panel.providers.github_actions.config import GitHubActionsConfig
from load_test_panel.providers.github_actions.models import (
    Artifact,
    ArtifactsResponse,
    Workflow,
    WorkflowRun,
    WorkflowRunsResponse,
    WorkflowsResponse,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class GitHubActionsEngine(WorkflowEngine):
    """GitHub Actions REST API client."""

    config: GitHubActionsConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: GitHubActionsConfig
    ) -> AsyncGenerator["GitHubActionsEngine", None]:
        """Create engine with managed session lifecycle."""
        headers = {"Accept": "application/vnd.github+json"}
        if config.token is not None:
            headers["Authorization"] = f"Bearer {config.token.get_secret_value()}"
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.request_timeout),
        ) as session:
            yield cls(config=config, session=session)

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.config.owner}/{self.config.repo}"

    async def list_workflows(self) -> Sequence[Workflow]:
        """List the workflows defined in the repository."""
        response = await self._get_model(
            f"{self.repo_path}/actions/workflows",
            WorkflowsResponse,
            action="list workflows",
        )
        return response.workflows

    async def list_runs(
        self,
        *,
        workflow: str | int | None = None,
        status: str | None = None,
        per_page: int = 50,
    ) -> Sequence[WorkflowRun]:
        """List runs for one workflow, or for the whole repository."""
        if workflow is None:
            url = f"{self.repo_path}/actions/runs"
        else:
            url = f"{self.repo_path}/actions/workflows/{workflow}/runs"

        params = {"per_page": str(per_page)}
        if status is not None:
            params["status"] = status

        runs_response = await self._get_model(
            url, WorkflowRunsResponse, action="list workflow runs", params=params
        )
        log.debug(
            "Listed %d workflow run(s) from %s", len(runs_response.workflow_runs), url
        )
        return runs_response.workflow_runs

    async def dispatch_workflow(
        self, workflow: str | int, ref: str, inputs: Mapping[str, str]
    ) -> None:
        """Dispatch a workflow run."""
        url = f"{self.repo_path}/actions/workflows/{workflow}/dispatches"
        payload = {"ref": ref, "inputs": dict(inputs)}

        log.info(
            "Dispatching workflow: api_base_url=%s, url=%s, owner=%s, repo=%s, "
            "workflow=%s, ref=%s, test_id=%s",
            self.config.api_base_url,
            url,
            self.config.owner,
            self.config.repo,
            workflow,
            ref,
            inputs.get("test_id"),
        )

        try:
            async with self.session.post(url, json=payload) as response:
                if response.status != 204:
                    text = await response.text()
                    raise UpstreamError(
                        f"Failed to dispatch workflow: {response.status} {text}"
                    )
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise UpstreamError(f"Failed to dispatch workflow: {exc!r}") from exc

    async def cancel_run(self, run_id: int) -> None:
        """Cancel a workflow run."""
        url = f"{self.repo_path}/actions/runs/{run_id}/cancel"
        try:
            async with self.session.post(url) as response:
                if response.status != 202:
                    text = await response.text()
                    raise UpstreamError(
                        f"Failed to cancel workflow run {run_id}: "
                        f"{response.status} {text}"
                    )
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise UpstreamError(
                f"Failed to cancel workflow run {run_id}: {exc!r}"
            ) from exc

    async def list_artifacts(self, run_id: int) -> Sequence[Artifact]:
        """List artifacts of a workflow run."""
        response = await self._get_model(
            f"{self.repo_path}/actions/runs/{run_id}/artifacts",
            ArtifactsResponse,
            action="list artifacts",
        )
        return response.artifacts

    async def download_artifact(self, artifact_id: int) -> bytes:
        """Download an artifact archive.

        GitHub answers with a redirect to short-lived blob storage, which
        aiohttp follows.
        """
        url = f"{self.repo_path}/actions/artifacts/{artifact_id}/zip"
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    text = await response.text()
                    raise UpstreamError(
                        f"Failed to download artifact {artifact_id}: "
                        f"{response.status} {text}"
                    )
                return await response.read()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise UpstreamError(
                f"Failed to download artifact {artifact_id}: {exc!r}"
            ) from exc

    async def _get_model[M: pydantic.BaseModel](
        self,
        url: str,
        model: type[M],
        *,
        action: str,
        params: Mapping[str, str] | None = None,
    ) -> M:
        data = await self._get_json(url, action=action, params=params)
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as exc:
            raise UpstreamError(
                f"Failed to {action}: unexpected response ({exc.error_count()} "
                "validation errors)"
            ) from exc

    async def _get_json(
        self, url: str, *, action: str, params: Mapping[str, str] | None = None
    ) -> Any:
        try:
            async with self.session.get(url, params=params) as response:
                if response.status != 200:
                    text = await response.text()
                    raise UpstreamError(f"Failed to {action}: {response.status} {text}")
                return await response.json()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise UpstreamError(f"Failed to {action}: {exc!r}") from exc
