"""Reconcile load tests with the GitHub Actions runs that execute them."""

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import pydantic

from load_test_panel.archive import extract_results
from load_test_panel.config import PanelSettings
from load_test_panel.errors import NotFoundError, UpstreamError
from load_test_panel.identifiers import extract_timestamp, find_test_id
from load_test_panel.locator import (
    CANCEL_LOOKUP,
    STATUS_LOOKUP,
    latest_dispatch,
    locate,
)
from load_test_panel.metadata import parse_metadata, run_title
from load_test_panel.models.result import (
    ArtifactResults,
    CancelResponse,
    TestResult,
    merge_layers,
)
from load_test_panel.models.trigger import TriggerRequest, TriggerResponse
from load_test_panel.providers.base import WorkflowEngine
from load_test_panel.providers.github_actions.models import WorkflowRun
from load_test_panel.status import classify

log = logging.getLogger(__name__)

# Runs can take up to a minute to show up in the API after dispatch.
STARTING_WINDOW = timedelta(minutes=5)
LATEST_DISPATCH_WINDOW = timedelta(minutes=5)

STARTING_MESSAGE = "Workflow starting..."
SEARCHING_MESSAGE = "Searching for workflow run..."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, kw_only=True)
class LoadTestOrchestrator:
    """Dispatches, tracks, lists and cancels load tests on a workflow engine."""

    engine: WorkflowEngine
    settings: PanelSettings
    clock: Callable[[], datetime] = field(default=utc_now, repr=False)

    async def trigger(
        self, payload: Mapping[str, Any] | TriggerRequest
    ) -> TriggerResponse:
        """Validate test parameters and dispatch the load test workflow.

        The dispatch is fire-and-forget: GitHub does not return the run it
        creates, so callers follow up with get_status.

        Raises:
            ValidationError: If the parameters are missing or malformed
            ConfigurationError: If no GitHub token is configured
            UpstreamError: If GitHub rejects the dispatch

        """
        if isinstance(payload, TriggerRequest):
            request = payload
        else:
            request = TriggerRequest.from_payload(payload)
        self.settings.require_token()

        log.info("Triggering workflow for test ID: %s", request.test_id)
        await self.engine.dispatch_workflow(
            self.settings.workflow_file,
            self.settings.workflow_ref,
            request.workflow_inputs(),
        )
        return TriggerResponse(test_id=request.test_id)

    async def get_status(self, test_id: str) -> TestResult:
        """Return the reconciled status of one test.

        A run that cannot be found yet is reported as running with a
        placeholder message, never as an error.

        Raises:
            ConfigurationError: If no GitHub token is configured
            UpstreamError: If workflow runs cannot be listed at all

        """
        self.settings.require_token()
        now = self.clock()

        runs = await self._list_candidate_runs()
        log.info("Looking for test %s among %d workflow run(s)", test_id, len(runs))

        run = locate(test_id, runs, now, STATUS_LOOKUP)
        if run is None and (run := latest_dispatch(runs, now, LATEST_DISPATCH_WINDOW)):
            log.info("Using most recent dispatched run %s for test %s", run.id, test_id)
        if run is None:
            log.info("No matching workflow run found for test ID: %s", test_id)
            return self._placeholder(test_id, now)

        result = self._reconcile(test_id, run)
        if result.status == "completed":
            result = await self._enrich(result, run)
        return result

    async def get_history(self) -> Sequence[TestResult]:
        """Return the most recent tests, newest first.

        Completed runs are enriched from their artifacts concurrently; a
        failure enriching one run leaves that entry with title metadata only.

        Raises:
            ConfigurationError: If no GitHub token is configured
            UpstreamError: If workflow runs cannot be listed

        """
        self.settings.require_token()
        limit = self.settings.history_limit

        workflow = await self._resolve_workflow()
        runs = await self.engine.list_runs(workflow=workflow, per_page=limit)
        runs = list(runs)[:limit]
        log.info("GitHub returned %d workflow run(s) for history", len(runs))
        if not runs:
            return []

        base_results = [
            self._reconcile(self._derive_test_id(run), run) for run in runs
        ]
        semaphore = asyncio.Semaphore(self.settings.artifact_concurrency)
        tasks = [
            self._enrich_bounded(semaphore, result, run)
            for result, run in zip(base_results, runs, strict=True)
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        return self._process_results(base_results, outcomes)

    async def cancel(self, test_id: str) -> CancelResponse:
        """Cancel the in-progress run of a test.

        Raises:
            ConfigurationError: If no GitHub token is configured
            NotFoundError: If no in-progress run correlates with the test
            UpstreamError: If GitHub rejects the listing or the cancellation

        """
        self.settings.require_token()
        log.info("Attempting to cancel test: %s", test_id)

        runs = await self.engine.list_runs(
            status="in_progress", per_page=self.settings.status_page_size
        )
        log.info("Found %d running workflow(s)", len(runs))

        run = locate(test_id, runs, self.clock(), CANCEL_LOOKUP)
        if run is None:
            log.info("No running workflow found for test ID: %s", test_id)
            raise NotFoundError("No running workflow found for this test")

        await self.engine.cancel_run(run.id)
        log.info("Cancelled workflow run %s for test %s", run.id, test_id)
        return CancelResponse(test_id=test_id, workflow_id=run.id)

    async def _resolve_workflow(self) -> str | int:
        """Find the load test workflow ID, falling back to its file name."""
        try:
            workflows = await self.engine.list_workflows()
        except UpstreamError as exc:
            log.warning("Could not list workflows, using file name: %s", exc)
            return self.settings.workflow_file

        for workflow in workflows:
            if (
                workflow.name == self.settings.workflow_name
                or workflow.path == self.settings.workflow_path
            ):
                log.debug("Found workflow ID: %s", workflow.id)
                return workflow.id

        log.info("Workflow %s not found, using file name", self.settings.workflow_name)
        return self.settings.workflow_file

    async def _list_candidate_runs(self) -> Sequence[WorkflowRun]:
        """List recent runs of the workflow, or of the repository if that fails."""
        workflow = await self._resolve_workflow()
        page_size = self.settings.status_page_size
        try:
            return await self.engine.list_runs(workflow=workflow, per_page=page_size)
        except UpstreamError as exc:
            log.warning(
                "Listing runs of workflow %s failed, trying all runs: %s", workflow, exc
            )
            return await self.engine.list_runs(per_page=page_size)

    def _placeholder(self, test_id: str, now: datetime) -> TestResult:
        """Running result for a test whose run is not visible yet."""
        created_at = extract_timestamp(test_id)
        if created_at is not None and now - created_at < STARTING_WINDOW:
            log.info(
                "Test %s was triggered %.0fs ago, assuming it is still starting",
                test_id,
                (now - created_at).total_seconds(),
            )
            return TestResult(
                test_id=test_id, status="running", message=STARTING_MESSAGE
            )
        return TestResult(test_id=test_id, status="running", message=SEARCHING_MESSAGE)

    def _derive_test_id(self, run: WorkflowRun) -> str:
        commit_message = run.head_commit.message if run.head_commit else None
        return find_test_id(run_title(run), commit_message) or f"run_{run.id}"

    def _reconcile(self, test_id: str, run: WorkflowRun) -> TestResult:
        """Classify a run and attach the metadata encoded in its title."""
        classification = classify(run)
        metadata = parse_metadata(run_title(run))
        return TestResult(
            test_id=test_id,
            run_id=run.id,
            status=classification.status,
            start_time=run.created_at,
            end_time=run.updated_at,
            github_url=run.html_url,
            conclusion=run.conclusion,
            failure_reason=classification.failure_reason,
            **metadata.model_dump(),
        )

    async def _enrich_bounded(
        self, semaphore: asyncio.Semaphore, result: TestResult, run: WorkflowRun
    ) -> TestResult:
        if result.status != "completed":
            return result
        async with semaphore:
            return await self._enrich(result, run)

    async def _enrich(self, result: TestResult, run: WorkflowRun) -> TestResult:
        """Layer artifact metrics over title metadata.

        Artifact values win where both are present. Any failure leaves the
        result as it was.
        """
        try:
            payload = await self._fetch_results(result.test_id, run.id)
        except UpstreamError as exc:
            log.warning("Could not fetch results for run %s: %s", run.id, exc)
            return result
        if payload is None:
            return result

        try:
            artifact = ArtifactResults.model_validate(payload)
        except pydantic.ValidationError as exc:
            log.warning("Unexpected results payload for run %s: %s", run.id, exc)
            return result

        metadata = parse_metadata(run_title(run))
        return result.model_copy(update=merge_layers(metadata, artifact))

    async def _fetch_results(self, test_id: str, run_id: int) -> dict[str, Any] | None:
        artifacts = await self.engine.list_artifacts(run_id)
        artifact = next((a for a in artifacts if test_id in a.name), None)
        if artifact is None:
            log.info("No results artifact for test %s in run %s", test_id, run_id)
            return None
        if artifact.expired:
            log.info("Results artifact %s of run %s has expired", artifact.id, run_id)
            return None

        data = await self.engine.download_artifact(artifact.id)
        return extract_results(data)

    def _process_results(
        self,
        base_results: Sequence[TestResult],
        outcomes: Sequence[TestResult | BaseException],
    ) -> Sequence[TestResult]:
        """Pair enrichment outcomes with their runs, keeping failures as-is."""
        final_results: list[TestResult] = []

        for base, outcome in zip(base_results, outcomes, strict=True):
            if isinstance(outcome, TestResult):
                final_results.append(outcome)
            elif isinstance(outcome, Exception):
                log.error(
                    "Enriching test %s failed: %s",
                    base.test_id,
                    outcome,
                    exc_info=outcome,
                )
                final_results.append(base)
            else:
                raise outcome

        return final_results
