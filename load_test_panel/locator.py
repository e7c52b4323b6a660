"""Correlate a test identifier with the workflow run that executes it.

GitHub stores no structured link between a dispatch request and the run it
creates. The identifier only shows up in free text (the run name, its
display title, or the commit message), and early in a run's life not even
there. Matching is therefore a heuristic join, in this priority:

1. identifier in the run name
2. identifier in the display title
3. identifier in the head commit message (status lookups only)
4. a ``workflow_dispatch`` run created within the recency window

Candidates are examined in the order given, which is newest first as
returned by the API, and the first candidate meeting any criterion wins.
Two tests dispatched within the same window cannot be told apart by the
last criterion; the newest run is taken.
"""

import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from load_test_panel.providers.github_actions.models import WorkflowRun

log = logging.getLogger(__name__)

MANUAL_DISPATCH_EVENT = "workflow_dispatch"


class MatchReason(enum.Enum):
    """Why a run was correlated with an identifier, highest priority first."""

    TITLE = "title"
    DISPLAY_TITLE = "display_title"
    COMMIT_MESSAGE = "commit_message"
    RECENT_DISPATCH = "recent_dispatch"


@dataclass(frozen=True, kw_only=True)
class MatchRules:
    """Criteria that differ between lookups."""

    recency_window: timedelta
    match_commit_message: bool = True


STATUS_LOOKUP = MatchRules(recency_window=timedelta(minutes=15))
CANCEL_LOOKUP = MatchRules(
    recency_window=timedelta(minutes=30), match_commit_message=False
)


def match_reason(
    test_id: str, run: WorkflowRun, now: datetime, rules: MatchRules
) -> MatchReason | None:
    """Return the highest priority criterion the run meets, if any."""
    if run.name and test_id in run.name:
        return MatchReason.TITLE
    if test_id in run.display_title:
        return MatchReason.DISPLAY_TITLE
    if (
        rules.match_commit_message
        and run.head_commit is not None
        and run.head_commit.message
        and test_id in run.head_commit.message
    ):
        return MatchReason.COMMIT_MESSAGE
    if is_recent_dispatch(run, now, rules.recency_window):
        return MatchReason.RECENT_DISPATCH
    return None


def locate(
    test_id: str,
    candidates: Iterable[WorkflowRun],
    now: datetime,
    rules: MatchRules = STATUS_LOOKUP,
) -> WorkflowRun | None:
    """Find the run correlated with a test identifier.

    Args:
        test_id: Client generated test identifier
        candidates: Runs to search, newest first
        now: Reference time for the recency window
        rules: Lookup specific matching rules

    Returns:
        The first matching run, or None

    """
    for run in candidates:
        if (reason := match_reason(test_id, run, now, rules)) is not None:
            log.info(
                "Located run %s for test %s (matched by %s)",
                run.id,
                test_id,
                reason.value,
            )
            return run
    return None


def latest_dispatch(
    candidates: Sequence[WorkflowRun], now: datetime, window: timedelta
) -> WorkflowRun | None:
    """Return the most recently created manual dispatch younger than window."""
    recent = [run for run in candidates if is_recent_dispatch(run, now, window)]
    if not recent:
        return None
    return max(recent, key=lambda run: run.created_at or now)


def is_recent_dispatch(run: WorkflowRun, now: datetime, window: timedelta) -> bool:
    """Check if a run was manually dispatched less than window ago."""
    if run.event != MANUAL_DISPATCH_EVENT or run.created_at is None:
        return False
    return now - run.created_at < window
