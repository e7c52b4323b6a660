"""Parse configuration metadata embedded in workflow run titles.

The load test workflow names its runs like::

    Test test_1700000000000_abc123def | Network: dev | Groups: 10 | Inbox: 4f2a...

Each label is scanned independently; a missing label leaves the field unset.
"""

import re

from load_test_panel.models.result import EmbeddedMetadata
from load_test_panel.providers.github_actions.models import WorkflowRun

NETWORK_PATTERN = re.compile(r"Network:\s*(\w+)")
GROUPS_PATTERN = re.compile(r"Groups:\s*(\d+)")
# The whole contiguous hex run; inbox IDs are 64 characters long.
INBOX_PATTERN = re.compile(r"Inbox:\s*([a-f0-9]+)")


def parse_metadata(title: str | None) -> EmbeddedMetadata:
    """Extract network, group count and inbox ID from a run title."""
    if not title:
        return EmbeddedMetadata()

    network = groups = inbox_id = None
    if match := NETWORK_PATTERN.search(title):
        network = match.group(1)
    if match := GROUPS_PATTERN.search(title):
        groups = int(match.group(1))
    if match := INBOX_PATTERN.search(title):
        inbox_id = match.group(1)

    return EmbeddedMetadata(network=network, groups=groups, inbox_id=inbox_id)


def run_title(run: WorkflowRun) -> str:
    """Title carrying the metadata: the run name, else its display title."""
    return run.name or run.display_title or ""
