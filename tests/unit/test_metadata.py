"""Tests for run title metadata parsing."""

import pytest

from load_test_panel.metadata import parse_metadata, run_title
from load_test_panel.models.result import EmbeddedMetadata
from load_test_panel.testing.factories import WorkflowRunFactory

INBOX_ID = "4f2a9c1be07d3a5f6c8e9b0a1d2c3e4f5a6b7c8d9e0f1a2b3c4d5e6f7a8b9c0d"


def test_parses_all_labels() -> None:
    """Extracts network, groups and inbox ID from a full title."""
    title = f"Test test_1_abc | Network: production | Groups: 10 | Inbox: {INBOX_ID}"

    metadata = parse_metadata(title)

    assert metadata == EmbeddedMetadata(
        network="production", groups=10, inbox_id=INBOX_ID
    )


def test_captures_full_inbox_id() -> None:
    """Captures the whole 64 character inbox ID, not an 8 character prefix."""
    metadata = parse_metadata(f"Inbox: {INBOX_ID}")

    assert metadata.inbox_id == INBOX_ID
    assert len(metadata.inbox_id) == 64


def test_inbox_id_stops_at_non_hex() -> None:
    """Stops the inbox ID capture at the first non-hex character."""
    metadata = parse_metadata("Inbox: abc123 | Network: dev")

    assert metadata.inbox_id == "abc123"
    assert metadata.network == "dev"


@pytest.mark.parametrize("title", ["", None, "XMTP Load Test", "Network dev Groups 3"])
def test_returns_empty_record_without_labels(title: str | None) -> None:
    """Returns an empty record when no label is present."""
    assert parse_metadata(title) == EmbeddedMetadata()


def test_labels_are_independent() -> None:
    """Parses each label on its own, in any order."""
    metadata = parse_metadata("Groups:7 | run by bot")

    assert metadata == EmbeddedMetadata(groups=7)


def test_allows_whitespace_after_colon() -> None:
    """Accepts any amount of whitespace after the label."""
    metadata = parse_metadata("Network:   local  Groups:\t25")

    assert metadata.network == "local"
    assert metadata.groups == 25


class TestRunTitle:
    """Tests for run_title."""

    def test_prefers_run_name(self) -> None:
        """Uses the run name when present."""
        run = WorkflowRunFactory.build(name="Network: dev", display_title="other")

        assert run_title(run) == "Network: dev"

    def test_falls_back_to_display_title(self) -> None:
        """Uses the display title when the run has no name."""
        run = WorkflowRunFactory.build(name=None, display_title="Groups: 3")

        assert run_title(run) == "Groups: 3"

    def test_returns_empty_string_without_titles(self) -> None:
        """Returns an empty string when neither title is set."""
        run = WorkflowRunFactory.build(name="", display_title="")

        assert run_title(run) == ""
