"""Tests for load test dispatch models."""

from typing import Any

import pytest

from load_test_panel.errors import ValidationError
from load_test_panel.models.trigger import TriggerRequest, TriggerResponse

INBOX_ID = "4f2a9c1be07d3a5f6c8e9b0a1d2c3e4f5a6b7c8d9e0f1a2b3c4d5e6f7a8b9c0d"


def payload(**overrides: Any) -> dict[str, Any]:
    """Minimal valid trigger payload with camelCase keys."""
    return {"inboxId": INBOX_ID, "testId": "test_1_abc", **overrides}


def test_applies_defaults() -> None:
    """Fills every optional parameter with its default."""
    request = TriggerRequest.from_payload(payload())

    assert request.workflow_inputs() == {
        "inbox_id": INBOX_ID,
        "test_id": "test_1_abc",
        "network": "dev",
        "duration": "30",
        "num_groups": "5",
        "num_dms": "5",
        "interval": "1",
        "messages_per_batch": "3",
        "existing_inbox_ids": "",
        "existing_group_names": "",
    }


def test_forwards_numbers_as_strings() -> None:
    """Converts numeric parameters to their string form."""
    request = TriggerRequest.from_payload(
        payload(duration=120, numGroups=10, interval=0.5, network="production")
    )

    inputs = request.workflow_inputs()
    assert inputs["duration"] == "120"
    assert inputs["num_groups"] == "10"
    assert inputs["interval"] == "0.5"
    assert inputs["network"] == "production"


def test_blank_values_use_defaults() -> None:
    """Treats empty and null values as absent."""
    request = TriggerRequest.from_payload(payload(network="", numDms=None))

    assert request.network == "dev"
    assert request.num_dms == "5"


def test_normalizes_inbox_id_case() -> None:
    """Accepts uppercase hex and forwards it lowercased."""
    request = TriggerRequest.from_payload(payload(inboxId=INBOX_ID.upper()))

    assert request.inbox_id == INBOX_ID


def test_accepts_snake_case_keys() -> None:
    """Accepts field names as well as camelCase keys."""
    request = TriggerRequest.from_payload(
        {"inbox_id": INBOX_ID, "test_id": "test_1_abc", "num_groups": 2}
    )

    assert request.num_groups == "2"


@pytest.mark.parametrize(
    "body",
    [
        {"testId": "test_1_abc"},
        {"inboxId": INBOX_ID},
        {"inboxId": "", "testId": "test_1_abc"},
        {},
    ],
)
def test_missing_required_fields(body: dict[str, Any]) -> None:
    """Rejects payloads without an inbox ID or test ID."""
    with pytest.raises(ValidationError, match="Missing required fields"):
        TriggerRequest.from_payload(body)


@pytest.mark.parametrize(
    "inbox_id",
    [
        INBOX_ID[:63],
        INBOX_ID + "0",
        "g" * 64,
        f" {INBOX_ID[1:]}",
    ],
    ids=["63-chars", "65-chars", "non-hex", "whitespace"],
)
def test_rejects_malformed_inbox_id(inbox_id: str) -> None:
    """Rejects inbox IDs that are not exactly 64 hex characters."""
    with pytest.raises(ValidationError, match="Invalid inbox ID format"):
        TriggerRequest.from_payload(payload(inboxId=inbox_id))


def test_rejects_non_object_payload() -> None:
    """Rejects bodies that are not JSON objects."""
    with pytest.raises(ValidationError):
        TriggerRequest.from_payload(["not", "an", "object"])


def test_response_serialization() -> None:
    """Serializes the dispatch acknowledgement with camelCase keys."""
    response = TriggerResponse(test_id="test_1_abc")

    assert response.to_json_dict() == {
        "success": True,
        "testId": "test_1_abc",
        "message": "Test started successfully",
    }
