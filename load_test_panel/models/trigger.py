"""Models for dispatching a load test."""

import re
from collections.abc import Mapping
from typing import Any

import pydantic
from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from load_test_panel.errors import ValidationError
from load_test_panel.models.base import Model

INBOX_ID_PATTERN = re.compile(r"^[a-f0-9]{64}$", re.IGNORECASE)


class TriggerRequest(Model):
    """Load test parameters submitted by the control panel.

    Numeric parameters are forwarded to the workflow as strings, which is
    the only input type workflow_dispatch accepts. Blank values fall back to
    the defaults.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")

    inbox_id: str = Field(..., description="64 character hex inbox ID")
    test_id: str = Field(..., description="Client generated test identifier")
    network: str = Field(default="dev", description="Target network")
    duration: str = Field(default="30", description="Test duration in seconds")
    num_groups: str = Field(default="5", description="Number of groups to create")
    num_dms: str = Field(default="5", description="Number of DMs to create")
    interval: str = Field(default="1", description="Seconds between batches")
    messages_per_batch: str = Field(default="3", description="Messages per batch")
    existing_inbox_ids: str = Field(default="", description="Comma-separated IDs")
    existing_group_names: str = Field(default="", description="Comma-separated names")

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {
                key: value for key, value in data.items() if value not in (None, "")
            }
        return data

    @field_validator("inbox_id")
    @classmethod
    def _check_inbox_id(cls, value: str) -> str:
        if not INBOX_ID_PATTERN.match(value):
            raise PydanticCustomError("inbox_id_format", "Invalid inbox ID format")
        return value.lower()

    @classmethod
    def from_payload(cls, payload: Any) -> "TriggerRequest":
        """Validate a raw request body.

        Raises:
            ValidationError: If required fields are missing or malformed

        """
        try:
            return cls.model_validate(payload)
        except pydantic.ValidationError as exc:
            errors = exc.errors()
            if any(error["type"] == "missing" for error in errors):
                raise ValidationError("Missing required fields") from exc
            raise ValidationError("; ".join(error["msg"] for error in errors)) from exc

    def workflow_inputs(self) -> dict[str, str]:
        """Inputs for the workflow_dispatch request, keyed as the workflow expects."""
        return self.model_dump(by_alias=False)


class TriggerResponse(Model):
    """Outcome of a successful dispatch."""

    success: bool = True
    test_id: str
    message: str = "Test started successfully"
