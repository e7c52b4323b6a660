"""Models for reconciled load test results."""

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    computed_field,
)

from load_test_panel.models.base import Model

type CanonicalStatus = Literal["running", "completed", "failed"]


def _none_if_invalid(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


# A malformed metric drops only that field, never the whole payload.
LenientInt = Annotated[int | None, WrapValidator(_none_if_invalid)]
LenientFloat = Annotated[float | None, WrapValidator(_none_if_invalid)]
LenientStr = Annotated[str | None, WrapValidator(_none_if_invalid)]


class EmbeddedMetadata(Model):
    """Configuration fields parsed out of a run title.

    Every field is optional; None means the title did not encode it.
    """

    network: str | None = None
    groups: int | None = None
    inbox_id: str | None = None


class ArtifactResults(Model):
    """Metrics payload found inside a result artifact."""

    model_config = ConfigDict(extra="ignore")

    total_messages: LenientInt = None
    messages_per_second: LenientFloat = None
    groups: LenientInt = None
    dms: LenientInt = None
    network: LenientStr = None
    inbox_id: LenientStr = None


class TestResult(Model):
    """Canonical, stable-shape record for one load test."""

    __test__ = False

    test_id: str
    status: CanonicalStatus
    run_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    github_url: str | None = None
    conclusion: str | None = None
    failure_reason: str | None = None
    message: str | None = Field(
        default=None, description="Placeholder text while no run is visible"
    )

    total_messages: int | None = None
    messages_per_second: float | None = None
    dms: int | None = None

    network: str | None = None
    groups: int | None = None
    inbox_id: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> int | None:
        """Whole seconds between start and end, if both are known."""
        if self.start_time is None or self.end_time is None:
            return None
        seconds = (self.end_time - self.start_time).total_seconds()
        if seconds < 0:
            return None
        return math.floor(seconds)


class CancelResponse(Model):
    """Outcome of a successful cancellation."""

    success: bool = True
    test_id: str
    workflow_id: int
    message: str = "Test cancelled successfully"


def merge_layers(*layers: Model) -> dict[str, Any]:
    """Merge model fields left to right into a single update mapping.

    A later layer overrides an earlier one only where it carries a value,
    so artifact metrics win over title metadata without erasing fields the
    artifact does not report.
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        values: Mapping[str, Any] = layer.model_dump()
        merged.update(
            {key: value for key, value in values.items() if value is not None}
        )
    return merged
