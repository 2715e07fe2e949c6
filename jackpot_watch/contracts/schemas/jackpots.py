from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FeedResult(_CamelModel):
    """One feed's normalized reading for a single run."""

    feed_id: str
    display_amount: str
    amount_millions: float = Field(default=0.0, ge=0)
    next_event_label: str
    error_message: str | None = None

    @property
    def has_error(self) -> bool:
        return self.error_message is not None


class AnnotatedResult(FeedResult):
    exceeds_threshold: bool = False


class ThresholdInfo(_CamelModel):
    amount: float
    display: str
    exceeded: bool
    exceeding_feed_ids: list[str] = Field(default_factory=list)


class SnapshotResponse(_CamelModel):
    timestamp: str
    mega_millions: AnnotatedResult
    powerball: AnnotatedResult
    threshold: ThresholdInfo


class ErrorResponse(BaseModel):
    error: str
