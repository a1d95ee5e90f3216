"""Action queue item model (``/api/actions``)."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from trailerfleet.ingestion.normalize import safe_int
from trailerfleet.models._base import FleetBaseModel, OptRecordId, RecordId, Timestamp

#: Priority assigned to items the backend sent without one; sorts after
#: every explicitly prioritized item.
DEFAULT_ACTION_PRIORITY = 1000


class ActionItem(FleetBaseModel):
    """An operational issue awaiting human acknowledgement.

    Lower ``priority`` numbers are more urgent. ``acknowledged_at`` is
    only ever set by the backend; this library never derives or clears
    it.
    """

    key: RecordId = Field(default="", validation_alias=AliasChoices("key", "id"))
    priority: int = DEFAULT_ACTION_PRIORITY
    category: str = ""
    title: str = ""
    site_id: OptRecordId = None
    job_site_id: OptRecordId = None
    created_at: Timestamp = None
    acknowledged_at: Timestamp = None
    acknowledged_by: str | None = None

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value: Any) -> int:
        parsed = safe_int(value)
        return DEFAULT_ACTION_PRIORITY if parsed is None else parsed

    @property
    def acknowledged(self) -> bool:
        return self.acknowledged_at is not None
