"""Maintenance log model (``/api/maintenance``)."""

from __future__ import annotations

from pydantic import Field

from trailerfleet.models._base import FleetBaseModel, FleetStrEnum, OptFloat, OptRecordId, RecordId, Timestamp


class MaintenanceStatus(FleetStrEnum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class VisitType(FleetStrEnum):
    INSPECTION = "inspection"
    REPAIR = "repair"
    SCHEDULED = "scheduled"
    EMERGENCY = "emergency"
    INSTALLATION = "installation"
    DECOMMISSION = "decommission"
    UNKNOWN = "unknown"


class MaintenanceLog(FleetBaseModel):
    """A scheduled or completed maintenance visit."""

    id: RecordId = ""
    job_site_id: OptRecordId = None
    job_site_name: str | None = None
    site_id: OptRecordId = None
    trailer_name: str | None = None
    visit_type: VisitType = VisitType.UNKNOWN
    status: MaintenanceStatus = MaintenanceStatus.SCHEDULED
    title: str = ""
    description: str | None = None
    technician: str | None = None
    technician_id: OptRecordId = None
    scheduled_date: Timestamp = None
    completed_date: Timestamp = None
    created_at: Timestamp = None
    labor_hours: OptFloat = None
    labor_cost_cents: OptFloat = None
    parts_cost_cents: OptFloat = None
    parts_used: list[dict[str, object]] = Field(default_factory=list)
