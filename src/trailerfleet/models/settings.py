"""Settings and administrative operation results."""

from __future__ import annotations

from trailerfleet.models._base import FleetBaseModel, OptInt


class FleetSettings(FleetBaseModel):
    """Data retention settings and database statistics (``/api/settings``)."""

    retention_days: OptInt = None
    db_size_bytes: OptInt = None
    snapshot_count: OptInt = None
    db_status: str | None = None

    @property
    def db_connected(self) -> bool:
        return (self.db_status or "").lower() == "connected"


class PurgeResult(FleetBaseModel):
    db_size_bytes: OptInt = None
    snapshot_count: OptInt = None


class ReclusterResult(FleetBaseModel):
    job_site_count: OptInt = None
    assignments: OptInt = None


class BackfillResult(FleetBaseModel):
    rows_computed: OptInt = None
    days_processed: OptInt = None
