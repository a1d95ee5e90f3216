"""Job site models (``/api/job-sites``)."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from trailerfleet.models._base import Flag, FleetBaseModel, OptFloat, OptInt, RecordId, Timestamp
from trailerfleet.models.site import PepwaveStatus, SiteSnapshot
from trailerfleet.models.status import OptStatus


class JobSiteTrailer(FleetBaseModel):
    """A trailer embedded in a job site's ``trailers`` array.

    ``site_id`` joins against battery/energy feeds, ``site_name``
    against the network feed.
    """

    site_id: RecordId = ""
    site_name: str = Field(default="", validation_alias=AliasChoices("site_name", "name"))
    manual_override: Flag = False
    latitude: OptFloat = None
    longitude: OptFloat = None
    snapshot: SiteSnapshot | None = None
    pepwave: PepwaveStatus | None = None


class JobSite(FleetBaseModel):
    """A physical location grouping one or more trailers.

    Summary fields (``avg_soc`` ... ``net_total``) are filled in by the
    list endpoint; the detail endpoint embeds snapshots per trailer
    instead.
    """

    id: RecordId = Field(default="", validation_alias=AliasChoices("id", "job_site_id"))
    name: str = ""
    status: str = "active"
    address: str | None = None
    notes: str | None = None
    latitude: OptFloat = None
    longitude: OptFloat = None
    created_at: Timestamp = None
    updated_at: Timestamp = None
    trailers: list[JobSiteTrailer] = Field(default_factory=list)

    trailer_count: OptInt = None
    trailers_online: OptInt = None
    avg_soc: OptFloat = None
    min_soc: OptFloat = None
    total_solar_watts: OptFloat = None
    worst_status: OptStatus = None
    net_online: OptInt = None
    net_total: OptInt = None

    @property
    def is_active(self) -> bool:
        return self.status.strip().lower() == "active"

    @property
    def member_count(self) -> int:
        """Number of trailers, preferring the server-side count."""
        if self.trailer_count is not None:
            return self.trailer_count
        return len(self.trailers)
