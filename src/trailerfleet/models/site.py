"""Trailer (site) models: inventory, battery/solar snapshot, gateway status."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from trailerfleet.models._base import (
    Flag,
    FleetBaseModel,
    OptFloat,
    OptInt,
    RecordId,
    Timestamp,
)


class Site(FleetBaseModel):
    """A trailer installation as listed by ``/api/sites``.

    The inventory endpoint proxies the upstream monitoring portal, which
    calls the identifier ``idSite``; other endpoints use ``site_id``.
    """

    site_id: RecordId = Field(default="", validation_alias=AliasChoices("site_id", "idSite", "id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "site_name"))
    identifier: str | None = None
    """Upstream portal identifier (gateway serial)."""
    last_timestamp: Timestamp = Field(default=None, validation_alias=AliasChoices("last_timestamp", "last_timestamp_ms"))


class SiteSnapshot(FleetBaseModel):
    """Latest battery/solar telemetry for one trailer (``/api/fleet/latest``)."""

    site_id: RecordId = Field(default="", validation_alias=AliasChoices("site_id", "idSite"))
    site_name: str = ""
    timestamp: Timestamp = None
    battery_soc: OptFloat = None
    """State of charge, percent."""
    battery_voltage: OptFloat = None
    battery_current: OptFloat = None
    battery_temp: OptFloat = None
    battery_power: OptFloat = None
    solar_watts: OptFloat = None
    solar_yield_today: OptFloat = None
    """Solar yield so far today, kWh."""
    solar_yield_yesterday: OptFloat = None
    charge_state: str | None = None


class PepwaveStatus(FleetBaseModel):
    """Cellular gateway status for one trailer, keyed by device name."""

    name: str = Field(default="", validation_alias=AliasChoices("name", "device_name"))
    online: Flag = False
    signal_bar: OptInt = None
    rsrp: OptFloat = None
    rsrq: OptFloat = None
    rssi: OptFloat = None
    sinr: OptFloat = None
    carrier: str | None = None
    technology: str | None = None
    usage_mb: OptFloat = None
    client_count: OptInt = None
    uptime: OptInt = None
    """Seconds since the gateway booted."""
    timestamp: Timestamp = None


class TrailerRecord(FleetBaseModel):
    """Canonical per-trailer record joining inventory and both telemetry feeds.

    ``snapshot`` is joined on ``site_id``; ``pepwave`` on the trailer
    name. Either is ``None`` when there is no recent data.
    """

    site_id: RecordId = ""
    name: str = ""
    snapshot: SiteSnapshot | None = None
    pepwave: PepwaveStatus | None = None

    @property
    def battery_soc(self) -> float | None:
        return self.snapshot.battery_soc if self.snapshot is not None else None

    @property
    def solar_watts(self) -> float | None:
        return self.snapshot.solar_watts if self.snapshot is not None else None

    @property
    def rsrp(self) -> float | None:
        return self.pepwave.rsrp if self.pepwave is not None else None
