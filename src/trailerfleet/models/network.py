"""Cellular gateway (network) device model for ``/api/fleet/network``."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from trailerfleet.models._base import Flag, FleetBaseModel, OptFloat, OptInt, RecordId, Timestamp


class SignalInfo(FleetBaseModel):
    bar: OptInt = Field(default=None, validation_alias=AliasChoices("bar", "signal_bar"))
    rsrp: OptFloat = None
    rsrq: OptFloat = None
    rssi: OptFloat = None
    sinr: OptFloat = None


class CellularInfo(FleetBaseModel):
    carrier: str | None = Field(default=None, validation_alias=AliasChoices("carrier", "carrier_name"))
    technology: str | None = None
    signal: SignalInfo | None = None


class NetworkDevice(FleetBaseModel):
    """A cellular gateway as reported by the network feed.

    The network feed identifies devices by their configured name, which
    matches the trailer name rather than the trailer's ``site_id``.
    """

    id: RecordId = Field(default="", validation_alias=AliasChoices("id", "sn", "serial"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "device_name"))
    online: Flag = False
    usage_mb: OptFloat = None
    uptime: OptInt = None
    client_count: OptInt = None
    wan_ip: str | None = None
    last_online: Timestamp = None
    cellular: CellularInfo | None = None

    @property
    def rsrp(self) -> float | None:
        if self.cellular is None or self.cellular.signal is None:
            return None
        return self.cellular.signal.rsrp

    @property
    def carrier(self) -> str | None:
        return self.cellular.carrier if self.cellular is not None else None
