"""Fleet inventory and telemetry endpoints.

Endpoints:
  - /api/sites
  - /api/fleet/latest
  - /api/fleet/combined
  - /api/fleet/energy
  - /api/fleet/alerts
  - /api/fleet/network
  - /api/fleet/intelligence
"""

from __future__ import annotations

import logging

from trailerfleet._api._common import api_path, get_collection, get_json, parse_object
from trailerfleet._transport import Transport
from trailerfleet.ingestion.records import parse_pepwave_map
from trailerfleet.models.analytics import FleetIntelligence
from trailerfleet.models.energy import EnergyAlert, EnergySite
from trailerfleet.models.network import NetworkDevice
from trailerfleet.models.site import PepwaveStatus, Site, SiteSnapshot

_logger = logging.getLogger(__name__)


async def fetch_sites(transport: Transport) -> list[Site]:
    """Trailer inventory."""
    return await get_collection(transport, api_path("sites"), Site)


async def fetch_fleet_latest(transport: Transport) -> list[SiteSnapshot]:
    """Latest battery/solar snapshot per trailer."""
    return await get_collection(transport, api_path("fleet", "latest"), SiteSnapshot)


async def fetch_fleet_combined(transport: Transport) -> dict[str, PepwaveStatus]:
    """Gateway status keyed by device (trailer) name."""
    body = await get_json(transport, api_path("fleet", "combined"))
    pepwave = parse_pepwave_map(body)
    _logger.debug("Combined feed returned %d gateways", len(pepwave))
    return pepwave


async def fetch_fleet_energy(transport: Transport) -> list[EnergySite]:
    """Daily yield/consumption series per trailer."""
    return await get_collection(transport, api_path("fleet", "energy"), EnergySite)


async def fetch_fleet_alerts(transport: Transport) -> list[EnergyAlert]:
    """Trailers in an energy deficit streak."""
    return await get_collection(transport, api_path("fleet", "alerts"), EnergyAlert, "alerts")


async def fetch_fleet_network(transport: Transport) -> list[NetworkDevice]:
    """Cellular gateways with signal and usage."""
    return await get_collection(transport, api_path("fleet", "network"), NetworkDevice, "devices")


async def fetch_fleet_intelligence(transport: Transport) -> FleetIntelligence:
    """Per-trailer solar/battery indicators plus a fleet summary."""
    endpoint = api_path("fleet", "intelligence")
    body = await get_json(transport, endpoint)
    return parse_object(endpoint, FleetIntelligence, body)
