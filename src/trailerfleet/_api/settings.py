"""Settings endpoints.

Endpoints:
  - /api/settings (GET/PUT)
  - /api/settings/purge (POST)
"""

from __future__ import annotations

from trailerfleet._api._common import api_path, get_json, parse_object, send_json
from trailerfleet._transport import Transport
from trailerfleet.models.settings import FleetSettings, PurgeResult


async def fetch_settings(transport: Transport) -> FleetSettings:
    endpoint = api_path("settings")
    return parse_object(endpoint, FleetSettings, await get_json(transport, endpoint))


async def update_settings(transport: Transport, *, retention_days: int) -> FleetSettings:
    """Change the snapshot retention period; returns the stored settings."""
    if retention_days <= 0:
        raise ValueError(f"retention_days must be positive, got {retention_days}")
    endpoint = api_path("settings")
    body = await send_json(transport, "PUT", endpoint, payload={"retention_days": retention_days})
    return parse_object(endpoint, FleetSettings, body)


async def purge_data(transport: Transport) -> PurgeResult:
    """Delete snapshots older than the retention period."""
    endpoint = api_path("settings", "purge")
    body = await send_json(transport, "POST", endpoint)
    return parse_object(endpoint, PurgeResult, body)
