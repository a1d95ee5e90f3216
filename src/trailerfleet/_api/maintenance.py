"""Maintenance endpoints.

Endpoints:
  - /api/maintenance/calendar?start=&end=&technician_id=
  - /api/maintenance/{id} (PUT)
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from trailerfleet._api._common import api_path, get_collection, parse_object, send_json
from trailerfleet._transport import Transport
from trailerfleet.ingestion.normalize import to_epoch_ms
from trailerfleet.models.maintenance import MaintenanceLog, MaintenanceStatus


async def fetch_maintenance_calendar(
    transport: Transport,
    start: datetime,
    end: datetime,
    *,
    technician_id: str | None = None,
) -> list[MaintenanceLog]:
    """Visits scheduled or completed between *start* and *end*."""
    if end < start:
        raise ValueError("end must not be before start")
    params: dict[str, Any] = {
        "start": to_epoch_ms(start),
        "end": to_epoch_ms(end),
        "technician_id": technician_id,
    }
    return await get_collection(
        transport,
        api_path("maintenance", "calendar"),
        MaintenanceLog,
        "logs",
        params=params,
    )


async def update_maintenance_log(
    transport: Transport,
    log_id: str,
    *,
    status: MaintenanceStatus | str | None = None,
    completed_date: datetime | None = None,
    **fields: Any,
) -> MaintenanceLog | None:
    """Update a visit; returns the updated log when the backend echoes it."""
    payload: dict[str, Any] = {key: value for key, value in fields.items() if value is not None}
    if status is not None:
        parsed = MaintenanceStatus(status)
        if parsed is MaintenanceStatus.UNKNOWN:
            raise ValueError(f"Unknown maintenance status {status!r}")
        payload["status"] = parsed.value
    if completed_date is not None:
        payload["completed_date"] = to_epoch_ms(completed_date)
    if not payload:
        raise ValueError("update_maintenance_log needs at least one field to change")

    endpoint = api_path("maintenance", log_id)
    body = await send_json(transport, "PUT", endpoint, payload=payload)
    log = body.get("log") if isinstance(body, Mapping) else None
    if isinstance(log, Mapping):
        return parse_object(endpoint, MaintenanceLog, log)
    return None
