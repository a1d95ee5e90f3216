"""Action queue endpoints.

Endpoints:
  - /api/actions
  - /api/actions/{key}/acknowledge (POST)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from trailerfleet._api._common import api_path, get_collection, parse_object, send_json
from trailerfleet._transport import Transport
from trailerfleet.models.actions import ActionItem


async def fetch_actions(transport: Transport) -> list[ActionItem]:
    return await get_collection(transport, api_path("actions"), ActionItem, "actions")


async def acknowledge_action(
    transport: Transport,
    key: str,
    *,
    acknowledged_by: str | None = None,
) -> ActionItem | None:
    """Acknowledge an action item; returns it when the backend echoes it."""
    endpoint = api_path("actions", key, "acknowledge")
    payload: dict[str, Any] = {}
    if acknowledged_by is not None:
        payload["acknowledged_by"] = acknowledged_by
    body = await send_json(transport, "POST", endpoint, payload=payload)
    action = body.get("action") if isinstance(body, Mapping) else None
    if isinstance(action, Mapping):
        return parse_object(endpoint, ActionItem, action)
    return None
