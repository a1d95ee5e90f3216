"""Job site endpoints.

Endpoints:
  - /api/job-sites (list with per-site summaries)
  - /api/job-sites/{id} (detail with embedded trailer snapshots; PUT to edit)
  - /api/job-sites/recluster
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from trailerfleet._api._common import api_path, get_collection, get_json, parse_object, send_json
from trailerfleet._transport import Transport
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.settings import ReclusterResult

_logger = logging.getLogger(__name__)


def _job_site_body(body: Any) -> Any:
    if isinstance(body, Mapping) and isinstance(body.get("job_site"), Mapping):
        return body["job_site"]
    return body


async def fetch_job_sites(transport: Transport) -> list[JobSite]:
    return await get_collection(transport, api_path("job-sites"), JobSite, "job_sites")


async def fetch_job_site(transport: Transport, job_site_id: str) -> JobSite:
    endpoint = api_path("job-sites", job_site_id)
    body = await get_json(transport, endpoint)
    return parse_object(endpoint, JobSite, _job_site_body(body))


async def update_job_site(
    transport: Transport,
    job_site_id: str,
    *,
    name: str | None = None,
    status: str | None = None,
    **fields: Any,
) -> JobSite | None:
    """Rename a job site or change its status.

    Returns the updated job site when the backend echoes it back.
    """
    payload: dict[str, Any] = {key: value for key, value in fields.items() if value is not None}
    if name is not None:
        payload["name"] = name
    if status is not None:
        payload["status"] = status
    if not payload:
        raise ValueError("update_job_site needs at least one field to change")

    endpoint = api_path("job-sites", job_site_id)
    _logger.debug("Updating job site %s: %s", job_site_id, sorted(payload))
    body = await send_json(transport, "PUT", endpoint, payload=payload)
    updated = _job_site_body(body)
    if isinstance(updated, Mapping) and ("id" in updated or "job_site_id" in updated):
        return parse_object(endpoint, JobSite, updated)
    return None


async def recluster_job_sites(transport: Transport) -> ReclusterResult:
    """Recompute automatic trailer → job site assignments."""
    endpoint = api_path("job-sites", "recluster")
    body = await send_json(transport, "POST", endpoint)
    return parse_object(endpoint, ReclusterResult, body or {})
