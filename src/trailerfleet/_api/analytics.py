"""Analytics endpoints.

Endpoints:
  - /api/analytics/fleet?days=
  - /api/analytics/rankings?days=
  - /api/analytics/job-sites/{id}?days=
  - /api/analytics/backfill?days= (POST)

``days`` must be one of 7, 30 or 90.
"""

from __future__ import annotations

from trailerfleet._api._common import api_path, get_collection, get_json, parse_object, send_json
from trailerfleet._constants import validate_days
from trailerfleet._transport import Transport
from trailerfleet.models.analytics import DailyMetricPoint, FleetAnalytics, SiteRanking
from trailerfleet.models.settings import BackfillResult


async def fetch_fleet_analytics(transport: Transport, days: int) -> FleetAnalytics:
    endpoint = api_path("analytics", "fleet")
    body = await get_json(transport, endpoint, params={"days": validate_days(days)})
    return parse_object(endpoint, FleetAnalytics, body)


async def fetch_rankings(transport: Transport, days: int) -> list[SiteRanking]:
    return await get_collection(
        transport,
        api_path("analytics", "rankings"),
        SiteRanking,
        "rankings",
        params={"days": validate_days(days)},
    )


async def fetch_job_site_analytics(transport: Transport, job_site_id: str, days: int) -> list[DailyMetricPoint]:
    """Daily metrics for one job site, oldest first, with gaps on days without data."""
    return await get_collection(
        transport,
        api_path("analytics", "job-sites", job_site_id),
        DailyMetricPoint,
        "data",
        params={"days": validate_days(days)},
    )


async def backfill_analytics(transport: Transport, days: int) -> BackfillResult:
    """Recompute daily metrics for the last *days* days."""
    endpoint = api_path("analytics", "backfill")
    body = await send_json(transport, "POST", endpoint, params={"days": validate_days(days)})
    return parse_object(endpoint, BackfillResult, body or {})
