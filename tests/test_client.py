from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest

from trailerfleet.client import FleetClient
from trailerfleet.config import FleetConfig, PollIntervals
from trailerfleet.exceptions import FleetApiError, FleetError, FleetResponseError
from trailerfleet.models.maintenance import MaintenanceStatus
from trailerfleet.polling import write_then_refetch


@dataclass
class FakeFleetBackend:
    calls: list[tuple[str, str, dict[str, Any] | None, dict[str, Any] | None]] = field(default_factory=list)
    acknowledged: set[str] = field(default_factory=set)
    fail_alerts: bool = False

    def count(self, method: str, endpoint: str) -> int:
        return sum(1 for call in self.calls if call[0] == method and call[1] == endpoint)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        self.calls.append((method, endpoint, dict(params) if params else None, dict(payload) if payload else None))
        await asyncio.sleep(0)

        if (method, endpoint) == ("GET", "/api/sites"):
            return {"records": [{"idSite": 1, "name": "T-1"}, {"idSite": 2, "name": "T-2"}]}
        if (method, endpoint) == ("GET", "/api/fleet/latest"):
            return {"records": [{"site_id": 1, "battery_soc": 64.5, "timestamp": 1_772_000_000}]}
        if (method, endpoint) == ("GET", "/api/fleet/combined"):
            return {"pepwave": {"T-2": {"online": True, "rsrp": -97}}}
        if (method, endpoint) == ("GET", "/api/fleet/alerts"):
            if self.fail_alerts:
                return {"success": False, "error": "database unavailable"}
            return {"alerts": [{"site_id": 2, "severity": "warning", "streak_days": 3}]}
        if (method, endpoint) == ("GET", "/api/fleet/intelligence"):
            return ["not", "an", "object"]
        if method == "GET" and endpoint.startswith("/api/analytics/job-sites/"):
            job_site_id = endpoint.rsplit("/", 1)[-1]
            return {"data": [{"date": "2026-03-01", "avg_soc": float(job_site_id)}]}
        if (method, endpoint) == ("GET", "/api/job-sites/7"):
            return {"job_site": {"id": 7, "name": "Depot", "trailers": [{"site_id": 1, "site_name": "T-1"}]}}
        if (method, endpoint) == ("PUT", "/api/job-sites/7"):
            return {"success": True, "job_site": {"id": 7, **(payload or {})}}
        if (method, endpoint) == ("GET", "/api/maintenance/calendar"):
            return {"logs": [{"id": 1, "status": "scheduled", "scheduled_date": "2026-03-12T09:00:00Z"}]}
        if method == "PUT" and endpoint.startswith("/api/maintenance/"):
            return {"success": True}
        if (method, endpoint) == ("GET", "/api/actions"):
            return {
                "actions": [
                    {"key": key, "priority": 1, "acknowledged_at": "2026-03-01T00:00:00Z" if key in self.acknowledged else None}
                    for key in ("low-soc-1", "offline-2")
                ]
            }
        if method == "POST" and endpoint.startswith("/api/actions/"):
            key = endpoint.split("/")[3]
            self.acknowledged.add(key)
            return {"success": True, "action": {"key": key, "acknowledged_at": "2026-03-01T00:00:00Z", **(payload or {})}}
        if (method, endpoint) == ("PUT", "/api/settings"):
            return {"retention_days": (payload or {}).get("retention_days"), "db_status": "connected"}

        raise AssertionError(f"Unexpected request: {method} {endpoint}")


@pytest.fixture
def backend() -> FakeFleetBackend:
    return FakeFleetBackend()


@pytest.fixture
def config() -> FleetConfig:
    return FleetConfig(base_url="https://fleet.example.com", intervals=PollIntervals(actions=15.0))


@pytest.mark.asyncio
async def test_requires_context_manager(backend: FakeFleetBackend) -> None:
    client = FleetClient()

    with pytest.raises(FleetError):
        await client.get_sites()


@pytest.mark.asyncio
async def test_trailer_records_join_all_feeds(backend: FakeFleetBackend, config: FleetConfig) -> None:
    async with FleetClient(config, transport=backend) as client:
        records = await client.get_trailer_records()

    assert [r.name for r in records] == ["T-1", "T-2"]
    assert records[0].battery_soc == 64.5
    assert records[0].pepwave is None
    assert records[1].snapshot is None
    assert records[1].rsrp == -97.0


@pytest.mark.asyncio
async def test_success_false_raises_api_error(backend: FakeFleetBackend) -> None:
    backend.fail_alerts = True

    async with FleetClient(transport=backend) as client:
        with pytest.raises(FleetApiError, match="database unavailable"):
            await client.get_fleet_alerts()


@pytest.mark.asyncio
async def test_unexpected_shape_raises_response_error(backend: FakeFleetBackend) -> None:
    async with FleetClient(transport=backend) as client:
        with pytest.raises(FleetResponseError):
            await client.get_fleet_intelligence()


@pytest.mark.asyncio
async def test_days_validated_before_any_request(backend: FakeFleetBackend) -> None:
    async with FleetClient(transport=backend) as client:
        with pytest.raises(ValueError):
            await client.get_rankings(14)
        with pytest.raises(ValueError):
            await client.fetch_comparison(["1", "2"], days=365)

    assert backend.calls == []


@pytest.mark.asyncio
async def test_fetch_comparison_keeps_order(backend: FakeFleetBackend) -> None:
    async with FleetClient(transport=backend) as client:
        series = await client.fetch_comparison(["3", "1", "3"], days=7)

    assert list(series) == ["3", "1"]
    assert series["3"][0].avg_soc == 3.0
    assert backend.calls[0][2] == {"days": 7}


@pytest.mark.asyncio
async def test_job_site_detail_and_update(backend: FakeFleetBackend) -> None:
    async with FleetClient(transport=backend) as client:
        detail = await client.get_job_site("7")
        updated = await client.update_job_site("7", name="Main depot")
        with pytest.raises(ValueError):
            await client.update_job_site("7")

    assert detail.name == "Depot"
    assert detail.trailers[0].site_id == "1"
    assert updated is not None
    assert updated.name == "Main depot"
    assert backend.calls[-1][3] == {"name": "Main depot"}


@pytest.mark.asyncio
async def test_my_work_requests_window_in_epoch_ms(backend: FakeFleetBackend) -> None:
    now = datetime(2026, 3, 10, tzinfo=UTC)

    async with FleetClient(transport=backend) as client:
        logs = await client.get_my_work("tech-4", now=now)

    assert [log.id for log in logs] == ["1"]
    params = backend.calls[0][2]
    assert params is not None
    assert params["technician_id"] == "tech-4"
    assert params["end"] - params["start"] == 90 * 86_400_000


@pytest.mark.asyncio
async def test_update_maintenance_log(backend: FakeFleetBackend) -> None:
    completed = datetime(2026, 3, 10, 12, tzinfo=UTC)

    async with FleetClient(transport=backend) as client:
        result = await client.update_maintenance_log("5", status="completed", completed_date=completed)
        with pytest.raises(ValueError):
            await client.update_maintenance_log("5", status="postponed")

    assert result is None
    assert backend.calls[-1][3] == {
        "status": MaintenanceStatus.COMPLETED.value,
        "completed_date": int(completed.timestamp() * 1000),
    }


@pytest.mark.asyncio
async def test_update_settings(backend: FakeFleetBackend) -> None:
    async with FleetClient(transport=backend) as client:
        settings = await client.update_settings(retention_days=45)
        with pytest.raises(ValueError):
            await client.update_settings(retention_days=0)

    assert settings.retention_days == 45
    assert settings.db_connected


@pytest.mark.asyncio
async def test_poll_uses_configured_interval(backend: FakeFleetBackend, config: FleetConfig) -> None:
    async with FleetClient(config, transport=backend) as client:
        source = client.poll(client.get_actions, name="actions", autostart=False)
        assert source.descriptor.interval == 15.0
        assert not source.running
        with pytest.raises(ValueError):
            client.poll(client.get_actions, name="no-such-source")


@pytest.mark.asyncio
async def test_acknowledge_then_refetch(backend: FakeFleetBackend) -> None:
    async with FleetClient(transport=backend) as client:
        source = client.poll(client.get_actions, name="actions", dedup_key="actions")
        await source.refetch()
        assert source.data is not None
        assert not any(item.acknowledged for item in source.data)

        item = await write_then_refetch(
            lambda: client.acknowledge_action("low-soc-1", acknowledged_by="ops"),
            source,
        )

        assert item is not None
        assert item.acknowledged_by == "ops"
        assert source.data is not None
        assert [a.key for a in source.data if a.acknowledged] == ["low-soc-1"]
        assert source.error is None

    assert not source.running
