"""High-level async client for the trailer fleet backend."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

import aiohttp

from trailerfleet._api import actions as _actions_api
from trailerfleet._api import analytics as _analytics_api
from trailerfleet._api import fleet as _fleet_api
from trailerfleet._api import job_sites as _job_sites_api
from trailerfleet._api import maintenance as _maintenance_api
from trailerfleet._api import settings as _settings_api
from trailerfleet._constants import validate_days
from trailerfleet._transport import HttpTransport, Transport
from trailerfleet.aggregation.work import work_window
from trailerfleet.config import FleetConfig, PollIntervals
from trailerfleet.exceptions import FleetError
from trailerfleet.ingestion.records import build_trailer_records
from trailerfleet.models.actions import ActionItem
from trailerfleet.models.analytics import DailyMetricPoint, FleetAnalytics, FleetIntelligence, SiteRanking
from trailerfleet.models.energy import EnergyAlert, EnergySite
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.maintenance import MaintenanceLog, MaintenanceStatus
from trailerfleet.models.network import NetworkDevice
from trailerfleet.models.settings import BackfillResult, FleetSettings, PurgeResult, ReclusterResult
from trailerfleet.models.site import PepwaveStatus, Site, SiteSnapshot, TrailerRecord
from trailerfleet.polling.registry import InFlightRegistry
from trailerfleet.polling.source import PollingSource
from trailerfleet.polling.state import FetchFn, FetchState, SourceDescriptor

_logger = logging.getLogger(__name__)

_INTERVAL_NAMES = frozenset(f.name for f in dataclasses.fields(PollIntervals))


class FleetClient:
    """Async client for the trailer fleet backend.

    Usage::

        async with FleetClient(FleetConfig.from_env()) as client:
            sites = await client.get_sites()
            latest = client.poll(client.get_fleet_latest, name="fleet_latest")

    The client owns one :class:`InFlightRegistry`; every source created
    through :meth:`poll` shares it, so sources with the same dedup key
    never issue concurrent duplicate requests. Sources are stopped when
    the client exits.

    Mutation methods only perform the write. Refreshing the affected
    sources is the caller's job, typically through
    :func:`trailerfleet.polling.write_then_refetch`.
    """

    def __init__(
        self,
        config: FleetConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        registry: InFlightRegistry | None = None,
    ) -> None:
        self._config = config or FleetConfig()
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport
        self._registry = registry if registry is not None else InFlightRegistry()
        self._sources: list[PollingSource[Any]] = []

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        if not self._external_transport:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.stop_polling()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    @property
    def config(self) -> FleetConfig:
        return self._config

    @property
    def registry(self) -> InFlightRegistry:
        return self._registry

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise FleetError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Fleet reads
    # ------------------------------------------------------------------

    async def get_sites(self) -> list[Site]:
        return await _fleet_api.fetch_sites(self._require_transport())

    async def get_fleet_latest(self) -> list[SiteSnapshot]:
        return await _fleet_api.fetch_fleet_latest(self._require_transport())

    async def get_fleet_combined(self) -> dict[str, PepwaveStatus]:
        return await _fleet_api.fetch_fleet_combined(self._require_transport())

    async def get_fleet_energy(self) -> list[EnergySite]:
        return await _fleet_api.fetch_fleet_energy(self._require_transport())

    async def get_fleet_alerts(self) -> list[EnergyAlert]:
        return await _fleet_api.fetch_fleet_alerts(self._require_transport())

    async def get_fleet_network(self) -> list[NetworkDevice]:
        return await _fleet_api.fetch_fleet_network(self._require_transport())

    async def get_fleet_intelligence(self) -> FleetIntelligence:
        return await _fleet_api.fetch_fleet_intelligence(self._require_transport())

    async def get_trailer_records(self) -> list[TrailerRecord]:
        """Inventory joined with both telemetry feeds (three concurrent reads)."""
        sites, snapshots, pepwave = await asyncio.gather(
            self.get_sites(),
            self.get_fleet_latest(),
            self.get_fleet_combined(),
        )
        return build_trailer_records(sites, snapshots, pepwave)

    # ------------------------------------------------------------------
    # Job sites
    # ------------------------------------------------------------------

    async def get_job_sites(self) -> list[JobSite]:
        return await _job_sites_api.fetch_job_sites(self._require_transport())

    async def get_job_site(self, job_site_id: str) -> JobSite:
        return await _job_sites_api.fetch_job_site(self._require_transport(), job_site_id)

    async def update_job_site(
        self,
        job_site_id: str,
        *,
        name: str | None = None,
        status: str | None = None,
        **fields: Any,
    ) -> JobSite | None:
        return await _job_sites_api.update_job_site(
            self._require_transport(),
            job_site_id,
            name=name,
            status=status,
            **fields,
        )

    async def recluster_job_sites(self) -> ReclusterResult:
        return await _job_sites_api.recluster_job_sites(self._require_transport())

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    async def get_fleet_analytics(self, days: int = 30) -> FleetAnalytics:
        return await _analytics_api.fetch_fleet_analytics(self._require_transport(), days)

    async def get_rankings(self, days: int = 30) -> list[SiteRanking]:
        return await _analytics_api.fetch_rankings(self._require_transport(), days)

    async def get_job_site_analytics(self, job_site_id: str, days: int = 30) -> list[DailyMetricPoint]:
        return await _analytics_api.fetch_job_site_analytics(self._require_transport(), job_site_id, days)

    async def backfill_analytics(self, days: int = 30) -> BackfillResult:
        return await _analytics_api.backfill_analytics(self._require_transport(), days)

    async def fetch_comparison(
        self,
        job_site_ids: Iterable[str],
        days: int = 30,
    ) -> dict[str, list[DailyMetricPoint]]:
        """Daily metrics for several job sites, fetched concurrently.

        The result keeps the order of *job_site_ids* and feeds
        :func:`trailerfleet.aggregation.align_series` directly. Any
        failed fetch fails the whole comparison.
        """
        validate_days(days)
        ids = list(dict.fromkeys(str(job_site_id) for job_site_id in job_site_ids))
        results = await asyncio.gather(*(self.get_job_site_analytics(job_site_id, days) for job_site_id in ids))
        return dict(zip(ids, results, strict=True))

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def get_maintenance_calendar(
        self,
        start: datetime,
        end: datetime,
        *,
        technician_id: str | None = None,
    ) -> list[MaintenanceLog]:
        return await _maintenance_api.fetch_maintenance_calendar(
            self._require_transport(),
            start,
            end,
            technician_id=technician_id,
        )

    async def get_my_work(self, technician_id: str | None = None, *, now: datetime | None = None) -> list[MaintenanceLog]:
        """Visits from 30 days ago to 60 days ahead for one technician."""
        start, end = work_window(now)
        return await self.get_maintenance_calendar(start, end, technician_id=technician_id)

    async def update_maintenance_log(
        self,
        log_id: str,
        *,
        status: MaintenanceStatus | str | None = None,
        completed_date: datetime | None = None,
        **fields: Any,
    ) -> MaintenanceLog | None:
        return await _maintenance_api.update_maintenance_log(
            self._require_transport(),
            log_id,
            status=status,
            completed_date=completed_date,
            **fields,
        )

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def get_actions(self) -> list[ActionItem]:
        return await _actions_api.fetch_actions(self._require_transport())

    async def acknowledge_action(self, key: str, *, acknowledged_by: str | None = None) -> ActionItem | None:
        return await _actions_api.acknowledge_action(
            self._require_transport(),
            key,
            acknowledged_by=acknowledged_by,
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self) -> FleetSettings:
        return await _settings_api.fetch_settings(self._require_transport())

    async def update_settings(self, *, retention_days: int) -> FleetSettings:
        return await _settings_api.update_settings(self._require_transport(), retention_days=retention_days)

    async def purge_data(self) -> PurgeResult:
        return await _settings_api.purge_data(self._require_transport())

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll(
        self,
        fetch: FetchFn,
        *,
        name: str = "",
        interval: float | None = None,
        dependency_key: Iterable[Any] = (),
        dedup_key: str | None = None,
        autostart: bool = True,
        on_update: Callable[[FetchState[Any]], None] | None = None,
        **kwargs: Any,
    ) -> PollingSource[Any]:
        """Create a polling source bound to this client's registry.

        When *interval* is omitted, *name* must be one of the
        :class:`~trailerfleet.config.PollIntervals` fields and its
        configured interval is used. With *autostart* (the default) the
        source starts immediately, which requires a running event loop.
        """
        if interval is None:
            if name not in _INTERVAL_NAMES:
                raise ValueError(f"No default interval for source {name!r}; pass interval=")
            interval = getattr(self._config.intervals, name)
        descriptor = SourceDescriptor(
            fetch=fetch,
            interval=interval,
            dependency_key=tuple(dependency_key),
            dedup_key=dedup_key,
            name=name,
        )
        source: PollingSource[Any] = PollingSource(
            descriptor,
            registry=self._registry,
            on_update=on_update,
            **kwargs,
        )
        self._sources.append(source)
        if autostart:
            source.start()
        return source

    def stop_polling(self) -> None:
        """Stop every source created through :meth:`poll`."""
        sources, self._sources = self._sources, []
        for source in sources:
            source.stop()
        if sources:
            _logger.debug("Stopped %d polling sources", len(sources))
