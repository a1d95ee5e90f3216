"""Fleet, job-site and network summary numbers.

"No data" is ``None`` throughout: missing values are left out of sums
and of denominators, whereas a reported ``0`` is a real value and is
counted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from trailerfleet._constants import SOC_ALARM_BELOW
from trailerfleet.aggregation.grouping import JobSiteIndex
from trailerfleet.aggregation.status import job_site_status, trailer_status, worst_status
from trailerfleet.ingestion.records import index_snapshots
from trailerfleet.models.analytics import FleetDailyPoint
from trailerfleet.models.job_site import JobSite, JobSiteTrailer
from trailerfleet.models.network import NetworkDevice
from trailerfleet.models.site import PepwaveStatus, Site, SiteSnapshot
from trailerfleet.models.status import SiteStatus


def _present(values: Iterable[float | None]) -> list[float]:
    return [value for value in values if value is not None]


def mean(values: Iterable[float | None]) -> float | None:
    """Arithmetic mean of the values that are present."""
    present = _present(values)
    if not present:
        return None
    return sum(present) / len(present)


def total(values: Iterable[float | None]) -> float | None:
    """Sum of the values that are present; ``None`` when none are."""
    present = _present(values)
    if not present:
        return None
    return sum(present)


def weighted_average(pairs: Iterable[tuple[float | None, float | None]]) -> float | None:
    """Average of per-group averages, weighted by group size.

    Each pair is ``(average, count)``. Pairs with a missing average or a
    non-positive count contribute nothing::

        >>> weighted_average([(80.0, 2), (20.0, 1)])
        60.0
    """
    weighted_sum = 0.0
    weight = 0.0
    for average, count in pairs:
        if average is None or count is None or count <= 0:
            continue
        weighted_sum += average * count
        weight += count
    if weight == 0:
        return None
    return weighted_sum / weight


# ------------------------------------------------------------------
# Fleet overview
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FleetKpis:
    total: int
    online: int
    alarm_count: int
    avg_soc: float | None
    total_yield_today: float | None
    net_online: int
    net_total: int

    @property
    def offline(self) -> int:
        return self.total - self.online


def fleet_kpis(
    sites: Iterable[Site],
    snapshots: Iterable[SiteSnapshot] | Mapping[str, SiteSnapshot],
    pepwave: Mapping[str, PepwaveStatus] | None = None,
) -> FleetKpis:
    """Fleet-wide KPIs from inventory, latest snapshots and gateway status.

    A trailer counts as online when it has a snapshot. Gateway counts
    cover every gateway reported, not only inventoried trailers.
    """
    snapshot_map = dict(snapshots) if isinstance(snapshots, Mapping) else index_snapshots(snapshots)
    site_list = list(sites)
    present = [snapshot_map[site.site_id] for site in site_list if site.site_id in snapshot_map]
    socs = [snap.battery_soc for snap in present]
    gateways = list((pepwave or {}).values())
    return FleetKpis(
        total=len(site_list),
        online=len(present),
        alarm_count=sum(1 for soc in socs if soc is not None and soc < SOC_ALARM_BELOW),
        avg_soc=mean(socs),
        total_yield_today=total(snap.solar_yield_today for snap in present),
        net_online=sum(1 for gateway in gateways if gateway.online),
        net_total=len(gateways),
    )


# ------------------------------------------------------------------
# Job site detail
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JobSiteKpis:
    trailer_count: int
    trailers_online: int
    avg_soc: float | None
    min_soc: float | None
    total_solar_watts: float | None
    net_online: int
    net_total: int
    worst_status: SiteStatus | None


def job_site_kpis(trailers: Iterable[JobSiteTrailer]) -> JobSiteKpis:
    """KPIs for one job site from its embedded trailers."""
    members = list(trailers)
    snapshots = [t.snapshot for t in members if t.snapshot is not None]
    gateways = [t.pepwave for t in members if t.pepwave is not None]
    socs = _present(snap.battery_soc for snap in snapshots)
    return JobSiteKpis(
        trailer_count=len(members),
        trailers_online=len(snapshots),
        avg_soc=mean(socs),
        min_soc=min(socs) if socs else None,
        total_solar_watts=total(snap.solar_watts for snap in snapshots),
        net_online=sum(1 for gateway in gateways if gateway.online),
        net_total=len(gateways),
        worst_status=worst_status(trailer_status(t.snapshot) for t in members),
    )


# ------------------------------------------------------------------
# Network
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NetworkKpis:
    online: int
    offline: int
    total: int
    avg_rsrp: float | None
    total_usage_mb: float | None
    weakest_rsrp: float | None
    weakest_name: str | None
    job_sites_all_online: int
    job_sites_with_offline: int


def network_kpis(
    devices: Iterable[NetworkDevice],
    job_sites: JobSiteIndex | Iterable[JobSite] = (),
) -> NetworkKpis:
    """Connectivity KPIs across all gateways.

    The weakest device is the one with the lowest RSRP (first one on
    ties). Job-site counts only consider job sites with at least one
    gateway.
    """
    index = job_sites if isinstance(job_sites, JobSiteIndex) else JobSiteIndex.from_job_sites(job_sites)
    device_list = list(devices)
    online = sum(1 for device in device_list if device.online)

    weakest: NetworkDevice | None = None
    weakest_rsrp: float | None = None
    for device in device_list:
        rsrp = device.rsrp
        if rsrp is None:
            continue
        if weakest_rsrp is None or rsrp < weakest_rsrp:
            weakest, weakest_rsrp = device, rsrp

    per_site: dict[str, list[bool]] = {}
    for device in device_list:
        ref = index.for_name(device.name)
        if ref is not None:
            per_site.setdefault(ref.id, []).append(device.online)
    all_online = sum(1 for flags in per_site.values() if all(flags))

    return NetworkKpis(
        online=online,
        offline=len(device_list) - online,
        total=len(device_list),
        avg_rsrp=mean(device.rsrp for device in device_list),
        total_usage_mb=total(device.usage_mb for device in device_list),
        weakest_rsrp=weakest_rsrp,
        weakest_name=weakest.name if weakest is not None else None,
        job_sites_all_online=all_online,
        job_sites_with_offline=len(per_site) - all_online,
    )


# ------------------------------------------------------------------
# Job site rollup
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JobSiteRollup:
    job_site_count: int
    trailer_count: int
    trailers_online: int
    avg_soc: float | None
    min_soc: float | None
    total_solar_watts: float | None
    critical: int
    at_risk: int
    offline: int
    net_online: int
    net_total: int


def job_site_rollup(summaries: Iterable[JobSite]) -> JobSiteRollup:
    """Fleet rollup across job-site summaries.

    ``avg_soc`` weights each job site's average by its member count.
    ``critical``/``at_risk``/``offline`` count job sites whose worst
    status is alarm, warning and offline respectively.
    """
    sites = list(summaries)
    statuses = [job_site_status(site) for site in sites]
    min_socs = _present(site.min_soc for site in sites)
    return JobSiteRollup(
        job_site_count=len(sites),
        trailer_count=sum(site.member_count for site in sites),
        trailers_online=sum(site.trailers_online or 0 for site in sites),
        avg_soc=weighted_average((site.avg_soc, site.member_count) for site in sites),
        min_soc=min(min_socs) if min_socs else None,
        total_solar_watts=total(site.total_solar_watts for site in sites),
        critical=statuses.count(SiteStatus.ALARM),
        at_risk=statuses.count(SiteStatus.WARNING),
        offline=statuses.count(SiteStatus.OFFLINE),
        net_online=sum(site.net_online or 0 for site in sites),
        net_total=sum(site.net_total or 0 for site in sites),
    )


# ------------------------------------------------------------------
# Analytics
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AnalyticsSummary:
    days: int
    avg_soc: float | None
    total_yield_kwh: float | None
    avg_uptime: float | None
    total_data_mb: float | None


def analytics_summary(daily: Iterable[FleetDailyPoint]) -> AnalyticsSummary | None:
    """Summary over a range of fleet daily points; ``None`` for an empty range."""
    points = list(daily)
    if not points:
        return None
    return AnalyticsSummary(
        days=len(points),
        avg_soc=mean(point.fleet_avg_soc for point in points),
        total_yield_kwh=total(point.fleet_yield_kwh for point in points),
        avg_uptime=mean(point.fleet_uptime for point in points),
        total_data_mb=total(point.fleet_data_mb for point in points),
    )
