"""Partition trailer-level records into job-site groups.

The two telemetry feeds use different join keys. Energy and battery
records carry the trailer's ``site_id``; network records only carry the
gateway's device name, which matches the trailer's ``site_name``.
:class:`JobSiteIndex` holds one join table for each.

Every input record lands exactly once, either in one group or in the
``unassigned`` tuple.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from trailerfleet.aggregation.ordering import natural_sort_key
from trailerfleet.models.energy import EnergyAlert, EnergySite
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.network import NetworkDevice

M = TypeVar("M")
G = TypeVar("G", bound="JobSiteGroup")


@dataclass(frozen=True, slots=True)
class JobSiteRef:
    """The job site a trailer belongs to."""

    id: str
    name: str
    status: str = "active"


@dataclass(frozen=True)
class JobSiteIndex:
    """Join tables from trailer ``site_id`` and trailer name to job site.

    A trailer listed under several job sites belongs to the first one.
    """

    by_site_id: Mapping[str, JobSiteRef] = field(default_factory=dict)
    by_name: Mapping[str, JobSiteRef] = field(default_factory=dict)

    @classmethod
    def from_job_sites(cls, job_sites: Iterable[JobSite]) -> JobSiteIndex:
        by_site_id: dict[str, JobSiteRef] = {}
        by_name: dict[str, JobSiteRef] = {}
        for job_site in job_sites:
            ref = JobSiteRef(id=job_site.id, name=job_site.name, status=job_site.status)
            for trailer in job_site.trailers:
                if trailer.site_id:
                    by_site_id.setdefault(trailer.site_id, ref)
                if trailer.site_name:
                    by_name.setdefault(trailer.site_name, ref)
        return cls(by_site_id=by_site_id, by_name=by_name)

    def for_site_id(self, site_id: str | None) -> JobSiteRef | None:
        return self.by_site_id.get(site_id) if site_id else None

    def for_name(self, name: str | None) -> JobSiteRef | None:
        return self.by_name.get(name) if name else None

    def job_site_names(self) -> dict[str, str]:
        """Device name → job-site name, for searching network devices."""
        return {name: ref.name for name, ref in self.by_name.items()}


def _as_index(job_sites: JobSiteIndex | Iterable[JobSite]) -> JobSiteIndex:
    if isinstance(job_sites, JobSiteIndex):
        return job_sites
    return JobSiteIndex.from_job_sites(job_sites)


@dataclass(frozen=True)
class JobSiteGroup(Generic[M]):
    id: str
    name: str
    status: str
    members: tuple[M, ...]

    def __len__(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class Grouping(Generic[G, M]):
    """Groups sorted by job-site name plus the unassigned records in input order."""

    groups: tuple[G, ...]
    unassigned: tuple[M, ...]

    def __iter__(self) -> Iterator[G]:
        return iter(self.groups)

    def members(self) -> Iterator[M]:
        """Every input record, grouped ones first."""
        for group in self.groups:
            yield from group.members
        yield from self.unassigned

    @property
    def record_count(self) -> int:
        return sum(len(group.members) for group in self.groups) + len(self.unassigned)

    def get(self, job_site_id: str) -> G | None:
        for group in self.groups:
            if group.id == job_site_id:
                return group
        return None


def _partition(
    records: Iterable[M],
    locate: Callable[[M], JobSiteRef | None],
) -> tuple[list[tuple[JobSiteRef, list[M]]], list[M]]:
    buckets: dict[str, tuple[JobSiteRef, list[M]]] = {}
    unassigned: list[M] = []
    for record in records:
        ref = locate(record)
        if ref is None:
            unassigned.append(record)
            continue
        buckets.setdefault(ref.id, (ref, []))[1].append(record)
    ordered = sorted(buckets.values(), key=lambda bucket: natural_sort_key(bucket[0].name))
    return ordered, unassigned


# ------------------------------------------------------------------
# Energy (joined on site_id)
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EnergyRow:
    """One trailer's energy figures for today.

    ``today_yield``/``today_consumed`` come from the last entry of the
    trailer's daily series; ``balance`` is ``None`` unless both exist.
    """

    site: EnergySite
    today_yield: float | None
    today_consumed: float | None
    alert: EnergyAlert | None = None
    job_site: JobSiteRef | None = None

    @property
    def site_id(self) -> str:
        return self.site.site_id

    @property
    def site_name(self) -> str:
        return self.site.site_name

    @property
    def balance(self) -> float | None:
        if self.today_yield is None or self.today_consumed is None:
            return None
        return self.today_yield - self.today_consumed

    @property
    def has_alert(self) -> bool:
        return self.alert is not None


@dataclass(frozen=True)
class EnergyGroup(JobSiteGroup[EnergyRow]):
    total_yield: float = 0.0
    total_consumed: float = 0.0
    alert_count: int = 0

    @property
    def balance(self) -> float:
        return self.total_yield - self.total_consumed


def energy_row(
    site: EnergySite,
    alert: EnergyAlert | None = None,
    job_site: JobSiteRef | None = None,
) -> EnergyRow:
    today = site.today
    return EnergyRow(
        site=site,
        today_yield=today.yield_wh if today is not None else None,
        today_consumed=today.consumed_wh if today is not None else None,
        alert=alert,
        job_site=job_site,
    )


def group_energy_by_job_site(
    sites: Iterable[EnergySite],
    job_sites: JobSiteIndex | Iterable[JobSite],
    alerts: Iterable[EnergyAlert] = (),
) -> Grouping[EnergyGroup, EnergyRow]:
    """Group daily energy by job site.

    Group totals sum today's values, treating a missing value as ``0``;
    per-trailer values stay ``None`` for display.
    """
    index = _as_index(job_sites)
    alert_by_site: dict[str, EnergyAlert] = {}
    for alert in alerts:
        alert_by_site.setdefault(alert.site_id, alert)

    rows = [
        energy_row(site, alert_by_site.get(site.site_id), index.for_site_id(site.site_id))
        for site in sites
    ]
    buckets, unassigned = _partition(rows, lambda row: row.job_site)
    groups = tuple(
        EnergyGroup(
            id=ref.id,
            name=ref.name,
            status=ref.status,
            members=tuple(members),
            total_yield=sum(row.today_yield or 0.0 for row in members),
            total_consumed=sum(row.today_consumed or 0.0 for row in members),
            alert_count=sum(1 for row in members if row.has_alert),
        )
        for ref, members in buckets
    )
    return Grouping(groups=groups, unassigned=tuple(unassigned))


# ------------------------------------------------------------------
# Network (joined on device name)
# ------------------------------------------------------------------


@dataclass(frozen=True)
class DeviceGroup(JobSiteGroup[NetworkDevice]):
    online: int = 0

    @property
    def total(self) -> int:
        return len(self.members)

    @property
    def offline(self) -> int:
        return self.total - self.online

    @property
    def all_online(self) -> bool:
        return self.online == self.total


def group_devices_by_job_site(
    devices: Iterable[NetworkDevice],
    job_sites: JobSiteIndex | Iterable[JobSite],
) -> Grouping[DeviceGroup, NetworkDevice]:
    """Group gateways by the job site of the trailer with the same name."""
    index = _as_index(job_sites)
    buckets, unassigned = _partition(devices, lambda device: index.for_name(device.name))
    groups = tuple(
        DeviceGroup(
            id=ref.id,
            name=ref.name,
            status=ref.status,
            members=tuple(members),
            online=sum(1 for device in members if device.online),
        )
        for ref, members in buckets
    )
    return Grouping(groups=groups, unassigned=tuple(unassigned))
