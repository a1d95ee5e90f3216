"""Filtering and ordering of fleet lists.

All functions return new lists and never mutate their input. Sorts are
stable, so records that compare equal keep their input order.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from trailerfleet._constants import SOC_ALARM_BELOW, SOC_WARNING_BELOW, WEAK_SIGNAL_RSRP_BELOW
from trailerfleet.models.analytics import TrailerIntel
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.network import NetworkDevice
from trailerfleet.models.site import TrailerRecord

_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(text: str | None) -> tuple[tuple[int, int, str], ...]:
    """Case-insensitive key that orders embedded numbers numerically.

    ``"Site 2"`` sorts before ``"Site 10"``.
    """
    parts: list[tuple[int, int, str]] = []
    for chunk in _DIGITS.split((text or "").strip()):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.casefold()))
    return tuple(parts)


# ------------------------------------------------------------------
# Fleet overview
# ------------------------------------------------------------------


class FleetFilter(enum.StrEnum):
    ALL = "all"
    ALARM = "alarm"
    WARNING = "warning"
    OFFLINE = "offline"
    NET_OFFLINE = "net-offline"


class FleetSort(enum.StrEnum):
    NAME = "name"
    SOC = "soc"
    SOC_DESC = "soc-desc"
    SOLAR = "solar"
    SIGNAL = "signal"


def _below(value: float | None, threshold: float) -> bool:
    return value is not None and value < threshold


_FLEET_FILTERS: dict[FleetFilter, Callable[[TrailerRecord], bool]] = {
    FleetFilter.ALL: lambda record: True,
    FleetFilter.ALARM: lambda record: _below(record.battery_soc, SOC_ALARM_BELOW),
    # Includes alarms: anything under the warning threshold.
    FleetFilter.WARNING: lambda record: _below(record.battery_soc, SOC_WARNING_BELOW),
    FleetFilter.OFFLINE: lambda record: record.snapshot is None,
    FleetFilter.NET_OFFLINE: lambda record: record.pepwave is not None and not record.pepwave.online,
}


def filter_trailers(
    records: Iterable[TrailerRecord],
    *,
    search: str = "",
    status: FleetFilter | str = FleetFilter.ALL,
) -> list[TrailerRecord]:
    """Filter trailers by a case-insensitive name search and a status filter."""
    predicate = _FLEET_FILTERS[FleetFilter(status)]
    term = search.strip().casefold()
    return [
        record
        for record in records
        if (not term or term in record.name.casefold()) and predicate(record)
    ]


def sort_trailers(records: Iterable[TrailerRecord], by: FleetSort | str = FleetSort.NAME) -> list[TrailerRecord]:
    """Sort trailers for the fleet overview.

    ``soc`` puts trailers without a reading first, ``soc-desc`` and
    ``solar`` (highest first) put them last, and ``signal`` lists the
    weakest gateways first with missing readings ahead of all of them.
    """
    order = FleetSort(by)
    items = list(records)
    if order is FleetSort.NAME:
        return sorted(items, key=lambda record: natural_sort_key(record.name))
    if order is FleetSort.SOC:
        return sorted(items, key=lambda record: _or(record.battery_soc, -1.0))
    if order is FleetSort.SOC_DESC:
        return sorted(items, key=lambda record: _or(record.battery_soc, -1.0), reverse=True)
    if order is FleetSort.SOLAR:
        return sorted(items, key=lambda record: _or(record.solar_watts, -1.0), reverse=True)
    return sorted(items, key=lambda record: _or(record.rsrp, -999.0))


def _or(value: float | None, default: float) -> float:
    return default if value is None else value


# ------------------------------------------------------------------
# Job sites
# ------------------------------------------------------------------


def sort_job_sites(job_sites: Iterable[JobSite]) -> list[JobSite]:
    """Active job sites first, then natural name order."""
    return sorted(job_sites, key=lambda site: (not site.is_active, natural_sort_key(site.name)))


# ------------------------------------------------------------------
# Trailer intelligence rankings
# ------------------------------------------------------------------


class IntelSort(enum.StrEnum):
    NAME = "name"
    SCORE = "score"
    AVG_7D = "avg7d"
    PERFORMANCE = "performance"
    AUTONOMY = "autonomy"
    YIELD = "yield"
    EXPECTED = "expected"
    STORED = "stored"
    CHARGE = "charge"
    PEAK_SUN_HOURS = "psh"


_INTEL_FIELDS: dict[IntelSort, Callable[[TrailerIntel], float | None]] = {
    IntelSort.SCORE: lambda t: t.solar.score,
    IntelSort.AVG_7D: lambda t: t.solar.avg_7d_score,
    IntelSort.PERFORMANCE: lambda t: t.solar.panel_performance_pct,
    IntelSort.AUTONOMY: lambda t: t.battery.days_of_autonomy,
    IntelSort.YIELD: lambda t: t.solar.yield_today_wh,
    IntelSort.EXPECTED: lambda t: t.location.expected_daily_yield_wh,
    IntelSort.STORED: lambda t: t.battery.stored_wh,
    IntelSort.CHARGE: lambda t: t.battery.charge_time_hours,
    IntelSort.PEAK_SUN_HOURS: lambda t: t.location.peak_sun_hours,
}


def sort_trailer_intel(
    trailers: Iterable[TrailerIntel],
    by: IntelSort | str = IntelSort.SCORE,
    *,
    descending: bool = False,
) -> list[TrailerIntel]:
    """Sort trailer intelligence rows by one indicator.

    Rows missing the indicator always come last, whatever the direction.
    Names compare case-insensitively.
    """
    order = IntelSort(by)
    items = list(trailers)
    if order is IntelSort.NAME:
        return sorted(items, key=lambda t: t.site_name.casefold(), reverse=descending)

    getter = _INTEL_FIELDS[order]
    present = [t for t in items if getter(t) is not None]
    missing = [t for t in items if getter(t) is None]
    present.sort(key=lambda t: _or(getter(t), 0.0), reverse=descending)
    return present + missing


def next_intel_sort(
    current: IntelSort | str,
    descending: bool,
    clicked: IntelSort | str,
) -> tuple[IntelSort, bool]:
    """Column-header toggle: same column flips direction, a new one sorts ascending."""
    if IntelSort(clicked) is IntelSort(current):
        return IntelSort(current), not descending
    return IntelSort(clicked), False


# ------------------------------------------------------------------
# Network devices
# ------------------------------------------------------------------


class DeviceFilter(enum.StrEnum):
    ALL = "all"
    ONLINE = "online"
    OFFLINE = "offline"
    WEAK = "weak"


_DEVICE_FILTERS: dict[DeviceFilter, Callable[[NetworkDevice], bool]] = {
    DeviceFilter.ALL: lambda device: True,
    DeviceFilter.ONLINE: lambda device: device.online,
    DeviceFilter.OFFLINE: lambda device: not device.online,
    DeviceFilter.WEAK: lambda device: _below(device.rsrp, WEAK_SIGNAL_RSRP_BELOW),
}


def filter_devices(
    devices: Iterable[NetworkDevice],
    *,
    search: str = "",
    status: DeviceFilter | str = DeviceFilter.ALL,
    job_site_names: Mapping[str, str] | None = None,
) -> list[NetworkDevice]:
    """Filter gateways by search term and connectivity.

    The search matches the device name, its carrier, or the name of the
    job site it belongs to (*job_site_names* maps device name → job-site
    name).
    """
    predicate = _DEVICE_FILTERS[DeviceFilter(status)]
    term = search.strip().casefold()
    names = job_site_names or {}

    def matches(device: NetworkDevice) -> bool:
        if not term:
            return True
        haystack: list[Any] = [device.name, device.carrier, names.get(device.name)]
        return any(term in str(value).casefold() for value in haystack if value)

    return [device for device in devices if matches(device) and predicate(device)]
