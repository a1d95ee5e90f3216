"""Derived member status and worst-status propagation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from trailerfleet._constants import SOC_ALARM_BELOW, SOC_WARNING_BELOW
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.site import SiteSnapshot
from trailerfleet.models.status import SiteStatus, parse_status


def soc_status(soc: float | None) -> SiteStatus:
    """Status implied by a state of charge alone (missing SOC is ``OK``)."""
    if soc is None:
        return SiteStatus.OK
    if soc < SOC_ALARM_BELOW:
        return SiteStatus.ALARM
    if soc < SOC_WARNING_BELOW:
        return SiteStatus.WARNING
    return SiteStatus.OK


def trailer_status(snapshot: SiteSnapshot | None) -> SiteStatus:
    """Status of one trailer from its latest battery snapshot.

    No snapshot means no recent data, which counts as ``OFFLINE``.
    """
    if snapshot is None:
        return SiteStatus.OFFLINE
    return soc_status(snapshot.battery_soc)


def worst_status(statuses: Iterable[Any]) -> SiteStatus | None:
    """Most severe status among *statuses*.

    Accepts :class:`SiteStatus` members or raw strings (aliases included);
    unparseable values are ignored. Returns ``None`` when nothing remains.
    """
    worst: SiteStatus | None = None
    for value in statuses:
        status = parse_status(value)
        if status is None:
            continue
        if worst is None or status.severity > worst.severity:
            worst = status
    return worst


def job_site_status(job_site: JobSite) -> SiteStatus | None:
    """Worst status of a job site.

    Uses the server-computed ``worst_status`` when present, otherwise
    derives it from the embedded trailers' snapshots.
    """
    if job_site.worst_status is not None:
        return job_site.worst_status
    return worst_status(trailer_status(trailer.snapshot) for trailer in job_site.trailers)
