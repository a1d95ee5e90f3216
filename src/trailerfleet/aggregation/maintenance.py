"""Views over the maintenance log: filtering, job-site groups, calendar days and costs."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo

from trailerfleet.aggregation.grouping import Grouping, JobSiteGroup, JobSiteRef, _partition
from trailerfleet.models.maintenance import MaintenanceLog, MaintenanceStatus

DUE_SOON_WINDOW = timedelta(days=3)

ALL_STATUSES = "all"


def filter_maintenance_logs(
    logs: Iterable[MaintenanceLog],
    *,
    status: MaintenanceStatus | str = ALL_STATUSES,
    search: str = "",
) -> list[MaintenanceLog]:
    """Filter visits by status and a case-insensitive search term.

    The search matches the title, job-site name, trailer name or
    technician. Input order is kept.
    """
    wanted = None if status == ALL_STATUSES else MaintenanceStatus(status)
    term = search.strip().casefold()

    def matches(log: MaintenanceLog) -> bool:
        if wanted is not None and log.status is not wanted:
            return False
        if not term:
            return True
        haystack = (log.title, log.job_site_name, log.trailer_name, log.technician)
        return any(term in value.casefold() for value in haystack if value)

    return [log for log in logs if matches(log)]


def _job_site_of(log: MaintenanceLog) -> JobSiteRef | None:
    if not log.job_site_id or not log.job_site_name:
        return None
    return JobSiteRef(id=log.job_site_id, name=log.job_site_name)


def group_logs_by_job_site(
    logs: Iterable[MaintenanceLog],
) -> Grouping[JobSiteGroup[MaintenanceLog], MaintenanceLog]:
    """Group visits under the job site they name.

    A visit needs both ``job_site_id`` and ``job_site_name`` to be
    grouped; the rest land in ``unassigned``. The first name seen for a
    job-site id labels its group.
    """
    buckets, unassigned = _partition(logs, _job_site_of)
    groups = tuple(
        JobSiteGroup(id=ref.id, name=ref.name, status=ref.status, members=tuple(members))
        for ref, members in buckets
    )
    return Grouping(groups=groups, unassigned=tuple(unassigned))


def day_key(moment: datetime | None, tz: tzinfo = UTC) -> date | None:
    if moment is None:
        return None
    return moment.astimezone(tz).date()


def logs_by_day(logs: Iterable[MaintenanceLog], *, tz: tzinfo = UTC) -> dict[date, list[MaintenanceLog]]:
    """Bucket visits by calendar day in *tz* for the month view.

    A visit is placed on its scheduled day, or the day it was created
    when unscheduled. Visits with neither date are left out.
    """
    days: dict[date, list[MaintenanceLog]] = {}
    for log in logs:
        key = day_key(log.scheduled_date or log.created_at, tz)
        if key is None:
            continue
        days.setdefault(key, []).append(log)
    return days


class VisitUrgency(enum.StrEnum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    ON_TRACK = "on_track"


def visit_urgency(log: MaintenanceLog, *, now: datetime | None = None) -> VisitUrgency:
    """How pressing a visit is: overdue, due within three days, or on track."""
    if log.status is MaintenanceStatus.COMPLETED:
        return VisitUrgency.COMPLETED
    scheduled = log.scheduled_date
    if scheduled is None:
        return VisitUrgency.ON_TRACK
    now = now or datetime.now(UTC)
    if scheduled < now:
        return VisitUrgency.OVERDUE
    if scheduled - now <= DUE_SOON_WINDOW:
        return VisitUrgency.DUE_SOON
    return VisitUrgency.ON_TRACK


@dataclass(frozen=True, slots=True)
class SiteCosts:
    job_site_id: str
    job_site_name: str
    labor_cost_cents: float = 0.0
    parts_cost_cents: float = 0.0
    visit_count: int = 0

    @property
    def total_cost_cents(self) -> float:
        return self.labor_cost_cents + self.parts_cost_cents


def costs_by_job_site(logs: Iterable[MaintenanceLog]) -> list[SiteCosts]:
    """Labor and parts spend per job site, ordered by job-site name.

    Cancelled visits and visits without a job site are not counted;
    missing cost figures count as zero.
    """
    buckets, _ = _partition(
        (log for log in logs if log.status is not MaintenanceStatus.CANCELLED),
        _job_site_of,
    )
    return [
        SiteCosts(
            job_site_id=ref.id,
            job_site_name=ref.name,
            labor_cost_cents=sum(log.labor_cost_cents or 0.0 for log in members),
            parts_cost_cents=sum(log.parts_cost_cents or 0.0 for log in members),
            visit_count=len(members),
        )
        for ref, members in buckets
    ]
