"""Bucketing of a technician's maintenance visits."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from trailerfleet.models.maintenance import MaintenanceLog, MaintenanceStatus

RECENT_COMPLETED_WINDOW = timedelta(days=7)
WORK_LOOKBACK = timedelta(days=30)
WORK_LOOKAHEAD = timedelta(days=60)


@dataclass(frozen=True, slots=True)
class WorkBuckets:
    overdue: tuple[MaintenanceLog, ...] = ()
    in_progress: tuple[MaintenanceLog, ...] = ()
    due_today: tuple[MaintenanceLog, ...] = ()
    upcoming: tuple[MaintenanceLog, ...] = ()
    recently_completed: tuple[MaintenanceLog, ...] = ()


def work_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Calendar range fetched for the my-work view: 30 days back, 60 ahead."""
    now = now or datetime.now(UTC)
    return now - WORK_LOOKBACK, now + WORK_LOOKAHEAD


def categorize_work(logs: Iterable[MaintenanceLog], *, now: datetime | None = None) -> WorkBuckets:
    """Split visits into overdue, in progress, due today, upcoming and recently completed.

    Day boundaries are taken in *now*'s timezone (UTC by default).
    Cancelled visits are dropped, as are completions older than a week.
    Upcoming visits are ordered by scheduled date, unscheduled ones last.
    """
    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow_start = today_start + timedelta(days=1)

    overdue: list[MaintenanceLog] = []
    in_progress: list[MaintenanceLog] = []
    due_today: list[MaintenanceLog] = []
    upcoming: list[MaintenanceLog] = []
    completed: list[MaintenanceLog] = []

    for log in logs:
        if log.status is MaintenanceStatus.COMPLETED:
            if log.completed_date is not None and log.completed_date > now - RECENT_COMPLETED_WINDOW:
                completed.append(log)
            continue
        if log.status is MaintenanceStatus.CANCELLED:
            continue
        if log.status is MaintenanceStatus.IN_PROGRESS:
            in_progress.append(log)
            continue
        scheduled = log.scheduled_date
        if scheduled is None:
            upcoming.append(log)
        elif scheduled < today_start:
            overdue.append(log)
        elif scheduled < tomorrow_start:
            due_today.append(log)
        else:
            upcoming.append(log)

    upcoming.sort(key=lambda log: (log.scheduled_date is None, log.scheduled_date or now))
    return WorkBuckets(
        overdue=tuple(overdue),
        in_progress=tuple(in_progress),
        due_today=tuple(due_today),
        upcoming=tuple(upcoming),
        recently_completed=tuple(completed),
    )
