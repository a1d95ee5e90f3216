"""Aggregation pipeline.

Pure functions from resolved, normalized records to derived views:
KPI rollups, job-site groupings, sorted and filtered lists, the action
queue and aligned comparison series. Nothing here performs I/O.
"""

from trailerfleet.aggregation.actions import ActionQueue, build_action_queue
from trailerfleet.aggregation.alignment import AlignedChart, AlignedSeries, align_series, toggle_selection
from trailerfleet.aggregation.grouping import (
    DeviceGroup,
    EnergyGroup,
    EnergyRow,
    Grouping,
    JobSiteGroup,
    JobSiteIndex,
    JobSiteRef,
    group_devices_by_job_site,
    group_energy_by_job_site,
)
from trailerfleet.aggregation.kpi import (
    AnalyticsSummary,
    FleetKpis,
    JobSiteKpis,
    JobSiteRollup,
    NetworkKpis,
    analytics_summary,
    fleet_kpis,
    job_site_kpis,
    job_site_rollup,
    network_kpis,
    weighted_average,
)
from trailerfleet.aggregation.maintenance import (
    SiteCosts,
    VisitUrgency,
    costs_by_job_site,
    filter_maintenance_logs,
    group_logs_by_job_site,
    logs_by_day,
    visit_urgency,
)
from trailerfleet.aggregation.ordering import (
    DeviceFilter,
    FleetFilter,
    FleetSort,
    IntelSort,
    filter_devices,
    filter_trailers,
    natural_sort_key,
    sort_job_sites,
    sort_trailer_intel,
    sort_trailers,
)
from trailerfleet.aggregation.status import job_site_status, trailer_status, worst_status
from trailerfleet.aggregation.work import WorkBuckets, categorize_work

__all__ = [
    "ActionQueue",
    "AlignedChart",
    "AlignedSeries",
    "AnalyticsSummary",
    "DeviceFilter",
    "DeviceGroup",
    "EnergyGroup",
    "EnergyRow",
    "FleetFilter",
    "FleetKpis",
    "FleetSort",
    "Grouping",
    "IntelSort",
    "JobSiteGroup",
    "JobSiteIndex",
    "JobSiteKpis",
    "JobSiteRef",
    "JobSiteRollup",
    "NetworkKpis",
    "SiteCosts",
    "VisitUrgency",
    "WorkBuckets",
    "align_series",
    "analytics_summary",
    "build_action_queue",
    "categorize_work",
    "costs_by_job_site",
    "filter_maintenance_logs",
    "filter_devices",
    "filter_trailers",
    "fleet_kpis",
    "group_devices_by_job_site",
    "group_energy_by_job_site",
    "group_logs_by_job_site",
    "job_site_kpis",
    "job_site_rollup",
    "job_site_status",
    "logs_by_day",
    "natural_sort_key",
    "network_kpis",
    "sort_job_sites",
    "sort_trailer_intel",
    "sort_trailers",
    "toggle_selection",
    "trailer_status",
    "visit_urgency",
    "weighted_average",
]
