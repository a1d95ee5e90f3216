"""Data models for fleet API responses."""

from trailerfleet.models._base import Day, FleetBaseModel, FleetStrEnum, Timestamp, coerce_id
from trailerfleet.models.actions import DEFAULT_ACTION_PRIORITY, ActionItem
from trailerfleet.models.analytics import (
    BatteryIntel,
    DailyMetricPoint,
    DateRange,
    FleetAnalytics,
    FleetDailyPoint,
    FleetIntelligence,
    LocationIntel,
    SiteRanking,
    SolarIntel,
    TrailerIntel,
)
from trailerfleet.models.energy import AlertSeverity, DailyEnergy, DeficitDay, EnergyAlert, EnergySite
from trailerfleet.models.job_site import JobSite, JobSiteTrailer
from trailerfleet.models.maintenance import MaintenanceLog, MaintenanceStatus, VisitType
from trailerfleet.models.network import CellularInfo, NetworkDevice, SignalInfo
from trailerfleet.models.settings import BackfillResult, FleetSettings, PurgeResult, ReclusterResult
from trailerfleet.models.site import PepwaveStatus, Site, SiteSnapshot, TrailerRecord
from trailerfleet.models.status import SiteStatus, parse_status

__all__ = [
    "DEFAULT_ACTION_PRIORITY",
    "ActionItem",
    "AlertSeverity",
    "BackfillResult",
    "BatteryIntel",
    "CellularInfo",
    "DailyEnergy",
    "DailyMetricPoint",
    "DateRange",
    "Day",
    "DeficitDay",
    "EnergyAlert",
    "EnergySite",
    "FleetAnalytics",
    "FleetBaseModel",
    "FleetDailyPoint",
    "FleetIntelligence",
    "FleetSettings",
    "FleetStrEnum",
    "JobSite",
    "JobSiteTrailer",
    "LocationIntel",
    "MaintenanceLog",
    "MaintenanceStatus",
    "NetworkDevice",
    "PepwaveStatus",
    "PurgeResult",
    "ReclusterResult",
    "SignalInfo",
    "Site",
    "SiteRanking",
    "SiteSnapshot",
    "SiteStatus",
    "SolarIntel",
    "Timestamp",
    "TrailerIntel",
    "TrailerRecord",
    "VisitType",
    "coerce_id",
    "parse_status",
]
