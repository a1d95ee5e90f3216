"""trailerfleet - Async Python client for solar/battery trailer fleet telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("trailerfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from trailerfleet.client import FleetClient
from trailerfleet.config import FleetConfig, PollIntervals
from trailerfleet.exceptions import (
    FleetApiError,
    FleetConfigError,
    FleetError,
    FleetResponseError,
    FleetTransportError,
)
from trailerfleet.models import (
    ActionItem,
    DailyMetricPoint,
    EnergyAlert,
    EnergySite,
    JobSite,
    JobSiteTrailer,
    MaintenanceLog,
    NetworkDevice,
    PepwaveStatus,
    Site,
    SiteSnapshot,
    SiteStatus,
    TrailerRecord,
)
from trailerfleet.polling import (
    FetchState,
    InFlightRegistry,
    PollingSource,
    SourceDescriptor,
    write_then_refetch,
)

__all__ = [
    "__version__",
    "ActionItem",
    "DailyMetricPoint",
    "EnergyAlert",
    "EnergySite",
    "FetchState",
    "FleetApiError",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "FleetResponseError",
    "FleetTransportError",
    "InFlightRegistry",
    "JobSite",
    "JobSiteTrailer",
    "MaintenanceLog",
    "NetworkDevice",
    "PepwaveStatus",
    "PollIntervals",
    "PollingSource",
    "Site",
    "SiteSnapshot",
    "SiteStatus",
    "SourceDescriptor",
    "TrailerRecord",
    "write_then_refetch",
]
