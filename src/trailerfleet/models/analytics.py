"""Analytics models: daily metrics, rankings and per-trailer intelligence."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field

from trailerfleet.models._base import Day, FleetBaseModel, OptFloat, OptInt, RecordId


class DailyMetricPoint(FleetBaseModel):
    """Metrics for one job site (or trailer) on one day.

    Returned by ``/api/analytics/job-sites/{id}``; one point per day,
    with gaps on days that have no data.
    """

    date: Day = None
    avg_soc: OptFloat = None
    min_soc: OptFloat = None
    max_soc: OptFloat = None
    total_yield_kwh: OptFloat = Field(
        default=None,
        validation_alias=AliasChoices("total_yield_kwh", "solar_yield_kwh"),
    )
    avg_voltage: OptFloat = None
    avg_signal_bar: OptFloat = None
    data_usage_mb: OptFloat = Field(default=None, validation_alias=AliasChoices("data_usage_mb", "total_data_mb"))
    uptime_percent: OptFloat = Field(default=None, validation_alias=AliasChoices("uptime_percent", "avg_uptime"))

    def value(self, field: str) -> float | None:
        """Numeric value of *field*, ``None`` when absent or non-numeric."""
        value: Any = getattr(self, field, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return float(value)


class FleetDailyPoint(FleetBaseModel):
    """Fleet-wide metrics for one day (``/api/analytics/fleet``)."""

    date: Day = None
    fleet_avg_soc: OptFloat = None
    fleet_min_soc: OptFloat = None
    fleet_yield_kwh: OptFloat = None
    fleet_data_mb: OptFloat = None
    fleet_uptime: OptFloat = None


class DateRange(FleetBaseModel):
    start: Day = None
    end: Day = None
    days_count: OptInt = None


class FleetAnalytics(FleetBaseModel):
    daily: list[FleetDailyPoint] = Field(default_factory=list)
    date_range: DateRange = Field(default_factory=DateRange)


class SiteRanking(FleetBaseModel):
    """One job site's standing over the selected range."""

    id: RecordId = Field(default="", validation_alias=AliasChoices("id", "job_site_id"))
    name: str = ""
    trailer_count: OptInt = None
    avg_soc: OptFloat = None
    min_soc: OptFloat = None
    total_yield_kwh: OptFloat = None
    avg_uptime: OptFloat = None
    total_data_mb: OptFloat = None


class SolarIntel(FleetBaseModel):
    score: OptFloat = None
    avg_7d_score: OptFloat = None
    panel_performance_pct: OptFloat = None
    yield_today_wh: OptFloat = None


class BatteryIntel(FleetBaseModel):
    days_of_autonomy: OptFloat = None
    stored_wh: OptFloat = None
    charge_time_hours: OptFloat = None


class LocationIntel(FleetBaseModel):
    expected_daily_yield_wh: OptFloat = None
    peak_sun_hours: OptFloat = None


class TrailerIntel(FleetBaseModel):
    """Derived solar/battery performance indicators for one trailer."""

    site_id: RecordId = ""
    site_name: str = ""
    solar: SolarIntel = Field(default_factory=SolarIntel)
    battery: BatteryIntel = Field(default_factory=BatteryIntel)
    location: LocationIntel = Field(default_factory=LocationIntel)


class FleetIntelligence(FleetBaseModel):
    fleet: dict[str, Any] = Field(default_factory=dict)
    trailers: list[TrailerIntel] = Field(default_factory=list)
