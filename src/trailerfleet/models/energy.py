"""Daily energy balance and deficit alert models."""

from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, Field

from trailerfleet.models._base import Day, FleetBaseModel, FleetStrEnum, OptFloat, OptInt, RecordId


class DailyEnergy(FleetBaseModel):
    """Solar yield versus consumption for one trailer on one day (Wh)."""

    date: Day = None
    yield_wh: OptFloat = None
    consumed_wh: OptFloat = None

    @property
    def balance_wh(self) -> float | None:
        if self.yield_wh is None or self.consumed_wh is None:
            return None
        return self.yield_wh - self.consumed_wh


class EnergySite(FleetBaseModel):
    """Daily energy series for one trailer (``/api/fleet/energy``).

    ``days`` is ordered oldest first; the last entry is "today".
    """

    site_id: RecordId = Field(default="", validation_alias=AliasChoices("site_id", "idSite"))
    site_name: str = Field(default="", validation_alias=AliasChoices("site_name", "name"))
    days: list[DailyEnergy] = Field(default_factory=list)

    @property
    def today(self) -> DailyEnergy | None:
        return self.days[-1] if self.days else None


class AlertSeverity(FleetStrEnum):
    CAUTION = "caution"
    WARNING = "warning"
    CRITICAL = "critical"
    UNKNOWN = "unknown"


class DeficitDay(FleetBaseModel):
    date: Day = None
    yield_wh: OptFloat = None
    consumed_wh: OptFloat = None
    deficit_wh: OptFloat = None


class EnergyAlert(FleetBaseModel):
    """A trailer consuming more than it yields for consecutive days."""

    site_id: RecordId = ""
    site_name: str = ""
    streak_days: OptInt = None
    severity: AlertSeverity = AlertSeverity.UNKNOWN
    deficit_days: list[DeficitDay] = Field(default_factory=list)

    @property
    def last_deficit_date(self) -> date | None:
        dates = [day.date for day in self.deficit_days if day.date is not None]
        return max(dates) if dates else None
