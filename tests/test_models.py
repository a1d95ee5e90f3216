"""Tests for Pydantic model parsing with FleetBaseModel + FleetStrEnum."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from trailerfleet.ingestion.records import build_trailer_records, parse_pepwave_map, parse_records
from trailerfleet.models.energy import AlertSeverity, EnergyAlert, EnergySite
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.maintenance import MaintenanceLog, MaintenanceStatus, VisitType
from trailerfleet.models.network import NetworkDevice
from trailerfleet.models.settings import FleetSettings
from trailerfleet.models.site import Site, SiteSnapshot

# ------------------------------------------------------------------
# FleetStrEnum
# ------------------------------------------------------------------


class TestFleetStrEnum:
    def test_unknown_value_falls_back(self) -> None:
        assert VisitType("teleportation") is VisitType.UNKNOWN

    def test_case_insensitive(self) -> None:
        assert MaintenanceStatus(" Completed ") is MaintenanceStatus.COMPLETED

    def test_model_field_uses_fallback(self) -> None:
        alert = EnergyAlert.model_validate({"site_id": 1, "severity": "apocalyptic"})
        assert alert.severity is AlertSeverity.UNKNOWN


# ------------------------------------------------------------------
# FleetBaseModel
# ------------------------------------------------------------------


class TestFleetBaseModel:
    def test_sentinels_use_defaults(self) -> None:
        snap = SiteSnapshot.model_validate({"site_id": 7, "battery_soc": "--", "solar_watts": "", "charge_state": "null"})

        assert snap.battery_soc is None
        assert snap.solar_watts is None
        assert snap.charge_state is None

    def test_zero_is_a_value(self) -> None:
        snap = SiteSnapshot.model_validate({"site_id": 7, "battery_soc": 0, "solar_watts": "0"})

        assert snap.battery_soc == 0.0
        assert snap.solar_watts == 0.0

    def test_raw_is_kept(self) -> None:
        payload = {"idSite": 12, "name": "T-12", "extra": {"x": 1}}

        site = Site.model_validate(payload)

        assert site.raw == payload
        assert "raw" not in repr(site)

    def test_frozen(self) -> None:
        site = Site.model_validate({"idSite": 1, "name": "T-1"})
        with pytest.raises(ValidationError):
            site.name = "other"  # type: ignore[misc]


# ------------------------------------------------------------------
# Identifiers and aliases
# ------------------------------------------------------------------


@pytest.mark.parametrize("raw_id", [123, 123.0, "123", " 123 "])
def test_ids_normalized_to_strings(raw_id: object) -> None:
    assert Site.model_validate({"idSite": raw_id}).site_id == "123"


def test_site_aliases() -> None:
    assert Site.model_validate({"site_id": 5, "site_name": "T-5"}).name == "T-5"
    assert Site.model_validate({"id": 6, "name": "T-6"}).site_id == "6"


def test_job_site_alias_and_counts() -> None:
    job_site = JobSite.model_validate(
        {
            "job_site_id": 4,
            "name": "Depot",
            "trailers": [{"site_id": 1, "name": "T-1"}, {"site_id": "2", "site_name": "T-2"}],
        }
    )

    assert job_site.id == "4"
    assert [t.site_name for t in job_site.trailers] == ["T-1", "T-2"]
    assert job_site.member_count == 2
    assert JobSite.model_validate({"id": 1, "trailer_count": "5"}).member_count == 5


# ------------------------------------------------------------------
# Timestamps
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "value",
    [1_772_000_000, 1_772_000_000_000, "1772000000", "2026-02-25T06:13:20Z", "2026-02-25T06:13:20"],
)
def test_timestamp_shapes(value: object) -> None:
    snap = SiteSnapshot.model_validate({"site_id": 1, "timestamp": value})

    assert snap.timestamp == datetime(2026, 2, 25, 6, 13, 20, tzinfo=UTC)


@pytest.mark.parametrize("value", [0, -5, "soon", "--"])
def test_unusable_timestamps_are_missing(value: object) -> None:
    assert SiteSnapshot.model_validate({"site_id": 1, "timestamp": value}).timestamp is None


# ------------------------------------------------------------------
# Nested payloads
# ------------------------------------------------------------------


def test_energy_site_today_is_last_day() -> None:
    site = EnergySite.model_validate(
        {
            "idSite": 3,
            "name": "T-3",
            "days": [
                {"date": "2026-03-01", "yield_wh": 900, "consumed_wh": 1000},
                {"date": "2026-03-02", "yield_wh": 1200, "consumed_wh": "--"},
            ],
        }
    )

    assert site.today is not None
    assert site.today.date == date(2026, 3, 2)
    assert site.today.balance_wh is None
    assert site.days[0].balance_wh == -100.0


def test_energy_alert_last_deficit_date() -> None:
    alert = EnergyAlert.model_validate(
        {
            "site_id": 3,
            "streak_days": 3,
            "severity": "critical",
            "deficit_days": [{"date": "2026-03-02"}, {"date": "2026-03-04"}, {"date": None}],
        }
    )

    assert alert.severity is AlertSeverity.CRITICAL
    assert alert.last_deficit_date == date(2026, 3, 4)


def test_network_device_signal() -> None:
    device = NetworkDevice.model_validate(
        {"sn": "1111-2222", "name": "T-1", "online": 1, "cellular": {"carrier_name": "Verizon", "signal": {"signal_bar": 4, "rsrp": "-92"}}}
    )

    assert device.id == "1111-2222"
    assert device.online is True
    assert device.rsrp == -92.0
    assert device.carrier == "Verizon"
    assert NetworkDevice.model_validate({"name": "T-2"}).rsrp is None


@pytest.mark.parametrize(("value", "expected"), [("online", True), ("no", False), ("garbled", False), (None, False)])
def test_online_flag(value: object, expected: bool) -> None:
    assert NetworkDevice.model_validate({"name": "T-1", "online": value}).online is expected


def test_maintenance_log_defaults() -> None:
    log = MaintenanceLog.model_validate({"id": 9, "visit_type": "repair", "scheduled_date": 1_772_000_000_000})

    assert log.status is MaintenanceStatus.SCHEDULED
    assert log.visit_type is VisitType.REPAIR
    assert log.scheduled_date is not None


def test_settings_connected() -> None:
    assert FleetSettings.model_validate({"db_status": "Connected"}).db_connected
    assert not FleetSettings.model_validate({}).db_connected


# ------------------------------------------------------------------
# Record parsing and joining
# ------------------------------------------------------------------


def test_parse_records_skips_garbage() -> None:
    records = parse_records(Site, [{"idSite": 1}, "nonsense", None, {"idSite": {"not": "an id"}}])

    assert [site.site_id for site in records] == ["1"]


def test_parse_pepwave_map_fills_names() -> None:
    statuses = parse_pepwave_map({"pepwave": {"T-1": {"online": True}, "T-2": "broken"}})

    assert list(statuses) == ["T-1"]
    assert statuses["T-1"].name == "T-1"


def test_build_trailer_records_joins_both_feeds() -> None:
    sites = parse_records(Site, [{"idSite": 1, "name": "T-1"}, {"idSite": 2, "name": "T-2"}])
    snapshots = parse_records(SiteSnapshot, [{"site_id": "1", "battery_soc": 55}, {"site_id": 99}])
    pepwave = parse_pepwave_map({"T-2": {"online": False}})

    records = build_trailer_records(sites, snapshots, pepwave)

    assert [r.site_id for r in records] == ["1", "2"]
    assert records[0].battery_soc == 55.0
    assert records[0].pepwave is None
    assert records[1].snapshot is None
    assert records[1].pepwave is not None
    assert records[1].pepwave.online is False
