from __future__ import annotations

import pytest

from trailerfleet.aggregation.status import job_site_status, soc_status, trailer_status, worst_status
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.site import SiteSnapshot
from trailerfleet.models.status import SiteStatus, parse_status


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ok", SiteStatus.OK),
        ("healthy", SiteStatus.OK),
        ("critical", SiteStatus.ALARM),
        ("ALARM", SiteStatus.ALARM),
        (" warning ", SiteStatus.WARNING),
        ("unknown", SiteStatus.OFFLINE),
    ],
)
def test_status_aliases(raw: str, expected: SiteStatus) -> None:
    assert parse_status(raw) is expected


def test_unmapped_status_is_none() -> None:
    assert parse_status("exploded") is None
    assert parse_status(None) is None


def test_severity_order() -> None:
    ordered = sorted(SiteStatus, key=lambda status: status.severity)
    assert ordered == [SiteStatus.OK, SiteStatus.WARNING, SiteStatus.ALARM, SiteStatus.OFFLINE]


def test_one_alarm_among_nine_ok_is_alarm() -> None:
    assert worst_status([SiteStatus.ALARM] + [SiteStatus.OK] * 9) is SiteStatus.ALARM


def test_offline_outranks_alarm() -> None:
    assert worst_status(["critical", "offline", "ok"]) is SiteStatus.OFFLINE


def test_worst_status_of_nothing_is_none() -> None:
    assert worst_status([]) is None
    assert worst_status(["garbage"]) is None


@pytest.mark.parametrize(
    ("soc", "expected"),
    [(5.0, SiteStatus.ALARM), (19.9, SiteStatus.ALARM), (20.0, SiteStatus.WARNING), (39.9, SiteStatus.WARNING), (40.0, SiteStatus.OK), (None, SiteStatus.OK)],
)
def test_soc_thresholds(soc: float | None, expected: SiteStatus) -> None:
    assert soc_status(soc) is expected


def test_trailer_without_snapshot_is_offline() -> None:
    assert trailer_status(None) is SiteStatus.OFFLINE
    assert trailer_status(SiteSnapshot.model_validate({"site_id": 1, "battery_soc": "--"})) is SiteStatus.OK


def test_job_site_status_prefers_server_value() -> None:
    site = JobSite.model_validate({"id": 1, "name": "Yard", "worst_status": "critical", "trailers": []})
    assert job_site_status(site) is SiteStatus.ALARM


def test_job_site_status_derived_from_trailers() -> None:
    site = JobSite.model_validate(
        {
            "id": 1,
            "name": "Yard",
            "trailers": [
                {"site_id": 1, "site_name": "T-1", "snapshot": {"site_id": 1, "battery_soc": 85}},
                {"site_id": 2, "site_name": "T-2", "snapshot": {"site_id": 2, "battery_soc": 31}},
            ],
        }
    )
    assert job_site_status(site) is SiteStatus.WARNING
    assert job_site_status(JobSite.model_validate({"id": 2, "name": "Empty"})) is None
