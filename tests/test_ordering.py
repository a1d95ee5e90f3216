from __future__ import annotations

import pytest

from trailerfleet.aggregation.ordering import (
    DeviceFilter,
    FleetFilter,
    FleetSort,
    IntelSort,
    filter_devices,
    filter_trailers,
    natural_sort_key,
    next_intel_sort,
    sort_job_sites,
    sort_trailer_intel,
    sort_trailers,
)
from trailerfleet.models.analytics import TrailerIntel
from trailerfleet.models.job_site import JobSite
from trailerfleet.models.network import NetworkDevice
from trailerfleet.models.site import TrailerRecord


def _trailer(name: str, soc: float | None = None, *, solar: float | None = None, rsrp: float | None = None,
             online: bool | None = None, snapshot: bool = True) -> TrailerRecord:
    payload: dict[str, object] = {"site_id": name, "name": name}
    if snapshot:
        payload["snapshot"] = {"site_id": name, "battery_soc": soc, "solar_watts": solar}
    if online is not None or rsrp is not None:
        payload["pepwave"] = {"name": name, "online": bool(online), "rsrp": rsrp}
    return TrailerRecord.model_validate(payload)


def _names(records: list[TrailerRecord]) -> list[str]:
    return [record.name for record in records]


def test_natural_sort_key() -> None:
    names = ["Site 10", "site 2", "Site 1", "Annex", "Site 2b"]

    assert sorted(names, key=natural_sort_key) == ["Annex", "Site 1", "site 2", "Site 2b", "Site 10"]


def test_filter_by_status_and_search() -> None:
    records = [
        _trailer("T-1", 15),
        _trailer("T-2", 35),
        _trailer("T-3", 80, online=False),
        _trailer("T-4", snapshot=False),
        _trailer("X-5", 10),
    ]

    assert _names(filter_trailers(records, status="alarm")) == ["T-1", "X-5"]
    assert _names(filter_trailers(records, status=FleetFilter.WARNING)) == ["T-1", "T-2", "X-5"]
    assert _names(filter_trailers(records, status="offline")) == ["T-4"]
    assert _names(filter_trailers(records, status="net-offline")) == ["T-3"]
    assert _names(filter_trailers(records, search=" t-")) == ["T-1", "T-2", "T-3", "T-4"]
    assert _names(filter_trailers(records, search="x", status="alarm")) == ["X-5"]


def test_unknown_filter_rejected() -> None:
    with pytest.raises(ValueError):
        filter_trailers([], status="sleepy")


def test_sort_trailers() -> None:
    records = [
        _trailer("T-10", 50, solar=100, rsrp=-90),
        _trailer("T-2", None, solar=None, rsrp=None),
        _trailer("T-1", 20, solar=300, rsrp=-110),
    ]

    assert _names(sort_trailers(records)) == ["T-1", "T-2", "T-10"]
    assert _names(sort_trailers(records, FleetSort.SOC)) == ["T-2", "T-1", "T-10"]
    assert _names(sort_trailers(records, "soc-desc")) == ["T-10", "T-1", "T-2"]
    assert _names(sort_trailers(records, "solar")) == ["T-1", "T-10", "T-2"]
    assert _names(sort_trailers(records, "signal")) == ["T-2", "T-1", "T-10"]
    assert _names(records) == ["T-10", "T-2", "T-1"]


def test_sort_job_sites_active_first() -> None:
    sites = [
        JobSite.model_validate({"id": 1, "name": "Site 10", "status": "active"}),
        JobSite.model_validate({"id": 2, "name": "Site 2", "status": "inactive"}),
        JobSite.model_validate({"id": 3, "name": "Site 9", "status": "Active"}),
    ]

    assert [site.id for site in sort_job_sites(sites)] == ["3", "1", "2"]


def _intel(name: str, score: float | None) -> TrailerIntel:
    return TrailerIntel.model_validate({"site_id": name, "site_name": name, "solar": {"score": score}})


def test_intel_missing_values_last_in_both_directions() -> None:
    rows = [_intel("b", 50), _intel("a", None), _intel("C", 90), _intel("d", 10)]

    assert [r.site_name for r in sort_trailer_intel(rows, "score")] == ["d", "b", "C", "a"]
    assert [r.site_name for r in sort_trailer_intel(rows, "score", descending=True)] == ["C", "b", "d", "a"]
    assert [r.site_name for r in sort_trailer_intel(rows, IntelSort.NAME)] == ["a", "b", "C", "d"]


def test_next_intel_sort() -> None:
    assert next_intel_sort("score", False, "score") == (IntelSort.SCORE, True)
    assert next_intel_sort("score", True, "yield") == (IntelSort.YIELD, False)


def test_filter_devices() -> None:
    devices = [
        NetworkDevice.model_validate({"name": "T-1", "online": True, "cellular": {"carrier": "Verizon", "signal": {"rsrp": -85}}}),
        NetworkDevice.model_validate({"name": "T-2", "online": False, "cellular": {"carrier": "AT&T", "signal": {"rsrp": -115}}}),
        NetworkDevice.model_validate({"name": "T-3", "online": True}),
    ]
    job_site_names = {"T-3": "North Quarry"}

    assert [d.name for d in filter_devices(devices, status=DeviceFilter.OFFLINE)] == ["T-2"]
    assert [d.name for d in filter_devices(devices, status="online")] == ["T-1", "T-3"]
    assert [d.name for d in filter_devices(devices, status="weak")] == ["T-2"]
    assert [d.name for d in filter_devices(devices, search="verizon")] == ["T-1"]
    assert [d.name for d in filter_devices(devices, search="quarry", job_site_names=job_site_names)] == ["T-3"]
