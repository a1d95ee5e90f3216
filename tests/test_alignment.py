from __future__ import annotations

from datetime import date

import pytest

from trailerfleet._constants import COMPARISON_COLORS
from trailerfleet.aggregation.alignment import align_series, toggle_selection
from trailerfleet.models.analytics import DailyMetricPoint


def _points(*rows: tuple[str, float | None]) -> list[DailyMetricPoint]:
    return [DailyMetricPoint.model_validate({"date": day, "avg_soc": value}) for day, value in rows]


def test_ragged_series_are_gap_filled() -> None:
    series = {
        "A": _points(("2026-03-01", 50.0), ("2026-03-03", 70.0)),
        "B": _points(("2026-03-02", 40.0), ("2026-03-03", 45.0)),
    }

    chart = align_series(series, field="avg_soc")

    assert chart is not None
    assert chart.dates == (date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3))
    a, b = chart.series
    assert a.values == (50.0, None, 70.0)
    assert b.values == (None, 40.0, 45.0)
    assert all(len(s.values) == len(chart.dates) for s in chart.series)


def test_missing_value_on_present_day_is_a_gap() -> None:
    series = {
        "A": _points(("2026-03-01", None), ("2026-03-02", 0.0)),
        "B": _points(("2026-03-01", 10.0)),
    }

    chart = align_series(series, field="avg_soc")

    assert chart is not None
    assert chart.get("A").values == (None, 0.0)
    assert chart.get("A").point_count == 1
    assert chart.get("B").values == (10.0, None)


def test_dates_sorted_even_when_input_is_not() -> None:
    series = {
        "A": _points(("2026-03-05", 1.0), ("2026-03-01", 2.0)),
        "B": _points(("2026-03-03", 3.0)),
    }

    chart = align_series(series, field="avg_soc")

    assert chart is not None
    assert [d.day for d in chart.dates] == [1, 3, 5]
    assert chart.get("A").values == (2.0, None, 1.0)


def test_fewer_than_two_series() -> None:
    assert align_series({"A": _points(("2026-03-01", 1.0))}, field="avg_soc") is None
    assert align_series({}, field="avg_soc") is None


def test_more_than_four_series_rejected() -> None:
    series = {str(i): _points(("2026-03-01", float(i))) for i in range(5)}

    with pytest.raises(ValueError):
        align_series(series, field="avg_soc")


def test_unknown_field_rejected() -> None:
    with pytest.raises(ValueError):
        align_series({"A": [], "B": []}, field="battery_mood")


def test_selection_order_sets_colors_and_labels() -> None:
    series = {
        "1": _points(("2026-03-01", 1.0)),
        "2": _points(("2026-03-01", 2.0)),
        "3": _points(("2026-03-01", 3.0)),
    }

    chart = align_series(series, field="avg_soc", selected=["3", "1", "9"], labels={"3": "Quarry"})

    assert chart is not None
    assert [s.key for s in chart.series] == ["3", "1", "9"]
    assert [s.color for s in chart.series] == list(COMPARISON_COLORS[:3])
    assert [s.label for s in chart.series] == ["Quarry", "Site 1", "Site 9"]
    assert chart.get("9").values == (None,)


def test_aliased_field_names() -> None:
    series = {
        "A": [DailyMetricPoint.model_validate({"date": "2026-03-01", "solar_yield_kwh": 4.5})],
        "B": [DailyMetricPoint.model_validate({"date": "2026-03-01", "total_yield_kwh": "3.25"})],
    }

    chart = align_series(series, field="total_yield_kwh")

    assert chart is not None
    assert [s.values for s in chart.series] == [(4.5,), (3.25,)]


def test_toggle_selection() -> None:
    assert toggle_selection((), "1") == ("1",)
    assert toggle_selection(("1", "2"), "1") == ("2",)
    assert toggle_selection(("1", "2", "3", "4"), "5") == ("1", "2", "3", "4")
    assert toggle_selection(("1", "2", "3", "4"), "4") == ("1", "2", "3")
