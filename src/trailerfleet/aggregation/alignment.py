"""Align independently fetched daily series for side-by-side comparison.

Each selected series may cover a different, non-contiguous set of days.
The aligned chart uses the sorted union of those days as its x axis and
leaves a gap (``None``) wherever a series has no point; values are
never interpolated or zero-filled.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from trailerfleet._constants import COMPARISON_COLORS, MAX_COMPARISON_SERIES, MIN_COMPARISON_SERIES
from trailerfleet.models.analytics import DailyMetricPoint

COMPARABLE_FIELDS: frozenset[str] = frozenset(
    name for name in DailyMetricPoint.model_fields if name not in {"raw", "date"}
)


@dataclass(frozen=True, slots=True)
class AlignedSeries:
    key: str
    label: str
    color: str
    values: tuple[float | None, ...]

    @property
    def point_count(self) -> int:
        return sum(1 for value in self.values if value is not None)


@dataclass(frozen=True, slots=True)
class AlignedChart:
    field: str
    dates: tuple[date, ...]
    series: tuple[AlignedSeries, ...]

    def get(self, key: str) -> AlignedSeries | None:
        for series in self.series:
            if series.key == key:
                return series
        return None


def _unique(keys: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for key in keys:
        seen.setdefault(str(key), None)
    return list(seen)


def align_series(
    series: Mapping[str, Iterable[DailyMetricPoint]],
    *,
    field: str,
    selected: Sequence[str] | None = None,
    labels: Mapping[str, str] | None = None,
) -> AlignedChart | None:
    """Align the *field* values of the selected series on a shared date axis.

    *selected* fixes the series order (and therefore each series' color);
    it defaults to the mapping's order. A selected key missing from
    *series* yields an all-gap series. Returns ``None`` for fewer than two
    selected series; raises :class:`ValueError` for more than four or for
    an unknown *field*.
    """
    if field not in COMPARABLE_FIELDS:
        raise ValueError(f"Unknown metric field {field!r}")
    order = _unique(selected if selected is not None else series.keys())
    if len(order) < MIN_COMPARISON_SERIES:
        return None
    if len(order) > MAX_COMPARISON_SERIES:
        raise ValueError(f"At most {MAX_COMPARISON_SERIES} series can be compared, got {len(order)}")

    by_date: dict[str, dict[date, DailyMetricPoint]] = {}
    for key in order:
        points: dict[date, DailyMetricPoint] = {}
        for point in series.get(key, ()):
            if point.date is not None:
                points[point.date] = point
        by_date[key] = points

    dates = tuple(sorted(set().union(*by_date.values())))
    names = labels or {}
    aligned = tuple(
        AlignedSeries(
            key=key,
            label=names.get(key) or f"Site {key}",
            color=COMPARISON_COLORS[position],
            values=tuple(
                by_date[key][day].value(field) if day in by_date[key] else None
                for day in dates
            ),
        )
        for position, key in enumerate(order)
    )
    return AlignedChart(field=field, dates=dates, series=aligned)


def toggle_selection(
    selected: Sequence[str],
    site_id: str,
    *,
    limit: int = MAX_COMPARISON_SERIES,
) -> tuple[str, ...]:
    """Add *site_id* to the selection, or remove it if already selected.

    Adding to a full selection leaves it unchanged.
    """
    current = tuple(selected)
    if site_id in current:
        return tuple(key for key in current if key != site_id)
    if len(current) >= limit:
        return current
    return (*current, site_id)
