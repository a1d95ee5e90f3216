"""Record parsing and joining at the ingestion boundary.

Raw collections are validated into models here, once. The two telemetry
feeds use different join keys (battery/solar snapshots carry the
trailer's ``site_id``, gateway status is keyed by the trailer name);
:func:`build_trailer_records` reconciles them into
:class:`~trailerfleet.models.site.TrailerRecord` so aggregation code
never has to.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from trailerfleet.models.site import PepwaveStatus, Site, SiteSnapshot, TrailerRecord

_logger = logging.getLogger(__name__)

TModel = TypeVar("TModel", bound=BaseModel)


def parse_records(model: type[TModel], items: Iterable[Any]) -> list[TModel]:
    """Validate each item into *model*, skipping entries that cannot be parsed."""
    parsed: list[TModel] = []
    for item in items:
        if isinstance(item, model):
            parsed.append(item)
            continue
        if not isinstance(item, Mapping):
            _logger.debug("Skipping non-object %s record: %r", model.__name__, item)
            continue
        try:
            parsed.append(model.model_validate(dict(item)))
        except ValidationError as exc:
            _logger.warning("Skipping invalid %s record: %s", model.__name__, exc.errors()[:1])
    return parsed


def parse_pepwave_map(payload: Any) -> dict[str, PepwaveStatus]:
    """Parse the ``pepwave`` map (device name → status) of the combined feed."""
    if isinstance(payload, Mapping):
        payload = payload.get("pepwave", payload)
    if not isinstance(payload, Mapping):
        return {}
    result: dict[str, PepwaveStatus] = {}
    for name, item in payload.items():
        if not isinstance(item, Mapping):
            continue
        data = dict(item)
        data.setdefault("name", str(name))
        try:
            result[str(name)] = PepwaveStatus.model_validate(data)
        except ValidationError as exc:
            _logger.warning("Skipping invalid gateway status for %s: %s", name, exc.errors()[:1])
    return result


def index_snapshots(snapshots: Iterable[SiteSnapshot]) -> dict[str, SiteSnapshot]:
    """Map ``site_id`` → snapshot; later entries win."""
    return {snap.site_id: snap for snap in snapshots if snap.site_id}


def build_trailer_records(
    sites: Iterable[Site],
    snapshots: Iterable[SiteSnapshot] | Mapping[str, SiteSnapshot] = (),
    pepwave: Mapping[str, PepwaveStatus] | None = None,
) -> list[TrailerRecord]:
    """Join inventory with both telemetry feeds, preserving inventory order."""
    snapshot_map = dict(snapshots) if isinstance(snapshots, Mapping) else index_snapshots(snapshots)
    pepwave_map = pepwave or {}
    return [
        TrailerRecord(
            site_id=site.site_id,
            name=site.name,
            snapshot=snapshot_map.get(site.site_id),
            pepwave=pepwave_map.get(site.name),
        )
        for site in sites
    ]
