"""Trailer and job-site health status."""

from __future__ import annotations

import enum
from typing import Annotated, Any

from pydantic import BeforeValidator

# Backend and UI spellings that map onto the canonical statuses.
_STATUS_ALIASES: dict[str, str] = {
    "healthy": "ok",
    "good": "ok",
    "critical": "alarm",
    "unknown": "offline",
}


class SiteStatus(enum.StrEnum):
    """Health status of a trailer or a group of trailers.

    Severity order (most severe first): ``OFFLINE``, ``ALARM``,
    ``WARNING``, ``OK``. The backend's ``critical``/``healthy``/``unknown``
    spellings are accepted as aliases.
    """

    OK = "ok"
    WARNING = "warning"
    ALARM = "alarm"
    OFFLINE = "offline"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def _missing_(cls, value: object) -> SiteStatus | None:
        if not isinstance(value, str):
            return None
        lowered = value.strip().lower()
        canonical = _STATUS_ALIASES.get(lowered, lowered)
        for member in cls:
            if member.value == canonical:
                return member
        return None


_SEVERITY: dict[SiteStatus, int] = {
    SiteStatus.OK: 0,
    SiteStatus.WARNING: 1,
    SiteStatus.ALARM: 2,
    SiteStatus.OFFLINE: 3,
}


def parse_status(value: Any) -> SiteStatus | None:
    """Parse a status string, returning ``None`` for missing/unmapped values."""
    if isinstance(value, SiteStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return SiteStatus(value)
    except ValueError:
        return None


OptStatus = Annotated[SiteStatus | None, BeforeValidator(parse_status)]
