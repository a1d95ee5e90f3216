"""Human-readable rendering of KPI values.

Aggregation code returns ``None`` for "no data"; these helpers turn it
into the ``--`` placeholder at the very last step.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta
from typing import NamedTuple

from trailerfleet._constants import NO_DATA


def display(value: float | int | None, *, digits: int = 1, suffix: str = "") -> str:
    """Render *value* with *digits* decimals, or the placeholder when missing."""
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return NO_DATA
    return f"{value:.{digits}f}{suffix}"


class SignalQuality(NamedTuple):
    label: str
    color: str


def signal_quality(rsrp: float | None) -> SignalQuality:
    """Bucket an LTE RSRP reading (dBm)."""
    if rsrp is None:
        return SignalQuality("Unknown", "#888")
    if rsrp >= -80:
        return SignalQuality("Excellent", "#2ecc71")
    if rsrp >= -90:
        return SignalQuality("Good", "#27ae60")
    if rsrp >= -100:
        return SignalQuality("Fair", "#f1c40f")
    if rsrp >= -110:
        return SignalQuality("Poor", "#e67e22")
    return SignalQuality("Weak", "#e74c3c")


def format_uptime(seconds: float | None) -> str:
    """``3d 4h`` for long uptimes, ``4h 12m`` otherwise."""
    if not seconds:
        return NO_DATA
    whole = int(seconds)
    days, remainder = divmod(whole, 86400)
    hours = remainder // 3600
    if days > 0:
        return f"{days}d {hours}h"
    minutes = (remainder % 3600) // 60
    return f"{hours}h {minutes}m"


def format_mb(mb: float | None) -> str:
    if mb is None:
        return NO_DATA
    if mb >= 1024:
        return f"{mb / 1024:.1f} GB"
    return f"{round(mb)} MB"


def format_duration(duration: timedelta | float | None) -> str:
    """Render a duration (a timedelta or seconds) as ``2d 3h``, ``3h 5m`` or ``5m``."""
    if isinstance(duration, timedelta):
        duration = duration.total_seconds()
    if not duration:
        return NO_DATA
    total_minutes = int(duration // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours >= 24:
        return f"{hours // 24}d {hours % 24}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_ago(last_updated: datetime | None, now: datetime | None = None) -> str | None:
    """Freshness label for a source: ``just now``, ``42s ago``, ``5m ago`` or ``3h ago``.

    Returns ``None`` when nothing has been fetched yet. Timestamps ahead
    of *now* read as ``just now``.
    """
    if last_updated is None:
        return None
    now = now or datetime.now(UTC)
    elapsed = int((now - last_updated).total_seconds())
    if elapsed < 10:
        return "just now"
    if elapsed < 60:
        return f"{elapsed}s ago"
    if elapsed < 3600:
        return f"{elapsed // 60}m ago"
    return f"{elapsed // 3600}h ago"
