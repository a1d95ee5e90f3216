"""Normalization helpers.

Centralizes defensive parsing and placeholder handling so that models
and aggregation functions never have to re-derive wire formats.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

# Sentinel strings the backend (or upstream VRM/InControl data) uses for "not available".
_SENTINELS = frozenset({"", "--", "—", "NaN", "nan", "null"})

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1e11


def is_sentinel(value: Any) -> bool:
    """Return True if *value* means "no data"."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() in _SENTINELS:
        return True
    return isinstance(value, float) and math.isnan(value)


def safe_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    if is_sentinel(value):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if is_sentinel(value):
        return None
    if isinstance(value, (int, float)):
        return bool(value)
    normalized = str(value).strip().lower()
    if normalized in {"1", "true", "yes", "on", "online"}:
        return True
    if normalized in {"0", "false", "no", "off", "offline"}:
        return False
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Convert an API timestamp to a timezone-aware UTC datetime.

    Accepts epoch seconds, epoch milliseconds (numbers or numeric
    strings) and ISO-8601 strings (``Z`` suffix allowed; naive values are
    taken as UTC). Returns ``None`` for missing, non-positive or
    unparseable input.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, bool) or is_sentinel(value):
        return None
    if isinstance(value, (int, float)):
        return _from_epoch(float(value))
    if isinstance(value, str):
        text = value.strip()
        try:
            return _from_epoch(float(text))
        except ValueError:
            pass
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
    return None


def _from_epoch(ts: float) -> datetime | None:
    if math.isnan(ts) or ts <= 0:
        return None
    if ts > _MS_THRESHOLD:
        ts /= 1000.0
    try:
        return datetime.fromtimestamp(ts, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_date(value: Any) -> date | None:
    """Parse a calendar day (``YYYY-MM-DD``, ISO datetime or epoch)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    parsed = parse_timestamp(value)
    return parsed.date() if parsed is not None else None


def to_epoch_ms(value: datetime) -> int:
    """Epoch milliseconds for a datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp() * 1000)


def extract_collection(payload: Any, *fields: str) -> list[Any]:
    """Pull a list of records out of a response body.

    The backend wraps collections as ``{"records": [...]}`` on most
    endpoints and under a named key (``alerts``, ``job_sites``,
    ``logs`` ...) on others; a bare JSON list is accepted too. Missing or
    malformed collections yield an empty list.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, Mapping):
        return []
    for key in (*fields, "records"):
        candidate = payload.get(key)
        if isinstance(candidate, list):
            return candidate
    return []
