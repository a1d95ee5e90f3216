"""Scrubbing of fleet API bodies before they reach DEBUG logs.

Request and response bodies can carry the bearer token, backend
credentials from the settings page, technician e-mail addresses and the
public addresses of trailer gateways. :func:`redact_for_log` masks those
values and shortens long strings and record lists so one response does
not flood the log.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

MASK = "<redacted>"
MAX_DEPTH = 20

# Masked when a key equals one of these, case-insensitively.
_CREDENTIAL_KEYS = frozenset({"authorization", "cookie", "set-cookie", "password", "secret", "token"})
_CONTACT_KEYS = frozenset({"email", "phone"})
_GATEWAY_KEYS = frozenset({"wan_ip", "public_ip", "mac", "imei", "iccid"})
_MASKED_KEYS = _CREDENTIAL_KEYS | _CONTACT_KEYS | _GATEWAY_KEYS

# Masked when a key ends with one of these (``api_token``, ``db_password``).
_MASKED_SUFFIXES = ("_token", "_password", "_secret")


def _is_masked(key: str) -> bool:
    lowered = key.lower()
    return lowered in _MASKED_KEYS or lowered.endswith(_MASKED_SUFFIXES)


def _cap(items: Iterable[Any], total: int, limit: int) -> list[Any]:
    kept = list(items)
    if total > limit:
        kept.append(f"<{total - limit} more>")
    return kept


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a copy of *value* that is safe to log.

    Lists and tuples keep their first *max_items* entries plus a
    ``<N more>`` marker; strings longer than *max_string* are cut.
    Objects that are not plain JSON values are logged by ``repr``.
    """
    if _depth > MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    def inner(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)

    if isinstance(value, Mapping):
        return {str(k): MASK if _is_masked(str(k)) else inner(v) for k, v in value.items()}
    if isinstance(value, Sequence):
        return _cap((inner(item) for item in value[:max_items]), len(value), max_items)
    return repr(value)
