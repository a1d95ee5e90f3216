"""Base model, enum and field types for fleet API records.

Every response model inherits from :class:`FleetBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.

Field types such as :data:`Timestamp` and :data:`OptFloat` perform the
shape-tolerant coercion (epoch seconds/milliseconds or ISO strings,
numeric strings) once, so aggregation code only ever sees canonical
values.

State enums inherit from :class:`FleetStrEnum` which adds an ``UNKNOWN``
member and a ``_missing_`` hook that returns it for any unmapped value.
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from trailerfleet.ingestion.normalize import (
    is_sentinel,
    parse_date,
    parse_timestamp,
    safe_bool,
    safe_float,
    safe_int,
)


def coerce_id(value: Any) -> Any:
    """Normalize record identifiers to strings (``123``, ``123.0`` and ``"123"`` are equal)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


Timestamp = Annotated[datetime | None, BeforeValidator(parse_timestamp)]
"""Epoch seconds, epoch milliseconds or ISO string → UTC datetime."""

Day = Annotated[date | None, BeforeValidator(parse_date)]
"""Calendar day (``YYYY-MM-DD`` or any timestamp form)."""

OptFloat = Annotated[float | None, BeforeValidator(safe_float)]
OptInt = Annotated[int | None, BeforeValidator(safe_int)]
Flag = Annotated[bool, BeforeValidator(lambda value: bool(safe_bool(value)))]
"""Wire flags (``1``, ``"yes"``, ``"online"``) → bool; unrecognized values are ``False``."""
RecordId = Annotated[str, BeforeValidator(coerce_id)]
OptRecordId = Annotated[str | None, BeforeValidator(coerce_id)]


class FleetStrEnum(enum.StrEnum):
    """Base for string state enums.

    Every subclass **must** define ``UNKNOWN``. Values the API sends that
    have no mapped member resolve to ``UNKNOWN`` instead of raising.
    """

    @classmethod
    def _missing_(cls, value: object) -> FleetStrEnum:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        unknown: FleetStrEnum = cls["UNKNOWN"]
        return unknown


class FleetBaseModel(BaseModel):
    """Base for fleet API response models.

    Handles:
    * sentinel values (``""``, ``"--"``, NaN, ``None``) → dropped so the
      field default is used instead
    * stashes the original API dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if not is_sentinel(value)}
        # Only auto-stash raw when not explicitly provided.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
