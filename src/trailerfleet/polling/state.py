"""Polling descriptors and fetch-state snapshots."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

FetchFn = Callable[[], Awaitable[Any]]


class SourceDescriptor(BaseModel):
    """What to poll and how often.

    ``dependency_key`` identifies the schedule: when any element changes
    the source restarts. ``dedup_key`` identifies the request: concurrent
    fetches sharing one are coalesced into a single call. A missing or
    blank ``dedup_key`` disables coalescing.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    fetch: FetchFn
    interval: float = Field(..., gt=0, description="Seconds between scheduled fetches")
    dependency_key: tuple[Any, ...] = ()
    dedup_key: str | None = None
    name: str = ""

    @field_validator("dependency_key", mode="before")
    @classmethod
    def _as_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (str, bytes)):
            return (value,)
        if isinstance(value, Sequence):
            return tuple(value)
        return value

    @field_validator("dedup_key")
    @classmethod
    def _blank_as_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @property
    def label(self) -> str:
        return self.name or self.dedup_key or getattr(self.fetch, "__name__", "source")

    @property
    def request_key(self) -> str | None:
        """Registry key for this descriptor's requests.

        Scoped by ``dependency_key`` so a request started for one set of
        inputs is never joined by a fetch for another.
        """
        if self.dedup_key is None or not self.dependency_key:
            return self.dedup_key
        return f"{self.dedup_key}:{self.dependency_key!r}"


class FetchState(BaseModel, Generic[T]):
    """Immutable view of a polling source at one point in time.

    ``loading`` is true only until the first fetch for the current
    dependency key resolves. ``last_updated`` moves only on success and
    never goes backwards while the source is running.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: T | None = None
    loading: bool = True
    error: str | None = None
    last_updated: datetime | None = None
