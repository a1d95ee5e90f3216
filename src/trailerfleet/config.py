"""Client configuration for trailerfleet."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from trailerfleet._constants import DEFAULT_BASE_URL
from trailerfleet.exceptions import FleetConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(env_key: str, value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise FleetConfigError(f"{env_key} must be a number, got {value!r}") from exc
    if parsed <= 0:
        raise FleetConfigError(f"{env_key} must be positive, got {value!r}")
    return parsed


@dataclasses.dataclass(frozen=True)
class PollIntervals:
    """Default refresh cadence per data source, in seconds.

    The values mirror how often each dashboard view re-reads its
    resource.  They are defaults only; every
    :class:`~trailerfleet.polling.source.PollingSource` can be given its
    own interval.
    """

    sites: float = 60.0
    fleet_latest: float = 30.0
    fleet_combined: float = 60.0
    fleet_energy: float = 60.0
    fleet_alerts: float = 60.0
    fleet_network: float = 60.0
    job_sites: float = 60.0
    job_site_detail: float = 30.0
    analytics: float = 120.0
    rankings: float = 120.0
    intelligence: float = 60.0
    maintenance: float = 60.0
    my_work: float = 30.0
    settings: float = 60.0
    actions: float = 30.0

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value <= 0:
                raise FleetConfigError(f"poll interval {f.name!r} must be positive, got {value}")


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Backend base URL (scheme and host, no trailing ``/api``).
    api_token : str or None
        Optional bearer token sent as ``Authorization`` header.
    request_timeout : float or None
        Total per-request timeout in seconds. ``None`` keeps the
        transport default; polling never adds a timeout of its own.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    intervals : PollIntervals
        Default polling cadence per data source.
    """

    base_url: str = DEFAULT_BASE_URL
    api_token: str | None = None
    request_timeout: float | None = None
    api_trace_enabled: bool = False
    intervals: PollIntervals = dataclasses.field(default_factory=PollIntervals)

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise FleetConfigError("base_url must be non-empty")
        object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``TRAILERFLEET_BASE_URL``, ``TRAILERFLEET_API_TOKEN``,
        ``TRAILERFLEET_REQUEST_TIMEOUT``, ``TRAILERFLEET_API_TRACE_ENABLED``
        and one ``TRAILERFLEET_INTERVAL_<SOURCE>`` variable per field of
        :class:`PollIntervals` (e.g. ``TRAILERFLEET_INTERVAL_FLEET_LATEST``).
        Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        FleetConfig
            Populated configuration.
        """
        env = os.environ

        interval_kwargs: dict[str, float] = {}
        for f in dataclasses.fields(PollIntervals):
            env_key = f"TRAILERFLEET_INTERVAL_{f.name.upper()}"
            val = env.get(env_key)
            if val is not None:
                interval_kwargs[f.name] = _env_float(env_key, val)

        # Allow overriding intervals via a nested dict
        interval_overrides = overrides.pop("intervals", None)
        if isinstance(interval_overrides, dict):
            interval_kwargs.update(interval_overrides)
        elif isinstance(interval_overrides, PollIntervals):
            interval_kwargs = dataclasses.asdict(interval_overrides)

        intervals = PollIntervals(**interval_kwargs) if interval_kwargs else PollIntervals()

        config_kwargs: dict[str, Any] = {"intervals": intervals}

        base_url = env.get("TRAILERFLEET_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        token = env.get("TRAILERFLEET_API_TOKEN")
        if token:
            config_kwargs["api_token"] = token

        timeout_env = env.get("TRAILERFLEET_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("TRAILERFLEET_REQUEST_TIMEOUT", timeout_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("TRAILERFLEET_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
