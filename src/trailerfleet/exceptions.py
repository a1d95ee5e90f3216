"""Custom exception hierarchy for trailerfleet."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all trailerfleet errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetTransportError(FleetError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FleetApiError(FleetError):
    """Backend answered, but reported an application-level failure.

    Raised when the JSON body carries ``"success": false`` or an
    ``"error"`` field instead of the requested collection.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str = "",
    ) -> None:
        self.endpoint = endpoint
        super().__init__(message)


class FleetResponseError(FleetApiError):
    """Response JSON did not have the expected shape (e.g. not an object)."""
