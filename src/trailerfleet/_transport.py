"""HTTP transport for the fleet backend JSON API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from trailerfleet._constants import USER_AGENT
from trailerfleet._redact import redact_for_log
from trailerfleet.config import FleetConfig
from trailerfleet.exceptions import FleetTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        ...


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, str] | None:
    """Drop ``None`` query values and stringify the rest."""
    if not params:
        return None
    cleaned = {key: str(value) for key, value in params.items() if value is not None}
    return cleaned or None


class HttpTransport:
    """JSON-over-HTTP transport bound to one :class:`aiohttp.ClientSession`."""

    def __init__(self, config: FleetConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = (
            aiohttp.ClientTimeout(total=config.request_timeout) if config.request_timeout is not None else None
        )

    def _headers(self, *, has_body: bool) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if has_body:
            headers["content-type"] = "application/json"
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises :class:`FleetTransportError` for connection failures,
        non-2xx statuses and bodies that are not valid JSON.
        """
        url = f"{self._config.base_url}{endpoint}"
        query = _clean_params(params)
        body = json.dumps(payload) if payload is not None else None

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled and payload is not None:
            _logger.debug("%s %s request body: %s", method, endpoint, redact_for_log(dict(payload)))

        kwargs: dict[str, Any] = {
            "params": query,
            "data": body,
            "headers": self._headers(has_body=body is not None),
        }
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            async with self._http.request(method, url, **kwargs) as resp:
                text = await resp.text()
                if resp.status < 200 or resp.status >= 300:
                    raise FleetTransportError(
                        f"API error: {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FleetTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FleetTransportError(
                f"Request to {endpoint} failed: {exc or type(exc).__name__}",
                endpoint=endpoint,
            ) from exc

        if not text.strip():
            return None

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FleetTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("%s %s response: %s", method, endpoint, redact_for_log(result))
        return result
