from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest

from trailerfleet._transport import HttpTransport
from trailerfleet.config import FleetConfig
from trailerfleet.exceptions import FleetTransportError


@dataclass
class FakeResponse:
    status: int = 200
    body: str = "{}"

    async def text(self) -> str:
        return self.body

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


@dataclass
class FakeSession:
    response: FakeResponse = field(default_factory=FakeResponse)
    error: Exception | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _transport(session: FakeSession, **config: Any) -> HttpTransport:
    return HttpTransport(FleetConfig(base_url="https://fleet.example.com", **config), session)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_get_decodes_json_and_cleans_params() -> None:
    session = FakeSession(FakeResponse(body='{"records": [1, 2]}'))

    result = await _transport(session).request_json("GET", "/api/analytics/fleet", params={"days": 30, "skip": None})

    assert result == {"records": [1, 2]}
    call = session.calls[0]
    assert call["url"] == "https://fleet.example.com/api/analytics/fleet"
    assert call["params"] == {"days": "30"}
    assert call["data"] is None
    assert "authorization" not in call["headers"]
    assert "content-type" not in call["headers"]
    assert "timeout" not in call


@pytest.mark.asyncio
async def test_payload_token_and_timeout() -> None:
    session = FakeSession()

    await _transport(session, api_token="tok", request_timeout=5.0).request_json(
        "PUT",
        "/api/settings",
        payload={"retention_days": 30},
    )

    call = session.calls[0]
    assert call["data"] == '{"retention_days": 30}'
    assert call["headers"]["authorization"] == "Bearer tok"
    assert call["headers"]["content-type"] == "application/json"
    assert call["timeout"].total == 5.0


@pytest.mark.asyncio
async def test_non_2xx_status_raises() -> None:
    session = FakeSession(FakeResponse(status=503, body="maintenance"))

    with pytest.raises(FleetTransportError) as exc_info:
        await _transport(session).request_json("GET", "/api/sites")

    assert exc_info.value.status_code == 503
    assert exc_info.value.endpoint == "/api/sites"
    assert "maintenance" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_body_is_none() -> None:
    session = FakeSession(FakeResponse(status=204, body="  "))

    assert await _transport(session).request_json("POST", "/api/settings/purge") is None


@pytest.mark.asyncio
async def test_invalid_json_raises() -> None:
    session = FakeSession(FakeResponse(body="<html>"))

    with pytest.raises(FleetTransportError) as exc_info:
        await _transport(session).request_json("GET", "/api/sites")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_client_errors_wrapped() -> None:
    session = FakeSession(error=aiohttp.ClientConnectionError("refused"))

    with pytest.raises(FleetTransportError) as exc_info:
        await _transport(session).request_json("GET", "/api/sites")

    assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)
    assert "refused" in str(exc_info.value)
