"""Shared helpers for fleet API endpoint modules.

This module centralizes the most repeated patterns:
- building ``/api`` endpoint paths
- detecting application-level failures in a decoded body
- pulling a collection out of a body and validating it into models

It is internal to trailerfleet and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from trailerfleet._constants import API_PREFIX
from trailerfleet._transport import Transport
from trailerfleet.exceptions import FleetApiError, FleetResponseError
from trailerfleet.ingestion.normalize import extract_collection
from trailerfleet.ingestion.records import parse_records

TModel = TypeVar("TModel", bound=BaseModel)


def api_path(*segments: Any) -> str:
    """``api_path("job-sites", 7)`` → ``/api/job-sites/7`` (segments are URL-quoted)."""
    return API_PREFIX + "".join(f"/{quote(str(segment), safe='')}" for segment in segments)


def ensure_success(endpoint: str, body: Any) -> Any:
    """Raise :class:`FleetApiError` when *body* reports a failure."""
    if isinstance(body, Mapping) and (body.get("success") is False or body.get("error")):
        reason = body.get("error") or body.get("message") or "unknown error"
        raise FleetApiError(f"{endpoint} failed: {reason}", endpoint=endpoint)
    return body


def expect_object(endpoint: str, body: Any) -> dict[str, Any]:
    if not isinstance(body, Mapping):
        raise FleetResponseError(
            f"{endpoint} returned {type(body).__name__}, expected an object",
            endpoint=endpoint,
        )
    return dict(body)


def parse_object(endpoint: str, model: type[TModel], body: Any) -> TModel:
    """Validate a single-object body into *model*."""
    try:
        return model.model_validate(expect_object(endpoint, body))
    except ValidationError as exc:
        raise FleetResponseError(f"{endpoint} returned an invalid {model.__name__}: {exc}", endpoint=endpoint) from exc


async def get_json(
    transport: Transport,
    endpoint: str,
    *,
    params: Mapping[str, Any] | None = None,
) -> Any:
    body = await transport.request_json("GET", endpoint, params=params)
    return ensure_success(endpoint, body)


async def send_json(
    transport: Transport,
    method: str,
    endpoint: str,
    *,
    payload: Mapping[str, Any] | None = None,
    params: Mapping[str, Any] | None = None,
) -> Any:
    body = await transport.request_json(method, endpoint, params=params, payload=payload)
    return ensure_success(endpoint, body)


async def get_collection(
    transport: Transport,
    endpoint: str,
    model: type[TModel],
    *fields: str,
    params: Mapping[str, Any] | None = None,
) -> list[TModel]:
    """GET *endpoint* and validate its collection into *model* records.

    The collection is read from the first of *fields* present, then
    ``records``, or from a bare list body.
    """
    body = await get_json(transport, endpoint, params=params)
    return parse_records(model, extract_collection(body, *fields))
