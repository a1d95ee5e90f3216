"""In-flight request registry for coalescing concurrent fetches.

One registry is owned per client/session; there is no module-level
instance. All operations run on the event loop thread, and
:meth:`InFlightRegistry.acquire` performs its check-then-insert without
yielding, so two callers can never both start a request for one key.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InFlightRequest:
    """The shared future for one outstanding request."""

    key: str
    future: asyncio.Future[Any]
    started_at: float = field(default_factory=time.monotonic)
    waiters: int = 0


class InFlightRegistry:
    """Maps dedup key → outstanding request.

    Invariant: at most one entry per key; the entry is removed as soon
    as its future settles (result, exception or cancellation), however
    many callers awaited it.
    """

    def __init__(self) -> None:
        self._entries: dict[str, InFlightRequest] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def pending(self, key: str) -> InFlightRequest | None:
        return self._entries.get(key)

    def acquire(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> asyncio.Future[Any]:
        """Return the shared future for *key*, starting *fetch* if none is running.

        Must be called from a running event loop. *fetch* is only invoked
        when no request for *key* is outstanding.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.future.done():
            # Settled but its release callback has not run yet.
            del self._entries[key]
            entry = None
        if entry is not None:
            entry.waiters += 1
            _logger.debug("Joining in-flight request %s (%d waiters)", key, entry.waiters)
            return entry.future

        future = asyncio.ensure_future(fetch())
        entry = InFlightRequest(key=key, future=future, waiters=1)
        self._entries[key] = entry
        future.add_done_callback(lambda fut, entry=entry: self._release(entry, fut))
        _logger.debug("Started request %s", key)
        return future

    async def run(self, key: str, fetch: Callable[[], Awaitable[Any]]) -> Any:
        """Await the (possibly shared) request for *key*.

        Every waiter receives the same result or the same exception.
        Cancelling one waiter does not cancel the shared request.
        """
        future = self.acquire(key, fetch)
        return await asyncio.shield(future)

    def _release(self, entry: InFlightRequest, future: asyncio.Future[Any]) -> None:
        if self._entries.get(entry.key) is entry:
            del self._entries[entry.key]
        # Mark the outcome as retrieved; waiters re-raise it themselves.
        if not future.cancelled():
            future.exception()
        elapsed = time.monotonic() - entry.started_at
        _logger.debug("Request %s settled after %.3fs", entry.key, elapsed)
