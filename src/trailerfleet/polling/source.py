"""Periodically refreshed view of one remote resource.

A :class:`PollingSource` fetches immediately when started, then again
every ``interval`` seconds on its own timer task, independently of every
other source. Fetches never overlap-block each other: the timer spawns a
new fetch on each tick without waiting for earlier ones, and state is
updated in the order fetches *resolve* (last resolved wins).

Cancellation is emulated: stopping a source cancels its timer and marks
it dead, and any fetch still in flight is left to finish but its outcome
is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from trailerfleet.polling.registry import InFlightRegistry
from trailerfleet.polling.state import FetchFn, FetchState, SourceDescriptor

_logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

SleepFn = Callable[[float], Awaitable[Any]]

_UNCHANGED: Any = object()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _error_message(exc: BaseException) -> str:
    text = str(exc).strip()
    return text or type(exc).__name__


class PollingSource(Generic[T]):
    """Repeatedly refreshed, deduplicated state for one remote resource.

    Usage::

        source = PollingSource(SourceDescriptor(fetch=client.get_sites, interval=60.0))
        async with source:
            ...
            print(source.data, source.error, source.last_updated)

    Parameters
    ----------
    descriptor : SourceDescriptor
        Fetch function, interval, dependency key and dedup key.
    registry : InFlightRegistry or None
        Shared registry used to coalesce requests with the same dedup key.
        Defaults to a private registry (which still coalesces this
        source's own overlapping fetches).
    clock : callable
        Returns the current UTC time; used for ``last_updated``.
    sleep : callable
        Coroutine used by the timer between ticks. Tests replace it with
        a manually advanced ticker.
    on_update : callable or None
        Invoked with the new :class:`FetchState` after each applied change.
    """

    def __init__(
        self,
        descriptor: SourceDescriptor,
        *,
        registry: InFlightRegistry | None = None,
        clock: Callable[[], datetime] = _utcnow,
        sleep: SleepFn = asyncio.sleep,
        on_update: Callable[[FetchState[T]], None] | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._registry = registry if registry is not None else InFlightRegistry()
        self._clock = clock
        self._sleep = sleep
        self._on_update = on_update
        self._state: FetchState[T] = FetchState()
        self._generation = 0
        self._running = False
        self._timer: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[Any]] = set()

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def descriptor(self) -> SourceDescriptor:
        return self._descriptor

    @property
    def state(self) -> FetchState[T]:
        return self._state

    @property
    def data(self) -> T | None:
        return self._state.data

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def last_updated(self) -> datetime | None:
        return self._state.last_updated

    @property
    def running(self) -> bool:
        return self._running

    @property
    def name(self) -> str:
        return self._descriptor.label

    def __repr__(self) -> str:
        return f"<PollingSource {self.name!r} running={self._running} loading={self._state.loading}>"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> PollingSource[T]:
        """Fire the first fetch now and install the interval timer.

        Must be called from a running event loop. Starting a running
        source is a no-op.
        """
        asyncio.get_running_loop()
        if self._running:
            return self
        self._running = True
        _logger.info("Polling %s every %.1fs", self.name, self._descriptor.interval)
        if not self._state.loading:
            # Restarted after stop(): nothing has resolved for this run yet.
            self._apply(loading=True, error=None)
        self._spawn_fetch()
        self._install_timer()
        return self

    def stop(self) -> None:
        """Cancel the timer; results of fetches still in flight are ignored."""
        if not self._running:
            return
        self._running = False
        self._generation += 1
        self._cancel_timer()
        _logger.info("Stopped polling %s", self.name)

    async def __aenter__(self) -> PollingSource[T]:
        return self.start()

    async def __aexit__(self, *exc: Any) -> None:
        self.stop()

    def update(
        self,
        dependency_key: Iterable[Any],
        *,
        fetch: FetchFn | None = None,
        interval: float | None = None,
        dedup_key: str | None = _UNCHANGED,
    ) -> bool:
        """Point the source at new inputs.

        When *dependency_key* differs from the current key (element-wise
        equality), or *interval* or *dedup_key* changes, the old timer is
        cancelled, ``loading`` resets, a fetch fires immediately and a new
        timer is installed. Otherwise only the fetch function is swapped.
        Passing ``dedup_key=None`` turns coalescing off.

        A stopped source only records the new inputs; they take effect on
        the next :meth:`start`.

        Returns whether the schedule was restarted.
        """
        current = self._descriptor
        self._descriptor = SourceDescriptor(
            fetch=fetch if fetch is not None else current.fetch,
            interval=current.interval if interval is None else interval,
            dependency_key=tuple(dependency_key),
            dedup_key=current.dedup_key if dedup_key is _UNCHANGED else dedup_key,
            name=current.name,
        )
        new = self._descriptor
        restart = (
            new.dependency_key != current.dependency_key
            or new.interval != current.interval
            or new.dedup_key != current.dedup_key
        )
        if not restart:
            return False

        self._generation += 1
        self._cancel_timer()
        if not self._running:
            return True
        _logger.info("Restarting %s for %r", self.name, new.dependency_key)
        self._apply(loading=True, error=None)
        self._spawn_fetch()
        self._install_timer()
        return True

    async def refetch(self) -> T | None:
        """Fetch now, outside the schedule, without touching the timer.

        Joins the outstanding request when one with the same dedup key is
        in flight. Returns the fetched value, or ``None`` when the fetch
        failed (the message is in :attr:`error`). On a source that is not
        running the value is returned but state is left untouched.
        """
        task = self._spawn_fetch()
        result: T | None = await asyncio.shield(task)
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _install_timer(self) -> None:
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(
            self._tick_loop(self._generation, self._descriptor.interval),
            name=f"poll:{self.name}",
        )

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and not timer.done():
            timer.cancel()

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    async def _tick_loop(self, generation: int, interval: float) -> None:
        while self._is_current(generation):
            await self._sleep(interval)
            if not self._is_current(generation):
                break
            _logger.debug("Polling %s (scheduled)", self.name)
            self._spawn_fetch()

    def _start_request(self) -> asyncio.Future[Any]:
        descriptor = self._descriptor
        try:
            request_key = descriptor.request_key
            if request_key is not None:
                return self._registry.acquire(request_key, descriptor.fetch)
            return asyncio.ensure_future(descriptor.fetch())
        except Exception as exc:  # noqa: BLE001 - surfaced through state like any fetch failure
            failed: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
            failed.set_exception(exc)
            return failed

    def _spawn_fetch(self) -> asyncio.Task[T | None]:
        future = self._start_request()
        task = asyncio.get_running_loop().create_task(self._settle(future, self._generation))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _settle(self, future: asyncio.Future[Any], generation: int) -> T | None:
        try:
            result: T = await asyncio.shield(future)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            self._fail(generation, "Request cancelled")
            return None
        except Exception as exc:  # noqa: BLE001 - poll failures become state, never propagate
            self._fail(generation, _error_message(exc))
            return None

        if self._is_current(generation):
            now = self._clock()
            previous = self._state.last_updated
            if previous is not None and now < previous:
                now = previous
            self._apply(data=result, loading=False, error=None, last_updated=now)
        else:
            _logger.debug("Discarding late result for %s", self.name)
        return result

    def _fail(self, generation: int, message: str) -> None:
        if not self._is_current(generation):
            _logger.debug("Discarding late failure for %s: %s", self.name, message)
            return
        _logger.warning("Polling %s failed: %s", self.name, message)
        self._apply(loading=False, error=message)

    def _apply(self, **changes: Any) -> None:
        self._state = self._state.model_copy(update=changes)
        if self._on_update is None:
            return
        try:
            self._on_update(self._state)
        except Exception:
            _logger.exception("on_update callback for %s failed", self.name)


def start(
    descriptor: SourceDescriptor,
    *,
    registry: InFlightRegistry | None = None,
    **kwargs: Any,
) -> PollingSource[Any]:
    """Create a :class:`PollingSource` for *descriptor* and start it."""
    return PollingSource(descriptor, registry=registry, **kwargs).start()


async def write_then_refetch(
    mutation: Callable[[], Awaitable[R]] | Awaitable[R],
    *sources: PollingSource[Any],
) -> R:
    """Await a write, then refresh the given sources.

    The refetch only happens after the mutation succeeds; a failing
    mutation propagates and leaves every source's state untouched.
    """
    pending = mutation() if callable(mutation) else mutation
    result = await pending
    if sources:
        await asyncio.gather(*(source.refetch() for source in sources))
    return result
