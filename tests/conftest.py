from __future__ import annotations

import asyncio

import pytest


class ManualTicker:
    """Stand-in for ``asyncio.sleep`` that only wakes when told to."""

    def __init__(self) -> None:
        self.waiters: list[asyncio.Future[None]] = []
        self.delays: list[float] = []

    async def sleep(self, delay: float) -> None:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self.waiters.append(future)
        self.delays.append(delay)
        await future

    @property
    def pending(self) -> int:
        return sum(1 for future in self.waiters if not future.done())

    async def tick(self) -> None:
        """Wake every sleeper once, then let the woken tasks run."""
        waiters, self.waiters = self.waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)
        await self.settle()

    @staticmethod
    async def settle(rounds: int = 10) -> None:
        for _ in range(rounds):
            await asyncio.sleep(0)


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()
