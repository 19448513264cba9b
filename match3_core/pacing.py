from __future__ import annotations

import asyncio
from typing import List


class Pacer:
    """
    The single suspension point of the core. Pipeline steps await `wait` between
    logical stages; an adapter that animates can set a time scale so those waits
    last as long as its animations. Pausing holds every waiter until resume, and a
    pending delay stops advancing while paused.
    """

    FRAME = 1 / 60

    def __init__(self, time_scale: float = 0.0) -> None:
        self.time_scale = time_scale
        self._paused = False
        self._waiters: List[asyncio.Future] = []

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False
        waiters, self._waiters = self._waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_result(None)

    async def gate(self) -> None:
        """Returns immediately unless paused, otherwise waits for resume."""
        while self._paused:
            fut = asyncio.get_running_loop().create_future()
            self._waiters.append(fut)
            await fut

    async def wait(self, seconds: float = 0.0) -> None:
        await self.gate()
        remaining = seconds * self.time_scale
        if remaining <= 0:
            await asyncio.sleep(0)
        while remaining > 0:
            step = min(remaining, self.FRAME)
            await asyncio.sleep(step)
            if self._paused:
                await self.gate()
            else:
                remaining -= step
        await self.gate()
