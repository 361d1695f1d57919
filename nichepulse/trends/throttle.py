"""Minimum-interval scheduler for spacing out vendor requests."""

import asyncio
import time
from typing import Awaitable, Callable, Optional


Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


class MinIntervalThrottle:
    """
    Guarantees at least `interval` seconds between consecutive acquisitions.

    The first call returns immediately. Clock and sleep are injectable so
    tests can drive it without real delays.
    """

    def __init__(
        self,
        interval: float,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    async def wait(self) -> float:
        """
        Block until the interval since the previous call has elapsed.

        Returns:
            Seconds actually slept
        """
        now = self._clock()
        waited = 0.0
        if self._last is not None:
            remaining = self.interval - (now - self._last)
            if remaining > 0:
                await self._sleep(remaining)
                waited = remaining
                now = self._clock()
        self._last = now
        return waited

    def reset(self) -> None:
        self._last = None
