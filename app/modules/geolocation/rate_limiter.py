"""
Fixed-window rate limiting for outbound geolocation calls.

At most `max_per_minute` admissions are granted per window. When the window
is saturated the caller is suspended until it rolls over; admissions never
fail.

Example:
    limiter = FixedWindowRateLimiter(max_per_minute=60)

    async with limiter:
        response = await client.get(url)
"""
import asyncio
import logging
from time import monotonic
from typing import Callable

import httpx

from core.config import RATE_LIMIT_WINDOW
from core.monitoring.metrics import record_rate_limit_wait

logger = logging.getLogger("app")


class FixedWindowRateLimiter:
    """
    Fixed-window counter guarded by one asyncio.Lock.

    Admissions are serialized through the lock, so a caller that has to wait
    for the window to roll over holds up everyone queued behind it.
    Cancelling a waiting caller releases the lock and leaves the window as it
    was.
    """

    def __init__(
        self,
        max_per_minute: int = 60,
        window_seconds: float = RATE_LIMIT_WINDOW.total_seconds(),
        clock: Callable[[], float] = monotonic,
    ):
        self.max_per_minute = max(1, int(max_per_minute))
        self.window_seconds = window_seconds
        self._clock = clock
        self._window_start = clock()
        self._count = 0
        self._gate = asyncio.Lock()

    @property
    def count_in_window(self) -> int:
        return self._count

    async def admit(self) -> None:
        async with self._gate:
            now = self._clock()
            elapsed = now - self._window_start

            if elapsed >= self.window_seconds:
                self._window_start = now
                self._count = 0
                elapsed = 0.0

            if self._count >= self.max_per_minute:
                delay = self.window_seconds - elapsed
                if delay > 0:
                    logger.warning({
                        "event": "geolocation_rate_limit_wait",
                        "delay_seconds": round(delay, 3),
                        "max_per_minute": self.max_per_minute,
                    })
                    await asyncio.sleep(delay)
                    record_rate_limit_wait(delay)
                self._window_start = self._clock()
                self._count = 0

            self._count += 1

    async def __aenter__(self):
        await self.admit()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class RateLimitTransport(httpx.AsyncBaseTransport):
    """httpx transport that takes a limiter slot before every outbound request"""

    def __init__(self, limiter: FixedWindowRateLimiter, transport: httpx.AsyncBaseTransport):
        self.limiter = limiter
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await self.limiter.admit()
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        await self._transport.aclose()
