"""Tests for the fixed-window outbound rate limiter."""

import asyncio
from time import monotonic

import httpx
import pytest

from modules.geolocation.rate_limiter import FixedWindowRateLimiter, RateLimitTransport


class TestFixedWindowRateLimiter:
    """Tests for FixedWindowRateLimiter."""

    def test_max_is_clamped(self):
        assert FixedWindowRateLimiter(max_per_minute=0).max_per_minute == 1
        assert FixedWindowRateLimiter(max_per_minute=-10).max_per_minute == 1

    @pytest.mark.asyncio
    async def test_admissions_within_budget_do_not_wait(self):
        limiter = FixedWindowRateLimiter(max_per_minute=5, window_seconds=10)

        start = monotonic()
        for _ in range(5):
            await limiter.admit()

        assert monotonic() - start < 0.5
        assert limiter.count_in_window == 5

    @pytest.mark.asyncio
    async def test_third_admission_waits_for_next_window(self):
        limiter = FixedWindowRateLimiter(max_per_minute=2, window_seconds=0.4)

        start = monotonic()
        await limiter.admit()
        await limiter.admit()
        assert monotonic() - start < 0.2

        await limiter.admit()
        assert monotonic() - start >= 0.35
        # Новое окно: текущий вызов уже посчитан
        assert limiter.count_in_window == 1

    @pytest.mark.asyncio
    async def test_window_resets_after_elapsed(self):
        now = [100.0]
        limiter = FixedWindowRateLimiter(max_per_minute=1, window_seconds=60, clock=lambda: now[0])

        await limiter.admit()
        now[0] += 61

        start = monotonic()
        await limiter.admit()
        assert monotonic() - start < 0.1
        assert limiter.count_in_window == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_respect_budget(self):
        limiter = FixedWindowRateLimiter(max_per_minute=3, window_seconds=0.3)
        admitted_at = []

        async def worker():
            async with limiter:
                admitted_at.append(monotonic())

        start = monotonic()
        await asyncio.gather(*(worker() for _ in range(6)))

        first_window = [t for t in admitted_at if t - start < 0.25]
        assert len(admitted_at) == 6
        assert len(first_window) == 3

    @pytest.mark.asyncio
    async def test_cancelled_waiter_leaves_limiter_usable(self):
        limiter = FixedWindowRateLimiter(max_per_minute=1, window_seconds=0.3)
        await limiter.admit()

        waiter = asyncio.create_task(limiter.admit())
        await asyncio.sleep(0.05)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        await asyncio.wait_for(limiter.admit(), timeout=1.0)


class TestRateLimitTransport:

    @pytest.mark.asyncio
    async def test_takes_slot_per_request(self):
        limiter = FixedWindowRateLimiter(max_per_minute=10, window_seconds=60)
        transport = RateLimitTransport(limiter, httpx.MockTransport(lambda r: httpx.Response(200)))

        async with httpx.AsyncClient(transport=transport, base_url="https://provider.test") as client:
            await client.get("/a")
            await client.get("/b")

        assert limiter.count_in_window == 2
