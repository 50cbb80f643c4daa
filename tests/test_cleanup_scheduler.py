"""Tests for the temporal block cleanup scheduler."""

import asyncio
from time import monotonic

import pytest

from conftest import make_entry
from modules.countries.cleanup import SchedulerState, TemporalBlockCleanupScheduler


class TestTemporalBlockCleanupScheduler:

    def test_run_once_removes_expired(self, store):
        store.add(make_entry("US"))
        store.add_temporal(make_entry("FR", minutes=-1))
        scheduler = TemporalBlockCleanupScheduler(store)

        assert scheduler.run_once() == 1
        assert scheduler.runs == 1
        assert scheduler.state == SchedulerState.IDLE
        assert len(store) == 1

    def test_run_once_survives_errors(self, store, monkeypatch):
        def broken():
            raise RuntimeError("boom")

        monkeypatch.setattr(store, "sweep_expired", broken)
        scheduler = TemporalBlockCleanupScheduler(store)

        assert scheduler.run_once() == 0
        assert scheduler.runs == 1

    @pytest.mark.asyncio
    async def test_first_sweep_runs_on_start(self, store):
        store.add_temporal(make_entry("FR", minutes=-1))
        scheduler = TemporalBlockCleanupScheduler(store, interval_seconds=3600)

        scheduler.start()
        await asyncio.sleep(0.05)
        try:
            assert len(store) == 0
            assert scheduler.is_running
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_runs_periodically(self, store):
        scheduler = TemporalBlockCleanupScheduler(store, interval_seconds=0.05)

        scheduler.start()
        await asyncio.sleep(0.3)
        await scheduler.stop()

        assert scheduler.runs >= 3

    @pytest.mark.asyncio
    async def test_stop_is_prompt(self, store):
        scheduler = TemporalBlockCleanupScheduler(store, interval_seconds=3600)
        scheduler.start()
        await asyncio.sleep(0.01)

        start = monotonic()
        await asyncio.wait_for(scheduler.stop(), timeout=1.0)

        assert monotonic() - start < 1.0
        assert scheduler.is_running is False
        assert scheduler.state == SchedulerState.STOPPED

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self, store):
        scheduler = TemporalBlockCleanupScheduler(store, interval_seconds=3600)
        scheduler.start()
        task = scheduler._task
        scheduler.start()
        try:
            assert scheduler._task is task
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, store):
        scheduler = TemporalBlockCleanupScheduler(store)
        await scheduler.stop()
        assert scheduler.state == SchedulerState.IDLE
