import asyncio
import logging
from enum import Enum
from typing import Optional

from core.config import TEMPORAL_BLOCK_CLEANUP_INTERVAL
from modules.countries.repository import CountryBlockStore

logger = logging.getLogger("system")


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class TemporalBlockCleanupScheduler:
    """
    Периодическая очистка просроченных временных блокировок.

    Runs a sweep right away and then every `interval_seconds` until stop()
    is called. The wait between runs wakes up as soon as stop() is signalled.
    """

    def __init__(
        self,
        store: CountryBlockStore,
        interval_seconds: float = TEMPORAL_BLOCK_CLEANUP_INTERVAL.total_seconds(),
    ):
        self.store = store
        self.interval_seconds = interval_seconds
        self.state = SchedulerState.IDLE
        self.runs = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """Один проход очистки. Ошибки логируются и не пробрасываются."""
        self.state = SchedulerState.RUNNING
        try:
            removed = self.store.sweep_expired()
            if removed > 0:
                logger.info({"event": "temporal_block_cleanup", "removed": removed})
            else:
                logger.debug({"event": "temporal_block_cleanup", "removed": 0})
            return removed
        except Exception as e:
            logger.error({
                "event": "temporal_block_cleanup_error",
                "error": str(e),
                "error_type": type(e).__name__,
            })
            return 0
        finally:
            self.runs += 1
            self.state = SchedulerState.IDLE

    async def _loop(self):
        logger.info({"event": "scheduler_started", "interval_seconds": self.interval_seconds})

        while not self._stop_event.is_set():
            self.run_once()

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

        self.state = SchedulerState.STOPPED
        logger.info({"event": "scheduler_stopped", "runs": self.runs})

    def start(self):
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self.state = SchedulerState.IDLE
        self._task = asyncio.create_task(self._loop(), name="temporal-block-cleanup")

    async def stop(self):
        if self._task is None:
            return
        self._stop_event.set()
        try:
            await self._task
        finally:
            self._task = None
