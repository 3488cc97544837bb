import asyncio
import logging
from typing import Awaitable, Callable, Optional

from backoffice.core.config import ANALYSIS_INITIAL_DELAY_SECONDS, ANALYSIS_INTERVAL_SECONDS

log = logging.getLogger(__name__)


class RecurringJob:
    """
    Runs an async job on a fixed interval until stopped.

    Owned by the application lifespan. ``tick()`` runs the job exactly once
    and is what tests drive; the loop is just ``tick()`` plus a sleep.
    """

    def __init__(
        self,
        name: str,
        job: Callable[[], Awaitable],
        interval: float = ANALYSIS_INTERVAL_SECONDS,
        initial_delay: float = ANALYSIS_INITIAL_DELAY_SECONDS,
    ):
        self.name = name
        self.job = job
        self.interval = interval
        self.initial_delay = initial_delay
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self):
        """Runs the job once. A failing run is logged and never stops the loop."""
        try:
            return await self.job()
        except Exception:
            log.exception(f"Job '{self.name}' failed")
            return None

    async def _run_loop(self):
        log.info(f"--- {self.name} started (every {self.interval}s) ---")
        if self.initial_delay:
            await asyncio.sleep(self.initial_delay)
        while True:
            await self.tick()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run_loop(), name=self.name)

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info(f"{self.name} stopped.")
