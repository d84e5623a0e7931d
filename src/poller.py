"""Poll scheduler: fixed-period reconciliation cycles with single-flight execution."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from src.models import DebateView

logger = logging.getLogger(__name__)

View = tuple[DebateView, ...]


class PollScheduler:
    """Drives reconciliation cycles and owns the published view.

    - The first cycle starts immediately on start(), then one per interval.
    - A tick that fires while a cycle is running is dropped, not queued.
    - A failed cycle publishes an empty view; the scheduler keeps ticking.
    - stop() lets an in-flight cycle finish, discards its result and
      returns once no background task remains.

    The view is replaced in a single assignment, so readers never see a
    partially built list.

    Usage:
        scheduler = PollScheduler(lambda: run_cycle(...), interval_sec=10)
        await scheduler.start()
        ...
        scheduler.view
        await scheduler.stop()
    """

    def __init__(
        self,
        cycle: Callable[[], Awaitable[View]],
        interval_sec: float,
        on_cycle_complete: Callable[[View], None] | None = None,
    ) -> None:
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be positive, got {interval_sec}")
        self._cycle = cycle
        self._interval = interval_sec
        self._on_cycle_complete = on_cycle_complete

        self._view: View = ()
        self._ticker: asyncio.Task | None = None
        self._cycle_task: asyncio.Task | None = None
        self._stopped = False

        # Stats
        self._cycles_completed = 0
        self._cycles_failed = 0
        self._ticks_skipped = 0

    @property
    def view(self) -> View:
        return self._view

    @property
    def running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    @property
    def cycle_in_flight(self) -> bool:
        return self._cycle_task is not None and not self._cycle_task.done()

    async def start(self) -> None:
        """Start ticking. The first cycle is triggered immediately."""
        if self.running:
            return
        self._stopped = False
        self._ticker = asyncio.create_task(self._tick_loop())
        logger.info("Poll scheduler started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        """Stop ticking and wait for any in-flight cycle, discarding its result."""
        self._stopped = True
        if self._ticker is not None:
            self._ticker.cancel()
            try:
                await self._ticker
            except asyncio.CancelledError:
                pass
            self._ticker = None
        if self._cycle_task is not None:
            await self._cycle_task
            self._cycle_task = None
        logger.info("Poll scheduler stopped")

    def trigger(self) -> bool:
        """Start a cycle unless one is already running.

        Returns:
            True if a new cycle was started, False if the trigger was dropped.
        """
        if self._stopped:
            return False
        if self.cycle_in_flight:
            self._ticks_skipped += 1
            logger.debug("Cycle still running, skipping tick")
            return False
        self._cycle_task = asyncio.create_task(self._run_cycle())
        return True

    async def refresh(self) -> View:
        """Run a cycle now, or join the one in flight, and return the view.

        Works without start(); after stop() it only returns the last view.
        """
        if not self.cycle_in_flight:
            self.trigger()
        task = self._cycle_task
        if task is not None:
            await task
        return self._view

    def get_metrics(self) -> dict:
        return {
            "cycles_completed": self._cycles_completed,
            "cycles_failed": self._cycles_failed,
            "ticks_skipped": self._ticks_skipped,
            "interval_sec": self._interval,
            "running": self.running,
        }

    async def _tick_loop(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick = loop.time()
        while True:
            self.trigger()
            next_tick += self._interval
            now = loop.time()
            if next_tick < now:
                next_tick = now
            await asyncio.sleep(next_tick - now)

    async def _run_cycle(self) -> None:
        try:
            view = await self._cycle()
        except Exception as exc:
            self._cycles_failed += 1
            logger.error("Reconciliation cycle failed: %s", exc)
            view = ()

        if self._stopped:
            logger.debug("Scheduler stopped during cycle, discarding result")
            return

        self._view = view
        self._cycles_completed += 1
        if self._on_cycle_complete:
            try:
                self._on_cycle_complete(view)
            except Exception as exc:
                logger.warning("on_cycle_complete callback failed: %s", exc)
