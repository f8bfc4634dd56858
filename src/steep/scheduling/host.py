"""Tick hosts that drive routines.

TickScheduler is the synchronous host: routines are started when spawned and
then resumed once per ``tick(delta)``. AsyncTickDriver calls ``tick`` from an
asyncio task at a fixed rate using wall-clock deltas.
"""

import asyncio
import logging
import time

from steep.scheduling.types import Routine

logger = logging.getLogger(__name__)


class TickScheduler:
    """Keeps the live routines and resumes each one once per tick.

    Example:
        scheduler = TickScheduler()
        scheduler.spawn(routine)   # runs the routine's first step now
        scheduler.tick(1 / 60)     # resumes every live routine once
    """

    def __init__(self) -> None:
        self._live: list[Routine] = []
        self.tick_count = 0
        self.time = 0.0

    @property
    def live_count(self) -> int:
        return len(self._live)

    def spawn(self, routine: Routine, start: bool = True) -> Routine:
        """Start a routine and keep it live until it finishes.

        With ``start=False`` the routine takes its first step on the next tick.
        """
        if not start or not self._step(routine, 0.0):
            self._live.append(routine)
        return routine

    def cancel(self, routine: Routine) -> bool:
        """Stop resuming a routine. Returns False if it was not live."""
        try:
            self._live.remove(routine)
        except ValueError:
            return False
        return True

    def tick(self, delta: float) -> None:
        """Resume every live routine once with this tick's delta.

        Routines spawned while the tick is in progress already ran their first
        step and are resumed from the next tick on.
        """
        if delta < 0:
            raise ValueError(f"tick delta must be >= 0, got {delta}")

        self.tick_count += 1
        self.time += delta

        for routine in list(self._live):
            if routine not in self._live:
                continue
            if self._step(routine, delta):
                self._live.remove(routine)

    def _step(self, routine: Routine, delta: float) -> bool:
        # A routine that raises is finished; queue flags it touched are left
        # as they were.
        try:
            return routine.resume(delta)
        except Exception:
            logger.exception(
                "routine_failed",
                extra={"routine.type": type(routine).__name__, "tick.count": self.tick_count},
            )
            return True


class AsyncTickDriver:
    """Ticks a TickScheduler from an asyncio task.

    Example:
        driver = AsyncTickDriver(scheduler, tick_rate=30)
        await driver.start()
        ...
        await driver.stop()
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        tick_rate: float = 60.0,
        max_delta: float = 0.25,
        heartbeat_ticks: int = 0,
    ):
        if tick_rate <= 0:
            raise ValueError(f"tick_rate must be > 0, got {tick_rate}")
        self._scheduler = scheduler
        self._interval = 1.0 / tick_rate
        self._max_delta = max_delta
        self._heartbeat_ticks = heartbeat_ticks
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def scheduler(self) -> TickScheduler:
        return self._scheduler

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.info(
            "tick_driver_started",
            extra={"tick.interval": round(self._interval, 4)},
        )
        self._task = asyncio.create_task(self._tick_loop())

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info(
            "tick_driver_stopped",
            extra={"tick.count": self._scheduler.tick_count},
        )

    async def run_for(self, seconds: float) -> None:
        """Tick for ``seconds`` of wall-clock time, then stop."""
        await self.start()
        try:
            await asyncio.sleep(seconds)
        finally:
            await self.stop()

    async def _tick_loop(self) -> None:
        last = time.monotonic()
        while self._running:
            await asyncio.sleep(self._interval)
            now = time.monotonic()
            delta = min(now - last, self._max_delta)
            last = now
            try:
                self._scheduler.tick(delta)
            except Exception as e:
                logger.error("tick_error", extra={"error.message": str(e)})

            count = self._scheduler.tick_count
            if self._heartbeat_ticks and count % self._heartbeat_ticks == 0:
                logger.info(
                    "tick_driver_heartbeat",
                    extra={
                        "tick.count": count,
                        "routine.live": self._scheduler.live_count,
                    },
                )
