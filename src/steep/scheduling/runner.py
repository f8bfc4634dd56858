"""Queue runner.

Drains a named queue one task at a time. Each drain pass works over a copy of
the pending list taken when the pass takes its first step; descriptors appended
while the pass is running are left for the next pass. Only one pass per
(owner, name) is live at a time.

A pass that finishes on a later tick than it started starts the next pass
right away. A pass that finished within its first step hands the next pass to
the host to start on the following tick, so a queue whose tasks keep feeding
it advances one pass per tick instead of nesting passes.
"""

import logging

from steep.scheduling.executor import TaskExecutor, build_executor
from steep.scheduling.host import TickScheduler
from steep.scheduling.registry import QueueRegistry, QueueState
from steep.scheduling.types import Owner, TaskDescriptor

logger = logging.getLogger(__name__)


class DrainPass:
    """One sequential run over a snapshot of a queue's pending tasks."""

    def __init__(
        self, runner: "QueueRunner", owner: Owner, name: str, queue: QueueState
    ):
        self._runner = runner
        self.owner = owner
        self.name = name
        self.queue = queue
        self.batch: tuple[TaskDescriptor, ...] = ()
        self.steps = 0
        self._index = 0
        self._current: TaskExecutor | None = None

    def resume(self, tick_delta: float) -> bool:
        self.steps += 1
        if self.steps == 1:
            self.batch = tuple(self.queue.pending)
            # A deferred pass gets its first step on a tick; it is still a start
            tick_delta = 0.0

        while self._index < len(self.batch):
            descriptor = self.batch[self._index]
            if self._current is None:
                self._current = build_executor(descriptor)
            if not self._current.resume(tick_delta):
                return False

            self._remove(descriptor)
            self._current = None
            self._index += 1
            # The next task starts now; no tick time has passed for it yet
            tick_delta = 0.0

        return self._complete()

    def _remove(self, descriptor: TaskDescriptor) -> None:
        pending = self.queue.pending
        for i, item in enumerate(pending):
            if item is descriptor:
                del pending[i]
                return

    def _complete(self) -> bool:
        queue = self.queue
        queue.running = False
        logger.debug(
            "queue_drain_finished",
            extra={
                "queue.owner": repr(self.owner),
                "queue.name": self.name,
                "queue.completed": len(self.batch),
                "queue.pending": len(queue.pending),
            },
        )
        if queue.pending:
            self._runner.drain(self.owner, self.name, start=self.steps > 1)
        elif queue.locked:
            queue.locked = False
            logger.debug(
                "queue_unlocked",
                extra={"queue.owner": repr(self.owner), "queue.name": self.name},
            )
        return True


class QueueRunner:
    """Starts drain passes on the host, at most one per queue."""

    def __init__(self, registry: QueueRegistry, host: TickScheduler):
        self._registry = registry
        self._host = host

    def drain(
        self, owner: Owner, name: str, start: bool = True
    ) -> DrainPass | None:
        """Start draining a queue unless it is unknown or already draining.

        With ``start=False`` the pass takes its first step on the next tick.
        Returns the new pass, or None when nothing was started.
        """
        queue = self._registry.find(owner, name)
        if queue is None or queue.running:
            return None

        # Set before the pass takes its first step; callbacks in that step
        # may append to this queue and trigger drain again.
        queue.running = True
        drain_pass = DrainPass(self, owner, name, queue)
        logger.debug(
            "queue_drain_started",
            extra={
                "queue.owner": repr(owner),
                "queue.name": name,
                "queue.pending": len(queue.pending),
                "queue.deferred": not start,
            },
        )
        self._host.spawn(drain_pass, start=start)
        return drain_pass
