"""Scheduling engine.

Wires the queue registry, the queue runner and a tick host together and
exposes the operations call-surface code builds on.
"""

import logging

from steep.scheduling.executor import OneShotExecutor
from steep.scheduling.host import TickScheduler
from steep.scheduling.registry import DEFAULT_QUEUE_NAME, QueueRegistry
from steep.scheduling.runner import QueueRunner
from steep.scheduling.types import Action, Owner, TaskDescriptor
from steep.scheduling.waits import WaitSpec, split_delay

logger = logging.getLogger(__name__)


class Engine:
    """Per-owner named queues on top of a tick host.

    Example:
        engine = Engine()
        engine.append(owner, "intro", TaskDescriptor.one_shot(fade_in, delay_time=1))
        engine.request_lock(owner, "intro")
        while running:
            engine.tick(frame_delta)
    """

    def __init__(
        self,
        host: TickScheduler | None = None,
        default_queue_name: str = DEFAULT_QUEUE_NAME,
    ):
        self.host = host or TickScheduler()
        self.registry = QueueRegistry(default_queue_name)
        self.runner = QueueRunner(self.registry, self.host)

    def append(self, owner: Owner, queue_name: str, descriptor: TaskDescriptor) -> bool:
        """Enqueue a task and make sure its queue is draining.

        Returns False, without storing the task, if the queue is locked.
        """
        if not self.registry.append(owner, queue_name, descriptor):
            return False
        self.runner.drain(owner, queue_name)
        return True

    def run_now(self, owner: Owner, delay: WaitSpec | None, action: Action) -> None:
        """Run a one-shot task right away, outside every queue.

        Bypass tasks ignore queue locks and run in parallel with each other
        and with any queue's drain.
        """
        delay_time, delay_condition = split_delay(delay)
        descriptor = TaskDescriptor(
            action=action, delay_time=delay_time, delay_condition=delay_condition
        )
        logger.debug("bypass_task_started", extra={"queue.owner": repr(owner)})
        self.host.spawn(OneShotExecutor(descriptor))

    def request_lock(self, owner: Owner, queue_name: str) -> bool:
        return self.registry.request_lock(owner, queue_name)

    def last_queue_name(self, owner: Owner) -> str:
        return self.registry.last_queue_name(owner)

    def forget_owner(self, owner: Owner) -> None:
        """Release the registry state of an owner whose lifetime has ended."""
        self.registry.forget_owner(owner)

    def tick(self, delta: float) -> None:
        self.host.tick(delta)

    def pending(self, owner: Owner, queue_name: str) -> tuple[TaskDescriptor, ...]:
        queue = self.registry.find(owner, queue_name)
        return tuple(queue.pending) if queue else ()

    def is_running(self, owner: Owner, queue_name: str) -> bool:
        queue = self.registry.find(owner, queue_name)
        return bool(queue and queue.running)

    def is_locked(self, owner: Owner, queue_name: str) -> bool:
        queue = self.registry.find(owner, queue_name)
        return bool(queue and queue.locked)

    def queue_names(self, owner: Owner) -> list[str]:
        return self.registry.queue_names(owner)

    def owners(self) -> list[Owner]:
        return self.registry.owners()
