"""Queue registry and admission gate.

Holds every piece of shared state the engine has: per owner, the pending
descriptors of each named queue, the running and locked flags for each queue,
and the last queue name the owner appended to. State is created lazily on
first touch and only released by ``forget_owner``.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from steep.scheduling.types import Owner, TaskDescriptor

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_NAME = "default"


@dataclass
class QueueState:
    """Pending list and flags for one (owner, name) queue."""

    pending: list[TaskDescriptor] = field(default_factory=list)
    running: bool = False
    locked: bool = False


@dataclass
class OwnerState:
    queues: dict[str, QueueState] = field(default_factory=dict)
    last_queue_name: str = DEFAULT_QUEUE_NAME


class QueueRegistry:
    """Owner -> queue name -> pending tasks, plus flags and name cursor.

    Example:
        registry = QueueRegistry()
        if registry.append(owner, "intro", descriptor):
            runner.drain(owner, "intro")
    """

    def __init__(self, default_queue_name: str = DEFAULT_QUEUE_NAME):
        self.default_queue_name = default_queue_name
        self._owners: dict[Owner, OwnerState] = {}

    def _owner(self, owner: Owner) -> OwnerState:
        state = self._owners.get(owner)
        if state is None:
            state = OwnerState(last_queue_name=self.default_queue_name)
            self._owners[owner] = state
        return state

    def queue(self, owner: Owner, name: str) -> QueueState:
        """Get the state for a queue, creating it if needed."""
        queues = self._owner(owner).queues
        state = queues.get(name)
        if state is None:
            state = QueueState()
            queues[name] = state
        return state

    def find(self, owner: Owner, name: str) -> QueueState | None:
        """Get the state for a queue without creating it."""
        owner_state = self._owners.get(owner)
        if owner_state is None:
            return None
        return owner_state.queues.get(name)

    def append(self, owner: Owner, name: str, descriptor: TaskDescriptor) -> bool:
        """Enqueue a descriptor unless the queue is locked.

        The name cursor moves to ``name`` either way, so calls that omit the
        queue name keep targeting a locked queue until it drains. The caller is
        responsible for triggering a drain after an accepted append.
        """
        owner_state = self._owner(owner)
        owner_state.last_queue_name = name

        queue = self.queue(owner, name)
        if queue.locked:
            logger.debug(
                "append_rejected_locked",
                extra={"queue.owner": repr(owner), "queue.name": name},
            )
            return False

        queue.pending.append(descriptor)
        return True

    def request_lock(self, owner: Owner, name: str) -> bool:
        """Close the admission gate for a non-empty, unlocked queue."""
        queue = self.find(owner, name)
        if queue is None or not queue.pending or queue.locked:
            return False
        queue.locked = True
        logger.debug(
            "queue_locked",
            extra={
                "queue.owner": repr(owner),
                "queue.name": name,
                "queue.pending": len(queue.pending),
            },
        )
        return True

    def last_queue_name(self, owner: Owner) -> str:
        owner_state = self._owners.get(owner)
        if owner_state is None:
            return self.default_queue_name
        return owner_state.last_queue_name

    def forget_owner(self, owner: Owner) -> None:
        """Drop all state for an owner.

        Tasks already handed to the host keep running, but their bookkeeping
        stays with the discarded state and never reaches a fresh queue.
        """
        if self._owners.pop(owner, None) is not None:
            logger.debug("owner_forgotten", extra={"queue.owner": repr(owner)})

    def owners(self) -> list[Owner]:
        return list(self._owners)

    def queue_names(self, owner: Owner) -> list[str]:
        owner_state = self._owners.get(owner)
        if owner_state is None:
            return []
        return list(owner_state.queues)

    def __iter__(self) -> Iterator[tuple[Owner, str, QueueState]]:
        for owner, owner_state in self._owners.items():
            for name, queue in owner_state.queues.items():
                yield owner, name, queue

    def __len__(self) -> int:
        return len(self._owners)
