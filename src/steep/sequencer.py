"""Chainable call surface over the scheduling engine.

Lets callers leave out the queue name (the owner's last used queue is
targeted), give a delay as seconds or as a condition, and pick between plain
and handle-aware callbacks.

Example:
    seq = Sequencer(engine, owner=player)
    (
        seq.add(show_title, queue="intro", delay=2)
        .loop(fade_in, duration=3)
        .add(lambda h: h.request_wait(music_done), handle=True)
        .now(play_click)
        .wait_for_completion()
    )
"""

from collections.abc import Callable
from typing import Any

from steep.scheduling.engine import Engine
from steep.scheduling.handle import ExecutionHandle
from steep.scheduling.types import (
    HandleAction,
    Owner,
    PlainAction,
    TaskDescriptor,
)
from steep.scheduling.waits import WaitSpec, split_delay


class Sequencer:
    """Binds an owner to an engine and returns itself from every call.

    Rejections never raise; ``accepted`` holds the outcome of the most recent
    append or lock request.
    """

    def __init__(self, engine: Engine, owner: Owner):
        self.engine = engine
        self.owner = owner
        self.accepted = True

    @property
    def queue_name(self) -> str:
        """The queue that calls without an explicit name will target."""
        return self.engine.last_queue_name(self.owner)

    def add(
        self,
        callback: Callable[..., Any] | None = None,
        *,
        queue: str | None = None,
        delay: WaitSpec | None = 0.0,
        handle: bool = False,
    ) -> "Sequencer":
        """Append a one-shot callback, optionally after a delay or condition."""
        delay_time, delay_condition = split_delay(delay)
        descriptor = TaskDescriptor.one_shot(
            callback,
            delay_time=delay_time,
            delay_condition=delay_condition,
            with_handle=handle,
        )
        return self._append(queue, descriptor)

    def pause(self, seconds: float, *, queue: str | None = None) -> "Sequencer":
        """Append a pure interval to a queue."""
        return self._append(queue, TaskDescriptor(delay_time=seconds))

    def loop(
        self,
        callback: Callable[[ExecutionHandle], Any],
        *,
        duration: float = 0.0,
        queue: str | None = None,
    ) -> "Sequencer":
        """Append a callback that runs once per tick.

        A positive duration bounds the loop; zero or less means it runs until
        the callback calls ``handle.deactivate()``.
        """
        if duration > 0:
            descriptor = TaskDescriptor.bounded_loop(duration, callback)
        else:
            descriptor = TaskDescriptor.unbounded_loop(callback)
        return self._append(queue, descriptor)

    def now(
        self,
        callback: Callable[..., Any],
        *,
        delay: WaitSpec | None = 0.0,
        handle: bool = False,
    ) -> "Sequencer":
        """Run a callback outside every queue, ignoring locks."""
        action = HandleAction(callback) if handle else PlainAction(callback)
        self.engine.run_now(self.owner, delay, action)
        return self

    def wait_for_completion(self) -> "Sequencer":
        """Lock the last used queue until everything in it has run."""
        self.accepted = self.engine.request_lock(self.owner, self.queue_name)
        return self

    def forget(self) -> None:
        """Release the engine's state for this owner."""
        self.engine.forget_owner(self.owner)

    def _append(self, queue: str | None, descriptor: TaskDescriptor) -> "Sequencer":
        name = queue if queue is not None else self.queue_name
        self.accepted = self.engine.append(self.owner, name, descriptor)
        return self
