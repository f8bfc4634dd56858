"""Task executors.

Each executor runs a single task to completion as an explicit state machine.
``resume(tick_delta)`` moves the task forward until it reaches the next
suspension point or finishes, and returns True once it is done.

The first ``resume`` call starts the task. Waits begun during a call only
count time from later ticks, so a task started with a delay of one second and
a tick delta of 0.5 fires on the second tick after it started.
"""

from collections.abc import Callable
from typing import Any, cast

from steep.scheduling.handle import ExecutionHandle
from steep.scheduling.types import (
    HandleAction,
    PlainAction,
    TaskDescriptor,
    TaskKind,
    TaskState,
)
from steep.scheduling.waits import Suspension, WaitSeconds

LoopCallback = Callable[[ExecutionHandle], Any]


class TaskExecutor:
    """Base class holding the current state and the wait being serviced."""

    def __init__(self) -> None:
        self.state = TaskState.NOT_STARTED
        self._wait: Suspension | None = None

    def resume(self, tick_delta: float) -> bool:
        raise NotImplementedError

    def _suspend(self, wait: Suspension) -> bool:
        """Begin a wait. Returns True if the task actually has to suspend."""
        if wait.begin():
            return False
        self._wait = wait
        return True

    def _service_wait(self, tick_delta: float) -> bool:
        """Advance the pending wait. Returns True while still waiting."""
        if self._wait is None:
            return False
        if not self._wait.advance(tick_delta):
            return True
        self._wait = None
        return False

    def _finish(self) -> bool:
        self.state = TaskState.DONE
        return True


class OneShotExecutor(TaskExecutor):
    """Delay, then condition, then callback, then the callback's own wait."""

    def __init__(self, descriptor: TaskDescriptor) -> None:
        super().__init__()
        self.descriptor = descriptor
        self.handle: ExecutionHandle | None = None

    def resume(self, tick_delta: float) -> bool:
        if self.state is TaskState.DONE:
            return True
        if self._service_wait(tick_delta):
            return False

        descriptor = self.descriptor
        if self.state is TaskState.NOT_STARTED:
            self.state = TaskState.WAITING_DELAY
            if descriptor.delay_time > 0 and self._suspend(
                WaitSeconds(descriptor.delay_time)
            ):
                return False

        if self.state is TaskState.WAITING_DELAY:
            self.state = TaskState.WAITING_CONDITION
            if descriptor.delay_condition is not None and self._suspend(
                descriptor.delay_condition
            ):
                return False

        if self.state is TaskState.WAITING_CONDITION:
            self.state = TaskState.RUNNING
            wait = self._invoke()
            self.state = TaskState.WAITING_POST_CALLBACK
            if wait is not None and self._suspend(wait):
                return False

        return self._finish()

    def _invoke(self) -> Suspension | None:
        action = self.descriptor.action
        if isinstance(action, PlainAction):
            action.callback()
        elif isinstance(action, HandleAction):
            self.handle = ExecutionHandle()
            action.callback(self.handle)
            return self.handle.take_wait()
        return None


class _LoopExecutor(TaskExecutor):
    """Shared tick structure for bounded and unbounded loops.

    Starting the loop only suspends for one tick; every iteration then runs on
    a tick and sees that tick's delta. After each invocation the callback's
    requested wait (if any) is serviced, followed by a one-tick yield, and the
    loop condition is re-checked on the tick after that.
    """

    def __init__(self, callback: LoopCallback) -> None:
        super().__init__()
        self.callback = callback
        self.handle = ExecutionHandle()

    def resume(self, tick_delta: float) -> bool:
        if self.state is TaskState.DONE:
            return True

        if self.state is TaskState.NOT_STARTED:
            if not self._can_start():
                return self._finish()
            self.state = TaskState.RUNNING
            return False

        if self.state is TaskState.WAITING_POST_CALLBACK:
            if self._service_wait(tick_delta):
                return False
            self.state = TaskState.RUNNING
            return False

        if not self._should_continue():
            return self._finish()

        self._prepare(tick_delta)
        self.callback(self.handle)

        wait = self.handle.take_wait()
        if wait is not None and self._suspend(wait):
            self.state = TaskState.WAITING_POST_CALLBACK
        return False

    def _can_start(self) -> bool:
        return True

    def _should_continue(self) -> bool:
        return self.handle.active

    def _prepare(self, tick_delta: float) -> None:
        raise NotImplementedError


class BoundedLoopExecutor(_LoopExecutor):
    """Runs the callback once per tick until ``duration`` has elapsed."""

    def __init__(self, duration: float, callback: LoopCallback) -> None:
        super().__init__(callback)
        self.duration = duration

    def _can_start(self) -> bool:
        # Non-positive durations are a silent no-op
        return self.duration > 0

    def _should_continue(self) -> bool:
        return self.handle.active and self.handle.elapsed < self.duration

    def _prepare(self, tick_delta: float) -> None:
        handle = self.handle
        handle.delta_time = (1 / (self.duration - handle.elapsed)) * tick_delta
        handle.elapsed += tick_delta


class UnboundedLoopExecutor(_LoopExecutor):
    """Runs the callback once per tick until it deactivates its handle."""

    def _prepare(self, tick_delta: float) -> None:
        self.handle.delta_time = tick_delta
        self.handle.elapsed += tick_delta


def build_executor(descriptor: TaskDescriptor) -> TaskExecutor:
    """Create the executor matching the descriptor's kind."""
    if descriptor.kind is TaskKind.ONE_SHOT:
        return OneShotExecutor(descriptor)

    # Loop descriptors always carry a HandleAction
    callback = cast(HandleAction, descriptor.action).callback
    if descriptor.kind is TaskKind.BOUNDED_LOOP:
        return BoundedLoopExecutor(descriptor.loop_duration, callback)
    return UnboundedLoopExecutor(callback)
