"""Scheduling types.

Public types:
- TaskKind: One-shot, bounded loop or unbounded loop
- TaskState: States a resumable task moves through
- PlainAction / HandleAction: The two callback shapes (tagged by type)
- TaskDescriptor: Immutable record of one enqueued unit of work
- Routine: Anything the host can resume once per tick
"""

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from steep.scheduling.waits import Suspension

if TYPE_CHECKING:
    from steep.scheduling.handle import ExecutionHandle

# Owners are opaque; the registry only uses them as dict keys
Owner = Hashable


class TaskKind(str, Enum):
    ONE_SHOT = "one_shot"
    BOUNDED_LOOP = "bounded_loop"
    UNBOUNDED_LOOP = "unbounded_loop"

    @property
    def is_loop(self) -> bool:
        return self is not TaskKind.ONE_SHOT


class TaskState(str, Enum):
    NOT_STARTED = "not_started"
    WAITING_DELAY = "waiting_delay"
    WAITING_CONDITION = "waiting_condition"
    RUNNING = "running"
    WAITING_POST_CALLBACK = "waiting_post_callback"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class PlainAction:
    """A callback that takes no arguments."""

    callback: Callable[[], Any]


@dataclass(frozen=True, slots=True)
class HandleAction:
    """A callback that receives an ExecutionHandle."""

    callback: "Callable[[ExecutionHandle], Any]"


Action = PlainAction | HandleAction


# eq=False: the runner removes finished descriptors by identity, so two
# descriptors built from the same values must stay distinct.
@dataclass(frozen=True, eq=False)
class TaskDescriptor:
    """One unit of queued work. Consumed exactly once."""

    action: Action | None = None
    kind: TaskKind = TaskKind.ONE_SHOT
    delay_time: float = 0.0
    delay_condition: Suspension | None = None
    loop_duration: float = 0.0

    def __post_init__(self) -> None:
        if self.delay_time < 0:
            raise ValueError(f"delay_time must be >= 0, got {self.delay_time}")
        if self.kind.is_loop:
            if not isinstance(self.action, HandleAction):
                raise ValueError(f"{self.kind.value} tasks need a handle-aware callback")
            if self.delay_time > 0 or self.delay_condition is not None:
                raise ValueError(f"{self.kind.value} tasks do not take a delay")

    @classmethod
    def one_shot(
        cls,
        callback: Callable[..., Any] | None = None,
        *,
        delay_time: float = 0.0,
        delay_condition: Suspension | None = None,
        with_handle: bool = False,
    ) -> "TaskDescriptor":
        action: Action | None = None
        if callback is not None:
            action = HandleAction(callback) if with_handle else PlainAction(callback)
        return cls(
            action=action,
            delay_time=delay_time,
            delay_condition=delay_condition,
        )

    @classmethod
    def bounded_loop(
        cls, duration: float, callback: "Callable[[ExecutionHandle], Any]"
    ) -> "TaskDescriptor":
        return cls(
            action=HandleAction(callback),
            kind=TaskKind.BOUNDED_LOOP,
            loop_duration=duration,
        )

    @classmethod
    def unbounded_loop(
        cls, callback: "Callable[[ExecutionHandle], Any]"
    ) -> "TaskDescriptor":
        return cls(action=HandleAction(callback), kind=TaskKind.UNBOUNDED_LOOP)


class Routine(Protocol):
    """A cooperative routine driven by the host.

    ``resume`` is called once when the routine is spawned (with a delta of
    0.0), unless the spawn is deferred, and then once per tick with that
    tick's delta. It returns True when the routine has finished.
    """

    def resume(self, tick_delta: float) -> bool: ...
