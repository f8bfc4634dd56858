"""Suspension conditions.

A suspension is the only way a task gives up its turn. It is begun at the
point the task suspends and is then advanced once per tick with that tick's
elapsed-time delta until it reports that it has resolved.

Public types:
- Suspension: Base class for all waits
- WaitSeconds: Resolves once enough tick time has accumulated
- WaitTicks: Resolves after a fixed number of ticks
- WaitUntil: Resolves once a predicate becomes truthy
"""

from collections.abc import Callable
from typing import Any


class Suspension:
    """Something a task can wait on between ticks.

    Subclasses implement ``_begin`` (called once, when the task suspends) and
    ``_advance`` (called on every later tick). ``begin`` returning True means
    the condition is already satisfied and the task does not suspend at all.
    """

    def __init__(self) -> None:
        self._begun = False
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    def begin(self) -> bool:
        self._begun = True
        self._resolved = self._begin()
        return self._resolved

    def advance(self, tick_delta: float) -> bool:
        """Feed one tick into the condition and report whether it resolved."""
        if not self._begun:
            return self.begin()
        if not self._resolved:
            self._resolved = self._advance(tick_delta)
        return self._resolved

    def _begin(self) -> bool:
        return False

    def _advance(self, tick_delta: float) -> bool:
        raise NotImplementedError


class WaitSeconds(Suspension):
    """Wait until the summed tick deltas since ``begin`` reach ``seconds``."""

    def __init__(self, seconds: float) -> None:
        super().__init__()
        self.seconds = float(seconds)
        self.waited = 0.0

    def _begin(self) -> bool:
        self.waited = 0.0
        return self.seconds <= 0

    def _advance(self, tick_delta: float) -> bool:
        self.waited += tick_delta
        return self.waited >= self.seconds

    def __repr__(self) -> str:
        return f"WaitSeconds({self.seconds!r})"


class WaitTicks(Suspension):
    """Wait for ``count`` ticks regardless of their delta."""

    def __init__(self, count: int) -> None:
        super().__init__()
        if count < 0:
            raise ValueError(f"tick count must be >= 0, got {count}")
        self.count = count
        self.remaining = count

    def _begin(self) -> bool:
        self.remaining = self.count
        return self.remaining == 0

    def _advance(self, tick_delta: float) -> bool:
        self.remaining -= 1
        return self.remaining <= 0

    def __repr__(self) -> str:
        return f"WaitTicks({self.count!r})"


class WaitUntil(Suspension):
    """Wait until ``predicate()`` is truthy.

    The predicate is checked once when the wait begins and then once per tick.
    A predicate that never turns true stalls the waiting task forever.
    """

    def __init__(self, predicate: Callable[[], Any]) -> None:
        super().__init__()
        self.predicate = predicate

    def _begin(self) -> bool:
        return bool(self.predicate())

    def _advance(self, tick_delta: float) -> bool:
        return bool(self.predicate())

    def __repr__(self) -> str:
        name = getattr(self.predicate, "__name__", type(self.predicate).__name__)
        return f"WaitUntil({name})"


# Anything callers may pass where a wait is expected
WaitSpec = float | int | Suspension | Callable[[], Any]


def as_suspension(value: WaitSpec | None) -> Suspension | None:
    """Normalize a duration, predicate or suspension into a Suspension.

    Numbers become WaitSeconds, callables become WaitUntil and suspensions
    pass through. None stays None.

    Raises:
        TypeError: If the value is a bool or of an unsupported type.
    """
    if value is None:
        return None
    if isinstance(value, Suspension):
        return value
    # bool is an int subclass; True/False as a duration is always a mistake
    if isinstance(value, bool):
        raise TypeError("a bool is not a valid wait; pass seconds or a predicate")
    if isinstance(value, int | float):
        return WaitSeconds(value)
    if callable(value):
        return WaitUntil(value)
    raise TypeError(f"cannot wait on {type(value).__name__}")


def split_delay(delay: WaitSpec | None) -> tuple[float, Suspension | None]:
    """Split a delay into (seconds, condition) as stored on a task descriptor."""
    if delay is None:
        return 0.0, None
    if isinstance(delay, int | float) and not isinstance(delay, bool):
        return float(delay), None
    return 0.0, as_suspension(delay)
