"""Execution handle passed to handle-aware callbacks."""

from dataclasses import dataclass

from steep.scheduling.waits import Suspension, WaitSpec, as_suspension


@dataclass
class ExecutionHandle:
    """Per-invocation control object for a running callback.

    One handle is created for each one-shot call and one for the whole run of
    a loop; it is never shared between tasks.

    Attributes:
        active: Cleared by ``deactivate()``; loops stop at the next boundary.
        delta_time: Tick delta as seen by the callback. For bounded loops this
            is the ascending-weighted value ``tick_delta / (duration - elapsed)``
            and is not clamped to [0, 1].
        elapsed: Tick time accumulated by the loop so far.
        pending_wait: Wait requested by the callback, consumed once right after
            the current invocation returns.
    """

    active: bool = True
    delta_time: float = 0.0
    elapsed: float = 0.0
    pending_wait: Suspension | None = None

    def deactivate(self) -> None:
        """Stop the surrounding loop after the current iteration."""
        self.active = False

    def request_wait(self, wait: WaitSpec) -> None:
        """Wait for seconds or a condition after the current callback returns.

        Only the most recent request made during an invocation applies.
        """
        self.pending_wait = as_suspension(wait)

    def take_wait(self) -> Suspension | None:
        wait, self.pending_wait = self.pending_wait, None
        return wait
