"""Simulated walkthrough of queues, loops, locks and bypass tasks."""

from dataclasses import dataclass
from typing import Annotated

import typer

from steep.cli.console import console, error, make_table
from steep.scheduling.engine import Engine
from steep.scheduling.handle import ExecutionHandle
from steep.sequencer import Sequencer

DEMO_OWNER = "demo"
DEMO_QUEUE = "Q"


@dataclass(frozen=True)
class DemoEvent:
    tick: int
    time: float
    message: str


def run_demo(tick_delta: float = 0.5, ticks: int = 8) -> list[DemoEvent]:
    """Run the demo scenario on a simulated clock and return what happened."""
    engine = Engine()
    events: list[DemoEvent] = []

    def record(message: str) -> None:
        host = engine.host
        events.append(DemoEvent(host.tick_count, round(host.time, 6), message))

    def on_loop(handle: ExecutionHandle) -> None:
        record(
            f"loop elapsed={handle.elapsed:g} delta_time={handle.delta_time:.3f}"
        )

    seq = Sequencer(engine, DEMO_OWNER)
    seq.add(lambda: record("A fired"), queue=DEMO_QUEUE, delay=1.0)
    seq.add(lambda: record("B fired"))
    seq.loop(on_loop, duration=1.0)
    seq.now(lambda: record("bypass fired"), delay=tick_delta)

    seq.wait_for_completion()
    record(f"lock {DEMO_QUEUE}: {'accepted' if seq.accepted else 'rejected'}")
    seq.add(lambda: record("late task fired"))
    record(f"append to {DEMO_QUEUE}: {'accepted' if seq.accepted else 'rejected'}")

    drained = False
    for _ in range(ticks):
        engine.tick(tick_delta)
        if not drained and not engine.pending(DEMO_OWNER, DEMO_QUEUE):
            drained = True
            locked = engine.is_locked(DEMO_OWNER, DEMO_QUEUE)
            record(f"{DEMO_QUEUE} drained (locked={locked})")

    seq.forget()
    return events


def register(app: typer.Typer) -> None:
    """Register the demo command."""

    @app.command()
    def demo(
        tick_delta: Annotated[
            float,
            typer.Option("--tick-delta", "-d", help="Seconds per simulated tick"),
        ] = 0.5,
        ticks: Annotated[
            int,
            typer.Option("--ticks", "-n", help="Number of ticks to simulate"),
        ] = 8,
    ) -> None:
        """Run a simulated queue scenario and print each event."""
        if tick_delta <= 0:
            error("--tick-delta must be positive")
            raise typer.Exit(1)
        if ticks < 0:
            error("--ticks must not be negative")
            raise typer.Exit(1)

        table = make_table("Tick", "Time", "Event")

        for event in run_demo(tick_delta, ticks):
            table.add_row(str(event.tick), f"{event.time:g}", event.message)

        console.print(table)
