"""Run a live sequence on the asyncio tick driver."""

from pathlib import Path
from typing import Annotated

import typer

from steep.cli.console import console, dim, error


def register(app: typer.Typer) -> None:
    """Register the run command."""

    @app.command()
    def run(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        seconds: Annotated[
            float,
            typer.Option("--seconds", "-s", help="Wall-clock seconds to run for"),
        ] = 3.0,
    ) -> None:
        """Tick a small sequence in real time using the configured tick rate."""
        import asyncio

        from pydantic import ValidationError

        from steep.config import ConfigError, build_driver, build_engine, load_config
        from steep.logging import configure_logging
        from steep.scheduling.handle import ExecutionHandle
        from steep.sequencer import Sequencer

        if seconds <= 0:
            error("--seconds must be positive")
            raise typer.Exit(1)

        try:
            steep_config = load_config(config)
        except (FileNotFoundError, ConfigError, ValidationError) as e:
            error(f"Error loading config: {e}")
            raise typer.Exit(1) from None

        configure_logging(
            level=steep_config.logging.level,
            use_rich=steep_config.logging.use_rich,
            log_to_file=steep_config.logging.log_to_file,
            retention_days=steep_config.logging.retention_days,
        )

        engine = build_engine(steep_config)
        driver = build_driver(steep_config, engine)

        reported = {"second": 0}

        def report(handle: ExecutionHandle) -> None:
            # One line per elapsed second
            second = int(handle.elapsed)
            if second > reported["second"]:
                reported["second"] = second
                console.print(f"  {second}s elapsed")

        seq = Sequencer(engine, owner="cli")
        (
            seq.add(lambda: console.print("[bold]sequence started[/bold]"), queue="main")
            .loop(report, duration=seconds * 0.8)
            .add(lambda: console.print("[bold green]sequence finished[/bold green]"))
            .wait_for_completion()
        )

        asyncio.run(driver.run_for(seconds))

        dim(
            f"{engine.host.tick_count} ticks, "
            f"{engine.host.time:.2f}s simulated, "
            f"{len(engine.pending('cli', 'main'))} task(s) left"
        )
