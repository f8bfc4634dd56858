"""Configuration management commands."""

from pathlib import Path
from typing import Annotated

import click
import typer

from steep.cli.console import console, error, make_table, success


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: $STEEP_HOME/config.toml)",
            ),
        ] = None,
    ) -> None:
        """Show or validate the configuration file."""
        if action is None:
            ctx = click.get_current_context()
            click.echo(ctx.get_help())
            raise typer.Exit(0)

        from pydantic import ValidationError
        from rich.syntax import Syntax

        from steep.config import ConfigError, load_config
        from steep.config.paths import get_config_path

        expanded_path = path.expanduser() if path else get_config_path()

        if action == "show":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            content = expanded_path.read_text()
            syntax = Syntax(content, "toml", theme="monokai", line_numbers=True)
            console.print(f"[bold]Config file: {expanded_path}[/bold]\n")
            console.print(syntax)

        elif action == "validate":
            if not expanded_path.exists():
                error(f"Config file not found: {expanded_path}")
                raise typer.Exit(1)

            try:
                config_obj = load_config(expanded_path)
            except ConfigError as e:
                error(f"Error loading config: {e}")
                raise typer.Exit(1) from None
            except ValidationError as e:
                error("Configuration validation failed:")
                console.print()
                for err in e.errors():
                    loc = ".".join(str(x) for x in err["loc"])
                    console.print(f"  [yellow]{loc}[/yellow]: {err['msg']}")
                raise typer.Exit(1) from None

            scheduler = config_obj.scheduler
            table = make_table("Setting", "Value", title="Configuration Summary")
            table.add_row("Tick rate", f"{scheduler.tick_rate:g} Hz")
            table.add_row("Max delta", f"{scheduler.max_delta:g} s")
            table.add_row("Default queue", scheduler.default_queue_name)
            table.add_row(
                "Heartbeat",
                f"every {scheduler.heartbeat_ticks} ticks"
                if scheduler.heartbeat_ticks
                else "[dim]off[/dim]",
            )
            table.add_row("Log level", config_obj.logging.level)
            table.add_row(
                "Log files",
                f"{config_obj.logging.retention_days} days"
                if config_obj.logging.log_to_file
                else "[dim]off[/dim]",
            )

            success("Configuration is valid!")
            console.print()
            console.print(table)

        else:
            error(f"Unknown action: {action}")
            console.print("Valid actions: show, validate")
            raise typer.Exit(1)
