"""Shared console utilities for CLI commands."""

from rich.console import Console
from rich.table import Table

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{msg}[/red]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{msg}[/green]")


def dim(msg: str) -> None:
    """Print a dimmed message."""
    console.print(f"[dim]{msg}[/dim]")


def make_table(*columns: str, title: str | None = None) -> Table:
    """Build a table; columns named "Tick" or "Time" are right-aligned."""
    table = Table(title=title, show_header=True)
    for column in columns:
        justify = "right" if column in ("Tick", "Time") else "left"
        table.add_column(column, justify=justify)
    return table
