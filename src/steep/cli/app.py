"""Main CLI application."""

import typer

from steep.cli.commands import config, demo, run

app = typer.Typer(
    name="steep",
    help="steep - tick-driven named task queues",
    no_args_is_help=True,
)

config.register(app)
demo.register(app)
run.register(app)


if __name__ == "__main__":
    app()
