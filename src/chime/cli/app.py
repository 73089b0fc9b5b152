"""Main CLI application."""

import typer

from chime.cli.commands import cron, reminders, serve

app = typer.Typer(
    name="chime",
    help="Chime - one-time and recurring chat reminders",
    no_args_is_help=True,
)

reminders.register(app)
cron.register(app)
serve.register(app)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
