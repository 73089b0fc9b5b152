"""Cron expression inspection commands."""

from datetime import datetime
from itertools import islice
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo

import typer

from chime.cli.console import console, error, get_config, success
from chime.cron import describe, is_valid, iter_triggers

ExpressionArgument = Annotated[
    str, typer.Argument(help='5-field cron expression, e.g. "0 8 * * 1-5"')
]


def register(app: typer.Typer) -> None:
    """Register the cron commands."""

    @app.command()
    def validate(expression: ExpressionArgument) -> None:
        """Check whether an expression is supported."""
        if is_valid(expression):
            success(f"Valid: {describe(expression)}")
        else:
            error(f"Invalid cron expression: {expression}")
            raise typer.Exit(1)

    @app.command("describe")
    def describe_(expression: ExpressionArgument) -> None:
        """Print a plain-English description of an expression."""
        if not is_valid(expression):
            error(f"Invalid cron expression: {expression}")
            raise typer.Exit(1)
        console.print(describe(expression))

    @app.command("next")
    def next_(
        expression: ExpressionArgument,
        count: Annotated[
            int, typer.Option("--count", "-n", help="Number of fire times", min=1)
        ] = 5,
        config: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
    ) -> None:
        """Show the next fire times of an expression."""
        if not is_valid(expression):
            error(f"Invalid cron expression: {expression}")
            raise typer.Exit(1)

        timezone = get_config(config).timezone
        start = datetime.now(ZoneInfo(timezone))
        console.print(f"[bold]{describe(expression)}[/bold] ({timezone})")
        for moment in islice(iter_triggers(expression, start), count):
            console.print(f"  {moment.strftime('%a %Y-%m-%d %H:%M')}")
