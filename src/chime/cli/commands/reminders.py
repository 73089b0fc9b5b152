"""Reminder management commands."""

from datetime import datetime
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo

import typer

from chime.cli.console import (
    console,
    dim,
    error,
    format_countdown,
    format_local,
    get_config,
    success,
    warning,
)
from chime.config import ChimeConfig
from chime.cron import InvalidCronExpression, describe, to_epoch_ms
from chime.reminders import IdAllocator, ReminderService, ReminderStore
from chime.reminders.dispatcher import now_ms

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]
ChatOption = Annotated[str, typer.Option("--chat", help="Chat identifier")]
SenderOption = Annotated[str, typer.Option("--sender", help="Sender identifier")]


def build_service(config: ChimeConfig) -> ReminderService:
    """Create a ReminderService over the configured data directory."""
    return ReminderService(
        ReminderStore(config.data_dir),
        IdAllocator(config.data_dir),
        timezone=config.timezone,
    )


def parse_at(value: str, timezone: str) -> int:
    """Parse an ISO datetime; naive values are in the configured timezone."""
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo(timezone))
    return to_epoch_ms(moment)


def register(app: typer.Typer) -> None:
    """Register the reminder commands."""

    @app.command()
    def add(
        chat: ChatOption,
        sender: SenderOption,
        message: Annotated[str, typer.Option("--message", "-m", help="Reminder text")],
        at: Annotated[
            str | None,
            typer.Option("--at", help="Fire once at an ISO date/time"),
        ] = None,
        in_minutes: Annotated[
            int | None,
            typer.Option("--in", help="Fire once after this many minutes", min=1),
        ] = None,
        cron: Annotated[
            str | None,
            typer.Option("--cron", help="Fire on a 5-field cron schedule"),
        ] = None,
        config: ConfigOption = None,
    ) -> None:
        """Create a one-time or recurring reminder.

        Examples:
            chime add --chat 42 --sender 7 -m "Stand up" --cron "0 9 * * 1-5"
            chime add --chat 42 --sender 7 -m "Tea" --in 15
            chime add --chat 42 --sender 7 -m "Call" --at 2026-01-12T14:30
        """
        chosen = [opt for opt in (at, in_minutes, cron) if opt is not None]
        if len(chosen) != 1:
            error("Exactly one of --at, --in or --cron is required")
            raise typer.Exit(1)

        chime_config = get_config(config)
        service = build_service(chime_config)

        try:
            if cron is not None:
                reminder = service.create_recurring(chat, sender, message, cron)
            else:
                if at is not None:
                    fire_at = parse_at(at, chime_config.timezone)
                else:
                    assert in_minutes is not None
                    fire_at = now_ms() + in_minutes * 60_000
                reminder = service.create_one_time(chat, sender, message, fire_at)
        except InvalidCronExpression as e:
            error(str(e))
            raise typer.Exit(1) from None
        except ValueError as e:
            error(f"Could not create reminder: {e}")
            raise typer.Exit(1) from None

        when = format_local(reminder.time, chime_config.timezone)
        if reminder.cron_expression:
            success(
                f"Recurring reminder {reminder.id} set "
                f"({describe(reminder.cron_expression)}), next at {when}"
            )
        else:
            success(f"Reminder {reminder.id} set for {when}")

    @app.command("list")
    def list_(
        chat: ChatOption,
        sender: SenderOption,
        config: ConfigOption = None,
    ) -> None:
        """List reminders for a chat and sender, soonest first."""
        from rich.table import Table

        chime_config = get_config(config)
        reminders = build_service(chime_config).list_reminders(chat, sender)

        if not reminders:
            warning("No reminders found")
            return

        now = now_ms()
        table = Table(show_header=True)
        table.add_column("ID", style="dim")
        table.add_column("Type")
        table.add_column("Message")
        table.add_column("Schedule")
        table.add_column("Next Fire")
        table.add_column("Last Fired")

        for reminder in reminders:
            message = (
                reminder.message[:40] + "..."
                if len(reminder.message) > 40
                else reminder.message
            )
            if reminder.cron_expression:
                schedule = describe(reminder.cron_expression)
            else:
                schedule = format_local(reminder.time, chime_config.timezone)
            last = (
                format_local(reminder.last_triggered, chime_config.timezone)
                if reminder.last_triggered
                else dim("never")
            )
            table.add_row(
                reminder.id,
                "recurring" if reminder.is_recurring else "one-time",
                message,
                schedule,
                format_countdown(reminder.time, now),
                last,
            )

        console.print(table)
        console.print(dim(f"Total: {len(reminders)} reminder(s)"))

    @app.command()
    def cancel(
        reminder_id: Annotated[str, typer.Argument(help="Reminder ID")],
        chat: ChatOption,
        sender: SenderOption,
        config: ConfigOption = None,
    ) -> None:
        """Cancel a reminder owned by the given chat and sender."""
        chime_config = get_config(config)
        removed = build_service(chime_config).cancel(reminder_id, chat, sender)
        if not removed:
            error(f"No reminder {reminder_id} found for this chat and sender")
            raise typer.Exit(1)
        success(f"Cancelled reminder {reminder_id}")

    @app.command()
    def stats(config: ConfigOption = None) -> None:
        """Show reminder store statistics."""
        chime_config = get_config(config)
        store = ReminderStore(chime_config.data_dir)
        data = store.get_stats(now=now_ms())

        console.print(f"[bold]Reminders:[/bold] {data['total']}")
        console.print(f"  one-time:  {data['one_time']}")
        console.print(f"  recurring: {data['recurring']}")
        console.print(f"  due now:   {data['due']}")
        console.print(dim(data["reminders_dir"]))
