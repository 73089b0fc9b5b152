"""CLI command modules."""

from chime.cli.commands import cron, reminders, serve

__all__ = ["cron", "reminders", "serve"]
