"""Shared console utilities for CLI commands."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import typer
from rich.console import Console

from chime.config import ChimeConfig, ConfigError, load_config

# Shared console instance for all CLI commands
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{msg}[/red]")


def warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]{msg}[/yellow]")


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{msg}[/green]")


def dim(msg: str) -> str:
    """Wrap a message in dim markup."""
    return f"[dim]{msg}[/dim]"


def get_config(config_path: Path | None) -> ChimeConfig:
    """Load configuration, exiting with an error message on failure."""
    try:
        return load_config(config_path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except (ValueError, ConfigError) as e:
        error(f"Configuration error: {e}")
        raise typer.Exit(1) from None


def format_local(epoch_ms: int, timezone: str) -> str:
    """Format an epoch-ms instant in the given timezone."""
    moment = datetime.fromtimestamp(epoch_ms / 1000, ZoneInfo(timezone))
    return moment.strftime("%Y-%m-%d %H:%M %Z")


def format_countdown(target_ms: int, now_ms: int) -> str:
    """Format a countdown string until ``target_ms``."""
    if target_ms <= now_ms:
        return "[green]now[/green]"

    total_seconds = (target_ms - now_ms) // 1000

    if total_seconds < 60:
        return f"in {total_seconds}s"

    total_minutes = total_seconds // 60
    if total_minutes < 60:
        return f"in {total_minutes}m"

    hours = total_minutes // 60
    minutes = total_minutes % 60
    if hours < 24:
        if minutes:
            return f"in {hours}h {minutes}m"
        return f"in {hours}h"

    days = hours // 24
    hours = hours % 24
    if hours:
        return f"in {days}d {hours}h"
    return f"in {days}d"
