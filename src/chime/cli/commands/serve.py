"""Serve command for running the reminder dispatcher."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from chime.cli.console import console, error, get_config
from chime.config import ChimeConfig, ConfigError

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register the serve command."""

    @app.command()
    def serve(
        config: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
        once: Annotated[
            bool,
            typer.Option("--once", help="Run a single dispatcher tick and exit"),
        ] = False,
    ) -> None:
        """Deliver due reminders over Telegram until interrupted."""
        from chime.logging import configure_logging

        chime_config = get_config(config)
        configure_logging(
            level=chime_config.logging.level,
            use_rich=True,
            log_to_file=chime_config.logging.log_to_file,
            retention_days=chime_config.logging.retention_days,
        )

        try:
            asyncio.run(_run(chime_config, once=once))
        except ConfigError as e:
            error(str(e))
            raise typer.Exit(1) from None
        except KeyboardInterrupt:
            pass


async def _run(config: ChimeConfig, *, once: bool) -> None:
    import signal

    from chime.delivery import TelegramDeliverer
    from chime.reminders import ReminderDispatcher, ReminderStore

    deliverer = TelegramDeliverer(config.require_bot_token())
    dispatcher = ReminderDispatcher(
        ReminderStore(config.data_dir),
        deliverer.deliver,
        timezone=config.timezone,
        poll_interval=config.dispatcher.poll_interval,
        heartbeat_interval=config.dispatcher.heartbeat_interval,
    )

    try:
        if once:
            result = await dispatcher.tick()
            console.print(
                f"Tick complete: {result.due} due, {result.delivered} delivered, "
                f"{result.failed} failed"
            )
            return

        stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop_event.set)

        console.print(
            f"[bold]Dispatching reminders[/bold] every "
            f"{config.dispatcher.poll_interval:g}s ({config.timezone})"
        )
        await dispatcher.start()
        await stop_event.wait()
        logger.info("shutdown_requested")
        await dispatcher.stop()
    finally:
        await deliverer.close()
