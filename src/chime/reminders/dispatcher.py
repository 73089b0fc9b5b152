"""Reminder dispatcher: polls the store and delivers due reminders.

The dispatcher owns the polling loop. All data access is delegated to
ReminderStore and all sending to the delivery callback.

Per tick, each due reminder is delivered independently:
- delivered + recurring: ``time`` recomputed from the cron expression
  relative to the tick instant, ``last_triggered`` set, record rewritten
  unless it was cancelled during delivery
- delivered + one-time: record deleted
- delivery failed: record left untouched and retried on the next tick
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

from chime.cron import is_valid, next_trigger_ms
from chime.reminders.store import ReminderStore
from chime.reminders.types import DeliverFn, Reminder

logger = logging.getLogger(__name__)

REMINDER_MARKER = "⏰ *Reminder*"
DEFAULT_POLL_INTERVAL = 10.0
# Heartbeat every 60 ticks (~10 min at the default interval)
DEFAULT_HEARTBEAT_INTERVAL = 60

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def format_reminder_message(message: str) -> str:
    """Build the delivered text for a reminder."""
    return f"{REMINDER_MARKER}\n\n{message}"


@dataclass
class TickResult:
    """Outcome counters for one dispatcher tick."""

    now: int
    scanned: int = 0
    due: int = 0
    delivered: int = 0
    failed: int = 0
    advanced: int = 0
    removed: int = 0
    errors: int = 0


class ReminderDispatcher:
    """Delivers due reminders on a fixed polling interval.

    Example:
        store = ReminderStore(Path("~/.chime/data"))
        dispatcher = ReminderDispatcher(store, deliverer.deliver)
        await dispatcher.start()
        ...
        await dispatcher.stop()

    Only one dispatcher may run against a given store at a time.
    """

    def __init__(
        self,
        store: ReminderStore,
        deliver: DeliverFn,
        *,
        timezone: str = "UTC",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        heartbeat_interval: int = DEFAULT_HEARTBEAT_INTERVAL,
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._deliver = deliver
        self._timezone = timezone
        self._poll_interval = poll_interval
        self._heartbeat_interval = heartbeat_interval
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None
        self._tick_lock = asyncio.Lock()
        self._tick_count = 0

    @property
    def store(self) -> ReminderStore:
        return self._store

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def tick_count(self) -> int:
        return self._tick_count

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.info(
            "reminder_dispatcher_started",
            extra={
                "file.path": str(self._store.reminders_dir),
                "dispatcher.poll_interval": self._poll_interval,
                "dispatcher.timezone": self._timezone,
            },
        )
        self._task = asyncio.create_task(self._poll_loop())

    async def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("reminder_dispatcher_stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.tick()
            except Exception:
                logger.exception("reminder_tick_error")
            await asyncio.sleep(self._poll_interval)

    async def tick(self, now: int | None = None) -> TickResult:
        """Run one scan-and-deliver cycle.

        Args:
            now: Tick instant in epoch ms; defaults to the dispatcher clock.
        """
        async with self._tick_lock:
            if now is None:
                now = self._clock()
            self._tick_count += 1
            result = TickResult(now=now)

            reminders = self._store.load_all_for_dispatch()
            result.scanned = len(reminders)
            due = [r for r in reminders if r.is_due(now)]
            result.due = len(due)

            if self._tick_count % self._heartbeat_interval == 0:
                logger.info(
                    "reminder_dispatcher_heartbeat",
                    extra={
                        "tick.count": self._tick_count,
                        "reminders.total": result.scanned,
                    },
                )
            logger.debug(
                f"Reminder check: {result.scanned} reminders, {result.due} due"
            )

            for reminder in due:
                try:
                    await self._process(reminder, now, result)
                except Exception:
                    result.errors += 1
                    logger.exception(
                        "reminder_processing_error",
                        extra={"reminder.id": reminder.id},
                    )

            if result.due:
                logger.info(
                    "reminder_tick_completed",
                    extra={
                        "reminders.due": result.due,
                        "reminders.delivered": result.delivered,
                        "reminders.failed": result.failed,
                        "reminders.errors": result.errors,
                    },
                )
            return result

    async def _process(self, reminder: Reminder, now: int, result: TickResult) -> None:
        if reminder.is_recurring and not is_valid(reminder.cron_expression or ""):
            result.errors += 1
            logger.error(
                "reminder_cron_invalid",
                extra={
                    "reminder.id": reminder.id,
                    "cron.expression": reminder.cron_expression,
                },
            )
            return

        logger.info(
            "reminder_triggered",
            extra={
                "reminder.id": reminder.id,
                "messaging.chat_id": reminder.chat,
                "reminder.recurring": reminder.is_recurring,
            },
        )

        if not await self._try_deliver(reminder):
            # Left as-is: still due, retried on the next tick
            result.failed += 1
            return
        result.delivered += 1

        if reminder.is_recurring:
            assert reminder.cron_expression is not None
            next_time = next_trigger_ms(reminder.cron_expression, now, self._timezone)
            advanced = replace(reminder, time=next_time, last_triggered=now)
            if not self._store.update(advanced):
                # Cancelled while the delivery was in flight
                logger.warning(
                    "reminder_already_removed", extra={"reminder.id": reminder.id}
                )
                return
            result.advanced += 1
            logger.debug(
                "reminder_advanced",
                extra={"reminder.id": reminder.id, "reminder.time": next_time},
            )
        else:
            if self._store.delete(reminder.id, reminder.chat, reminder.sender):
                result.removed += 1
            else:
                logger.warning(
                    "reminder_already_removed", extra={"reminder.id": reminder.id}
                )

    async def _try_deliver(self, reminder: Reminder) -> bool:
        text = format_reminder_message(reminder.message)
        try:
            delivered = await self._deliver(reminder.chat, text)
        except Exception as e:
            logger.warning(
                "reminder_delivery_error",
                extra={"reminder.id": reminder.id, "error.message": str(e)},
            )
            return False
        if not delivered:
            logger.warning(
                "reminder_delivery_failed",
                extra={
                    "reminder.id": reminder.id,
                    "messaging.chat_id": reminder.chat,
                },
            )
        return bool(delivered)
