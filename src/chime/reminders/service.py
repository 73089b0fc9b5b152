"""Reminder creation and management for the command layer."""

import logging

from chime.cron import next_trigger_ms, validate
from chime.reminders.dispatcher import Clock, now_ms
from chime.reminders.ids import IdAllocator
from chime.reminders.store import ReminderStore
from chime.reminders.types import Reminder

logger = logging.getLogger(__name__)


class ReminderService:
    """Creates, lists and cancels reminders on behalf of a (chat, sender).

    Expressions are validated before anything is written, so a rejected
    recurring reminder never reaches the store.
    """

    def __init__(
        self,
        store: ReminderStore,
        ids: IdAllocator,
        *,
        timezone: str = "UTC",
        clock: Clock = now_ms,
    ) -> None:
        self._store = store
        self._ids = ids
        self._timezone = timezone
        self._clock = clock

    def create_one_time(
        self, chat: str, sender: str, message: str, time: int
    ) -> Reminder:
        """Create a reminder firing once at ``time`` (epoch ms).

        Raises:
            ValueError: If the message is empty or the time is not in the future.
        """
        _check_message(message)
        now = self._clock()
        if time <= now:
            raise ValueError("Reminder time must be in the future")

        reminder = Reminder(
            id=self._ids.next_id(),
            chat=chat,
            sender=sender,
            message=message,
            time=time,
            created=now,
        )
        self._save(reminder)
        logger.info(
            "reminder_created",
            extra={
                "reminder.id": reminder.id,
                "messaging.chat_id": chat,
                "reminder.time": time,
            },
        )
        return reminder

    def create_recurring(
        self, chat: str, sender: str, message: str, cron_expression: str
    ) -> Reminder:
        """Create a reminder firing on a cron schedule.

        Raises:
            InvalidCronExpression: If the expression is not accepted.
            ValueError: If the message is empty.
        """
        expression = validate(cron_expression)
        _check_message(message)
        now = self._clock()

        reminder = Reminder(
            id=self._ids.next_id(),
            chat=chat,
            sender=sender,
            message=message,
            time=next_trigger_ms(expression, now, self._timezone),
            created=now,
            cron_expression=expression,
        )
        self._save(reminder)
        logger.info(
            "recurring_reminder_created",
            extra={
                "reminder.id": reminder.id,
                "messaging.chat_id": chat,
                "cron.expression": expression,
                "reminder.time": reminder.time,
            },
        )
        return reminder

    def list_reminders(self, chat: str, sender: str) -> list[Reminder]:
        """List reminders owned by (chat, sender), soonest first."""
        return sorted(self._store.get_all(chat, sender), key=lambda r: r.time)

    def cancel(self, reminder_id: str, chat: str, sender: str) -> bool:
        removed = self._store.delete(reminder_id, chat, sender)
        if removed:
            logger.info("reminder_cancelled", extra={"reminder.id": reminder_id})
        return removed

    def _save(self, reminder: Reminder) -> None:
        if self._store.get(reminder.id) is not None:
            # The id counter wrapped onto a live reminder
            logger.warning("reminder_id_reused", extra={"reminder.id": reminder.id})
        self._store.put(reminder)


def _check_message(message: str) -> None:
    if not message.strip():
        raise ValueError("Reminder message must not be empty")
