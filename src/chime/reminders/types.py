"""Reminder types.

Public types:
- Reminder: A persisted reminder (one-time or recurring)
- DeliverFn: Async delivery callback used by the dispatcher
"""

import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Wire keys of the persisted record
_KNOWN_FIELDS = {
    "id",
    "chat",
    "sender",
    "message",
    "time",
    "created",
    "cronExpression",
    "lastTriggered",
}


@dataclass
class Reminder:
    """A reminder record.

    All instants are epoch milliseconds. ``time`` is the next fire time;
    ``cron_expression`` marks the reminder as recurring.
    """

    id: str
    chat: str
    sender: str
    message: str
    time: int
    created: int
    cron_expression: str | None = None
    last_triggered: int | None = None

    @property
    def is_recurring(self) -> bool:
        return self.cron_expression is not None

    def is_due(self, now: int) -> bool:
        return self.time <= now

    def owned_by(self, chat: str, sender: str) -> bool:
        return self.chat == chat and self.sender == sender

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted record shape (optional keys omitted)."""
        data: dict[str, Any] = {
            "id": self.id,
            "chat": self.chat,
            "sender": self.sender,
            "message": self.message,
            "time": self.time,
            "created": self.created,
        }
        if self.cron_expression is not None:
            data["cronExpression"] = self.cron_expression
        if self.last_triggered is not None:
            data["lastTriggered"] = self.last_triggered
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Reminder | None":
        """Parse a persisted record, returning None if it is unusable."""
        if not isinstance(data, dict):
            return None

        for key in ("id", "chat", "sender", "message"):
            if not isinstance(data.get(key), str):
                return None
        if not data["id"]:
            return None

        time = _as_millis(data.get("time"))
        created = _as_millis(data.get("created"))
        if time is None or created is None:
            return None

        cron = data.get("cronExpression")
        if cron is not None and not isinstance(cron, str):
            return None

        last_triggered = None
        if data.get("lastTriggered") is not None:
            last_triggered = _as_millis(data["lastTriggered"])
            if last_triggered is None:
                return None

        unknown = set(data) - _KNOWN_FIELDS
        if unknown:
            logger.debug(
                "reminder_unknown_fields",
                extra={"reminder.id": data["id"], "fields": sorted(unknown)},
            )

        return cls(
            id=data["id"],
            chat=data["chat"],
            sender=data["sender"],
            message=data["message"],
            time=time,
            created=created,
            cron_expression=cron,
            last_triggered=last_triggered,
        )


def _as_millis(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


# Delivery receives the chat id and the full text to send; True on success
DeliverFn = Callable[[str, str], Awaitable[bool]]
