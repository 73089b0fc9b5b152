"""Reminders subsystem: persisted one-time and recurring reminders.

Public API:
- ReminderStore: File-backed CRUD for reminders
- ReminderDispatcher: Polling loop that delivers due reminders
- ReminderService: Creation path used by the command layer
- IdAllocator: Sequential ids with wraparound

Types:
- Reminder: A single reminder record
- DeliverFn: Async delivery callback signature
"""

from chime.reminders.dispatcher import (
    ReminderDispatcher,
    TickResult,
    format_reminder_message,
)
from chime.reminders.ids import IdAllocator
from chime.reminders.service import ReminderService
from chime.reminders.store import ReminderStore
from chime.reminders.types import DeliverFn, Reminder

__all__ = [
    "DeliverFn",
    "IdAllocator",
    "Reminder",
    "ReminderDispatcher",
    "ReminderService",
    "ReminderStore",
    "TickResult",
    "format_reminder_message",
]
