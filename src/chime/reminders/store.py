"""Reminder store backed by one JSON file per reminder."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from chime.reminders.persistence import file_lock, read_json, write_json_atomic
from chime.reminders.types import Reminder

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"[A-Za-z0-9_-]+")


class ReminderStore:
    """File-backed storage for reminders.

    Layout::

        <data_dir>/reminders/<id>.json
        <data_dir>/.reminders.lock

    Every read scans the directory. Corrupt or partial files are logged and
    skipped so that a single bad record never fails a whole read.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._reminders_dir = data_dir / "reminders"
        self._lock_file = data_dir / ".reminders.lock"

    @property
    def reminders_dir(self) -> Path:
        return self._reminders_dir

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get_all(self, chat: str, sender: str) -> list[Reminder]:
        """Get all reminders owned by (chat, sender) in creation order."""
        return [r for r in self._scan() if r.owned_by(chat, sender)]

    def load_all_for_dispatch(self) -> list[Reminder]:
        """Get every reminder regardless of owner."""
        return self._scan()

    def get(self, reminder_id: str) -> Reminder | None:
        path = self._lookup(reminder_id)
        if path is None or not path.exists():
            return None
        return self._read(path)

    def get_stats(self, now: int | None = None) -> dict[str, Any]:
        reminders = self._scan()
        recurring = sum(1 for r in reminders if r.is_recurring)
        stats: dict[str, Any] = {
            "reminders_dir": str(self._reminders_dir),
            "total": len(reminders),
            "one_time": len(reminders) - recurring,
            "recurring": recurring,
        }
        if now is not None:
            stats["due"] = sum(1 for r in reminders if r.is_due(now))
        return stats

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def put(self, reminder: Reminder) -> None:
        """Insert or overwrite a reminder by id.

        Returns only once the record is fully on disk.
        """
        path = self._path_for(reminder.id)
        with file_lock(self._lock_file):
            write_json_atomic(path, reminder.to_dict())
        logger.debug(
            "reminder_saved",
            extra={"reminder.id": reminder.id, "reminder.time": reminder.time},
        )

    def update(self, reminder: Reminder) -> bool:
        """Overwrite a reminder only if its record still exists.

        Returns False without writing when the record was removed in the
        meantime, for example by a concurrent cancel.
        """
        path = self._path_for(reminder.id)
        with file_lock(self._lock_file):
            if not path.exists():
                return False
            write_json_atomic(path, reminder.to_dict())
        logger.debug(
            "reminder_updated",
            extra={"reminder.id": reminder.id, "reminder.time": reminder.time},
        )
        return True

    def delete(self, reminder_id: str, chat: str, sender: str) -> bool:
        """Remove a reminder if it exists and is owned by (chat, sender)."""
        path = self._lookup(reminder_id)
        if path is None:
            return False
        with file_lock(self._lock_file):
            if not path.exists():
                return False
            reminder = self._read(path)
            if reminder is None or not reminder.owned_by(chat, sender):
                return False
            path.unlink()
        logger.debug("reminder_deleted", extra={"reminder.id": reminder_id})
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _path_for(self, reminder_id: str) -> Path:
        path = self._lookup(reminder_id)
        if path is None:
            raise ValueError(f"Invalid reminder id: {reminder_id!r}")
        return path

    def _lookup(self, reminder_id: str) -> Path | None:
        # Ids that could never have been written name no record
        if not _SAFE_ID.fullmatch(reminder_id):
            return None
        return self._reminders_dir / f"{reminder_id}.json"

    def _scan(self) -> list[Reminder]:
        if not self._reminders_dir.exists():
            return []

        reminders: list[Reminder] = []
        for path in self._reminders_dir.glob("*.json"):
            reminder = self._read(path)
            if reminder is not None:
                reminders.append(reminder)
        reminders.sort(key=_creation_order)
        return reminders

    def _read(self, path: Path) -> Reminder | None:
        try:
            data = read_json(path)
        except (OSError, ValueError) as e:
            logger.warning(
                "reminder_file_unreadable",
                extra={"file.path": str(path), "error.message": str(e)},
            )
            return None

        reminder = Reminder.from_dict(data)
        if reminder is None:
            logger.warning("reminder_file_corrupt", extra={"file.path": str(path)})
        return reminder


def _creation_order(reminder: Reminder) -> tuple[int, int, str]:
    numeric = int(reminder.id) if reminder.id.isdigit() else 0
    return (reminder.created, numeric, reminder.id)
