"""Sequential reminder ids."""

import logging
from pathlib import Path

from chime.reminders.persistence import file_lock, write_text_atomic

logger = logging.getLogger(__name__)

MAX_ID = 999


class IdAllocator:
    """Allocates short sequential ids from a counter file.

    Ids run from 1 to ``max_id`` and wrap back to 1, so an id can be reused
    once the counter has cycled. Uniqueness is best-effort.
    """

    def __init__(self, data_dir: Path, max_id: int = MAX_ID) -> None:
        if max_id < 1:
            raise ValueError("max_id must be at least 1")
        self._counter_file = data_dir / "last_id"
        self._lock_file = data_dir / ".last_id.lock"
        self._max_id = max_id

    @property
    def counter_file(self) -> Path:
        return self._counter_file

    def next_id(self) -> str:
        with file_lock(self._lock_file):
            current = self._read_counter()
            next_value = current + 1
            if next_value > self._max_id:
                logger.info("reminder_id_wrapped", extra={"id.max": self._max_id})
                next_value = 1
            write_text_atomic(self._counter_file, str(next_value))
        return str(next_value)

    def _read_counter(self) -> int:
        try:
            raw = self._counter_file.read_text().strip()
        except FileNotFoundError:
            return 0
        try:
            value = int(raw)
        except ValueError:
            logger.warning(
                "reminder_id_counter_corrupt",
                extra={"file.path": str(self._counter_file)},
            )
            return 0
        return value if 0 <= value <= self._max_id else 0
