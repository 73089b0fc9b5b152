"""Shared test fixtures and factories."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

from chime.cron import to_epoch_ms
from chime.reminders import IdAllocator, Reminder, ReminderStore

# Monday 2026-01-12 10:07:42 UTC
NOW = datetime(2026, 1, 12, 10, 7, 42, tzinfo=UTC)
NOW_MS = to_epoch_ms(NOW)


# =============================================================================
# Reminder Fixtures and Factories
# =============================================================================


def make_reminder(
    id: str = "1",
    chat: str = "chat-1",
    sender: str = "user-1",
    message: str = "Drink water",
    time: int = NOW_MS + 60_000,
    created: int = NOW_MS - 60_000,
    cron_expression: str | None = None,
    last_triggered: int | None = None,
) -> Reminder:
    """Factory for creating reminders."""
    return Reminder(
        id=id,
        chat=chat,
        sender=sender,
        message=message,
        time=time,
        created=created,
        cron_expression=cron_expression,
        last_triggered=last_triggered,
    )


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store(data_dir: Path) -> ReminderStore:
    return ReminderStore(data_dir)


@pytest.fixture
def ids(data_dir: Path) -> IdAllocator:
    return IdAllocator(data_dir)


class FakeClock:
    """Settable epoch-ms clock."""

    def __init__(self, now: int = NOW_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class RecordingDeliverer:
    """Delivery callback that records calls and returns a fixed outcome."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls: list[tuple[str, str]] = []
        self.fail_chats: set[str] = set()
        self.raise_chats: set[str] = set()

    async def __call__(self, chat_id: str, text: str) -> bool:
        self.calls.append((chat_id, text))
        if chat_id in self.raise_chats:
            raise ConnectionError("transport down")
        if chat_id in self.fail_chats:
            return False
        return self.result


@pytest.fixture
def deliverer() -> RecordingDeliverer:
    return RecordingDeliverer()


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1", "COLUMNS": "200"})


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a temporary config file pointing at a temporary data dir."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        f"""
data_dir = "{tmp_path / "data"}"
timezone = "UTC"

[dispatcher]
poll_interval = 5
"""
    )
    return config_path
