"""Tests for the file-backed reminder store."""

import json

import pytest

from chime.reminders import ReminderStore
from tests.conftest import NOW_MS, make_reminder


class TestPutAndRead:
    """Tests for put/get_all/get."""

    def test_round_trip_preserves_fields(self, store: ReminderStore):
        reminder = make_reminder(cron_expression="0 8 * * *", last_triggered=NOW_MS)
        store.put(reminder)

        assert store.get_all(reminder.chat, reminder.sender) == [reminder]

    def test_persisted_shape(self, store: ReminderStore):
        reminder = make_reminder(id="7")
        store.put(reminder)

        data = json.loads((store.reminders_dir / "7.json").read_text())
        assert data == {
            "id": "7",
            "chat": "chat-1",
            "sender": "user-1",
            "message": "Drink water",
            "time": reminder.time,
            "created": reminder.created,
        }

    def test_put_overwrites_same_id(self, store: ReminderStore):
        store.put(make_reminder(message="first"))
        store.put(make_reminder(message="second"))

        reminders = store.get_all("chat-1", "user-1")
        assert [r.message for r in reminders] == ["second"]

    def test_get_all_filters_by_owner(self, store: ReminderStore):
        store.put(make_reminder(id="1"))
        store.put(make_reminder(id="2", sender="user-2"))
        store.put(make_reminder(id="3", chat="chat-2"))

        assert [r.id for r in store.get_all("chat-1", "user-1")] == ["1"]
        assert [r.id for r in store.get_all("chat-1", "user-2")] == ["2"]

    def test_get_all_in_creation_order(self, store: ReminderStore):
        store.put(make_reminder(id="10", created=NOW_MS - 1000))
        store.put(make_reminder(id="2", created=NOW_MS - 3000))
        store.put(make_reminder(id="3", created=NOW_MS - 2000))

        assert [r.id for r in store.get_all("chat-1", "user-1")] == ["2", "3", "10"]

    def test_get_all_on_empty_store(self, store: ReminderStore):
        assert store.get_all("chat-1", "user-1") == []

    def test_load_all_for_dispatch_ignores_owner(self, store: ReminderStore):
        store.put(make_reminder(id="1"))
        store.put(make_reminder(id="2", chat="chat-2", sender="user-2"))

        assert {r.id for r in store.load_all_for_dispatch()} == {"1", "2"}

    def test_get_by_id(self, store: ReminderStore):
        reminder = make_reminder(id="4")
        store.put(reminder)

        assert store.get("4") == reminder
        assert store.get("5") is None

    def test_no_temp_files_left_behind(self, store: ReminderStore):
        store.put(make_reminder())

        leftovers = [p.name for p in store.reminders_dir.iterdir()]
        assert leftovers == ["1.json"]

    def test_rejects_unsafe_ids(self, store: ReminderStore):
        with pytest.raises(ValueError):
            store.put(make_reminder(id="../escape"))
        with pytest.raises(ValueError):
            store.update(make_reminder(id="../escape"))

    @pytest.mark.parametrize("reminder_id", ["../escape", "a/b", "1\n", ""])
    def test_unsafe_ids_are_absent(self, store: ReminderStore, reminder_id):
        assert store.get(reminder_id) is None
        assert store.delete(reminder_id, "chat-1", "user-1") is False


class TestCorruptRecords:
    """Corrupt files are skipped, never failing the whole read."""

    def test_invalid_json_skipped(self, store: ReminderStore):
        store.put(make_reminder(id="1"))
        (store.reminders_dir / "2.json").write_text('{"id": "2", "chat": ')

        assert [r.id for r in store.get_all("chat-1", "user-1")] == ["1"]
        assert [r.id for r in store.load_all_for_dispatch()] == ["1"]

    def test_incomplete_record_skipped(self, store: ReminderStore):
        store.put(make_reminder(id="1"))
        (store.reminders_dir / "2.json").write_text(
            json.dumps({"id": "2", "chat": "chat-1", "message": "no sender"})
        )

        assert [r.id for r in store.load_all_for_dispatch()] == ["1"]

    def test_binary_garbage_skipped(self, store: ReminderStore):
        store.put(make_reminder(id="1"))
        (store.reminders_dir / "3.json").write_bytes(b"\xff\xfe\x00garbage")

        assert [r.id for r in store.load_all_for_dispatch()] == ["1"]

    def test_delete_of_corrupt_record_returns_false(self, store: ReminderStore):
        store.reminders_dir.mkdir(parents=True)
        (store.reminders_dir / "2.json").write_text("not json")

        assert store.delete("2", "chat-1", "user-1") is False
        assert (store.reminders_dir / "2.json").exists()


class TestDelete:
    """Tests for ownership-checked delete."""

    def test_delete_removes_record(self, store: ReminderStore):
        reminder = make_reminder()
        store.put(reminder)

        assert store.delete(reminder.id, reminder.chat, reminder.sender) is True
        assert store.get_all(reminder.chat, reminder.sender) == []

    def test_delete_with_mismatched_sender(self, store: ReminderStore):
        reminder = make_reminder()
        store.put(reminder)

        assert store.delete(reminder.id, reminder.chat, "someone-else") is False
        assert store.get_all(reminder.chat, reminder.sender) == [reminder]

    def test_delete_with_mismatched_chat(self, store: ReminderStore):
        reminder = make_reminder()
        store.put(reminder)

        assert store.delete(reminder.id, "other-chat", reminder.sender) is False
        assert store.get(reminder.id) == reminder

    def test_delete_missing_id(self, store: ReminderStore):
        assert store.delete("42", "chat-1", "user-1") is False


class TestUpdate:
    """Tests for update-if-present."""

    def test_update_existing(self, store: ReminderStore):
        store.put(make_reminder(time=NOW_MS))

        assert store.update(make_reminder(time=NOW_MS + 60_000)) is True
        updated = store.get("1")
        assert updated is not None
        assert updated.time == NOW_MS + 60_000

    def test_update_after_delete_writes_nothing(self, store: ReminderStore):
        reminder = make_reminder()
        store.put(reminder)
        store.delete(reminder.id, reminder.chat, reminder.sender)

        assert store.update(reminder) is False
        assert store.get(reminder.id) is None
        assert list(store.reminders_dir.iterdir()) == []

    def test_update_missing_store(self, store: ReminderStore):
        assert store.update(make_reminder()) is False
        assert not store.reminders_dir.exists()


class TestStats:
    """Tests for get_stats()."""

    def test_counts(self, store: ReminderStore):
        store.put(make_reminder(id="1", time=NOW_MS - 1000))
        store.put(make_reminder(id="2", cron_expression="* * * * *"))

        stats = store.get_stats(now=NOW_MS)
        assert stats["total"] == 2
        assert stats["one_time"] == 1
        assert stats["recurring"] == 1
        assert stats["due"] == 1

    def test_due_omitted_without_now(self, store: ReminderStore):
        assert "due" not in store.get_stats()
