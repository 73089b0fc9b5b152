"""Tests for sequential reminder ids."""

from pathlib import Path

import pytest

from chime.reminders import IdAllocator


class TestIdAllocator:
    """Tests for IdAllocator."""

    def test_starts_at_one(self, ids: IdAllocator):
        assert ids.next_id() == "1"

    def test_sequential(self, ids: IdAllocator):
        assert [ids.next_id() for _ in range(3)] == ["1", "2", "3"]

    def test_persists_across_instances(self, data_dir: Path):
        IdAllocator(data_dir).next_id()
        IdAllocator(data_dir).next_id()

        assert IdAllocator(data_dir).next_id() == "3"

    def test_wraps_after_max(self, ids: IdAllocator):
        ids.counter_file.parent.mkdir(parents=True, exist_ok=True)
        ids.counter_file.write_text("999")

        assert ids.next_id() == "1"
        assert ids.next_id() == "2"

    def test_custom_max(self, data_dir: Path):
        ids = IdAllocator(data_dir, max_id=2)

        assert [ids.next_id() for _ in range(4)] == ["1", "2", "1", "2"]

    def test_corrupt_counter_restarts(self, ids: IdAllocator):
        ids.counter_file.parent.mkdir(parents=True, exist_ok=True)
        ids.counter_file.write_text("banana")

        assert ids.next_id() == "1"

    def test_out_of_range_counter_restarts(self, ids: IdAllocator):
        ids.counter_file.parent.mkdir(parents=True, exist_ok=True)
        ids.counter_file.write_text("5000")

        assert ids.next_id() == "1"

    def test_invalid_max(self, data_dir: Path):
        with pytest.raises(ValueError):
            IdAllocator(data_dir, max_id=0)
