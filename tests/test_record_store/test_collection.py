"""Tests for collections over storage backends."""

from __future__ import annotations

import dataclasses
from unittest.mock import MagicMock

import pytest

from record_store import Collection, MemoryBackend, SessionCollection, StorageError
from record_store.store import EXERCISES_KEY, SESSIONS_KEY
from workout_engine.serialization import (
    exercise_from_record,
    exercise_to_record,
    session_from_record,
    session_to_record,
)


def _exercises(backend) -> Collection:
    return Collection(backend, EXERCISES_KEY, exercise_to_record, exercise_from_record)


def _sessions(backend) -> SessionCollection:
    return SessionCollection(backend, SESSIONS_KEY, session_to_record, session_from_record)


class TestCollection:
    def test_empty(self) -> None:
        assert _exercises(MemoryBackend()).get_all() == []

    def test_add_and_get(self, push_ups, squats) -> None:
        collection = _exercises(MemoryBackend())
        assert collection.add(push_ups)
        assert collection.add(squats)
        assert collection.get_all() == [push_ups, squats]
        assert collection.get_by_id("sq") == squats
        assert collection.get_by_id("nope") is None

    def test_update(self, push_ups) -> None:
        collection = _exercises(MemoryBackend())
        collection.add(push_ups)
        renamed = dataclasses.replace(push_ups, name="Wide Push-ups")
        assert collection.update("pu", renamed)
        assert collection.get_by_id("pu").name == "Wide Push-ups"

    def test_update_missing_returns_false(self, push_ups) -> None:
        assert not _exercises(MemoryBackend()).update("pu", push_ups)

    def test_delete(self, push_ups, squats) -> None:
        collection = _exercises(MemoryBackend())
        collection.save_all([push_ups, squats])
        assert collection.delete("pu")
        assert collection.get_all() == [squats]
        assert not collection.delete("pu")

    def test_undecodable_record_skipped_but_kept(self, push_ups) -> None:
        backend = MemoryBackend({EXERCISES_KEY: [{"name": "no id"}, "junk"]})
        collection = _exercises(backend)
        assert collection.get_all() == []
        assert collection.add(push_ups)
        raw = backend.load(EXERCISES_KEY)
        assert raw[0] == {"name": "no id"}
        assert len(raw) == 3

    def test_clear(self, push_ups) -> None:
        backend = MemoryBackend()
        collection = _exercises(backend)
        collection.add(push_ups)
        assert collection.clear()
        assert EXERCISES_KEY not in backend.keys()

    def test_is_empty(self, push_ups) -> None:
        backend = MemoryBackend({EXERCISES_KEY: []})
        collection = _exercises(backend)
        assert collection.is_empty()
        collection.add(push_ups)
        assert not collection.is_empty()
        assert _exercises(MemoryBackend()).is_empty()

    def test_undecodable_records_are_not_empty(self) -> None:
        collection = _exercises(MemoryBackend({EXERCISES_KEY: [{"name": "no id"}]}))
        assert collection.get_all() == []
        assert not collection.is_empty()


class TestStorageFailures:
    def test_read_error_gives_empty_list(self) -> None:
        backend = MagicMock()
        backend.load.side_effect = StorageError("disk gone")
        assert _exercises(backend).get_all() == []

    def test_add_refuses_to_overwrite_unreadable_data(self, push_ups) -> None:
        backend = MagicMock()
        backend.load.side_effect = StorageError("corrupt")
        assert not _exercises(backend).add(push_ups)
        backend.save.assert_not_called()

    def test_is_empty_raises_on_unreadable_data(self) -> None:
        backend = MagicMock()
        backend.load.side_effect = StorageError("corrupt")
        with pytest.raises(StorageError):
            _exercises(backend).is_empty()

    def test_non_list_data_is_unreadable(self, push_ups) -> None:
        backend = MemoryBackend({EXERCISES_KEY: {"oops": True}})
        collection = _exercises(backend)
        assert collection.get_all() == []
        assert not collection.add(push_ups)
        assert backend.load(EXERCISES_KEY) == {"oops": True}

    def test_write_error_returns_false(self, push_ups) -> None:
        backend = MagicMock()
        backend.load.return_value = []
        backend.save.side_effect = StorageError("read-only")
        assert not _exercises(backend).add(push_ups)


class TestSessionCollection:
    def test_by_workout(self, make_session, clock) -> None:
        sessions = _sessions(MemoryBackend())
        sessions.add(make_session("a", "w1", clock(), {}))
        sessions.add(make_session("b", "w2", clock(), {}))
        assert [s.id for s in sessions.get_by_workout_id("w1")] == ["a"]

    def test_latest_by_date(self, make_session, clock) -> None:
        sessions = _sessions(MemoryBackend())
        earlier = clock()
        later = clock.advance(days=1)
        sessions.add(make_session("new", "w1", later, {}))
        sessions.add(make_session("old", "w1", earlier, {}))
        assert sessions.get_latest_by_workout_id("w1").id == "new"

    def test_equal_dates_highest_id_wins(self, make_session, clock) -> None:
        sessions = _sessions(MemoryBackend())
        sessions.add(make_session("002", "w1", clock(), {}))
        sessions.add(make_session("001", "w1", clock(), {}))
        assert sessions.get_latest_by_workout_id("w1").id == "002"

    def test_latest_none(self) -> None:
        assert _sessions(MemoryBackend()).get_latest_by_workout_id("w1") is None

    def test_out_of_range_epoch_date_does_not_break_reads(
        self, make_session, clock
    ) -> None:
        good = session_to_record(make_session("ok", "w1", clock(), {"pu": [(5, "Standard")]}))
        bad = {"id": "bad", "workoutId": "w1", "date": 1e20, "exercises": []}
        sessions = _sessions(MemoryBackend({SESSIONS_KEY: [good, bad]}))
        loaded = sessions.get_all()
        assert [s.id for s in loaded] == ["ok", "bad"]
        assert sessions.get_latest_by_workout_id("w1").id == "ok"
