"""Tests for the session engine: seeding, set edits, completion, finalize."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from workout_engine.exceptions import (
    PreconditionError,
    SessionNotSavedError,
    SessionStateError,
    ValidationError,
)
from workout_engine.history import SessionHistory
from workout_engine.models.enums import ExerciseType, SessionState
from workout_engine.models.exercise import Exercise
from workout_engine.session_engine import SessionEngine


@pytest.fixture
def engine(store, clock, id_factory) -> SessionEngine:
    return SessionEngine(
        SessionHistory(store.sessions), store.sessions, clock=clock, id_factory=id_factory
    )


@pytest.fixture
def session_a(store, make_session, clock):
    """Earlier Upper Body session: push-ups 10, 8, 6 at Standard."""
    session = make_session(
        "a",
        "w1",
        clock() - timedelta(days=2),
        {"pu": [(10, "Standard"), (8, "Standard"), (6, "Standard")]},
    )
    store.sessions.add(session)
    return session


def _reps(engine, exercise_id):
    return [s.reps for s in engine.data_for(exercise_id).sets]


def _levels(engine, exercise_id):
    return [s.level for s in engine.data_for(exercise_id).sets]


class TestStart:
    def test_push_ups_scenario(self, engine, session_a, upper_body, exercises) -> None:
        engine.start(upper_body, exercises)
        assert _reps(engine, "pu") == [10, 8, 6]
        assert _levels(engine, "pu") == ["Standard"] * 3
        assert [s.reps for s in engine.data_for("pu").previous_sets] == [10, 8, 6]

        updated = engine.set_level("pu", 0, "Decline")
        assert updated.reps == 0
        assert _levels(engine, "pu") == ["Decline", "Standard", "Standard"]
        assert _reps(engine, "pu") == [0, 8, 6]

    def test_shell_and_state(self, engine, upper_body, exercises, clock) -> None:
        session = engine.start(upper_body, exercises)
        assert engine.state == SessionState.ACTIVE
        assert session.id == "s001"
        assert session.workout_id == "w1"
        assert session.date == clock()
        assert session.exercises == ()
        assert not session.completed

    def test_workout_order_and_unreferenced_dropped(self, engine, upper_body, exercises) -> None:
        extra = Exercise("zz", "Extra", ExerciseType.MAIN, "Core", ("Standard",))
        engine.start(upper_body, list(reversed(exercises)) + [extra])
        assert [e.id for e in engine.exercises] == ["ac", "pu", "sq"]

    def test_defaults_to_three_sets_without_history(self, engine, upper_body, exercises) -> None:
        engine.start(upper_body, exercises)
        assert _reps(engine, "sq") == [0, 0, 0]
        assert _levels(engine, "sq") == ["Standard"] * 3
        assert engine.data_for("sq").previous_sets == ()

    def test_mirrors_previous_set_count(
        self, engine, store, make_session, clock, upper_body, exercises
    ) -> None:
        store.sessions.add(
            make_session("p", "w1", clock() - timedelta(days=1), {"sq": [(20, "Jump")] * 4})
        )
        engine.start(upper_body, exercises)
        assert _reps(engine, "sq") == [20, 20, 20, 20]
        assert _levels(engine, "sq") == ["Jump"] * 4

    def test_default_level_from_last_previous_set(
        self, engine, store, make_session, clock, upper_body, exercises
    ) -> None:
        store.sessions.add(
            make_session(
                "p", "w1", clock() - timedelta(days=1),
                {"pu": [(10, "Standard"), (5, "Decline")]},
            )
        )
        engine.start(upper_body, exercises)
        assert _levels(engine, "pu") == ["Decline", "Decline"]
        # position 0 was Standard last time, so nothing to carry over there
        assert _reps(engine, "pu") == [0, 5]

    def test_undefined_previous_level_falls_back(
        self, engine, store, make_session, clock, upper_body, exercises
    ) -> None:
        store.sessions.add(
            make_session("p", "w1", clock() - timedelta(days=1), {"pu": [(7, ""), (7, "")]})
        )
        engine.start(upper_body, exercises)
        assert _levels(engine, "pu") == ["Standard", "Standard"]
        assert _reps(engine, "pu") == [0, 0]

    def test_baseline_is_workout_scoped(
        self, engine, store, make_session, clock, upper_body, exercises
    ) -> None:
        store.sessions.add(
            make_session("other", "w9", clock() - timedelta(days=1), {"pu": [(12, "Standard")]})
        )
        engine.start(upper_body, exercises)
        assert engine.data_for("pu").previous_sets == ()
        # reps lookups are global though
        assert _reps(engine, "pu") == [12, 0, 0]

    def test_no_resolved_exercises(self, engine, upper_body) -> None:
        with pytest.raises(PreconditionError):
            engine.start(upper_body, [])
        assert engine.state == SessionState.UNINITIALIZED

    def test_cannot_start_twice(self, engine, upper_body, exercises) -> None:
        engine.start(upper_body, exercises)
        with pytest.raises(SessionStateError):
            engine.start(upper_body, exercises)

    def test_mutation_before_start(self, engine) -> None:
        with pytest.raises(SessionStateError):
            engine.set_reps("pu", 0, 5)


class TestSetMutation:
    @pytest.fixture(autouse=True)
    def _started(self, engine, upper_body, exercises) -> None:
        engine.start(upper_body, exercises)

    @pytest.mark.parametrize(
        "raw, expected", [(12, 12), ("15", 15), ("abc", 0), (-4, 0), (None, 0), (7.9, 7)]
    )
    def test_set_reps_coerces(self, engine, raw, expected) -> None:
        assert engine.set_reps("pu", 1, raw).reps == expected
        assert _reps(engine, "pu")[1] == expected

    def test_unknown_level_rejected(self, engine) -> None:
        with pytest.raises(ValidationError):
            engine.set_level("pu", 0, "Planche")
        assert _levels(engine, "pu")[0] == "Standard"

    def test_level_change_discards_typed_reps(self, engine) -> None:
        engine.set_reps("pu", 0, 25)
        engine.set_level("pu", 0, "Decline")
        assert _reps(engine, "pu")[0] == 0

    def test_add_set(self, engine) -> None:
        engine.set_level("pu", 2, "Decline")
        new_set = engine.add_set("pu")
        assert new_set.reps == 0
        assert new_set.level == "Standard"
        assert len(engine.data_for("pu").sets) == 4

    def test_remove_set_at_index(self, engine) -> None:
        for i, reps in enumerate([1, 2, 3]):
            engine.set_reps("pu", i, reps)
        engine.remove_set("pu", 1)
        assert _reps(engine, "pu") == [1, 3]

    def test_last_set_cannot_be_removed(self, engine) -> None:
        engine.remove_set("pu", 0)
        engine.remove_set("pu", 0)
        with pytest.raises(PreconditionError):
            engine.remove_set("pu", 0)
        assert len(engine.data_for("pu").sets) == 1

    def test_bad_set_index(self, engine) -> None:
        with pytest.raises(IndexError):
            engine.remove_set("pu", 3)
        with pytest.raises(IndexError):
            engine.set_reps("pu", -1, 3)

    def test_unknown_exercise(self, engine) -> None:
        with pytest.raises(KeyError):
            engine.add_set("nope")

    def test_complete_set_stamps_time(self, engine, clock) -> None:
        clock.advance(minutes=3)
        done = engine.complete_set("pu", 0)
        assert done.completed
        assert done.completed_at == clock()


class TestCompletion:
    @pytest.fixture(autouse=True)
    def _started(self, engine, upper_body, exercises) -> None:
        engine.start(upper_body, exercises)

    def test_requires_some_reps(self, engine) -> None:
        with pytest.raises(PreconditionError):
            engine.complete_exercise("pu")
        assert not engine.data_for("pu").completed

    def test_marks_completed_with_time(self, engine, clock) -> None:
        engine.set_reps("pu", 0, 10)
        data = engine.complete_exercise("pu")
        assert data.completed
        assert data.completed_at == clock()

    def test_completed_exercise_is_locked(self, engine) -> None:
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        with pytest.raises(PreconditionError):
            engine.set_reps("pu", 0, 11)
        with pytest.raises(PreconditionError):
            engine.add_set("pu")

    def test_cursor_moves_to_next_incomplete_and_wraps(self, engine) -> None:
        assert engine.current_exercise.id == "ac"
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        assert engine.current_exercise.id == "sq"
        engine.set_reps("sq", 0, 10)
        engine.complete_exercise("sq")
        assert engine.current_exercise.id == "ac"

    def test_select_exercise(self, engine) -> None:
        assert engine.select_exercise(2).id == "sq"
        assert engine.current_index == 2
        with pytest.raises(IndexError):
            engine.select_exercise(3)

    def test_completion_percentage_monotonic(self, engine) -> None:
        seen = [engine.completion_percentage()]
        for exercise_id in ("ac", "pu", "sq"):
            engine.set_reps(exercise_id, 0, 5)
            engine.complete_exercise(exercise_id)
            seen.append(engine.completion_percentage())
        assert seen == [0, 33, 67, 100]

    def test_total_volume_counts_unfinished_sets(self, engine) -> None:
        engine.set_reps("pu", 0, 10)
        engine.set_reps("sq", 1, 15)
        engine.complete_exercise("pu")
        assert engine.total_volume() == 25

    def test_elapsed_minutes_round_half_up(self, engine, clock) -> None:
        clock.advance(seconds=90)
        assert engine.elapsed_minutes() == 2

    def test_summary(self, engine, clock) -> None:
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        clock.advance(minutes=20)
        summary = engine.summary()
        assert summary.completion_percentage == 33
        assert summary.total_volume == 10
        assert summary.completed_exercises == 1
        assert summary.total_exercises == 3
        assert summary.elapsed_minutes == 20
        assert [i.exercise_id for i in summary.improvements] == ["ac", "pu", "sq"]


class TestImprovementAgainstBaseline:
    def test_improvement_uses_previous_sets(
        self, engine, session_a, upper_body, exercises
    ) -> None:
        engine.start(upper_body, exercises)
        engine.set_reps("pu", 0, 15)
        engine.set_reps("pu", 1, 12)
        engine.set_reps("pu", 2, 9)
        improvement = engine.improvement("pu")
        assert improvement.previous_volume == 24
        assert improvement.current_volume == 36
        assert improvement.percentage == 50
        assert improvement.improved


class TestFinalize:
    def test_requires_a_completed_exercise_then_succeeds(
        self, engine, store, upper_body, exercises
    ) -> None:
        engine.start(upper_body, exercises)
        with pytest.raises(PreconditionError):
            engine.finalize()
        assert engine.state == SessionState.ACTIVE
        assert store.sessions.get_all() == []

        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        saved = engine.finalize()
        assert engine.state == SessionState.FINALIZED
        assert store.sessions.get_all() == [saved]

    def test_snapshot_contents(self, engine, session_a, store, upper_body, exercises, clock) -> None:
        engine.start(upper_body, exercises)
        engine.set_reps("pu", 0, 11)
        engine.complete_exercise("pu")
        clock.advance(minutes=42, seconds=20)
        saved = engine.finalize()
        assert saved.completed
        assert saved.duration == 42
        assert saved.date == engine.started_at
        assert all(d.previous_sets == () for d in saved.exercises)
        assert [d.exercise_id for d in saved.exercises] == ["ac", "pu", "sq"]
        assert store.sessions.get_latest_by_workout_id("w1").id == saved.id

    def test_failed_write_keeps_session_active(self, clock, id_factory, upper_body, exercises) -> None:
        sink = MagicMock()
        sink.add.return_value = False
        source = MagicMock()
        source.get_all.return_value = []
        engine = SessionEngine(SessionHistory(source), sink, clock=clock, id_factory=id_factory)
        engine.start(upper_body, exercises)
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")

        with pytest.raises(SessionNotSavedError) as excinfo:
            engine.finalize()
        assert excinfo.value.session_id == "s001"
        assert engine.state == SessionState.ACTIVE

        sink.add.return_value = True
        saved = engine.finalize()
        assert engine.state == SessionState.FINALIZED
        assert sink.add.call_count == 2
        sink.add.assert_called_with(saved)

    def test_no_mutation_after_finalize(self, engine, upper_body, exercises) -> None:
        engine.start(upper_body, exercises)
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        engine.finalize()
        with pytest.raises(SessionStateError):
            engine.set_reps("sq", 0, 3)
        with pytest.raises(SessionStateError):
            engine.finalize()

    def test_finalize_before_start_rejected(self, engine, store) -> None:
        with pytest.raises(SessionStateError):
            engine.finalize()
        assert engine.state == SessionState.UNINITIALIZED
        assert store.sessions.get_all() == []

    def test_finalize_closes_rest_timer(self, store, clock, upper_body, exercises) -> None:
        timer = MagicMock()
        engine = SessionEngine(
            SessionHistory(store.sessions), store.sessions, clock=clock, rest_timer=timer
        )
        engine.start(upper_body, exercises)
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        engine.finalize()
        timer.close.assert_called_once()


class TestAbandon:
    def test_nothing_saved(self, store, clock, upper_body, exercises) -> None:
        timer = MagicMock()
        engine = SessionEngine(
            SessionHistory(store.sessions), store.sessions, clock=clock, rest_timer=timer
        )
        engine.start(upper_body, exercises)
        engine.set_reps("pu", 0, 10)
        engine.complete_exercise("pu")
        engine.abandon()
        assert engine.state == SessionState.ABANDONED
        assert store.sessions.get_all() == []
        timer.close.assert_called_once()
        with pytest.raises(SessionStateError):
            engine.complete_exercise("sq")
