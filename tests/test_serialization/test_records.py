"""Tests for stored-record serialization, including legacy session shapes."""

from __future__ import annotations

from datetime import datetime, timezone

from workout_engine.models.enums import ExerciseType
from workout_engine.models.session import SetData
from workout_engine.serialization.records import (
    exercise_data_from_record,
    exercise_data_to_record,
    exercise_from_record,
    exercise_to_record,
    format_timestamp,
    is_legacy_exercise_record,
    parse_timestamp,
    session_from_record,
    session_to_record,
    workout_from_record,
    workout_to_record,
)


class TestTimestamps:
    def test_z_suffix(self) -> None:
        parsed = parse_timestamp("2026-10-19T09:00:00.000Z")
        assert parsed == datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

    def test_epoch_millis(self) -> None:
        assert parse_timestamp(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self) -> None:
        assert parse_timestamp("2026-10-19T09:00:00").tzinfo is not None

    def test_unreadable_is_none(self) -> None:
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None

    def test_out_of_range_epoch_is_none(self, caplog) -> None:
        assert parse_timestamp(1e20) is None
        assert parse_timestamp(-1e20) is None
        assert "Unreadable timestamp" in caplog.text

    def test_out_of_range_epoch_session_sorts_oldest(self) -> None:
        session = session_from_record({"id": "x", "workoutId": "1", "date": 1e20})
        assert session.date == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_format_naive_as_utc(self) -> None:
        assert format_timestamp(datetime(2026, 1, 2, 3, 4)) == "2026-01-02T03:04:00+00:00"


class TestExerciseRecords:
    def test_camel_case_fields(self, push_ups) -> None:
        record = exercise_to_record(push_ups)
        assert record["targetMuscle"] == "Chest"
        assert record["secondaryMuscle"] == "Arms"
        assert record["type"] == "Main"
        assert record["levels"] == ["Standard", "Decline"]

    def test_read_back(self, push_ups) -> None:
        assert exercise_from_record(exercise_to_record(push_ups)) == push_ups

    def test_unknown_type_reads_as_main(self) -> None:
        exercise = exercise_from_record({"id": 7, "name": "X", "type": "Yoga", "levels": ["A"]})
        assert exercise.exercise_type == ExerciseType.MAIN
        assert exercise.id == "7"

    def test_missing_levels_get_fallback(self) -> None:
        exercise = exercise_from_record({"id": "1", "name": "X", "type": "Main", "levels": []})
        assert exercise.levels == ("Standard",)


class TestWorkoutRecords:
    def test_exercises_field_holds_ids(self, upper_body) -> None:
        record = workout_to_record(upper_body)
        assert record["exercises"] == ["ac", "pu", "sq"]
        assert record["recommendedDay"] == "Monday"
        assert workout_from_record(record) == upper_body


class TestLegacySessionRecords:
    def test_detects_legacy_shape(self) -> None:
        assert is_legacy_exercise_record({"exerciseId": "1", "sets": 3, "reps": 10})
        assert not is_legacy_exercise_record({"exerciseId": "1", "sets": []})

    def test_legacy_expanded_to_sets(self) -> None:
        data = exercise_data_from_record(
            {"exerciseId": "1", "sets": 3, "reps": 10, "completed": True}
        )
        assert data.sets == (SetData(10, ""), SetData(10, ""), SetData(10, ""))
        assert data.completed

    def test_legacy_non_numeric_reps_read_as_zero(self) -> None:
        data = exercise_data_from_record({"exerciseId": "1", "sets": "2", "reps": "lots"})
        assert [s.reps for s in data.sets] == [0, 0]

    def test_current_shape(self) -> None:
        data = exercise_data_from_record(
            {"exerciseId": "1", "sets": [{"reps": "12", "level": "Decline"}, {"reps": -3}]}
        )
        assert data.sets == (SetData(12, "Decline"), SetData(0, ""))

    def test_previous_sets_not_written(self) -> None:
        from workout_engine.models.session import ExerciseSessionData

        record = exercise_data_to_record(
            ExerciseSessionData("1", sets=(SetData(5, "A"),), previous_sets=(SetData(3, "A"),))
        )
        assert "previousSets" not in record
        assert record["sets"][0]["reps"] == 5

    def test_mixed_history_session(self) -> None:
        session = session_from_record(
            {
                "id": "1700000000000",
                "workoutId": "1",
                "date": "2023-11-14T22:13:20.000Z",
                "exercises": [
                    {"exerciseId": "1", "sets": 2, "reps": 8},
                    {"exerciseId": "2", "sets": [{"reps": 5, "level": "Standard"}]},
                ],
                "duration": 25,
                "completed": True,
            }
        )
        assert session.exercise_data("1").sets == (SetData(8, ""), SetData(8, ""))
        assert session.exercise_data("2").sets == (SetData(5, "Standard"),)
        assert session.duration == 25

    def test_unreadable_date_sorts_oldest(self) -> None:
        session = session_from_record({"id": "x", "workoutId": "1", "date": "garbage"})
        assert session.date == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_session_written_in_current_shape(self, make_session, clock) -> None:
        session = make_session("a", "w1", clock(), {"pu": [(10, "Standard")]})
        record = session_to_record(session)
        assert record["workoutId"] == "w1"
        assert record["exercises"][0]["sets"] == [
            {"reps": 10, "level": "Standard", "completed": False, "completedAt": None}
        ]
        assert session_from_record(record) == session
