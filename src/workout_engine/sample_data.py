"""Sample calisthenics exercises and workouts for a fresh install."""

from __future__ import annotations

from workout_engine.models.enums import ExerciseType
from workout_engine.models.exercise import Exercise
from workout_engine.models.workout import Workout, with_muscles_covered

_MAIN = ExerciseType.MAIN
_WARMUP = ExerciseType.WARMUP
_STRETCHING = ExerciseType.STRETCHING

# (id, name, type, target, secondary, levels)
_EXERCISE_ROWS: tuple[tuple[str, str, ExerciseType, str, str, tuple[str, ...]], ...] = (
    ("1", "Push-ups", _MAIN, "Chest", "Arms", (
        "Standard Push-ups",
        "Low Decline Push-ups",
        "Medium Decline Push-ups",
        "High Decline Push-ups",
        "Diamond Push-ups",
        "Archer Push-ups",
    )),
    ("2", "Pull-ups", _MAIN, "Back", "Arms", (
        "Assisted Pull-ups",
        "Standard Pull-ups",
        "Wide Grip Pull-ups",
        "Close Grip Pull-ups",
        "L-Sit Pull-ups",
        "Archer Pull-ups",
    )),
    ("3", "Squats", _MAIN, "Legs", "Glutes", (
        "Standard Squats",
        "Jump Squats",
        "Pistol Squats (Assisted)",
        "Pistol Squats",
        "Shrimp Squats",
        "Dragon Squats",
    )),
    ("4", "Plank", _MAIN, "Core", "", (
        "Standard Plank",
        "Forearm Plank",
        "Side Plank",
        "Plank to Push-up",
        "Plank Jacks",
        "One-Arm Plank",
    )),
    ("5", "Burpees", _MAIN, "Full Body", "Cardio", (
        "Half Burpees",
        "Standard Burpees",
        "Burpee with Push-up",
        "Burpee with Jump",
        "Burpee with Tuck Jump",
        "Burpee with 360° Jump",
    )),
    ("6", "Mountain Climbers", _WARMUP, "Full Body", "Cardio", ("Standard",)),
    ("7", "Arm Circles", _WARMUP, "Shoulders", "", ("Standard",)),
    ("8", "Leg Swings", _WARMUP, "Legs", "", ("Standard",)),
    ("9", "Hip Flexor Stretch", _STRETCHING, "Legs", "", ("Standard",)),
    ("10", "Shoulder Stretch", _STRETCHING, "Shoulders", "", ("Standard",)),
    ("11", "Dips", _MAIN, "Arms", "Chest", (
        "Assisted Dips",
        "Standard Dips",
        "Weighted Dips",
        "Ring Dips",
        "L-Sit Dips",
        "Korean Dips",
    )),
    ("12", "Lunges", _MAIN, "Legs", "Glutes", (
        "Standard Lunges",
        "Walking Lunges",
        "Jumping Lunges",
        "Bulgarian Split Squats",
        "Reverse Lunges",
        "Lateral Lunges",
    )),
    ("13", "Pike Push-ups", _MAIN, "Shoulders", "Arms", (
        "Standard Pike Push-ups",
        "Elevated Pike Push-ups",
        "Handstand Push-ups (Assisted)",
        "Handstand Push-ups",
        "Freestanding Handstand Push-ups",
        "One-Arm Handstand Push-ups",
    )),
    ("14", "Hollow Body Hold", _MAIN, "Core", "", (
        "Hollow Body Hold (Bent Legs)",
        "Standard Hollow Body Hold",
        "Hollow Body Rocks",
        "Hollow Body V-ups",
        "Hollow Body Pull-ups",
        "Hollow Body Press to Handstand",
    )),
    ("15", "Jumping Jacks", _WARMUP, "Full Body", "Cardio", ("Standard",)),
    ("16", "Cat-Cow Stretch", _STRETCHING, "Back", "Core", ("Standard",)),
    ("17", "Calf Raises", _MAIN, "Legs", "", (
        "Standard Calf Raises",
        "Single Leg Calf Raises",
        "Jump Calf Raises",
        "Pistol Calf Raises",
        "Weighted Calf Raises",
        "One-Leg Calf Raises",
    )),
    ("18", "Tricep Dips", _MAIN, "Arms", "", ("Standard",)),
    ("19", "High Knees", _WARMUP, "Legs", "Cardio", ("Standard",)),
    ("20", "Child's Pose", _STRETCHING, "Back", "Shoulders", ("Standard",)),
)

# (id, name, exercise ids, recommended day)
_WORKOUT_ROWS: tuple[tuple[str, str, tuple[str, ...], str], ...] = (
    ("1", "Upper Body Strength", ("1", "2", "11", "13", "18"), "Monday"),
    ("2", "Lower Body Power", ("3", "12", "17", "5"), "Wednesday"),
    ("3", "Full Body HIIT", ("5", "1", "3", "14", "2"), "Friday"),
    ("4", "Core Focus", ("4", "14", "1", "3"), "Tuesday"),
    ("5", "Active Recovery", ("6", "15", "19", "9", "10", "16", "20"), "Sunday"),
)


def sample_exercises() -> list[Exercise]:
    return [
        Exercise(
            id=eid,
            name=name,
            exercise_type=ex_type,
            target_muscle=target,
            secondary_muscle=secondary,
            levels=levels,
        )
        for eid, name, ex_type, target, secondary, levels in _EXERCISE_ROWS
    ]


def sample_workouts(exercises: list[Exercise] | None = None) -> list[Workout]:
    """Sample workouts with ``muscles_covered`` computed from *exercises*."""
    pool = exercises if exercises is not None else sample_exercises()
    return [
        with_muscles_covered(
            Workout(id=wid, name=name, exercise_ids=ids, recommended_day=day),
            pool,
        )
        for wid, name, ids, day in _WORKOUT_ROWS
    ]
