"""Workout tracker command line.

Usage:
    workout-tracker seed [--reset]          # load the sample library
    workout-tracker stats                   # overall and per-workout numbers
    workout-tracker history <workout_id>    # sessions of one workout
    workout-tracker progress <exercise_id> [--level Standard]
    workout-tracker rest [--seconds 90]     # run a rest countdown
"""

from __future__ import annotations

import argparse
import logging
import sys
import threading

from record_store import RecordStore
from workout_engine.history import SessionHistory
from workout_engine.rest_timer import RestTimer, format_timer, validate_duration
from workout_engine.stats import (
    exercise_progress,
    overall_stats,
    recent_sessions,
    rep_trend,
    workout_stats,
)

from tracker_cli.config import DATA_DIR, LOG_LEVEL, REST_SECONDS
from tracker_cli.ticker import SchedulerTickSource

logger = logging.getLogger(__name__)


def _open_store() -> RecordStore:
    logger.debug("Opening record store at %s", DATA_DIR)
    return RecordStore.open(DATA_DIR)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_seed(store: RecordStore, args: argparse.Namespace) -> int:
    ok = store.reset_to_sample_data() if args.reset else store.initialize_sample_data()
    if not ok:
        logger.error("Seeding sample data failed")
        return 1
    print(
        f"{len(store.exercises.get_all())} exercises, "
        f"{len(store.workouts.get_all())} workouts"
    )
    return 0


def cmd_stats(store: RecordStore, args: argparse.Namespace) -> int:
    sessions = store.sessions.get_all()
    workouts = store.workouts.get_all()
    overall = overall_stats(sessions, workouts, store.exercises.get_all())
    print(
        f"Workouts: {overall.total_workouts}  Exercises: {overall.total_exercises}  "
        f"Sessions: {overall.completed_sessions}/{overall.total_sessions} "
        f"({overall.completion_rate}%)"
    )
    print(f"Average duration: {overall.average_duration}m  Volume: {overall.total_volume}")

    for workout in workouts:
        ws = workout_stats(sessions, workout.id)
        last = ws.last_session.date.date().isoformat() if ws.last_session else "never"
        print(
            f"  [{workout.id}] {workout.name}: {ws.total_sessions} sessions, "
            f"avg {ws.average_duration}m, volume {ws.total_volume}, last {last}"
        )

    recent = recent_sessions(sessions)
    if recent:
        print("Recent:")
        names = {w.id: w.name for w in workouts}
        for session in recent:
            print(
                f"  {session.date:%Y-%m-%d %H:%M}  "
                f"{names.get(session.workout_id, session.workout_id)}  "
                f"{session.duration}m"
            )
    return 0


def cmd_history(store: RecordStore, args: argparse.Namespace) -> int:
    workout = store.workouts.get_by_id(args.workout_id)
    if workout is None:
        logger.error("No workout with id %s", args.workout_id)
        return 1
    exercise_names = {e.id: e.name for e in store.exercises.get_all()}
    sessions = recent_sessions(
        store.sessions.get_by_workout_id(workout.id), limit=args.limit
    )
    if not sessions:
        print(f"No sessions for {workout.name}")
        return 0
    for session in sessions:
        print(f"{session.date:%Y-%m-%d %H:%M}  {session.duration}m")
        for data in session.exercises:
            sets = ", ".join(
                f"{s.reps}@{s.level}" if s.level else str(s.reps) for s in data.sets
            )
            marker = "x" if data.completed else " "
            name = exercise_names.get(data.exercise_id, data.exercise_id)
            print(f"  [{marker}] {name}: {sets}")
    return 0


def cmd_progress(store: RecordStore, args: argparse.Namespace) -> int:
    history = SessionHistory(store.sessions)
    sessions = history.sessions()
    frame = exercise_progress(sessions, args.exercise_id)
    if args.level:
        frame = frame[frame["level"] == args.level]
    if frame.empty:
        print(f"No history for exercise {args.exercise_id}")
        return 0
    print(frame.to_string(index=False))

    for level in sorted(set(frame["level"])):
        best = history.max_reps_for_exercise_level(args.exercise_id, level)
        print(f"Max reps at {level or '(no level)'}: {best}")
    latest = history.latest_record_for_exercise(args.exercise_id)
    if latest is not None:
        print("Last session: " + ", ".join(str(s.reps) for s in latest.sets))
    trend = rep_trend(sessions, args.exercise_id, args.level)
    print(f"Trend: {trend:+.1f} reps per session")
    return 0


def cmd_rest(store: RecordStore, args: argparse.Namespace) -> int:
    done = threading.Event()
    ticker = SchedulerTickSource()
    timer = RestTimer(args.seconds, notify=done.set, tick_source=ticker)
    print(f"Resting {format_timer(timer.duration)}")
    timer.start()
    try:
        while not done.wait(timeout=1):
            print(f"\r{format_timer(timer.remaining)}", end="", flush=True)
        print("\rRest over\a")
    except KeyboardInterrupt:
        print()
        logger.info("Rest cancelled at %s", format_timer(timer.remaining))
    finally:
        timer.close()
        ticker.shutdown()
    return 0


def _rest_seconds(value: str) -> int:
    try:
        return validate_duration(int(value))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal workout tracker")
    sub = parser.add_subparsers(dest="command", required=True)

    seed = sub.add_parser("seed", help="Load the sample exercises and workouts")
    seed.add_argument(
        "--reset", action="store_true", help="Drop all sessions and definitions first"
    )
    seed.set_defaults(func=cmd_seed)

    stats = sub.add_parser("stats", help="Show overall and per-workout statistics")
    stats.set_defaults(func=cmd_stats)

    history = sub.add_parser("history", help="List recent sessions of a workout")
    history.add_argument("workout_id")
    history.add_argument("--limit", type=int, default=10)
    history.set_defaults(func=cmd_history)

    progress = sub.add_parser("progress", help="Show rep progress for an exercise")
    progress.add_argument("exercise_id")
    progress.add_argument("--level", default=None)
    progress.set_defaults(func=cmd_progress)

    rest = sub.add_parser("rest", help="Run a rest countdown")
    rest.add_argument("--seconds", type=_rest_seconds, default=REST_SECONDS)
    rest.set_defaults(func=cmd_rest)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    store = _open_store()
    return args.func(store, args)


if __name__ == "__main__":
    sys.exit(main())
