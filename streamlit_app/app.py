"""Workout Tracker: Streamlit session page.

Run with:
    streamlit run streamlit_app/app.py

Data lives in WORKOUT_TRACKER_DATA_DIR (see tracker_cli.config).
"""

from __future__ import annotations

import time
from typing import Callable

import streamlit as st

from record_store import RecordStore
from tracker_cli.config import DATA_DIR, REST_SECONDS
from tracker_cli.ticker import SchedulerTickSource
from workout_engine import (
    ExerciseLibrary,
    PreconditionError,
    RestTimer,
    SessionEngine,
    SessionHistory,
    SessionNotSavedError,
    ValidationError,
)
from workout_engine.models.enums import REST_MAX_SECONDS, REST_MIN_SECONDS
from workout_engine.models.exercise import Exercise
from workout_engine.models.session import ExerciseSessionData
from workout_engine.rest_timer import format_timer
from workout_engine.stats import recent_sessions

from helpers import (
    TYPE_COLORS,
    TYPE_ICONS,
    format_duration,
    format_improvement,
    format_sets,
    progress_label,
    session_caption,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Workout Tracker",
    page_icon="💪",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Cached resources
# ---------------------------------------------------------------------------


@st.cache_resource
def get_store() -> RecordStore:
    store = RecordStore.open(DATA_DIR)
    store.initialize_sample_data()
    return store


@st.cache_resource
def get_tick_source() -> SchedulerTickSource:
    return SchedulerTickSource()


store = get_store()
library = ExerciseLibrary(store.exercises, store.workouts)


# ---------------------------------------------------------------------------
# Widget keys and messages
# ---------------------------------------------------------------------------


def _bump_widget_version() -> None:
    """Force set widgets to be recreated from the engine's values.

    Streamlit keeps a widget's value by key, so after the engine changes a
    set (level reload, set removed) the old widget would keep showing the
    stale number. A version counter in every key makes them new widgets.
    """
    st.session_state["_wv"] = st.session_state.get("_wv", 0) + 1


def _wk(name: str) -> str:
    v = st.session_state.get("_wv", 0)
    return f"{name}_v{v}"


def _flash(level: str, text: str) -> None:
    st.session_state["flash"] = (level, text)


def _show_flash() -> None:
    message = st.session_state.pop("flash", None)
    if message is None:
        return
    level, text = message
    getattr(st, level, st.info)(text)


def _run_action(action: Callable, *args, refresh: bool = False) -> None:
    """Run an engine action from a widget callback, reporting rejections."""
    try:
        action(*args)
    except ValidationError as exc:
        _flash("warning", "; ".join(exc.messages))
    except (PreconditionError, IndexError, KeyError) as exc:
        _flash("warning", str(exc))
    if refresh:
        _bump_widget_version()


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


def _start_session(workout_id: str) -> None:
    workout = store.workouts.get_by_id(workout_id)
    if workout is None:
        _flash("error", "That workout no longer exists")
        return

    alerts: list[str] = []
    timer = RestTimer(
        REST_SECONDS,
        notify=lambda: alerts.append("Rest over, next set!"),
        tick_source=get_tick_source(),
    )
    engine = SessionEngine(SessionHistory(store.sessions), store.sessions, rest_timer=timer)
    try:
        engine.start(workout, library.resolve_exercises(workout))
    except PreconditionError as exc:
        _flash("error", str(exc))
        return
    st.session_state["engine"] = engine
    st.session_state["rest_alerts"] = alerts
    st.session_state.pop("last_result", None)
    _bump_widget_version()


def _finish_session(engine: SessionEngine) -> None:
    try:
        saved = engine.finalize()
    except SessionNotSavedError as exc:
        _flash("error", f"{exc}. Your progress is kept, try again.")
        return
    except PreconditionError as exc:
        _flash("warning", str(exc))
        return
    st.session_state["last_result"] = (saved, engine.summary())
    st.session_state.pop("engine", None)
    _flash("success", f"Session completed! Duration: {saved.duration} minutes")


def _exit_session(engine: SessionEngine) -> None:
    engine.abandon()
    st.session_state.pop("engine", None)


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------


def _on_reps_change(engine: SessionEngine, exercise_id: str, index: int, key: str) -> None:
    _run_action(engine.set_reps, exercise_id, index, st.session_state.get(key, 0))


def _on_level_change(engine: SessionEngine, exercise_id: str, index: int, key: str) -> None:
    _run_action(engine.set_level, exercise_id, index, st.session_state.get(key), refresh=True)


def _render_set_row(
    engine: SessionEngine, exercise: Exercise, data: ExerciseSessionData, index: int
) -> None:
    set_data = data.sets[index]
    locked = data.completed
    c_reps, c_level, c_done, c_remove = st.columns([2, 3, 1, 1])

    reps_key = _wk(f"reps_{exercise.id}_{index}")
    c_reps.number_input(
        f"Set {index + 1} reps",
        min_value=0,
        step=1,
        value=set_data.reps,
        key=reps_key,
        disabled=locked,
        on_change=_on_reps_change,
        args=(engine, exercise.id, index, reps_key),
    )

    levels = list(exercise.levels)
    level_key = _wk(f"level_{exercise.id}_{index}")
    c_level.selectbox(
        "Level",
        levels,
        index=levels.index(set_data.level) if set_data.level in levels else 0,
        key=level_key,
        disabled=locked,
        on_change=_on_level_change,
        args=(engine, exercise.id, index, level_key),
    )

    c_done.button(
        "✓" if set_data.completed else "Done",
        key=_wk(f"done_{exercise.id}_{index}"),
        disabled=locked or set_data.completed,
        on_click=_run_action,
        args=(engine.complete_set, exercise.id, index),
    )
    c_remove.button(
        "✕",
        key=_wk(f"remove_{exercise.id}_{index}"),
        disabled=locked or len(data.sets) <= 1,
        on_click=_run_action,
        args=(engine.remove_set, exercise.id, index),
        kwargs={"refresh": True},
    )


def _render_exercise(engine: SessionEngine, position: int, exercise: Exercise) -> None:
    data = engine.data_for(exercise.id)
    icon = TYPE_ICONS.get(exercise.exercise_type, "")
    title = f"{icon} {exercise.name}" + ("  ✅" if data.completed else "")
    with st.expander(title, expanded=position == engine.current_index):
        color = TYPE_COLORS.get(exercise.exercise_type, "#EEEEEE")
        muscles = exercise.target_muscle
        if exercise.secondary_muscle:
            muscles += f" / {exercise.secondary_muscle}"
        st.markdown(
            f'<div style="background:{color};padding:4px 10px;border-radius:4px;">'
            f"{exercise.exercise_type.value} | {muscles}</div>",
            unsafe_allow_html=True,
        )
        st.markdown(f"**Last time:** {format_sets(data.previous_sets)}")

        for index in range(len(data.sets)):
            _render_set_row(engine, exercise, data, index)

        c_add, c_complete, c_delta = st.columns(3)
        c_add.button(
            "Add set",
            key=_wk(f"add_{exercise.id}"),
            disabled=data.completed,
            on_click=_run_action,
            args=(engine.add_set, exercise.id),
        )
        c_complete.button(
            "Complete exercise",
            key=_wk(f"complete_{exercise.id}"),
            type="primary",
            disabled=data.completed,
            on_click=_run_action,
            args=(engine.complete_exercise, exercise.id),
        )
        c_delta.metric("vs last time", format_improvement(engine.improvement(exercise.id)))


def _render_rest_timer(timer: RestTimer) -> None:
    st.sidebar.subheader("Rest Timer")
    st.sidebar.markdown(f"## {format_timer(timer.remaining)}")

    duration = st.sidebar.slider(
        "Duration (seconds)",
        min_value=REST_MIN_SECONDS,
        max_value=REST_MAX_SECONDS,
        value=timer.duration,
        key="rest_duration",
        disabled=timer.is_running,
    )
    if duration != timer.duration and not timer.is_running:
        timer.set_duration(duration)

    c_toggle, c_reset = st.sidebar.columns(2)
    if timer.is_running:
        c_toggle.button("Pause", on_click=timer.pause)
    else:
        c_toggle.button("Start", on_click=timer.start)
    c_reset.button("Reset", on_click=timer.reset)

    alerts = st.session_state.get("rest_alerts", [])
    while alerts:
        st.toast(alerts.pop(0), icon="⏰")


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

st.sidebar.title("Workout Tracker")
engine: SessionEngine | None = st.session_state.get("engine")

if engine is None:
    workouts = store.workouts.get_all()
    if workouts:
        names = {w.id: w.name for w in workouts}
        chosen = st.sidebar.selectbox(
            "Workout", list(names), format_func=lambda wid: names[wid]
        )
        st.sidebar.button(
            "Start session", type="primary", on_click=_start_session, args=(chosen,)
        )
    else:
        st.sidebar.info("No workouts yet. Run `workout-tracker seed` to load samples.")
else:
    _render_rest_timer(engine.rest_timer)
    st.sidebar.divider()
    st.sidebar.button("Exit without saving", on_click=_exit_session, args=(engine,))


# ---------------------------------------------------------------------------
# Main area
# ---------------------------------------------------------------------------

_show_flash()

if engine is not None:
    st.title(engine.workout.name)
    summary = engine.summary()
    st.progress(
        summary.completion_percentage / 100,
        text=progress_label(
            summary.completed_exercises,
            summary.total_exercises,
            summary.completion_percentage,
        ),
    )
    m1, m2, m3 = st.columns(3)
    m1.metric("Completed", f"{summary.completion_percentage}%")
    m2.metric("Volume", str(summary.total_volume))
    m3.metric("Elapsed", format_duration(summary.elapsed_minutes))

    for position, exercise in enumerate(engine.exercises):
        _render_exercise(engine, position, exercise)

    st.divider()
    if st.button("Finish session", type="primary"):
        _finish_session(engine)
        st.rerun()

    if engine.rest_timer is not None and engine.rest_timer.is_running:
        time.sleep(1)
        st.rerun()
else:
    result = st.session_state.get("last_result")
    if result is not None:
        saved, summary = result
        st.subheader("Session Summary")
        s1, s2, s3 = st.columns(3)
        s1.metric("Completed", f"{summary.completion_percentage}%")
        s2.metric("Volume", str(summary.total_volume))
        s3.metric("Duration", format_duration(saved.duration))

    st.subheader("Recent Sessions")
    names = {w.id: w.name for w in store.workouts.get_all()}
    history = recent_sessions(store.sessions.get_all())
    if not history:
        st.info("No sessions yet. Pick a workout and press **Start session**.")
    for session in history:
        st.markdown(session_caption(session, names.get(session.workout_id, "Deleted workout")))
