"""
Workout session lifecycle.

A workout is a reusable template: it is only ever DRAFT or IN_PROGRESS.
Completing a session appends a WorkoutHistory snapshot and folds the workout
back to DRAFT in the same transaction; resetting discards the session without
a snapshot. Both share `_clear_progress` so the two paths cannot drift.
"""
from __future__ import annotations
import datetime as dt
import logging
import os
from typing import List, Optional, Tuple

from prometheus_client import Counter
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session as DBSession, select

from ..models import Exercise, Workout, WorkoutHistory, WorkoutSet, WorkoutStatus
from ..schemas import CompleteWorkoutResult, SessionSummary, WorkoutRead
from .common import Conflict, TransactionFailure, now_utc, seconds_between
from .workouts_service import get_owned_workout, list_exercises_with_sets, workout_read

logger = logging.getLogger(__name__)

# 0 disables the guard: every complete() call appends a history row
COMPLETE_DEDUP_SECONDS = int(os.getenv("COMPLETE_DEDUP_SECONDS", "0"))

LIFECYCLE_TRANSITIONS = Counter(
    "workout_lifecycle_transitions_total",
    "Workout lifecycle transitions",
    ["transition"],
)


def resolve_duration(
    elapsed_seconds: Optional[int],
    started_at: Optional[dt.datetime],
    completed_at: dt.datetime,
) -> int:
    """Client hint wins when non-zero, then server elapsed time, then 0."""
    if elapsed_seconds:
        return int(elapsed_seconds)
    if started_at is not None:
        return seconds_between(started_at, completed_at)
    return 0


def tally_sets(tree: List[Tuple[Exercise, List[WorkoutSet]]]) -> Tuple[int, int, int]:
    """(exercise_count, total_sets, completed_sets) for a loaded workout tree."""
    total = sum(len(sets) for _, sets in tree)
    done = sum(1 for _, sets in tree for s in sets if s.completed)
    return len(tree), total, done


def _clear_progress(db: DBSession, w: Workout) -> None:
    """Return a workout and all of its sets to the untouched DRAFT state. Caller commits."""
    w.status = WorkoutStatus.draft
    w.started_at = None
    w.completed_at = None
    w.duration = None
    db.add(w)

    ex_ids = select(Exercise.id).where(Exercise.workout_id == w.id)
    db.execute(
        update(WorkoutSet)
        .where(WorkoutSet.exercise_id.in_(ex_ids))
        .values(completed=False, completed_at=None)
        .execution_options(synchronize_session="fetch")
    )


def _guard_duplicate(db: DBSession, workout_id: int, now: dt.datetime) -> None:
    if COMPLETE_DEDUP_SECONDS <= 0:
        return
    last = db.exec(
        select(WorkoutHistory.completed_at)
        .where(WorkoutHistory.workout_id == workout_id)
        .order_by(WorkoutHistory.completed_at.desc())
        .limit(1)
    ).first()
    if last is not None and seconds_between(last, now) < COMPLETE_DEDUP_SECONDS:
        raise Conflict("Workout was already completed moments ago")


def start_workout(db: DBSession, user_id: int, workout_id: int) -> WorkoutRead:
    w = get_owned_workout(db, user_id, workout_id)

    # already running: keep the original timer baseline
    if w.status == WorkoutStatus.in_progress and w.started_at is not None:
        return workout_read(db, w)

    w.status = WorkoutStatus.in_progress
    w.started_at = now_utc()
    db.add(w)
    db.commit()
    db.refresh(w)

    LIFECYCLE_TRANSITIONS.labels(transition="start").inc()
    logger.info("Workout %s started at %s", w.id, w.started_at.isoformat())
    return workout_read(db, w)


def complete_workout(
    db: DBSession,
    user_id: int,
    workout_id: int,
    elapsed_seconds: Optional[int] = None,
) -> CompleteWorkoutResult:
    w = get_owned_workout(db, user_id, workout_id)

    completed_at = now_utc()
    _guard_duplicate(db, w.id, completed_at)

    duration = resolve_duration(elapsed_seconds, w.started_at, completed_at)
    exercise_count, total_sets, completed_sets = tally_sets(list_exercises_with_sets(db, w.id))

    try:
        db.add(WorkoutHistory(
            workout_id=w.id,
            user_id=w.user_id,
            name=w.name,
            notes=w.notes,
            duration=duration,
            exercise_count=exercise_count,
            total_sets=total_sets,
            completed_sets=completed_sets,
            completed_at=completed_at,
        ))
        db.flush()
        _clear_progress(db, w)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Completing workout %s failed, rolled back", workout_id)
        raise TransactionFailure(f"Failed to complete workout: {e}")

    db.refresh(w)
    LIFECYCLE_TRANSITIONS.labels(transition="complete").inc()
    logger.info(
        "Workout %s completed: duration=%ss sets=%s/%s",
        w.id, duration, completed_sets, total_sets,
    )
    return CompleteWorkoutResult(
        workout=workout_read(db, w),
        session=SessionSummary(
            duration=duration,
            completed_at=completed_at,
            exercise_count=exercise_count,
            total_sets=total_sets,
            completed_sets=completed_sets,
        ),
    )


def reset_workout(db: DBSession, user_id: int, workout_id: int) -> WorkoutRead:
    w = get_owned_workout(db, user_id, workout_id)

    try:
        _clear_progress(db, w)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Resetting workout %s failed, rolled back", workout_id)
        raise TransactionFailure(f"Failed to reset workout: {e}")

    db.refresh(w)
    LIFECYCLE_TRANSITIONS.labels(transition="reset").inc()
    logger.info("Workout %s reset to draft", w.id)
    return workout_read(db, w)
