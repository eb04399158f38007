from __future__ import annotations
from typing import Dict, List, Optional
from fastapi import HTTPException
from sqlalchemy import delete
from sqlmodel import Session as DBSession, select


from ..models import Workout, Exercise, WorkoutSet, WorkoutStatus
from ..schemas import (
    WorkoutCreate,
    WorkoutUpdate,
    WorkoutRead,
    ExerciseRead,
    ExerciseOrderUpdate,
    SetRead,
)
from .adapters import exercise_catalog
from .common import ensure_owner, normalize_whitespace


def get_owned_workout(db: DBSession, user_id: int, workout_id: int) -> Workout:
    w = db.get(Workout, workout_id)
    ensure_owner(w, user_id, "Workout")
    return w  # type: ignore


def list_exercises_with_sets(db: DBSession, workout_id: int) -> List[tuple[Exercise, List[WorkoutSet]]]:
    exercises = db.exec(
        select(Exercise)
        .where(Exercise.workout_id == workout_id)
        .order_by(Exercise.order_index.asc(), Exercise.id.asc())
    ).all()
    if not exercises:
        return []

    sets_by_ex: Dict[int, List[WorkoutSet]] = {ex.id: [] for ex in exercises}
    sets = db.exec(
        select(WorkoutSet)
        .where(WorkoutSet.exercise_id.in_(list(sets_by_ex)))
        .order_by(WorkoutSet.order_index.asc(), WorkoutSet.id.asc())
    ).all()
    for s in sets:
        sets_by_ex[s.exercise_id].append(s)
    return [(ex, sets_by_ex[ex.id]) for ex in exercises]


def exercise_read(ex: Exercise, sets: List[WorkoutSet], details: Optional[dict] = None) -> ExerciseRead:
    return ExerciseRead(
        id=ex.id,
        workout_id=ex.workout_id,
        name=ex.name,
        order_index=ex.order_index,
        sets=[SetRead.model_validate(s) for s in sets],
        **(details or {}),
    )


def workout_read(db: DBSession, w: Workout, catalog: Optional[List[dict]] = None) -> WorkoutRead:
    """Serialize a workout with its ordered exercises and sets."""
    by_name = exercise_catalog.index_by_name(catalog) if catalog else {}
    exercises = [
        exercise_read(ex, sets, exercise_catalog.details_for(by_name.get(exercise_catalog.name_key(ex.name))))
        for ex, sets in list_exercises_with_sets(db, w.id)
    ]
    return WorkoutRead(
        id=w.id,
        user_id=w.user_id,
        name=w.name,
        notes=w.notes,
        date=w.date,
        status=w.status,
        started_at=w.started_at,
        completed_at=w.completed_at,
        duration=w.duration,
        exercises=exercises,
    )


def list_workouts(db: DBSession, user_id: int) -> List[WorkoutRead]:
    rows = db.exec(
        select(Workout)
        .where(Workout.user_id == user_id)
        .order_by(Workout.date.desc(), Workout.id.desc())
    ).all()
    return [workout_read(db, w) for w in rows]


def create_workout(db: DBSession, user_id: int, payload: WorkoutCreate) -> WorkoutRead:
    name = normalize_whitespace(payload.name)
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    w = Workout(
        user_id=user_id,
        name=name,
        notes=(payload.notes or None),
        status=WorkoutStatus.draft,
    )
    db.add(w)
    db.commit()
    db.refresh(w)
    return workout_read(db, w)


def get_workout(db: DBSession, user_id: int, workout_id: int, catalog: Optional[List[dict]] = None) -> WorkoutRead:
    w = get_owned_workout(db, user_id, workout_id)
    return workout_read(db, w, catalog)


def update_workout(db: DBSession, user_id: int, workout_id: int, payload: WorkoutUpdate) -> WorkoutRead:
    w = get_owned_workout(db, user_id, workout_id)
    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        name = normalize_whitespace(data["name"])
        if not name:
            raise HTTPException(status_code=400, detail="name is required")
        w.name = name
    if "notes" in data:
        w.notes = data["notes"] or None
    db.add(w)
    db.commit()
    db.refresh(w)
    return workout_read(db, w)


def delete_workout(db: DBSession, user_id: int, workout_id: int) -> None:
    w = get_owned_workout(db, user_id, workout_id)
    ex_ids = select(Exercise.id).where(Exercise.workout_id == workout_id)
    db.execute(delete(WorkoutSet).where(WorkoutSet.exercise_id.in_(ex_ids)))
    db.execute(delete(Exercise).where(Exercise.workout_id == workout_id))
    db.delete(w)
    db.commit()


def resequence_exercises(db: DBSession, workout_id: int) -> None:
    """Renumber exercises 0..n-1 keeping their current relative order. Caller commits."""
    items = db.exec(
        select(Exercise)
        .where(Exercise.workout_id == workout_id)
        .order_by(Exercise.order_index.asc(), Exercise.id.asc())
    ).all()
    for idx, obj in enumerate(items):
        if obj.order_index != idx:
            obj.order_index = idx
            db.add(obj)


def reorder_exercises(db: DBSession, user_id: int, workout_id: int, payload: ExerciseOrderUpdate) -> WorkoutRead:
    w = get_owned_workout(db, user_id, workout_id)

    rows = db.exec(select(Exercise).where(Exercise.workout_id == workout_id)).all()
    by_id = {ex.id: ex for ex in rows}
    unknown = [item.id for item in payload.exercises if item.id not in by_id]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Exercises not in this workout: {unknown}")

    for item in payload.exercises:
        ex = by_id[item.id]
        ex.order_index = item.order
        db.add(ex)
    db.flush()
    resequence_exercises(db, workout_id)
    db.commit()
    db.refresh(w)
    return workout_read(db, w)
