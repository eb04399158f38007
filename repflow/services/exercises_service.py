from __future__ import annotations
from typing import List
from fastapi import HTTPException
from sqlalchemy import delete, func
from sqlmodel import Session as DBSession, select


from ..models import Exercise, Workout, WorkoutSet
from ..schemas import ExerciseCreate, ExerciseRead
from .common import NotFound, ensure_owner, normalize_whitespace
from .workouts_service import exercise_read, get_owned_workout, list_exercises_with_sets, resequence_exercises


def get_owned_exercise(db: DBSession, user_id: int, exercise_id: int) -> Exercise:
    ex = db.get(Exercise, exercise_id)
    if not ex:
        raise NotFound("Exercise")
    w = db.get(Workout, ex.workout_id)
    ensure_owner(w, user_id, "Exercise")
    return ex


def add_exercise(db: DBSession, user_id: int, payload: ExerciseCreate) -> ExerciseRead:
    name = normalize_whitespace(payload.name)
    if not name:
        raise HTTPException(status_code=400, detail="Workout ID and exercise name are required")
    w = get_owned_workout(db, user_id, payload.workout_id)

    cur_max = db.exec(
        select(func.max(Exercise.order_index)).where(Exercise.workout_id == w.id)
    ).first()
    next_order = 0 if cur_max is None else cur_max + 1

    ex = Exercise(workout_id=w.id, name=name, order_index=next_order)
    db.add(ex)
    db.commit()
    db.refresh(ex)
    return exercise_read(ex, [])


def list_exercises(db: DBSession, user_id: int, workout_id: int) -> List[ExerciseRead]:
    get_owned_workout(db, user_id, workout_id)
    return [exercise_read(ex, sets) for ex, sets in list_exercises_with_sets(db, workout_id)]


def delete_exercise(db: DBSession, user_id: int, exercise_id: int) -> None:
    ex = get_owned_exercise(db, user_id, exercise_id)
    workout_id = ex.workout_id
    db.execute(delete(WorkoutSet).where(WorkoutSet.exercise_id == exercise_id))
    db.delete(ex)
    db.flush()
    resequence_exercises(db, workout_id)
    db.commit()
