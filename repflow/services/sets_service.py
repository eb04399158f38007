from __future__ import annotations
from sqlalchemy import func
from sqlmodel import Session as DBSession, select


from ..models import WorkoutSet
from ..schemas import SetCreate, SetUpdate
from .common import NotFound, now_utc
from .exercises_service import get_owned_exercise


def get_set(db: DBSession, user_id: int, set_id: int) -> WorkoutSet:
    s = db.get(WorkoutSet, set_id)
    if not s:
        raise NotFound("Set")
    # ownership flows set -> exercise -> workout
    try:
        get_owned_exercise(db, user_id, s.exercise_id)
    except NotFound:
        raise NotFound("Set")
    return s


def create_set(db: DBSession, user_id: int, payload: SetCreate) -> WorkoutSet:
    ex = get_owned_exercise(db, user_id, payload.exercise_id)

    cur_max = db.exec(
        select(func.max(WorkoutSet.order_index)).where(WorkoutSet.exercise_id == ex.id)
    ).first()
    next_order = 0 if cur_max is None else cur_max + 1

    s = WorkoutSet(
        exercise_id=ex.id,
        reps=payload.reps,
        weight=payload.weight,
        notes=(payload.notes or None),
        order_index=next_order,
        completed=False,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def update_set(db: DBSession, user_id: int, set_id: int, payload: SetUpdate) -> WorkoutSet:
    s = get_set(db, user_id, set_id)
    data = payload.model_dump(exclude_unset=True)
    for field, value in data.items():
        setattr(s, field, value)
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


def delete_set(db: DBSession, user_id: int, set_id: int) -> None:
    s = get_set(db, user_id, set_id)
    exercise_id = s.exercise_id
    db.delete(s)
    db.flush()

    siblings = db.exec(
        select(WorkoutSet)
        .where(WorkoutSet.exercise_id == exercise_id)
        .order_by(WorkoutSet.order_index.asc(), WorkoutSet.id.asc())
    ).all()
    for idx, obj in enumerate(siblings):
        if obj.order_index != idx:
            obj.order_index = idx
            db.add(obj)
    db.commit()


def complete_set(db: DBSession, user_id: int, set_id: int) -> WorkoutSet:
    s = get_set(db, user_id, set_id)
    s.completed = True
    s.completed_at = now_utc()
    db.add(s)
    db.commit()
    db.refresh(s)
    return s
