from __future__ import annotations
from typing import List, Optional
from sqlmodel import Session as DBSession, select


from ..models import WorkoutHistory
from .common import NotFound, ensure_owner


def list_history(
    db: DBSession,
    user_id: int,
    workout_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[WorkoutHistory]:
    stmt = select(WorkoutHistory).where(WorkoutHistory.user_id == user_id)
    if workout_id is not None:
        stmt = stmt.where(WorkoutHistory.workout_id == workout_id)
    stmt = stmt.order_by(WorkoutHistory.completed_at.desc(), WorkoutHistory.id.desc())
    return db.exec(stmt.offset(offset).limit(limit)).all()


def get_history(db: DBSession, user_id: int, history_id: int) -> WorkoutHistory:
    h = db.get(WorkoutHistory, history_id)
    ensure_owner(h, user_id, "Workout history")
    return h  # type: ignore


def list_history_for_user(db: DBSession, caller_id: int, user_id: int, limit: int = 50, offset: int = 0) -> List[WorkoutHistory]:
    # only the owner may read a user's history
    if caller_id != user_id:
        raise NotFound("User")
    return list_history(db, user_id, limit=limit, offset=offset)
