from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session as DBSession


from ..db import get_session
from ..auth import get_current_user
from ..models import User
from ..schemas import WorkoutHistoryRead
from ..services import history_service as svc
from ..services.common import parse_id


router = APIRouter(prefix="/api", tags=["history"])


@router.get("/workout-history", response_model=List[WorkoutHistoryRead])
def list_history(
    workout_id: Optional[int] = Query(None, alias="workoutId", description="Only sessions of this workout"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.list_history(db=db, user_id=user.id, workout_id=workout_id, limit=limit, offset=offset)


@router.get("/workout-history/{history_id}", response_model=WorkoutHistoryRead)
def get_history(
    history_id: str,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.get_history(db=db, user_id=user.id, history_id=parse_id(history_id, "workout history"))


@router.get("/users/{user_id}/workout-history", response_model=List[WorkoutHistoryRead])
def list_user_history(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.list_history_for_user(
        db=db, caller_id=user.id, user_id=parse_id(user_id, "user"), limit=limit, offset=offset
    )
