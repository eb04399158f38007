from typing import List

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session as DBSession


from ..db import get_session
from ..auth import get_current_user
from ..models import User
from ..schemas import ExerciseCreate, ExerciseRead
from ..services import exercises_service as svc
from ..services.common import parse_id


router = APIRouter(prefix="/api/exercises", tags=["exercises"])


def exercise_id_param(exercise_id: str) -> int:
    return parse_id(exercise_id, "exercise")


@router.post("", response_model=ExerciseRead, status_code=201)
def add_exercise(
    payload: ExerciseCreate,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.add_exercise(db=db, user_id=user.id, payload=payload)


@router.get("", response_model=List[ExerciseRead])
def list_exercises(
    workout_id: int = Query(..., alias="workoutId", description="Workout whose exercises to list"),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.list_exercises(db=db, user_id=user.id, workout_id=workout_id)


@router.delete("/{exercise_id}", status_code=204)
def delete_exercise(
    exercise_id: int = Depends(exercise_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    svc.delete_exercise(db=db, user_id=user.id, exercise_id=exercise_id)
    return None
