from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session as DBSession


from ..db import get_session
from ..auth import get_current_user
from ..models import User
from ..schemas import (
    WorkoutCreate,
    WorkoutUpdate,
    WorkoutRead,
    ExerciseOrderUpdate,
    CompleteWorkoutIn,
    CompleteWorkoutResult,
)
from ..services import workouts_service as svc
from ..services import lifecycle_service as lifecycle
from ..services.adapters import exercise_catalog
from ..services.common import parse_id


router = APIRouter(prefix="/api/workouts", tags=["workouts"])


def workout_id_param(workout_id: str) -> int:
    return parse_id(workout_id, "workout")


# ---------- Workouts ----------
@router.get("", response_model=List[WorkoutRead])
def list_workouts(
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.list_workouts(db=db, user_id=user.id)


@router.post("", response_model=WorkoutRead, status_code=201)
def create_workout(
    payload: WorkoutCreate,
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.create_workout(db=db, user_id=user.id, payload=payload)


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    catalog = await exercise_catalog.load_catalog()
    return svc.get_workout(db=db, user_id=user.id, workout_id=workout_id, catalog=catalog)


@router.patch("/{workout_id}", response_model=WorkoutRead)
def update_workout(
    payload: WorkoutUpdate,
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.update_workout(db=db, user_id=user.id, workout_id=workout_id, payload=payload)


@router.delete("/{workout_id}", status_code=204)
def delete_workout(
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    svc.delete_workout(db=db, user_id=user.id, workout_id=workout_id)
    return None


@router.put("/{workout_id}/exercises/order", response_model=WorkoutRead)
def reorder_exercises(
    payload: ExerciseOrderUpdate,
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return svc.reorder_exercises(db=db, user_id=user.id, workout_id=workout_id, payload=payload)


# ---------- Session lifecycle ----------
@router.post("/{workout_id}/start", response_model=WorkoutRead)
def start_workout(
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return lifecycle.start_workout(db=db, user_id=user.id, workout_id=workout_id)


@router.post("/{workout_id}/complete", response_model=CompleteWorkoutResult)
def complete_workout(
    payload: Optional[CompleteWorkoutIn] = None,
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    elapsed = payload.elapsed_time if payload else None
    return lifecycle.complete_workout(db=db, user_id=user.id, workout_id=workout_id, elapsed_seconds=elapsed)


@router.post("/{workout_id}/reset", response_model=WorkoutRead)
def reset_workout(
    workout_id: int = Depends(workout_id_param),
    db: DBSession = Depends(get_session),
    user: User = Depends(get_current_user),
):
    return lifecycle.reset_workout(db=db, user_id=user.id, workout_id=workout_id)
