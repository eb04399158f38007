from __future__ import annotations
from typing import Optional
import datetime as dt
from enum import Enum
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from .services.common import now_utc


# ---------- Enums ----------
class WorkoutStatus(str, Enum):
    draft = "DRAFT"
    in_progress = "IN_PROGRESS"


# ---------- Master user ----------
class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: Optional[str] = None
    password_hash: str
    created_at: dt.datetime = Field(default_factory=now_utc, sa_type=DateTime(timezone=True))


# ---------- Workouts (reusable) ----------
class Workout(SQLModel, table=True):
    """
    A reusable template the user trains against. A running session lives on
    the row itself (status/started_at) until it is completed or reset.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    notes: Optional[str] = None
    date: dt.datetime = Field(default_factory=now_utc, index=True, sa_type=DateTime(timezone=True))
    status: WorkoutStatus = Field(default=WorkoutStatus.draft)
    started_at: Optional[dt.datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    completed_at: Optional[dt.datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    duration: Optional[int] = None


class Exercise(SQLModel, table=True):
    """
    Items live under a workout. No user_id here, ownership comes via the
    parent workout.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    workout_id: int = Field(foreign_key="workout.id", index=True)
    name: str = Field(index=True)
    order_index: int = Field(default=0, index=True)


class WorkoutSet(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    exercise_id: int = Field(foreign_key="exercise.id", index=True)
    reps: int = Field(default=0)
    weight: Optional[float] = None
    notes: Optional[str] = None
    order_index: int = Field(default=0, index=True)
    completed: bool = Field(default=False)
    completed_at: Optional[dt.datetime] = Field(default=None, sa_type=DateTime(timezone=True))


# ---------- History (append-only) ----------
class WorkoutHistory(SQLModel, table=True):
    """
    Snapshot of one completed session. workout_id is a plain reference, the
    source workout keeps changing (and may be deleted) after the snapshot.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    workout_id: int = Field(index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    notes: Optional[str] = None
    duration: int = Field(default=0)
    exercise_count: int = Field(default=0)
    total_sets: int = Field(default=0)
    completed_sets: int = Field(default=0)
    completed_at: dt.datetime = Field(default_factory=now_utc, index=True, sa_type=DateTime(timezone=True))
