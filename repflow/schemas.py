from typing import Annotated, List, Optional
from datetime import datetime, timezone
from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import WorkoutStatus


def _as_utc(value: datetime) -> datetime:
    # SQLite reads timestamps back naive, they are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class ApiModel(BaseModel):
    """camelCase on the wire for the mobile client, snake_case accepted too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- Auth ----------
class RegisterIn(ApiModel):
    email: EmailStr
    password: str
    name: Optional[str] = None


class LoginIn(ApiModel):
    email: EmailStr
    password: str


class UserRead(ApiModel):
    id: int
    email: str
    name: Optional[str] = None
    created_at: UtcDatetime


# ---------- Sets ----------
class SetCreate(ApiModel):
    exercise_id: int
    reps: int = Field(default=0, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class SetUpdate(ApiModel):
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("reps")
    @classmethod
    def _reps_not_null(cls, value: Optional[int]) -> int:
        # omit reps to keep it, null would clear a required column
        if value is None:
            raise ValueError("reps cannot be null")
        return value


class SetRead(ApiModel):
    id: int
    exercise_id: int
    reps: int
    weight: Optional[float] = None
    notes: Optional[str] = None
    order_index: int
    completed: bool
    completed_at: Optional[UtcDatetime] = None


# ---------- Exercises ----------
class ExerciseCreate(ApiModel):
    workout_id: int
    name: str


class ExerciseDetails(ApiModel):
    """Catalog fields joined on by exercise name, empty when the catalog is unavailable."""
    instructions: List[str] = []
    images: List[str] = []
    primary_muscles: List[str] = []
    secondary_muscles: List[str] = []
    equipment: str = ""
    level: str = ""
    force: str = ""
    mechanic: str = ""
    category: str = ""
    muscle_group: str = ""


class ExerciseRead(ExerciseDetails):
    id: int
    workout_id: int
    name: str
    order_index: int
    sets: List[SetRead] = []


class ExerciseOrder(ApiModel):
    id: int
    order: int


class ExerciseOrderUpdate(ApiModel):
    exercises: List[ExerciseOrder]


# ---------- Workouts ----------
class WorkoutCreate(ApiModel):
    name: str
    notes: Optional[str] = None


class WorkoutUpdate(ApiModel):
    name: Optional[str] = None
    notes: Optional[str] = None


class WorkoutRead(ApiModel):
    id: int
    user_id: int
    name: str
    notes: Optional[str] = None
    date: UtcDatetime
    status: WorkoutStatus
    started_at: Optional[UtcDatetime] = None
    completed_at: Optional[UtcDatetime] = None
    duration: Optional[int] = None
    exercises: List[ExerciseRead] = []


# ---------- Lifecycle ----------
class CompleteWorkoutIn(ApiModel):
    elapsed_time: Optional[int] = Field(default=None, ge=0)


class SessionSummary(ApiModel):
    duration: int
    completed_at: UtcDatetime
    exercise_count: int
    total_sets: int
    completed_sets: int


class CompleteWorkoutResult(ApiModel):
    workout: WorkoutRead
    session: SessionSummary


# ---------- History ----------
class WorkoutHistoryRead(ApiModel):
    id: int
    workout_id: int
    user_id: int
    name: str
    notes: Optional[str] = None
    duration: int
    exercise_count: int
    total_sets: int
    completed_sets: int
    completed_at: UtcDatetime


# ---------- Exercise catalog ----------
class CatalogExercise(ExerciseDetails):
    id: Optional[str] = None
    name: str


class CatalogPage(ApiModel):
    items: List[CatalogExercise]
    limit: int
    offset: int
    next_offset: Optional[int] = None
