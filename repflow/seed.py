"""Seed a demo user with one sample workout."""

from __future__ import annotations

import logging
import os
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .auth import hash_pw
from .db import engine, init_db
from .models import Exercise, User, Workout, WorkoutSet, WorkoutStatus

DEMO_EMAIL = os.getenv("SEED_EMAIL", "test@example.com")
DEMO_PASSWORD = os.getenv("SEED_PASSWORD", "password123")

logger = logging.getLogger(__name__)


def seed(db: Session) -> Workout:
    user = db.exec(select(User).where(User.email == DEMO_EMAIL)).first()
    if user is None:
        user = User(email=DEMO_EMAIL, name="Test User", password_hash=hash_pw(DEMO_PASSWORD))
        db.add(user)
        db.commit()
        db.refresh(user)
    logger.info("Seed user: %s", user.email)

    workout = Workout(
        user_id=user.id,
        name="Chest & Triceps Day",
        notes="Focus on form and controlled movements",
        status=WorkoutStatus.draft,
    )
    db.add(workout)
    db.commit()
    db.refresh(workout)

    bench = Exercise(workout_id=workout.id, name="Barbell Bench Press - Medium Grip", order_index=0)
    db.add(bench)
    db.commit()
    db.refresh(bench)

    db.add(WorkoutSet(exercise_id=bench.id, reps=10, weight=60, order_index=0))
    db.add(WorkoutSet(exercise_id=bench.id, reps=8, weight=70, order_index=1))
    db.commit()
    logger.info("Seed workout: %s", workout.id)
    return workout


def main() -> None:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    init_db()
    try:
        with Session(engine) as db:
            seed(db)
    except SQLAlchemyError:
        logger.exception("Seed failed")
        sys.exit(1)
    logger.info("Seed completed")


if __name__ == "__main__":
    main()
