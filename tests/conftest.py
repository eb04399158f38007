import os
import sys
import tempfile

# --- ensure project root is importable, and keep the app off ./repflow.db ---
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.gettempdir(), 'repflow_app_test.db')}"
)

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, create_engine, Session

from repflow.main import app
from repflow.db import get_session as prod_get_session
from repflow.services.adapters import exercise_catalog


CATALOG = [
    {
        "id": "Barbell_Squat",
        "name": "Barbell Squat",
        "force": "push",
        "level": "beginner",
        "mechanic": "compound",
        "equipment": "barbell",
        "primaryMuscles": ["quadriceps"],
        "secondaryMuscles": ["calves", "glutes", "hamstrings", "lower back"],
        "instructions": ["Set the bar on a rack.", "Squat down and stand up."],
        "category": "strength",
        "images": ["Barbell_Squat/0.jpg", "Barbell_Squat/1.jpg"],
    },
    {
        "id": "Leg_Press",
        "name": "Leg Press",
        "force": "push",
        "level": "beginner",
        "mechanic": "compound",
        "equipment": "machine",
        "primaryMuscles": ["quadriceps"],
        "secondaryMuscles": ["calves", "glutes", "hamstrings"],
        "instructions": ["Sit down on the machine.", "Press the platform."],
        "category": "strength",
        "images": ["Leg_Press/0.jpg"],
    },
    {
        "id": "Barbell_Bench_Press_-_Medium_Grip",
        "name": "Barbell Bench Press - Medium Grip",
        "force": "push",
        "level": "beginner",
        "mechanic": "compound",
        "equipment": "barbell",
        "primaryMuscles": ["chest"],
        "secondaryMuscles": ["shoulders", "triceps"],
        "instructions": ["Lie back on a flat bench."],
        "category": "strength",
        "images": [],
    },
]


@pytest.fixture
def _engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    # Import models to register metadata, then create tables
    from repflow import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(_engine):
    with Session(_engine) as s:
        yield s


@pytest.fixture(autouse=True)
def fake_catalog(monkeypatch):
    async def _load():
        return CATALOG

    monkeypatch.setattr(exercise_catalog, "load_catalog", _load)
    return CATALOG


@pytest.fixture
def client(db, _engine):
    # Override the app's DB session dependency to use the test engine
    def _get_session_override():
        with Session(_engine) as s:
            yield s

    app.dependency_overrides[prod_get_session] = _get_session_override
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


# ---- shared helpers ----
def register(client, email="lifter@example.com", password="secret123", name=None):
    r = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
    assert r.status_code == 201
    return r.json()


@pytest.fixture
def user(client):
    return register(client)


@pytest.fixture
def make_workout(client):
    """Build a workout tree through the API: make_workout("Legs", {"Squat": [10, 8]})."""
    def _make(name="Leg Day", exercises=None, notes=None):
        w = client.post("/api/workouts", json={"name": name, "notes": notes}).json()
        for ex_name, reps_list in (exercises or {}).items():
            ex = client.post("/api/exercises", json={"workoutId": w["id"], "name": ex_name}).json()
            for reps in reps_list:
                r = client.post("/api/sets", json={"exerciseId": ex["id"], "reps": reps, "weight": 60})
                assert r.status_code == 201
        return client.get(f"/api/workouts/{w['id']}").json()

    return _make
