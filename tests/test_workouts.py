from sqlmodel import select

from repflow.models import Exercise, WorkoutHistory, WorkoutSet
from repflow.services.adapters import exercise_catalog


def _login(client, email):
    r = client.post("/api/auth/register", json={"email": email, "password": "secret123"})
    assert r.status_code == 201


def _orders(workout):
    return [(ex["name"], ex["orderIndex"]) for ex in workout["exercises"]]


def test_create_and_list_workouts(client, user):
    r = client.post("/api/workouts", json={"name": "  Push   Day ", "notes": "heavy"})
    assert r.status_code == 201
    w = r.json()
    assert w["name"] == "Push Day"
    assert w["status"] == "DRAFT"
    assert w["startedAt"] is None
    assert w["exercises"] == []
    assert w["userId"] == user["id"]

    client.post("/api/workouts", json={"name": "Pull Day"})
    names = [x["name"] for x in client.get("/api/workouts").json()]
    assert names == ["Pull Day", "Push Day"]


def test_create_workout_requires_name(client, user):
    r = client.post("/api/workouts", json={"name": "   "})
    assert r.status_code == 400


def test_workout_detail_is_enriched_from_catalog(client, user, make_workout):
    w = make_workout("Legs", {"barbell  squat": [5], "Mystery Move": [10]})
    squat, mystery = w["exercises"]

    assert squat["name"] == "barbell squat"
    assert squat["primaryMuscles"] == ["quadriceps"]
    assert squat["muscleGroup"] == "quadriceps"
    assert squat["equipment"] == "barbell"
    assert squat["instructions"][0] == "Set the bar on a rack."
    assert squat["images"][0].endswith("Barbell_Squat/0.jpg")

    assert mystery["primaryMuscles"] == []
    assert mystery["instructions"] == []
    assert mystery["muscleGroup"] == ""


def test_workout_detail_survives_catalog_outage(client, user, make_workout, monkeypatch):
    w = make_workout("Legs", {"Barbell Squat": [5]})

    async def _empty():
        return []

    monkeypatch.setattr(exercise_catalog, "load_catalog", _empty)
    r = client.get(f"/api/workouts/{w['id']}")
    assert r.status_code == 200
    ex = r.json()["exercises"][0]
    assert ex["name"] == "Barbell Squat"
    assert ex["primaryMuscles"] == []
    assert ex["equipment"] == ""


def test_update_workout(client, user, make_workout):
    w = make_workout("Legs")
    r = client.patch(f"/api/workouts/{w['id']}", json={"name": "Legs B", "notes": "tempo"})
    assert r.status_code == 200
    assert r.json()["name"] == "Legs B"
    assert r.json()["notes"] == "tempo"

    r = client.patch(f"/api/workouts/{w['id']}", json={"name": ""})
    assert r.status_code == 400


def test_delete_workout_keeps_history(client, user, make_workout, db):
    w = make_workout("Legs", {"Barbell Squat": [5, 5]})
    client.post(f"/api/workouts/{w['id']}/complete", json={"elapsedTime": 60})

    r = client.delete(f"/api/workouts/{w['id']}")
    assert r.status_code == 204
    assert client.get(f"/api/workouts/{w['id']}").status_code == 404

    db.expire_all()
    assert db.exec(select(Exercise).where(Exercise.workout_id == w["id"])).all() == []
    assert db.exec(select(WorkoutSet)).all() == []
    assert len(db.exec(select(WorkoutHistory).where(WorkoutHistory.workout_id == w["id"])).all()) == 1


def test_get_workout_bad_id(client, user):
    assert client.get("/api/workouts/nope").status_code == 400
    assert client.get("/api/workouts/424242").status_code == 404


def test_workouts_are_user_scoped(client):
    _login(client, "alice@example.com")
    wid = client.post("/api/workouts", json={"name": "Alice W"}).json()["id"]
    client.post("/api/auth/logout")

    _login(client, "bob@example.com")
    assert client.get("/api/workouts").json() == []
    assert client.get(f"/api/workouts/{wid}").status_code == 404
    assert client.patch(f"/api/workouts/{wid}", json={"name": "mine now"}).status_code == 404
    assert client.delete(f"/api/workouts/{wid}").status_code == 404
    assert client.post("/api/exercises", json={"workoutId": wid, "name": "Sneaky"}).status_code == 404


def test_workouts_require_login(client):
    assert client.get("/api/workouts").status_code == 401
    assert client.post("/api/workouts", json={"name": "x"}).status_code == 401


# ---------- Exercises ----------
def test_exercises_append_in_order(client, user, make_workout):
    w = make_workout("Full Body", {"Barbell Squat": [], "Leg Press": [], "Barbell Bench Press - Medium Grip": []})
    assert [ex["orderIndex"] for ex in w["exercises"]] == [0, 1, 2]

    listed = client.get("/api/exercises", params={"workoutId": w["id"]}).json()
    assert [ex["name"] for ex in listed] == ["Barbell Squat", "Leg Press", "Barbell Bench Press - Medium Grip"]


def test_add_exercise_validation(client, user, make_workout):
    w = make_workout("Legs")
    assert client.post("/api/exercises", json={"workoutId": w["id"], "name": "  "}).status_code == 400
    assert client.post("/api/exercises", json={"workoutId": 999, "name": "Squat"}).status_code == 404
    assert client.get("/api/exercises").status_code == 422


def test_delete_exercise_closes_gap(client, user, make_workout, db):
    w = make_workout("Legs", {"A": [5], "B": [5, 5], "C": []})
    b = w["exercises"][1]

    r = client.delete(f"/api/exercises/{b['id']}")
    assert r.status_code == 204

    after = client.get(f"/api/workouts/{w['id']}").json()
    assert _orders(after) == [("A", 0), ("C", 1)]
    db.expire_all()
    assert db.exec(select(WorkoutSet).where(WorkoutSet.exercise_id == b["id"])).all() == []
    assert client.delete(f"/api/exercises/{b['id']}").status_code == 404
    assert client.delete("/api/exercises/xyz").status_code == 400


def test_reorder_exercises(client, user, make_workout):
    w = make_workout("Legs", {"A": [], "B": [], "C": []})
    a, b, c = (ex["id"] for ex in w["exercises"])

    r = client.put(
        f"/api/workouts/{w['id']}/exercises/order",
        json={"exercises": [{"id": c, "order": 0}, {"id": a, "order": 1}, {"id": b, "order": 2}]},
    )
    assert r.status_code == 200
    assert _orders(r.json()) == [("C", 0), ("A", 1), ("B", 2)]
    assert _orders(client.get(f"/api/workouts/{w['id']}").json()) == [("C", 0), ("A", 1), ("B", 2)]


def test_reorder_with_gaps_is_resequenced(client, user, make_workout):
    w = make_workout("Legs", {"A": [], "B": [], "C": []})
    a, b, c = (ex["id"] for ex in w["exercises"])

    r = client.put(
        f"/api/workouts/{w['id']}/exercises/order",
        json={"exercises": [{"id": a, "order": 10}, {"id": b, "order": 5}, {"id": c, "order": 7}]},
    )
    assert _orders(r.json()) == [("B", 0), ("C", 1), ("A", 2)]


def test_reorder_rejects_foreign_exercise(client, user, make_workout):
    w1 = make_workout("One", {"A": []})
    w2 = make_workout("Two", {"B": []})
    foreign = w2["exercises"][0]["id"]

    r = client.put(
        f"/api/workouts/{w1['id']}/exercises/order",
        json={"exercises": [{"id": foreign, "order": 0}]},
    )
    assert r.status_code == 400
    assert _orders(client.get(f"/api/workouts/{w2['id']}").json()) == [("B", 0)]
