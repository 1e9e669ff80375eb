"""Tests for physical activity, exercise entries and health app links."""

from datetime import date

import pytest

from conftest import login
from core.access import actor_from_user
from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from data.exercise_types import EXERCISE_TYPES
from database import models
from database.database import seed_exercise_types
from database.models import HealthProvider
from schemas.activity_schema import (
    ExerciseEntryCreateRequest,
    ExerciseEntryUpdateRequest,
    HealthAppIntegrationCreateRequest,
    PhysicalActivityUpsertRequest,
)
from services import activity_service

DAY = date(2024, 5, 8)


def exercise_type(db, name):
    return db.query(models.ExerciseType).filter(models.ExerciseType.name == name).one()


def test_exercise_types_are_seeded_once(db):
    assert len(activity_service.list_exercise_types(db)) == len(EXERCISE_TYPES)
    assert seed_exercise_types(db) == 0


def test_saving_same_day_updates_the_record(db, client_user):
    actor = actor_from_user(client_user)
    first = activity_service.save_daily_activity(db, actor, PhysicalActivityUpsertRequest(date=DAY, steps=4000))
    second = activity_service.save_daily_activity(db, actor, PhysicalActivityUpsertRequest(date=DAY, steps=9000))
    assert first.id == second.id
    assert second.steps == 9000
    assert db.query(models.PhysicalActivity).count() == 1


def test_calories_derived_from_exercise_type(db, client_user):
    actor = actor_from_user(client_user)
    activity = activity_service.save_daily_activity(db, actor, PhysicalActivityUpsertRequest(date=DAY))
    running = exercise_type(db, "Correr")

    derived = activity_service.add_exercise_entry(db, actor, ExerciseEntryCreateRequest(
        activity_id=activity.id, exercise_type_id=running.id, duration=30,
    ))
    assert derived.calories_burned == pytest.approx(running.calories_per_minute * 30)

    given = activity_service.add_exercise_entry(db, actor, ExerciseEntryCreateRequest(
        activity_id=activity.id, exercise_type_id=running.id, duration=30, calories_burned=123,
    ))
    assert given.calories_burned == 123

    day = activity_service.get_daily_activity(db, actor, client_user.id, DAY)
    assert [e.exercise_type.name for e in day.exercises] == ["Correr", "Correr"]


def test_unknown_exercise_type_is_404(db, client_user):
    actor = actor_from_user(client_user)
    activity = activity_service.save_daily_activity(db, actor, PhysicalActivityUpsertRequest(date=DAY))
    with pytest.raises(NotFoundError):
        activity_service.add_exercise_entry(db, actor, ExerciseEntryCreateRequest(
            activity_id=activity.id, exercise_type_id=999, duration=10,
        ))


def test_entries_belong_to_activity_owner(db, nutritionist, make_user, client_user):
    owner = actor_from_user(client_user)
    activity = activity_service.save_daily_activity(db, owner, PhysicalActivityUpsertRequest(date=DAY))
    yoga = exercise_type(db, "Yoga")
    entry = activity_service.add_exercise_entry(db, owner, ExerciseEntryCreateRequest(
        activity_id=activity.id, exercise_type_id=yoga.id, duration=20,
    ))

    stranger = actor_from_user(make_user("luis@mail.com"))
    with pytest.raises(AuthorizationError):
        activity_service.update_exercise_entry(db, stranger, entry.id, ExerciseEntryUpdateRequest(duration=5))
    with pytest.raises(AuthorizationError):
        activity_service.delete_exercise_entry(db, actor_from_user(nutritionist), entry.id)

    # The nutritionist may read it.
    assert activity_service.get_daily_activity(db, actor_from_user(nutritionist), client_user.id, DAY) is not None

    updated = activity_service.update_exercise_entry(db, owner, entry.id, ExerciseEntryUpdateRequest(duration=45))
    assert updated.duration == 45
    activity_service.delete_exercise_entry(db, owner, entry.id)
    assert db.query(models.ExerciseEntry).count() == 0


def test_required_entry_fields_cannot_be_cleared(db, client_user):
    actor = actor_from_user(client_user)
    activity = activity_service.save_daily_activity(db, actor, PhysicalActivityUpsertRequest(date=DAY))
    yoga = exercise_type(db, "Yoga")
    entry = activity_service.add_exercise_entry(db, actor, ExerciseEntryCreateRequest(
        activity_id=activity.id, exercise_type_id=yoga.id, duration=20,
    ))

    for field in ("duration", "exercise_type_id"):
        with pytest.raises(ValidationError):
            activity_service.update_exercise_entry(db, actor, entry.id, ExerciseEntryUpdateRequest(**{field: None}))

    db.refresh(entry)
    assert entry.duration == 20
    assert entry.exercise_type_id == yoga.id


def test_no_activity_is_none(db, client_user):
    assert activity_service.get_daily_activity(db, actor_from_user(client_user), client_user.id, DAY) is None


def test_new_integration_retires_previous(db, client_user):
    actor = actor_from_user(client_user)
    with pytest.raises(NotFoundError):
        activity_service.get_integration(db, actor)

    first = activity_service.connect_integration(db, actor, HealthAppIntegrationCreateRequest(
        provider=HealthProvider.GOOGLE_FIT, access_token="tok-1",
    ))
    second = activity_service.connect_integration(db, actor, HealthAppIntegrationCreateRequest(
        provider=HealthProvider.APPLE_HEALTH,
    ))
    db.refresh(first)
    assert first.active is False
    assert activity_service.get_integration(db, actor).id == second.id

    status = activity_service.integration_response(first)
    assert status.connected is True
    assert "access_token" not in status.model_dump()


def test_activity_endpoints(make_client, nutritionist, client_user):
    ana = make_client()
    login(ana, "ana@mail.com")
    types = ana.get("/api/exercise-types").json()
    walking = next(t for t in types if t["name"] == "Caminar")

    saved = ana.post("/api/physical-activity", json={"date": "2024-05-08", "steps": 10500})
    assert saved.status_code == 200
    entry = ana.post("/api/exercise-entries", json={
        "activity_id": saved.json()["id"], "exercise_type_id": walking["id"], "duration": 40,
    })
    assert entry.status_code == 201
    assert entry.json()["calories_burned"] == pytest.approx(walking["calories_per_minute"] * 40)

    day = ana.get("/api/physical-activity/daily?date=2024-05-08").json()
    assert day["steps"] == 10500
    assert day["exercises"][0]["exercise_type"]["name"] == "Caminar"
    assert ana.get("/api/physical-activity/daily?date=2024-05-09").json() is None

    staff = make_client()
    login(staff, "cristina@nutri.es")
    seen = staff.get(f"/api/nutritionist/clients/{client_user.id}/activities?date=2024-05-08")
    assert seen.json()["steps"] == 10500

    entry_id = entry.json()["id"]
    assert ana.patch(f"/api/exercise-entries/{entry_id}", json={"duration": 50}).json()["duration"] == 50
    assert ana.delete(f"/api/exercise-entries/{entry_id}").status_code == 204

    assert ana.get("/api/health-app-integration").status_code == 404
    linked = ana.post("/api/health-app-integration", json={"provider": "google_fit", "access_token": "abc"})
    assert linked.status_code == 201
    assert linked.json()["connected"] is True
    assert ana.get("/api/health-app-integration").json()["provider"] == "google_fit"


def test_null_entry_fields_are_400(make_client, client_user):
    ana = make_client()
    login(ana, "ana@mail.com")
    walking = next(t for t in ana.get("/api/exercise-types").json() if t["name"] == "Caminar")
    activity = ana.post("/api/physical-activity", json={"date": "2024-05-08"}).json()
    entry_id = ana.post("/api/exercise-entries", json={
        "activity_id": activity["id"], "exercise_type_id": walking["id"], "duration": 40,
    }).json()["id"]

    for body in ({"duration": None}, {"exercise_type_id": None}):
        response = ana.patch(f"/api/exercise-entries/{entry_id}", json=body)
        assert response.status_code == 400

    day = ana.get("/api/physical-activity/daily?date=2024-05-08").json()
    assert day["exercises"][0]["duration"] == 40
    assert day["exercises"][0]["exercise_type"]["name"] == "Caminar"
