"""Tests for meal logging, the day and week views, and comments."""

from datetime import date

import pytest

from conftest import login
from core.access import actor_from_user
from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from database import models
from database.models import MealType
from schemas import CommentCreateRequest, MealCreateRequest, MealUpdateRequest
from services import comment_service, meal_service

MONDAY = date(2024, 5, 6)
WEDNESDAY = date(2024, 5, 8)


def new_meal(day=WEDNESDAY, meal_type=MealType.BREAKFAST, name="Avena", calories=300, time=None):
    return MealCreateRequest(date=day, type=meal_type, name=name, calories=calories, time=time)


def summary_total(db, user, day):
    row = (
        db.query(models.NutritionSummary)
        .filter(models.NutritionSummary.user_id == user.id, models.NutritionSummary.date == day)
        .first()
    )
    return row.calories_total if row else None


def test_two_meals_in_one_slot_are_both_kept(db, client_user):
    actor = actor_from_user(client_user)
    meal_service.create_meal(db, actor, new_meal(name="Avena", time="08:00"))
    meal_service.create_meal(db, actor, new_meal(name="Fruta", time="09:30"))

    daily = meal_service.get_daily_meals(db, client_user.id, WEDNESDAY)
    assert list(daily) == ["Desayuno"]
    assert [m.name for m in daily["Desayuno"]] == ["Avena", "Fruta"]


def test_daily_summary_follows_changes(db, client_user):
    actor = actor_from_user(client_user)
    first = meal_service.create_meal(db, actor, new_meal(calories=300))
    meal_service.create_meal(db, actor, new_meal(meal_type=MealType.LUNCH, calories=700))
    assert summary_total(db, client_user, WEDNESDAY) == 1000

    meal_service.update_meal(db, actor, first.id, MealUpdateRequest(calories=400))
    assert summary_total(db, client_user, WEDNESDAY) == 1100

    meal_service.update_meal(db, actor, first.id, MealUpdateRequest(date=MONDAY))
    assert summary_total(db, client_user, WEDNESDAY) == 700
    assert summary_total(db, client_user, MONDAY) == 400

    meal_service.delete_meal(db, actor, first.id)
    assert summary_total(db, client_user, MONDAY) == 0


def test_update_rejects_null_required_fields(db, client_user):
    actor = actor_from_user(client_user)
    meal = meal_service.create_meal(db, actor, new_meal())
    with pytest.raises(ValidationError):
        meal_service.update_meal(db, actor, meal.id, MealUpdateRequest(name=None))


def test_nutritionist_may_edit_but_not_delete(db, nutritionist, client_user):
    meal = meal_service.create_meal(db, actor_from_user(client_user), new_meal())
    staff = actor_from_user(nutritionist)

    updated = meal_service.update_meal(db, staff, meal.id, MealUpdateRequest(notes="Menos azúcar"))
    assert updated.notes == "Menos azúcar"
    with pytest.raises(AuthorizationError):
        meal_service.delete_meal(db, staff, meal.id)


def test_other_users_cannot_touch_meal(db, make_user, other_nutritionist, client_user):
    meal = meal_service.create_meal(db, actor_from_user(client_user), new_meal())
    stranger = make_user("luis@mail.com")
    for actor in (actor_from_user(other_nutritionist), actor_from_user(stranger)):
        with pytest.raises(AuthorizationError):
            meal_service.update_meal(db, actor, meal.id, MealUpdateRequest(name="x"))
        with pytest.raises(AuthorizationError):
            meal_service.delete_meal(db, actor, meal.id)


def test_delete_removes_comments(db, nutritionist, client_user):
    meal_id = meal_service.create_meal(db, actor_from_user(client_user), new_meal()).id
    comment_service.add_comment(db, actor_from_user(nutritionist), CommentCreateRequest(meal_id=meal_id, content="Ok"))
    meal_service.delete_meal(db, actor_from_user(client_user), meal_id)
    assert db.query(models.Comment).count() == 0
    with pytest.raises(NotFoundError):
        meal_service.delete_meal(db, actor_from_user(client_user), meal_id)


def test_weekly_view_runs_monday_to_sunday(db, client_user):
    actor = actor_from_user(client_user)
    meal_service.create_meal(db, actor, new_meal(day=MONDAY))
    meal_service.create_meal(db, actor, new_meal(day=date(2024, 5, 12), meal_type=MealType.DINNER))
    meal_service.create_meal(db, actor, new_meal(day=date(2024, 5, 13)))

    week = meal_service.get_weekly_meals(db, client_user.id, WEDNESDAY)
    assert week.week_start == MONDAY
    assert week.week_end == date(2024, 5, 12)
    assert len(week.meals) == 7
    assert list(week.meals["2024-05-06"]) == ["Desayuno"]
    assert list(week.meals["2024-05-12"]) == ["Cena"]
    assert week.meals["2024-05-07"] == {}
    assert [s.date for s in week.summaries] == [MONDAY, date(2024, 5, 12)]


def test_comments_come_only_from_own_nutritionist(db, other_nutritionist, client_user):
    meal = meal_service.create_meal(db, actor_from_user(client_user), new_meal())
    with pytest.raises(AuthorizationError):
        comment_service.add_comment(
            db, actor_from_user(other_nutritionist), CommentCreateRequest(meal_id=meal.id, content="Hola")
        )
    with pytest.raises(AuthorizationError):
        comment_service.add_comment(
            db, actor_from_user(client_user), CommentCreateRequest(meal_id=meal.id, content="Hola")
        )


def test_only_meal_owner_marks_read(db, nutritionist, client_user):
    meal = meal_service.create_meal(db, actor_from_user(client_user), new_meal())
    comment = comment_service.add_comment(
        db, actor_from_user(nutritionist), CommentCreateRequest(meal_id=meal.id, content="Bien")
    )
    with pytest.raises(AuthorizationError):
        comment_service.mark_comment_read(db, actor_from_user(nutritionist), comment.id)

    assert comment_service.mark_comment_read(db, actor_from_user(client_user), comment.id).read is True
    assert comment_service.mark_comment_read(db, actor_from_user(client_user), comment.id).read is True


def test_meal_endpoints(make_client, nutritionist, client_user):
    ana = make_client()
    login(ana, "ana@mail.com")
    created = ana.post("/api/meals", json={
        "date": "2024-05-08", "time": "08:15", "type": "Desayuno", "name": "Tostadas", "calories": 250,
    })
    assert created.status_code == 201
    meal_id = created.json()["id"]

    staff = make_client()
    login(staff, "cristina@nutri.es")
    comment = staff.post("/api/comments", json={"meal_id": meal_id, "content": "Añade proteína"})
    assert comment.status_code == 201

    daily = ana.get("/api/meals/daily?date=2024-05-08").json()
    assert daily["Desayuno"][0]["comments"][0]["content"] == "Añade proteína"

    weekly = ana.get("/api/meals/weekly?date=2024-05-08").json()
    assert weekly["week_start"] == "2024-05-06"
    assert weekly["summaries"][0]["calories_total"] == 250

    read = ana.post(f"/api/comments/{comment.json()['id']}/read")
    assert read.status_code == 200 and read.json()["read"] is True

    assert ana.patch(f"/api/meals/{meal_id}", json={"calories": 300}).json()["calories"] == 300
    assert ana.get(f"/api/meals/{meal_id}/comments").status_code == 200
    assert staff.delete(f"/api/meals/{meal_id}").status_code == 403
    assert ana.delete(f"/api/meals/{meal_id}").status_code == 204
    assert ana.get("/api/meals/daily?date=2024-05-08").json() == {}


def test_bad_meal_type_is_400(make_client, client_user):
    api = make_client()
    login(api, "ana@mail.com")
    response = api.post("/api/meals", json={"date": "2024-05-08", "type": "Brunch", "name": "Tortitas"})
    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["error"]["details"]["validation_errors"]]
    assert "type" in fields
