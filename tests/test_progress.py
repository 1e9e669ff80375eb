"""Tests for the nutritionist dashboard figures."""

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from core.access import actor_from_user
from database import models
from database.models import MealType
from schemas import CommentCreateRequest, MealCreateRequest
from services import comment_service, meal_service
from services.progress_aggregator import (
    ProgressAggregator,
    classify_week,
    latest_meal,
    progress_percentage,
    trailing_window,
)

NOW = datetime(2024, 5, 12, 20, 0)
TODAY = NOW.date()
SLOTS = list(MealType)


def meal(day, meal_type=MealType.BREAKFAST, time=None, id=1):
    return SimpleNamespace(date=day, type=meal_type.value, time=time, id=id)


def log_meals(db, user, count, start=TODAY):
    """Log `count` meals, five slots per day walking backwards from `start`."""
    actor = actor_from_user(user)
    for i in range(count):
        meal_service.create_meal(db, actor, MealCreateRequest(
            date=start - timedelta(days=i // len(SLOTS)),
            type=SLOTS[i % len(SLOTS)],
            name=f"Comida {i}",
            calories=100,
        ))


@pytest.mark.parametrize("count,status", [
    (0, "Insuficiente"),
    (7, "Insuficiente"),
    (8, "Regular"),
    (15, "Regular"),
    (16, "Bien"),
    (40, "Bien"),
])
def test_classify_week(count, status):
    assert classify_week(count) == status


def test_trailing_window_includes_today():
    assert trailing_window(NOW) == (date(2024, 5, 6), date(2024, 5, 12))


def test_progress_counts_slots_not_meals():
    two_breakfasts = [meal(TODAY, id=1), meal(TODAY, id=2)]
    assert progress_percentage(two_breakfasts) == 3
    assert progress_percentage([]) == 0


def test_progress_full_week_is_100():
    meals = [
        meal(TODAY - timedelta(days=d), t, id=d * 10 + i)
        for d in range(7) for i, t in enumerate(SLOTS)
    ]
    assert progress_percentage(meals + meals) == 100


def test_latest_meal_orders_by_date_time_then_id():
    early = meal(TODAY, time="08:00", id=5)
    late = meal(TODAY, time="21:30", id=1)
    untimed = meal(TODAY, time=None, id=9)
    yesterday = meal(TODAY - timedelta(days=1), time="23:59", id=10)
    assert latest_meal([early, late, untimed, yesterday]) is late
    assert latest_meal([untimed, meal(TODAY, time=None, id=3)]) is untimed
    assert latest_meal([]) is None


def test_summary_for_sixteen_meals(db, client_user):
    log_meals(db, client_user, 16)
    card = ProgressAggregator(db).summarize(client_user, now=NOW)
    assert card.last_week_status == "Bien"
    assert card.progress == round(100 * 16 / 35)
    assert card.latest_meal is not None
    assert card.pending_comments == 0


def test_summary_defaults_to_the_utc_clock(db, client_user, monkeypatch):
    # The trailing week ends on the UTC day, so the next day is outside it.
    monkeypatch.setattr("services.progress_aggregator.utc_now", lambda: datetime(2024, 5, 12, 23, 30))
    log_meals(db, client_user, 1, start=TODAY)
    log_meals(db, client_user, 1, start=TODAY + timedelta(days=1))

    card = ProgressAggregator(db).summarize(client_user)
    assert card.latest_meal.date == TODAY
    assert card.progress == round(100 / 35)


@pytest.mark.parametrize("count,status", [(8, "Regular"), (7, "Insuficiente"), (0, "Insuficiente")])
def test_summary_status_buckets(db, client_user, count, status):
    log_meals(db, client_user, count)
    card = ProgressAggregator(db).summarize(client_user, now=NOW)
    assert card.last_week_status == status
    if count == 0:
        assert card.latest_meal is None
        assert card.progress == 0


def test_meals_outside_window_are_ignored(db, client_user):
    log_meals(db, client_user, 20, start=TODAY - timedelta(days=7))
    log_meals(db, client_user, 5, start=TODAY + timedelta(days=1))
    card = ProgressAggregator(db).summarize(client_user, now=NOW)
    assert card.last_week_status == "Insuficiente"
    assert card.progress == 0


def test_pending_comments_drop_when_read(db, nutritionist, client_user):
    log_meals(db, client_user, 2)
    meal_ids = [m.id for m in db.query(models.Meal).all()]
    staff = actor_from_user(nutritionist)
    comments = [
        comment_service.add_comment(db, staff, CommentCreateRequest(meal_id=meal_id, content="Bien"))
        for meal_id in meal_ids
    ]
    aggregator = ProgressAggregator(db)
    assert aggregator.summarize(client_user, now=NOW).pending_comments == 2

    comment_service.mark_comment_read(db, actor_from_user(client_user), comments[0].id)
    assert aggregator.summarize(client_user, now=NOW).pending_comments == 1


def test_summarize_clients_lists_own_active_clients_by_name(db, make_user, nutritionist, other_nutritionist):
    make_user("zoe@mail.com", name="Zoe", nutritionist=nutritionist)
    make_user("bea@mail.com", name="Bea", nutritionist=nutritionist)
    make_user("hugo@mail.com", name="Hugo", nutritionist=other_nutritionist)
    gone = make_user("ivan@mail.com", name="Ivan", nutritionist=nutritionist)
    gone.active = False
    db.commit()

    aggregator = ProgressAggregator(db)
    names = [c.name for c in aggregator.summarize_clients(nutritionist.id, now=NOW)]
    assert names == ["Bea", "Zoe"]
    names = [c.name for c in aggregator.summarize_clients(nutritionist.id, include_inactive=True, now=NOW)]
    assert names == ["Bea", "Ivan", "Zoe"]
