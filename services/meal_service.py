"""Meal logging and the daily / weekly meal views.

Any number of meals may be logged in the same (day, meal type) slot; the
views group them per slot in time order. The per-day calorie summary is
recomputed every time a day's meals change.
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.access import Actor, ensure_owner_access
from core.exceptions import AuthorizationError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, save
from database import models
from database.models import MealType
from schemas.meal_schema import (
    CommentResponse,
    DailyMeals,
    MealCreateRequest,
    MealUpdateRequest,
    MealWithComments,
    NutritionSummaryResponse,
    WeeklyMealsResponse,
)

logger = get_logger("services.meal_service")


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday and Sunday of the week containing `day`."""
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def meal_repository(db: Session) -> BaseRepository:
    return BaseRepository(models.Meal, db, resource="Meal")


def meals_between(db: Session, user_id: int, start: date, end: date) -> List[models.Meal]:
    return (
        db.query(models.Meal)
        .filter(
            models.Meal.user_id == user_id,
            models.Meal.date >= start,
            models.Meal.date <= end,
        )
        .order_by(models.Meal.date, models.Meal.time, models.Meal.id)
        .all()
    )


def refresh_daily_summary(db: Session, user_id: int, day: date) -> models.NutritionSummary:
    """Recompute the calorie total of `user_id` on `day`."""
    total = (
        db.query(func.coalesce(func.sum(models.Meal.calories), 0))
        .filter(models.Meal.user_id == user_id, models.Meal.date == day)
        .scalar()
    )
    summary = (
        db.query(models.NutritionSummary)
        .filter(models.NutritionSummary.user_id == user_id, models.NutritionSummary.date == day)
        .first()
    )
    if summary is None:
        summary = models.NutritionSummary(user_id=user_id, date=day)
        db.add(summary)
    summary.calories_total = int(total)
    db.commit()
    db.refresh(summary)
    return summary


def create_meal(db: Session, actor: Actor, payload: MealCreateRequest) -> models.Meal:
    data = payload.model_dump()
    data["type"] = payload.type.value
    meal = save(db, models.Meal(user_id=actor.id, **data))
    refresh_daily_summary(db, actor.id, meal.date)
    logger.info("Meal id=%s logged by user id=%s (%s, %s)", meal.id, actor.id, meal.date, meal.type)
    return meal


def update_meal(db: Session, actor: Actor, meal_id: int, payload: MealUpdateRequest) -> models.Meal:
    """Update a meal as its owner or as the owner's nutritionist."""
    repo = meal_repository(db)
    meal = repo.get_or_404(meal_id)
    ensure_owner_access(db, actor, meal.user_id)

    changes = payload.model_dump(exclude_unset=True)
    for key in ("date", "type", "name"):
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be null", field=key)
    if changes.get("type") is not None:
        changes["type"] = MealType(changes["type"]).value
    previous_day = meal.date
    meal = repo.update(meal, changes)

    if "calories" in changes or meal.date != previous_day:
        refresh_daily_summary(db, meal.user_id, previous_day)
        if meal.date != previous_day:
            refresh_daily_summary(db, meal.user_id, meal.date)
    logger.info("Meal id=%s updated by user id=%s", meal.id, actor.id)
    return meal


def delete_meal(db: Session, actor: Actor, meal_id: int) -> None:
    """Delete a meal and its comments. Only the owner may delete."""
    repo = meal_repository(db)
    meal = repo.get_or_404(meal_id)
    ensure_owner_access(db, actor, meal.user_id)
    if meal.user_id != actor.id:
        raise AuthorizationError("Not authorized to delete this meal")

    day, owner_id = meal.date, meal.user_id
    db.query(models.Comment).filter(models.Comment.meal_id == meal.id).delete(synchronize_session=False)
    repo.delete(meal)
    refresh_daily_summary(db, owner_id, day)
    logger.info("Meal id=%s deleted by user id=%s", meal_id, actor.id)


def attach_comments(db: Session, meals: List[models.Meal]) -> List[MealWithComments]:
    """Serialize meals with their comments, newest comment first."""
    if not meals:
        return []
    comments = (
        db.query(models.Comment)
        .filter(models.Comment.meal_id.in_([m.id for m in meals]))
        .order_by(models.Comment.created_at.desc(), models.Comment.id.desc())
        .all()
    )
    by_meal = defaultdict(list)
    for comment in comments:
        by_meal[comment.meal_id].append(CommentResponse.model_validate(comment))

    out = []
    for meal in meals:
        item = MealWithComments.model_validate(meal)
        item.comments = by_meal.get(meal.id, [])
        out.append(item)
    return out


def group_by_slot(meals: List[MealWithComments]) -> DailyMeals:
    grouped: DailyMeals = {}
    for meal in meals:
        grouped.setdefault(meal.type, []).append(meal)
    return grouped


def get_daily_meals(db: Session, user_id: int, day: date) -> DailyMeals:
    return group_by_slot(attach_comments(db, meals_between(db, user_id, day, day)))


def get_weekly_meals(db: Session, user_id: int, day: date) -> WeeklyMealsResponse:
    start, end = week_bounds(day)
    meals = attach_comments(db, meals_between(db, user_id, start, end))

    days: Dict[str, List[MealWithComments]] = {
        (start + timedelta(days=i)).isoformat(): [] for i in range(7)
    }
    for meal in meals:
        days[meal.date.isoformat()].append(meal)

    summaries = (
        db.query(models.NutritionSummary)
        .filter(
            models.NutritionSummary.user_id == user_id,
            models.NutritionSummary.date >= start,
            models.NutritionSummary.date <= end,
        )
        .order_by(models.NutritionSummary.date)
        .all()
    )
    return WeeklyMealsResponse(
        week_start=start,
        week_end=end,
        meals={key: group_by_slot(value) for key, value in days.items()},
        summaries=[NutritionSummaryResponse.model_validate(s) for s in summaries],
    )
