"""Meals API router.

Meal logging for the signed-in user plus the daily and weekly views the
frontend renders. Views group meals by meal type and carry the comments
the user's nutritionist left on each meal.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from core.access import Actor, get_current_actor
from core.clock import utc_today
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas import CommentResponse, MealCreateRequest, MealResponse, MealUpdateRequest, WeeklyMealsResponse
from schemas.meal_schema import DailyMeals
from services import comment_service, meal_service

logger = get_logger("api.meals")
router = APIRouter(prefix="/api/meals", tags=["meals"])


@router.get("/daily", response_model=DailyMeals)
def daily_meals(
    day: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_read),
):
    """Return the user's meals of one day grouped by meal type.

    Args:
        day: Day to show, defaults to the current UTC day.
    """
    return meal_service.get_daily_meals(db, actor.id, day or utc_today())


@router.get("/weekly", response_model=WeeklyMealsResponse)
def weekly_meals(
    day: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_read),
):
    """Return the Monday-to-Sunday week containing `date`."""
    return meal_service.get_weekly_meals(db, actor.id, day or utc_today())


@router.post("", response_model=MealResponse, status_code=201)
def create_meal(
    payload: MealCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    meal = meal_service.create_meal(db, actor, payload)
    return MealResponse.model_validate(meal)


@router.patch("/{meal_id}", response_model=MealResponse)
def update_meal(
    meal_id: int,
    payload: MealUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    """Partially update a meal.

    Raises:
        NotFoundError: Unknown meal.
        AuthorizationError: Caller is neither the owner nor their nutritionist.
    """
    meal = meal_service.update_meal(db, actor, meal_id, payload)
    return MealResponse.model_validate(meal)


@router.delete("/{meal_id}", status_code=204)
def delete_meal(
    meal_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    meal_service.delete_meal(db, actor, meal_id)
    return Response(status_code=204)


@router.get("/{meal_id}/comments", response_model=List[CommentResponse])
def meal_comments(
    meal_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_read),
):
    comments = comment_service.list_comments(db, actor, meal_id)
    return [CommentResponse.model_validate(c) for c in comments]
