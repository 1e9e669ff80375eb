"""Meal plan API router.

Nutritionists write weekly plans for their clients and decide when to
publish them. Clients read their active, published plan.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.access import Actor, get_current_actor, require_nutritionist
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas.plan_schema import (
    MealPlanCreateRequest,
    MealPlanDetailCreateRequest,
    MealPlanDetailResponse,
    MealPlanPublishResponse,
    MealPlanResponse,
    MealPlanWithDetails,
    PublishRequest,
)
from services import meal_plan_service

logger = get_logger("api.meal_plans")
router = APIRouter(prefix="/api/meal-plans", tags=["meal-plans"])


@router.post("", response_model=MealPlanResponse, status_code=201)
def create_plan(
    payload: MealPlanCreateRequest,
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_write),
):
    """Create a plan; it replaces the client's previous active plan."""
    plan = meal_plan_service.create_plan(db, actor, payload)
    return MealPlanResponse.model_validate(plan)


@router.post("/{plan_id}/details", response_model=MealPlanDetailResponse, status_code=201)
def add_plan_detail(
    plan_id: int,
    payload: MealPlanDetailCreateRequest,
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_write),
):
    detail = meal_plan_service.add_detail(db, actor, plan_id, payload)
    return MealPlanDetailResponse.model_validate(detail)


# Declared before /{plan_id} so the literal paths win.
@router.get("/active", response_model=MealPlanWithDetails)
def active_plan(
    user_id: Optional[int] = None,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_read),
):
    """Return the active plan.

    Args:
        user_id: Client id; required for nutritionists, ignored for clients.

    Raises:
        NotFoundError: No active plan is visible to the caller.
    """
    return meal_plan_service.get_active_plan(db, actor, user_id)


@router.get("/nutritionist", response_model=List[MealPlanWithDetails])
def authored_plans(actor: Actor = Depends(require_nutritionist), db: Session = Depends(get_db_read)):
    return meal_plan_service.list_authored_plans(db, actor)


@router.get("/{plan_id}", response_model=MealPlanWithDetails)
def get_plan(plan_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db_read)):
    return meal_plan_service.get_plan(db, actor, plan_id)


@router.post("/{plan_id}/deactivate", response_model=MealPlanResponse)
def deactivate_plan(plan_id: int, actor: Actor = Depends(require_nutritionist), db: Session = Depends(get_db_write)):
    plan = meal_plan_service.deactivate_plan(db, actor, plan_id)
    return MealPlanResponse.model_validate(plan)


@router.post("/{plan_id}/publish", response_model=MealPlanPublishResponse)
def publish_plan(
    plan_id: int,
    payload: PublishRequest,
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_write),
):
    plan = meal_plan_service.set_published(db, actor, plan_id, payload.published)
    message = "Meal plan published" if plan.published else "Meal plan unpublished"
    return MealPlanPublishResponse(message=message, meal_plan=MealPlanResponse.model_validate(plan))
