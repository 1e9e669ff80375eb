"""Weekly meal plans written by nutritionists for their clients.

Creating a plan makes it the client's only active plan: every other active
plan of that client is switched off in the same transaction. Clients only
ever see published plans.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from core.access import Actor, NutritionistActor, ensure_own_client
from core.exceptions import AuthorizationError, NotFoundError
from core.logger import get_logger
from core.repository import BaseRepository, save
from database import models
from schemas.plan_schema import (
    MealPlanCreateRequest,
    MealPlanDetailCreateRequest,
    MealPlanDetailResponse,
    MealPlanWithDetails,
)

logger = get_logger("services.meal_plan_service")


def plan_repository(db: Session) -> BaseRepository:
    return BaseRepository(models.MealPlan, db, resource="MealPlan")


def with_details(db: Session, plan: models.MealPlan) -> MealPlanWithDetails:
    details = (
        db.query(models.MealPlanDetail)
        .filter(models.MealPlanDetail.meal_plan_id == plan.id)
        .order_by(models.MealPlanDetail.day, models.MealPlanDetail.id)
        .all()
    )
    out = MealPlanWithDetails.model_validate(plan)
    out.details = [MealPlanDetailResponse.model_validate(d) for d in details]
    return out


def _authored_plan(db: Session, actor: Actor, plan_id: int) -> models.MealPlan:
    plan = plan_repository(db).get_or_404(plan_id)
    if plan.nutritionist_id != actor.id:
        raise AuthorizationError("Not authorized to modify this meal plan")
    return plan


def create_plan(db: Session, actor: Actor, payload: MealPlanCreateRequest) -> models.MealPlan:
    ensure_own_client(db, actor, payload.user_id)

    db.query(models.MealPlan).filter(
        models.MealPlan.user_id == payload.user_id,
        models.MealPlan.active.is_(True),
    ).update({models.MealPlan.active: False}, synchronize_session=False)

    plan = save(db, models.MealPlan(
        nutritionist_id=actor.id,
        user_id=payload.user_id,
        week_start=payload.week_start,
        week_end=payload.week_end,
        description=payload.description,
        active=True,
        published=payload.published,
    ))
    logger.info("Meal plan id=%s created for client id=%s", plan.id, plan.user_id)
    return plan


def add_detail(db: Session, actor: Actor, plan_id: int, payload: MealPlanDetailCreateRequest) -> models.MealPlanDetail:
    plan = _authored_plan(db, actor, plan_id)
    return save(db, models.MealPlanDetail(
        meal_plan_id=plan.id,
        day=payload.day,
        meal_type=payload.meal_type.value,
        description=payload.description,
        image=payload.image,
    ))


def get_plan(db: Session, actor: Actor, plan_id: int) -> MealPlanWithDetails:
    """Fetch a plan for its author or its client (published plans only)."""
    plan = plan_repository(db).get_or_404(plan_id)
    if plan.nutritionist_id == actor.id:
        return with_details(db, plan)
    if plan.user_id == actor.id:
        if not plan.published:
            raise NotFoundError("MealPlan", plan_id)
        return with_details(db, plan)
    raise AuthorizationError("Not authorized to view this meal plan")


def get_active_plan(db: Session, actor: Actor, user_id: Optional[int] = None) -> MealPlanWithDetails:
    """The active plan of a client.

    Clients get their own published plan. Nutritionists pass the client id
    and also see unpublished drafts.
    """
    query = db.query(models.MealPlan).filter(models.MealPlan.active.is_(True))
    if isinstance(actor, NutritionistActor):
        if user_id is None:
            raise NotFoundError("MealPlan", message="No active meal plan")
        ensure_own_client(db, actor, user_id)
        query = query.filter(models.MealPlan.user_id == user_id)
    else:
        query = query.filter(
            models.MealPlan.user_id == actor.id,
            models.MealPlan.published.is_(True),
        )
    plan = query.order_by(models.MealPlan.created_at.desc(), models.MealPlan.id.desc()).first()
    if plan is None:
        raise NotFoundError("MealPlan", message="No active meal plan")
    return with_details(db, plan)


def list_authored_plans(db: Session, actor: Actor) -> List[MealPlanWithDetails]:
    plans = (
        db.query(models.MealPlan)
        .filter(models.MealPlan.nutritionist_id == actor.id)
        .order_by(models.MealPlan.created_at, models.MealPlan.id)
        .all()
    )
    return [with_details(db, plan) for plan in plans]


def deactivate_plan(db: Session, actor: Actor, plan_id: int) -> models.MealPlan:
    plan = _authored_plan(db, actor, plan_id)
    return plan_repository(db).update(plan, {"active": False})


def set_published(db: Session, actor: Actor, plan_id: int, published: bool) -> models.MealPlan:
    plan = _authored_plan(db, actor, plan_id)
    plan = plan_repository(db).update(plan, {"published": published})
    logger.info("Meal plan id=%s published=%s", plan.id, published)
    return plan
