"""Nutritionist API router.

Dashboard and client management for the signed-in nutritionist. Every
route is limited to the nutritionist's own clients; anyone else's client
answers 403.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.access import Actor, require_nutritionist
from core.clock import utc_today
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas import ClientActionResponse, ClientSummary, UserResponse, WeeklyMealsResponse
from schemas.activity_schema import PhysicalActivityResponse
from schemas.meal_schema import DailyMeals
from services import activity_service, client_service, meal_service
from services.progress_aggregator import ProgressAggregator

logger = get_logger("api.nutritionist")
router = APIRouter(prefix="/api/nutritionist", tags=["nutritionist"])


@router.get("/clients", response_model=List[ClientSummary])
def list_clients(
    include_inactive: bool = False,
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_read),
):
    """Return one summary card per client.

    Args:
        include_inactive: Also list deactivated clients and pending invites.

    Returns:
        Client cards with latest meal, weekly progress, unread comment count
        and last-week status, ordered by name.
    """
    return ProgressAggregator(db).summarize_clients(actor.id, include_inactive=include_inactive)


@router.get("/clients/{client_id}", response_model=UserResponse)
def get_client(client_id: int, actor: Actor = Depends(require_nutritionist), db: Session = Depends(get_db_read)):
    return UserResponse.model_validate(client_service.get_client(db, actor, client_id))


@router.post("/clients/{client_id}/activate", response_model=ClientActionResponse)
def activate_client(client_id: int, actor: Actor = Depends(require_nutritionist), db: Session = Depends(get_db_write)):
    client = client_service.set_client_active(db, actor, client_id, True)
    return ClientActionResponse(message="Client activated", client=UserResponse.model_validate(client))


@router.post("/clients/{client_id}/deactivate", response_model=ClientActionResponse)
def deactivate_client(client_id: int, actor: Actor = Depends(require_nutritionist), db: Session = Depends(get_db_write)):
    client = client_service.set_client_active(db, actor, client_id, False)
    return ClientActionResponse(message="Client deactivated", client=UserResponse.model_validate(client))


@router.delete("/clients/{client_id}", response_model=ClientActionResponse)
def delete_client(client_id: int, actor: Actor = Depends(require_nutritionist), db: Session = Depends(get_db_write)):
    """Soft delete: the client is deactivated and their data is kept."""
    client = client_service.set_client_active(db, actor, client_id, False)
    return ClientActionResponse(message="Client removed", client=UserResponse.model_validate(client))


@router.get("/clients/{client_id}/meals/daily", response_model=DailyMeals)
def client_daily_meals(
    client_id: int,
    day: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_read),
):
    client = client_service.get_client(db, actor, client_id)
    return meal_service.get_daily_meals(db, client.id, day or utc_today())


@router.get("/clients/{client_id}/meals/weekly", response_model=WeeklyMealsResponse)
def client_weekly_meals(
    client_id: int,
    day: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_read),
):
    client = client_service.get_client(db, actor, client_id)
    return meal_service.get_weekly_meals(db, client.id, day or utc_today())


@router.get("/clients/{client_id}/activities", response_model=Optional[PhysicalActivityResponse])
def client_activities(
    client_id: int,
    day: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_read),
):
    """Return the client's activity of a day, or null if nothing was logged."""
    client = client_service.get_client(db, actor, client_id)
    return activity_service.get_daily_activity(db, actor, client.id, day or utc_today())
