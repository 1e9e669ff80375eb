"""Physical activity API router.

Exercise catalogue, per-day steps and exercise entries, and the health
app connection of the signed-in user.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from core.access import Actor, get_current_actor
from core.clock import utc_today
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas.activity_schema import (
    ExerciseEntryCreateRequest,
    ExerciseEntryResponse,
    ExerciseEntryUpdateRequest,
    ExerciseTypeResponse,
    HealthAppIntegrationCreateRequest,
    HealthAppIntegrationResponse,
    PhysicalActivityResponse,
    PhysicalActivityUpsertRequest,
)
from services import activity_service

logger = get_logger("api.activity")
router = APIRouter(prefix="/api", tags=["activity"])


@router.get("/exercise-types", response_model=List[ExerciseTypeResponse])
def exercise_types(db: Session = Depends(get_db_read)):
    return [ExerciseTypeResponse.model_validate(t) for t in activity_service.list_exercise_types(db)]


@router.get("/physical-activity/daily", response_model=Optional[PhysicalActivityResponse])
def daily_activity(
    day: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_read),
):
    """Return the caller's activity of a day with its exercises, or null."""
    return activity_service.get_daily_activity(db, actor, actor.id, day or utc_today())


@router.post("/physical-activity", response_model=PhysicalActivityResponse)
def save_activity(
    payload: PhysicalActivityUpsertRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    """Create the activity of a day, or update it if it already exists."""
    activity = activity_service.save_daily_activity(db, actor, payload)
    return activity_service.with_exercises(db, activity)


@router.post("/exercise-entries", response_model=ExerciseEntryResponse, status_code=201)
def add_exercise(
    payload: ExerciseEntryCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    entry = activity_service.add_exercise_entry(db, actor, payload)
    return ExerciseEntryResponse.model_validate(entry)


@router.patch("/exercise-entries/{entry_id}", response_model=ExerciseEntryResponse)
def update_exercise(
    entry_id: int,
    payload: ExerciseEntryUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    entry = activity_service.update_exercise_entry(db, actor, entry_id, payload)
    return ExerciseEntryResponse.model_validate(entry)


@router.delete("/exercise-entries/{entry_id}", status_code=204)
def delete_exercise(entry_id: int, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db_write)):
    activity_service.delete_exercise_entry(db, actor, entry_id)
    return Response(status_code=204)


@router.get("/health-app-integration", response_model=HealthAppIntegrationResponse)
def health_app_integration(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db_read)):
    """Return the caller's active integration.

    Raises:
        NotFoundError: Nothing is connected.
    """
    return activity_service.integration_response(activity_service.get_integration(db, actor))


@router.post("/health-app-integration", response_model=HealthAppIntegrationResponse, status_code=201)
def connect_health_app(
    payload: HealthAppIntegrationCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    integration = activity_service.connect_integration(db, actor, payload)
    return activity_service.integration_response(integration)
