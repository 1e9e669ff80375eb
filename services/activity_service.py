"""Physical activity tracking: daily steps, exercise entries, health apps.

One activity row exists per user and day; saving the same day again
updates it. Exercise entries hang off that row and, when no calorie figure
is given, burn `calories_per_minute * duration` of their exercise type.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from core.access import Actor, ensure_owner_access
from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, save
from database import models
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

logger = get_logger("services.activity_service")


def list_exercise_types(db: Session) -> List[models.ExerciseType]:
    return (
        db.query(models.ExerciseType)
        .filter(models.ExerciseType.active.is_(True))
        .order_by(models.ExerciseType.name)
        .all()
    )


def estimate_calories(exercise_type: Optional[models.ExerciseType], duration: int) -> Optional[float]:
    if exercise_type is None or not exercise_type.calories_per_minute:
        return None
    return exercise_type.calories_per_minute * duration


def activity_for_day(db: Session, user_id: int, day: date) -> Optional[models.PhysicalActivity]:
    return (
        db.query(models.PhysicalActivity)
        .filter(models.PhysicalActivity.user_id == user_id, models.PhysicalActivity.date == day)
        .first()
    )


def with_exercises(db: Session, activity: models.PhysicalActivity) -> PhysicalActivityResponse:
    rows = (
        db.query(models.ExerciseEntry, models.ExerciseType)
        .outerjoin(models.ExerciseType, models.ExerciseType.id == models.ExerciseEntry.exercise_type_id)
        .filter(models.ExerciseEntry.activity_id == activity.id)
        .order_by(models.ExerciseEntry.id)
        .all()
    )
    out = PhysicalActivityResponse.model_validate(activity)
    exercises = []
    for entry, exercise_type in rows:
        item = ExerciseEntryResponse.model_validate(entry)
        if exercise_type is not None:
            item.exercise_type = ExerciseTypeResponse.model_validate(exercise_type)
        exercises.append(item)
    out.exercises = exercises
    return out


def get_daily_activity(db: Session, actor: Actor, user_id: int, day: date) -> Optional[PhysicalActivityResponse]:
    ensure_owner_access(db, actor, user_id)
    activity = activity_for_day(db, user_id, day)
    if activity is None:
        return None
    return with_exercises(db, activity)


def save_daily_activity(db: Session, actor: Actor, payload: PhysicalActivityUpsertRequest) -> models.PhysicalActivity:
    """Create the actor's activity for a day, or update the existing one."""
    activity = activity_for_day(db, actor.id, payload.date)
    if activity is None:
        activity = save(db, models.PhysicalActivity(
            user_id=actor.id,
            date=payload.date,
            steps=payload.steps,
            notes=payload.notes,
        ))
    else:
        activity = BaseRepository(models.PhysicalActivity, db).update(
            activity, payload.model_dump(exclude_unset=True, exclude={"date"})
        )
    return activity


def _owned_activity(db: Session, actor: Actor, activity_id: int) -> models.PhysicalActivity:
    activity = BaseRepository(models.PhysicalActivity, db, resource="PhysicalActivity").get_or_404(activity_id)
    ensure_owner_access(db, actor, activity.user_id)
    if activity.user_id != actor.id:
        raise AuthorizationError("Not authorized to modify this activity")
    return activity


def _exercise_type(db: Session, exercise_type_id: int) -> models.ExerciseType:
    exercise_type = db.get(models.ExerciseType, exercise_type_id)
    if exercise_type is None:
        raise NotFoundError("ExerciseType", exercise_type_id)
    return exercise_type


def add_exercise_entry(db: Session, actor: Actor, payload: ExerciseEntryCreateRequest) -> models.ExerciseEntry:
    activity = _owned_activity(db, actor, payload.activity_id)
    exercise_type = _exercise_type(db, payload.exercise_type_id)
    calories = payload.calories_burned
    if calories is None:
        calories = estimate_calories(exercise_type, payload.duration)
    return save(db, models.ExerciseEntry(
        activity_id=activity.id,
        exercise_type_id=exercise_type.id,
        duration=payload.duration,
        calories_burned=calories,
        start_time=payload.start_time,
        notes=payload.notes,
    ))


def update_exercise_entry(db: Session, actor: Actor, entry_id: int, payload: ExerciseEntryUpdateRequest) -> models.ExerciseEntry:
    repo = BaseRepository(models.ExerciseEntry, db, resource="ExerciseEntry")
    entry = repo.get_or_404(entry_id)
    _owned_activity(db, actor, entry.activity_id)
    changes = payload.model_dump(exclude_unset=True)
    for key in ("exercise_type_id", "duration"):
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be null", field=key)
    if changes.get("exercise_type_id") is not None:
        _exercise_type(db, changes["exercise_type_id"])
    return repo.update(entry, changes)


def delete_exercise_entry(db: Session, actor: Actor, entry_id: int) -> None:
    repo = BaseRepository(models.ExerciseEntry, db, resource="ExerciseEntry")
    entry = repo.get_or_404(entry_id)
    _owned_activity(db, actor, entry.activity_id)
    repo.delete(entry)


def integration_response(integration: models.HealthAppIntegration) -> HealthAppIntegrationResponse:
    return HealthAppIntegrationResponse(
        id=integration.id,
        user_id=integration.user_id,
        provider=integration.provider,
        active=integration.active,
        connected=bool(integration.access_token),
        token_expiry=integration.token_expiry,
        last_synced=integration.last_synced,
        created_at=integration.created_at,
    )


def get_integration(db: Session, actor: Actor) -> models.HealthAppIntegration:
    integration = (
        db.query(models.HealthAppIntegration)
        .filter(
            models.HealthAppIntegration.user_id == actor.id,
            models.HealthAppIntegration.active.is_(True),
        )
        .first()
    )
    if integration is None:
        raise NotFoundError("HealthAppIntegration", message="No active health app integration")
    return integration


def connect_integration(db: Session, actor: Actor, payload: HealthAppIntegrationCreateRequest) -> models.HealthAppIntegration:
    """Store new health app tokens, retiring the previous integration."""
    db.query(models.HealthAppIntegration).filter(
        models.HealthAppIntegration.user_id == actor.id,
        models.HealthAppIntegration.active.is_(True),
    ).update({models.HealthAppIntegration.active: False}, synchronize_session=False)
    integration = save(db, models.HealthAppIntegration(
        user_id=actor.id,
        provider=payload.provider.value,
        access_token=payload.access_token,
        refresh_token=payload.refresh_token,
        token_expiry=payload.token_expiry,
        active=True,
    ))
    logger.info("Health app %s connected for user id=%s", integration.provider, actor.id)
    return integration
