"""Nutritionist comments on client meals."""

from typing import List

from sqlalchemy.orm import Session

from core.access import Actor, ensure_own_client, ensure_owner_access
from core.exceptions import AuthorizationError
from core.logger import get_logger
from core.repository import BaseRepository, save
from database import models
from schemas.meal_schema import CommentCreateRequest

logger = get_logger("services.comment_service")


def add_comment(db: Session, actor: Actor, payload: CommentCreateRequest) -> models.Comment:
    """Comment on a meal. Only the meal owner's nutritionist may do so."""
    meal = BaseRepository(models.Meal, db, resource="Meal").get_or_404(payload.meal_id)
    ensure_own_client(db, actor, meal.user_id)
    comment = save(db, models.Comment(
        meal_id=meal.id,
        nutritionist_id=actor.id,
        content=payload.content,
        read=False,
    ))
    logger.info("Comment id=%s added to meal id=%s by nutritionist id=%s", comment.id, meal.id, actor.id)
    return comment


def list_comments(db: Session, actor: Actor, meal_id: int) -> List[models.Comment]:
    meal = BaseRepository(models.Meal, db, resource="Meal").get_or_404(meal_id)
    ensure_owner_access(db, actor, meal.user_id)
    return (
        db.query(models.Comment)
        .filter(models.Comment.meal_id == meal_id)
        .order_by(models.Comment.created_at.desc(), models.Comment.id.desc())
        .all()
    )


def mark_comment_read(db: Session, actor: Actor, comment_id: int) -> models.Comment:
    """Acknowledge a comment. Only the owner of the commented meal can."""
    repo = BaseRepository(models.Comment, db, resource="Comment")
    comment = repo.get_or_404(comment_id)
    meal = db.get(models.Meal, comment.meal_id)
    ensure_owner_access(db, actor, meal.user_id)
    if meal.user_id != actor.id:
        raise AuthorizationError("Only the meal owner can mark comments as read")
    if not comment.read:
        comment = repo.update(comment, {"read": True})
    return comment
