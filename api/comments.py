"""Comments API router: nutritionist feedback on client meals."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.access import Actor, get_current_actor, require_nutritionist
from core.logger import get_logger
from database.deps import get_db_write
from schemas import CommentCreateRequest, CommentResponse
from services import comment_service

logger = get_logger("api.comments")
router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post("", response_model=CommentResponse, status_code=201)
def create_comment(
    payload: CommentCreateRequest,
    actor: Actor = Depends(require_nutritionist),
    db: Session = Depends(get_db_write),
):
    """Comment on a meal of one of the nutritionist's clients.

    Raises:
        NotFoundError: Unknown meal.
        AuthorizationError: The meal belongs to someone else's client.
    """
    comment = comment_service.add_comment(db, actor, payload)
    return CommentResponse.model_validate(comment)


@router.post("/{comment_id}/read", response_model=CommentResponse)
def mark_read(
    comment_id: int,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db_write),
):
    comment = comment_service.mark_comment_read(db, actor, comment_id)
    return CommentResponse.model_validate(comment)
