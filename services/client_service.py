"""Nutritionist-side management of their own clients."""

from sqlalchemy.orm import Session

from core.access import Actor, ensure_own_client
from core.exceptions import ValidationError
from core.logger import get_logger
from core.repository import BaseRepository
from database import models

logger = get_logger("services.client_service")


def get_client(db: Session, actor: Actor, client_id: int) -> models.User:
    return ensure_own_client(db, actor, client_id)


def set_client_active(db: Session, actor: Actor, client_id: int, active: bool) -> models.User:
    """Switch a client on or off. Inactive clients cannot log in.

    Raises:
        ValidationError: Activating a client whose invitation is still
            pending; only redeeming the token may do that.
    """
    client = ensure_own_client(db, actor, client_id)
    if active and client.invite_token is not None:
        raise ValidationError("Client has not accepted the invitation yet")
    client = BaseRepository(models.User, db, resource="Client").update(client, {"active": active})
    if not active:
        db.query(models.AuthSession).filter(models.AuthSession.user_id == client.id).delete(
            synchronize_session=False
        )
        db.commit()
    logger.info("Client id=%s active=%s by nutritionist id=%s", client.id, active, actor.id)
    return client
