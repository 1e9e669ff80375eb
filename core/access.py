"""Per-request authentication and authorization.

The acting user is modelled as a tagged union, `NutritionistActor` or
`ClientActor`, built from the database row on every request. Ownership is
always re-read from the database; nothing but the user id lives in the
session.
"""

from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from database import models
from database.deps import get_db_write
from database.models import Role
from services.session_store import SessionStore


@dataclass(frozen=True)
class NutritionistActor:
    id: int

    @property
    def role(self) -> Role:
        return Role.NUTRITIONIST


@dataclass(frozen=True)
class ClientActor:
    id: int
    nutritionist_id: Optional[int]

    @property
    def role(self) -> Role:
        return Role.CLIENT


Actor = Union[NutritionistActor, ClientActor]


def actor_from_user(user: models.User) -> Actor:
    if user.role == Role.NUTRITIONIST.value:
        return NutritionistActor(id=user.id)
    return ClientActor(id=user.id, nutritionist_id=user.nutritionist_id)


def get_current_user(request: Request, db: Session = Depends(get_db_write)) -> models.User:
    """Resolve the session cookie to an active user.

    Raises:
        AuthenticationError: No cookie, unknown or expired session, or the
            user has since been deactivated.
    """
    session_id = request.cookies.get(settings.session_cookie_name)
    user_id = SessionStore(db).resolve(session_id)
    if user_id is None:
        raise AuthenticationError()
    user = db.get(models.User, user_id)
    if user is None or not user.active:
        raise AuthenticationError()
    return user


def get_current_actor(user: models.User = Depends(get_current_user)) -> Actor:
    return actor_from_user(user)


def require_role(role: Role):
    """Build a dependency that only lets actors with `role` through."""

    def dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role != role:
            raise AuthorizationError(f"Forbidden. {role.value.capitalize()} access required.")
        return actor

    return dependency


require_nutritionist = require_role(Role.NUTRITIONIST)


def can_access_owner(actor: Actor, owner: models.User) -> bool:
    """True when `actor` may act on records owned by `owner`."""
    if owner.id == actor.id:
        return True
    return isinstance(actor, NutritionistActor) and owner.nutritionist_id == actor.id


def ensure_owner_access(db: Session, actor: Actor, owner_id: int) -> models.User:
    """Check `actor` may act on data owned by user `owner_id`.

    Returns:
        The owner row.

    Raises:
        NotFoundError: The owner does not exist.
        AuthorizationError: The actor is neither the owner nor the owner's
            nutritionist.
    """
    owner = db.get(models.User, owner_id)
    if owner is None:
        raise NotFoundError("User", owner_id)
    if not can_access_owner(actor, owner):
        raise AuthorizationError()
    return owner


def ensure_own_client(db: Session, actor: Actor, client_id: int) -> models.User:
    """Check `client_id` is a client followed by the nutritionist `actor`."""
    if not isinstance(actor, NutritionistActor):
        raise AuthorizationError("Forbidden. Nutritionist access required.")
    client = db.get(models.User, client_id)
    if client is None or client.role != Role.CLIENT.value:
        raise NotFoundError("Client", client_id)
    if client.nutritionist_id != actor.id:
        raise AuthorizationError("Not authorized to access this client")
    return client
