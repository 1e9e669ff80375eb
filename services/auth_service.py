"""Registration and credential verification.

Login failures are deliberately indistinguishable: an unknown email, an
inactive account and a wrong password all raise the same
`AuthenticationError`.
"""

from functools import lru_cache
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import AuthenticationError, EmailAlreadyRegisteredError, ValidationError
from core.logger import get_logger
from core.repository import save
from core.security import hash_password, unusable_password, verify_password
from database import models
from database.models import Role

logger = get_logger("services.auth_service")

INVALID_CREDENTIALS = "Invalid email or password"


@lru_cache(maxsize=1)
def _decoy_credential() -> str:
    return unusable_password()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str, include_inactive: bool = False) -> Optional[models.User]:
    query = db.query(models.User).filter(models.User.email == normalize_email(email))
    if not include_inactive:
        query = query.filter(models.User.active.is_(True))
    return query.first()


def _check_nutritionist(db: Session, nutritionist_id: int) -> None:
    nutritionist = db.get(models.User, nutritionist_id)
    if (
        nutritionist is None
        or nutritionist.role != Role.NUTRITIONIST.value
        or not nutritionist.active
    ):
        raise ValidationError("Unknown nutritionist", field="nutritionist_id")


def register_user(
    db: Session,
    email: str,
    password: str,
    name: str,
    role: Role = Role.CLIENT,
    nutritionist_id: Optional[int] = None,
) -> models.User:
    """Create an active, credentialed user.

    A pending invitation for the same email is taken over instead of
    failing, and its invite token is cleared. A removed client keeps their
    row, and their history, out of reach of self-registration.

    Raises:
        EmailAlreadyRegisteredError: The email belongs to an active user or
            to a removed client.
        ValidationError: `nutritionist_id` does not name an active nutritionist.
    """
    email = normalize_email(email)
    existing = get_user_by_email(db, email, include_inactive=True)
    if existing is not None and (existing.active or existing.invite_token is None):
        raise EmailAlreadyRegisteredError()

    if role == Role.NUTRITIONIST:
        nutritionist_id = None
    elif nutritionist_id is not None:
        _check_nutritionist(db, nutritionist_id)
    elif existing is not None and existing.role == Role.CLIENT.value:
        nutritionist_id = existing.nutritionist_id

    credential = hash_password(password)
    try:
        if existing is not None:
            existing.password = credential
            existing.name = name
            existing.role = role.value
            existing.nutritionist_id = nutritionist_id
            existing.active = True
            existing.invite_token = None
            existing.invite_expires = None
            db.commit()
            db.refresh(existing)
            user = existing
        else:
            user = save(db, models.User(
                email=email,
                password=credential,
                name=name,
                role=role.value,
                nutritionist_id=nutritionist_id,
                active=True,
            ))
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyRegisteredError()

    logger.info("Registered %s user id=%s", user.role, user.id)
    return user


def login(db: Session, email: str, password: str) -> models.User:
    """Return the active user owning `email` if `password` matches.

    Raises:
        AuthenticationError: With a generic message on any failure.
    """
    user = get_user_by_email(db, email)
    # Unknown emails still pay for one scrypt derivation.
    credential = user.password if user is not None else _decoy_credential()
    if not verify_password(password, credential) or user is None:
        logger.info("Failed login attempt")
        raise AuthenticationError(INVALID_CREDENTIALS)
    logger.info("User id=%s logged in", user.id)
    return user
